"""CLI entry point for the RHDA pipeline toolkit.

Provides commands for analysing a manifest, gating a saved report, checking
the backend and describing the host.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any

import structlog
import typer
import yaml
from pydantic import ValidationError

from .analysis import StackAnalysis
from .config import (
    AppConfig,
    EnvSettings,
    TrustifyDaConfig,
    set_trustify_da_system_properties,
)
from .exceptions import RhdaPipelineError
from .logging import SensitiveDataFilter, redact_sensitive_data
from .models import AnalysisReport, Severity
from .severity import GateResult, evaluate_report
from .utils import (
    get_data_model,
    get_operating_system,
    is_linux,
    is_mac,
    is_windows,
    url_exists,
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_VULNERABILITY = 2

app = typer.Typer(
    name="rhda",
    help="RHDA pipeline toolkit - gate builds on Trustify DA stack analysis",
)

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format (json or console).

    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_sensitive_data,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config: Path | None) -> AppConfig:
    """Load the YAML config if given, else the ``RHDA_*`` environment settings."""
    try:
        if config is not None:
            return AppConfig.from_yaml(config)
        return AppConfig.from_settings(EnvSettings())
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
        typer.echo(f"❌ Invalid configuration: {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e


def resolve_threshold(app_config: AppConfig, threshold: str | None) -> Severity:
    """Get the allowed severity, preferring the command line value."""
    if threshold is None:
        return app_config.gate.highest_allowed_severity
    try:
        return Severity.from_value(threshold)
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e


def print_gate_summary(report: AnalysisReport, result: GateResult) -> None:
    """Print per-source counters and the gate decision."""
    for provider_name, provider in report.providers.items():
        for source_name, source in provider.sources.items():
            if source is None or source.summary is None:
                continue
            summary = source.summary
            typer.echo(
                f"  [{provider_name}/{source_name}] "
                f"critical={summary.critical} high={summary.high} "
                f"medium={summary.medium} low={summary.low}"
            )

    observed = ", ".join(
        s.value for s in sorted(result.severities, key=lambda s: s.rank)
    ) or "none"
    typer.echo(f"\nHighest severities found: {observed}")
    typer.echo(f"Highest allowed severity: {result.highest_allowed_severity.value}")


def gate_exit_code(app_config: AppConfig, result: GateResult) -> int:
    if not result.exceeded:
        typer.echo("✅ No vulnerability exceeds the allowed severity")
        return EXIT_SUCCESS
    if app_config.gate.fail_on_exceeded:
        typer.echo("❌ Vulnerabilities exceed the allowed severity", err=True)
        return EXIT_VULNERABILITY
    typer.echo("⚠️ Vulnerabilities exceed the allowed severity (fail_on_exceeded is off)")
    return EXIT_SUCCESS


@app.command()
def analyze(
    manifest: Annotated[
        Path,
        typer.Argument(help="Manifest to analyse (pom.xml, package.json, go.mod, ...)"),
    ],
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config YAML file"),
    ] = None,
    command: Annotated[
        str | None,
        typer.Option("--command", help="Trustify DA CLI executable"),
    ] = None,
    threshold: Annotated[
        str | None,
        typer.Option("--threshold", "-t", help="Highest allowed severity"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the raw JSON report to this file"),
    ] = None,
) -> None:
    """Run a stack analysis and fail when the allowed severity is exceeded."""
    app_config = load_config(config)
    setup_logging(app_config.logging.level, app_config.logging.format)
    highest_allowed = resolve_threshold(app_config, threshold)
    if command:
        app_config.cli.command = command

    set_trustify_da_system_properties(os.environ)
    da_config = TrustifyDaConfig.from_env(os.environ)

    analysis = StackAnalysis(da_config, app_config.cli)
    try:
        report = analysis.run(manifest)
    except RhdaPipelineError as e:
        logger.exception("Stack analysis failed", error_code=e.error_code)
        typer.echo(f"❌ Stack analysis failed: {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e

    if output is not None and analysis.last_output is not None:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(analysis.last_output, encoding="utf-8")
        except OSError as e:
            typer.echo(f"❌ Cannot write report: {e}", err=True)
            raise typer.Exit(EXIT_FAILED) from e
        typer.echo(f"Report saved to: {output}")

    result = evaluate_report(report, highest_allowed)
    print_gate_summary(report, result)
    raise typer.Exit(gate_exit_code(app_config, result))


@app.command()
def evaluate(
    report_file: Annotated[
        Path,
        typer.Argument(help="Saved JSON stack analysis report"),
    ],
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config YAML file"),
    ] = None,
    threshold: Annotated[
        str | None,
        typer.Option("--threshold", "-t", help="Highest allowed severity"),
    ] = None,
) -> None:
    """Gate a previously saved stack analysis report."""
    app_config = load_config(config)
    setup_logging(app_config.logging.level, app_config.logging.format)
    highest_allowed = resolve_threshold(app_config, threshold)

    try:
        report = AnalysisReport.from_json(report_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, RhdaPipelineError) as e:
        typer.echo(f"❌ Cannot read report: {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e

    result = evaluate_report(report, highest_allowed)
    print_gate_summary(report, result)
    raise typer.Exit(gate_exit_code(app_config, result))


@app.command()
def check_backend(
    url: Annotated[
        str | None,
        typer.Option("--url", help="Backend URL (default: TRUSTIFY_DA_BACKEND_URL)"),
    ] = None,
) -> None:
    """Check that the analysis backend answers with HTTP 200."""
    app_config = load_config(None)
    setup_logging(app_config.logging.level, app_config.logging.format)

    target = url or TrustifyDaConfig.from_env(os.environ).backend_url
    shown = SensitiveDataFilter.filter_string(target)
    if url_exists(target):
        typer.echo(f"✅ {shown} is reachable")
        return
    typer.echo(f"❌ {shown} is not reachable", err=True)
    raise typer.Exit(EXIT_FAILED)


@app.command()
def info() -> None:
    """Show the host platform and the configured backend."""
    app_config = load_config(None)
    setup_logging(app_config.logging.level, app_config.logging.format)

    if is_windows():
        family = "windows"
    elif is_mac():
        family = "mac"
    elif is_linux():
        family = "linux"
    else:
        family = "unknown"

    typer.echo(f"Operating system: {get_operating_system()} ({family})")
    typer.echo(f"Data model: {get_data_model()}-bit")
    backend_url = TrustifyDaConfig.from_env(os.environ).backend_url
    typer.echo(f"Backend URL: {SensitiveDataFilter.filter_string(backend_url)}")


def main() -> None:  # pragma: no cover
    """Main entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
