"""Stack analysis of a manifest through the Trustify DA CLI."""

from __future__ import annotations

from pathlib import Path

import structlog

from .config import CliConfig, TrustifyDaConfig
from .exceptions import ConfigurationError, ReportParseError
from .executor import CommandExecutor
from .logging import mask_token
from .models import AnalysisReport
from .utils import is_json_valid

logger = structlog.get_logger(__name__)


class StackAnalysis:
    """Run a stack analysis and turn the CLI output into a report."""

    def __init__(
        self,
        config: TrustifyDaConfig,
        cli: CliConfig,
        executor: CommandExecutor | None = None,
    ) -> None:
        """Initialize the analysis.

        Args:
            config: Trustify DA settings for this run.
            cli: Command line client configuration.
            executor: Optional executor (for testing).

        """
        self.config = config
        self.cli = cli
        self.executor = executor or CommandExecutor()
        self.last_output: str | None = None

    def build_command(self, manifest: Path) -> list[str]:
        """Get the argument vector analysing ``manifest``."""
        return [self.cli.command, "stack", str(manifest)]

    def run(self, manifest: str | Path) -> AnalysisReport:
        """Analyse a manifest file.

        Args:
            manifest: Path to the manifest (pom.xml, package.json, ...).

        Returns:
            The parsed analysis report.

        Raises:
            ConfigurationError: If the manifest does not exist.
            CommandExecutionError: If the CLI fails.
            ReportParseError: If the CLI output is not a JSON report.

        """
        manifest_path = Path(manifest).expanduser().resolve()
        if not manifest_path.is_file():
            msg = f"Manifest file not found: {manifest_path}"
            raise ConfigurationError(msg)

        logger.info(
            "Running stack analysis",
            manifest=str(manifest_path),
            backend_url=self.config.backend_url,
            token=mask_token(self.config.token) if self.config.token else None,
        )

        output = self.executor.execute(
            self.build_command(manifest_path),
            envs=self.config.as_environment(),
            timeout=self.cli.timeout,
        )
        self.last_output = output

        if not is_json_valid(output):
            logger.error("Analysis output is not JSON", output_length=len(output))
            raise ReportParseError("CLI output is not a JSON document")

        return AnalysisReport.from_json(output)
