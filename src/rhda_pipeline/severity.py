"""Severity aggregation and threshold evaluation for analysis reports.

The build gate is two steps: reduce a report to the distinct highest
vulnerability severities of its dependencies, then check whether any of
them is more severe than the allowed ceiling.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import structlog

from .models import AnalysisReport, DependencyReport, Severity, Source

logger = structlog.get_logger(__name__)


def _sources(report: AnalysisReport) -> Iterator[Source]:
    for provider in report.providers.values():
        for source in provider.sources.values():
            if source is not None:
                yield source


def _dependencies(sources: Iterable[Source]) -> Iterator[DependencyReport]:
    for source in sources:
        for dependency in source.dependencies:
            if dependency is not None:
                yield dependency


def get_all_highest_severities_from_response(report: AnalysisReport) -> set[Severity]:
    """Collect the highest vulnerability severity of every dependency.

    Providers, sources and dependencies are walked in turn; absent sources,
    dependencies and highest vulnerabilities are skipped.

    Args:
        report: The stack analysis report.

    Returns:
        The distinct severities found.

    """
    return {
        dependency.highest_vulnerability.severity
        for dependency in _dependencies(_sources(report))
        if dependency.highest_vulnerability is not None
    }


def is_highest_vulnerability_allowed_exceeded(
    severities: Iterable[Severity],
    highest_allowed_severity: Severity,
) -> bool:
    """Check if any severity is strictly more severe than the allowed one.

    A severity equal to ``highest_allowed_severity`` does not exceed it.
    """
    return any(
        severity.is_more_severe_than(highest_allowed_severity) for severity in severities
    )


@dataclass(frozen=True)
class GateResult:
    """Outcome of gating a report against an allowed severity."""

    severities: frozenset[Severity]
    highest_allowed_severity: Severity
    exceeded: bool

    @property
    def most_severe(self) -> Severity | None:
        """The most severe severity observed, if any."""
        if not self.severities:
            return None
        return min(self.severities, key=lambda severity: severity.rank)


def evaluate_report(
    report: AnalysisReport,
    highest_allowed_severity: Severity,
) -> GateResult:
    """Aggregate a report's severities and compare them with the ceiling."""
    severities = get_all_highest_severities_from_response(report)
    exceeded = is_highest_vulnerability_allowed_exceeded(severities, highest_allowed_severity)

    logger.info(
        "Evaluated analysis report",
        severities=sorted(s.value for s in severities),
        highest_allowed=highest_allowed_severity.value,
        exceeded=exceeded,
    )

    return GateResult(
        severities=frozenset(severities),
        highest_allowed_severity=highest_allowed_severity,
        exceeded=exceeded,
    )
