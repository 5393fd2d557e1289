"""Data models for RHDA stack analysis reports.

These models mirror the JSON report produced by the Trustify DA backend.
They are read-only: a report is built once per analysis run and only read
afterwards.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import ReportParseError


class Severity(str, Enum):
    """Vulnerability severity, most severe first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Position in the severity ranking; 0 is the most severe."""
        return _SEVERITY_RANKING.index(self)

    def is_more_severe_than(self, other: Severity) -> bool:
        """Check if this severity strictly outranks ``other``."""
        return self.rank < other.rank

    @classmethod
    def from_value(cls, value: str | Severity) -> Severity:
        """Parse a severity name, ignoring case and surrounding whitespace.

        Raises:
            ValueError: If the name is not a known severity.

        """
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            msg = f"Unknown severity: {value!r}"
            raise ValueError(msg) from None


# Ranking is explicit so it never depends on member or alphabetical order.
_SEVERITY_RANKING: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    return int(value) if value is not None else 0


@dataclass(frozen=True)
class Issue:
    """A single vulnerability reported against a dependency."""

    id: str
    severity: Severity
    title: str = ""
    source: str = ""
    cvss_score: float | None = None
    cves: list[str] = field(default_factory=list)
    unique: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Issue | None:
        """Create an Issue from its JSON form; None stays None."""
        if data is None:
            return None
        raw_severity = data.get("severity")
        if raw_severity is None:
            raise ReportParseError(f"issue {data.get('id')!r} has no severity")
        try:
            severity = Severity.from_value(raw_severity)
        except ValueError as e:
            raise ReportParseError(str(e)) from e

        score = data.get("cvssScore")
        return cls(
            id=str(data.get("id", "")),
            severity=severity,
            title=data.get("title") or "",
            source=data.get("source") or "",
            cvss_score=float(score) if score is not None else None,
            cves=list(data.get("cves") or []),
            unique=bool(data.get("unique", False)),
        )


def _issues(data: dict[str, Any]) -> list[Issue]:
    return [
        issue
        for issue in (Issue.from_dict(raw) for raw in data.get("issues") or [])
        if issue is not None
    ]


@dataclass(frozen=True)
class TransitiveDependencyReport:
    """A transitive dependency pulled in by a direct dependency."""

    ref: str
    issues: list[Issue] = field(default_factory=list)
    highest_vulnerability: Issue | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransitiveDependencyReport:
        """Create a TransitiveDependencyReport from its JSON form."""
        return cls(
            ref=data.get("ref") or "",
            issues=_issues(data),
            highest_vulnerability=Issue.from_dict(data.get("highestVulnerability")),
        )


@dataclass(frozen=True)
class DependencyReport:
    """A direct dependency together with its vulnerabilities."""

    ref: str
    issues: list[Issue] = field(default_factory=list)
    transitive: list[TransitiveDependencyReport] = field(default_factory=list)
    recommendation: str | None = None
    highest_vulnerability: Issue | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DependencyReport | None:
        """Create a DependencyReport from its JSON form; None stays None."""
        if data is None:
            return None
        return cls(
            ref=data.get("ref") or "",
            issues=_issues(data),
            transitive=[
                TransitiveDependencyReport.from_dict(raw)
                for raw in data.get("transitive") or []
                if raw is not None
            ],
            recommendation=data.get("recommendation"),
            highest_vulnerability=Issue.from_dict(data.get("highestVulnerability")),
        )


@dataclass(frozen=True)
class SourceSummary:
    """Vulnerability counters reported by a single source."""

    direct: int = 0
    transitive: int = 0
    total: int = 0
    dependencies: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    remediations: int = 0
    recommendations: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SourceSummary | None:
        """Create a SourceSummary from its JSON form; None stays None."""
        if data is None:
            return None
        return cls(
            direct=_int(data, "direct"),
            transitive=_int(data, "transitive"),
            total=_int(data, "total"),
            dependencies=_int(data, "dependencies"),
            critical=_int(data, "critical"),
            high=_int(data, "high"),
            medium=_int(data, "medium"),
            low=_int(data, "low"),
            remediations=_int(data, "remediations"),
            recommendations=_int(data, "recommendations"),
        )


@dataclass(frozen=True)
class Source:
    """Findings of one vulnerability source within a provider."""

    summary: SourceSummary | None = None
    dependencies: list[DependencyReport | None] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Source | None:
        """Create a Source from its JSON form; None stays None."""
        if data is None:
            return None
        return cls(
            summary=SourceSummary.from_dict(data.get("summary")),
            dependencies=[
                DependencyReport.from_dict(raw) for raw in data.get("dependencies") or []
            ],
        )


@dataclass(frozen=True)
class ProviderStatus:
    """Outcome of the request the backend made to a provider."""

    ok: bool
    name: str = ""
    code: int | None = None
    message: str = ""
    warnings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ProviderStatus | None:
        """Create a ProviderStatus from its JSON form; None stays None."""
        if data is None:
            return None
        code = data.get("code")
        return cls(
            ok=bool(data.get("ok", False)),
            name=data.get("name") or "",
            code=int(code) if code is not None else None,
            message=data.get("message") or "",
            warnings=dict(data.get("warnings") or {}),
        )


@dataclass(frozen=True)
class ProviderReport:
    """Everything a single provider returned, keyed by source name."""

    status: ProviderStatus | None = None
    sources: dict[str, Source | None] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ProviderReport:
        """Create a ProviderReport from its JSON form."""
        data = data or {}
        return cls(
            status=ProviderStatus.from_dict(data.get("status")),
            sources={
                name: Source.from_dict(raw)
                for name, raw in (data.get("sources") or {}).items()
            },
        )


@dataclass(frozen=True)
class Scanned:
    """Counters of the dependencies the backend scanned."""

    total: int = 0
    direct: int = 0
    transitive: int = 0


@dataclass(frozen=True)
class AnalysisReport:
    """Stack analysis report, keyed by provider name."""

    scanned: Scanned | None = None
    providers: dict[str, ProviderReport] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisReport:
        """Create an AnalysisReport from the decoded backend JSON.

        Args:
            data: The decoded JSON object.

        Returns:
            AnalysisReport instance.

        Raises:
            ReportParseError: If the data is not a JSON object, a nested
                level has the wrong type or a severity is unknown.

        """
        if not isinstance(data, dict):
            raise ReportParseError("report must be a JSON object")

        try:
            scanned_data = data.get("scanned")
            scanned = None
            if scanned_data is not None:
                scanned = Scanned(
                    total=_int(scanned_data, "total"),
                    direct=_int(scanned_data, "direct"),
                    transitive=_int(scanned_data, "transitive"),
                )

            return cls(
                scanned=scanned,
                providers={
                    name: ProviderReport.from_dict(raw)
                    for name, raw in (data.get("providers") or {}).items()
                },
            )
        except (AttributeError, TypeError, ValueError) as e:
            # A nested level has the wrong JSON type
            raise ReportParseError(f"malformed report: {e}") from e

    @classmethod
    def from_json(cls, text: str) -> AnalysisReport:
        """Parse the backend's JSON output into an AnalysisReport."""
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ReportParseError("output is not valid JSON") from e
        return cls.from_dict(data)
