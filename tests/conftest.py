"""Pytest configuration and fixtures."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from rhda_pipeline.config import (
    TRUSTIFY_DA_BACKEND_URL_PROPERTY,
    TRUSTIFY_DA_SYSTEM_PROPERTIES,
)
from rhda_pipeline.models import AnalysisReport


def _issue(issue_id: str, severity: str, score: float) -> dict[str, Any]:
    return {
        "id": issue_id,
        "title": f"Vulnerability {issue_id}",
        "source": "osv",
        "cvssScore": score,
        "severity": severity,
        "cves": [issue_id],
        "unique": False,
    }


@pytest.fixture
def sample_report_data() -> dict[str, Any]:
    """Create a stack analysis report with CRITICAL, HIGH and MEDIUM findings."""
    log4j = _issue("CVE-2021-44228", "CRITICAL", 10.0)
    jackson = _issue("CVE-2020-36518", "HIGH", 7.5)
    commons = _issue("CVE-2021-29425", "MEDIUM", 4.8)
    jackson_again = _issue("CVE-2022-42003", "HIGH", 7.5)

    return {
        "scanned": {"total": 12, "direct": 4, "transitive": 8},
        "providers": {
            "trusted-content": {
                "status": {"ok": True, "name": "trusted-content", "code": 200, "message": "OK"},
                "sources": {},
            },
            "osv": {
                "status": {"ok": True, "name": "osv", "code": 200, "message": "OK"},
                "sources": {
                    "osv": {
                        "summary": {
                            "direct": 3,
                            "transitive": 2,
                            "total": 5,
                            "dependencies": 3,
                            "critical": 1,
                            "high": 2,
                            "medium": 1,
                            "low": 0,
                            "remediations": 0,
                            "recommendations": 1,
                        },
                        "dependencies": [
                            {
                                "ref": "pkg:maven/org.apache.logging.log4j/log4j-core@2.14.1",
                                "issues": [log4j],
                                "transitive": [],
                                "highestVulnerability": log4j,
                            },
                            {
                                "ref": "pkg:maven/com.fasterxml.jackson.core/jackson-databind@2.13.1",
                                "issues": [jackson, jackson_again],
                                "transitive": [
                                    {
                                        "ref": "pkg:maven/commons-io/commons-io@2.6",
                                        "issues": [commons],
                                        "highestVulnerability": commons,
                                    }
                                ],
                                "recommendation": "pkg:maven/com.fasterxml.jackson.core/jackson-databind@2.13.4.2",
                                "highestVulnerability": jackson,
                            },
                            {
                                "ref": "pkg:maven/commons-io/commons-io@2.6",
                                "issues": [commons],
                                "highestVulnerability": commons,
                            },
                            {
                                "ref": "pkg:maven/org.slf4j/slf4j-api@1.7.36",
                                "issues": [],
                                "highestVulnerability": None,
                            },
                        ],
                    },
                },
            },
        },
    }


@pytest.fixture
def sample_report(sample_report_data: dict[str, Any]) -> AnalysisReport:
    """Create a parsed sample report."""
    return AnalysisReport.from_dict(sample_report_data)


@pytest.fixture
def sample_report_json(sample_report_data: dict[str, Any]) -> str:
    """Create the sample report as CLI output."""
    return json.dumps(sample_report_data)


@pytest.fixture
def report_file(tmp_path: Path, sample_report_json: str) -> Path:
    """Write the sample report to a file."""
    path = tmp_path / "report.json"
    path.write_text(sample_report_json, encoding="utf-8")
    return path


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """Create an empty pom.xml manifest."""
    path = tmp_path / "pom.xml"
    path.write_text("<project></project>", encoding="utf-8")
    return path


@pytest.fixture
def clean_trustify_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every Trustify DA variable from the process environment.

    monkeypatch restores the original values after the test, including the
    ones written by the code under test.
    """
    for prop in (*TRUSTIFY_DA_SYSTEM_PROPERTIES, TRUSTIFY_DA_BACKEND_URL_PROPERTY):
        monkeypatch.setenv(prop, "placeholder")
        monkeypatch.delenv(prop)
