"""RHDA pipeline toolkit - gate builds on Trustify DA dependency analysis.

This package propagates Trustify DA settings into the build environment,
runs stack analyses through the Trustify DA CLI, and decides whether a build
should fail from the highest vulnerability severities in the report.
"""

__version__ = "1.0.0"

from .analysis import StackAnalysis
from .config import (
    RHDA_BACKEND_URL,
    TRUSTIFY_DA_SYSTEM_PROPERTIES,
    AppConfig,
    GateConfig,
    TrustifyDaConfig,
    set_trustify_da_system_properties,
)
from .executor import CommandExecutor
from .models import (
    AnalysisReport,
    DependencyReport,
    Issue,
    ProviderReport,
    Severity,
    Source,
)
from .severity import (
    GateResult,
    evaluate_report,
    get_all_highest_severities_from_response,
    is_highest_vulnerability_allowed_exceeded,
)
from .utils import do_execute, is_json_valid, url_exists

__all__ = [
    # Version
    "__version__",
    # Analysis
    "StackAnalysis",
    "CommandExecutor",
    "do_execute",
    # Config
    "AppConfig",
    "GateConfig",
    "RHDA_BACKEND_URL",
    "TRUSTIFY_DA_SYSTEM_PROPERTIES",
    "TrustifyDaConfig",
    "set_trustify_da_system_properties",
    # Models
    "AnalysisReport",
    "DependencyReport",
    "Issue",
    "ProviderReport",
    "Severity",
    "Source",
    # Severity gate
    "GateResult",
    "evaluate_report",
    "get_all_highest_severities_from_response",
    "is_highest_vulnerability_allowed_exceeded",
    # Probes
    "is_json_valid",
    "url_exists",
]
