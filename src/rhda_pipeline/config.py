"""Configuration management for the RHDA pipeline toolkit.

Covers two concerns:

- propagating the ``TRUSTIFY_DA_*`` settings understood by the Trustify DA
  client from a build environment into the process environment, and
- application settings (CLI, gate threshold, logging) loaded from YAML or
  from ``RHDA_*`` environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Literal

import structlog
import yaml  # type: ignore
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Severity

logger = structlog.get_logger(__name__)

TRUST_DA_TOKEN_PROPERTY = "TRUST_DA_TOKEN"
TRUST_DA_SOURCE_PROPERTY = "TRUST_DA_SOURCE"
TRUST_DA_SOURCE_VALUE = "jenkins-plugin"
CONSENT_TELEMETRY_PROPERTY = "CONSENT_TELEMETRY"

TRUSTIFY_DA_SYSTEM_PROPERTIES: tuple[str, ...] = (
    "TRUSTIFY_DA_DEBUG",
    "TRUSTIFY_DA_PROXY_URL",
    "TRUSTIFY_DA_MVN_PATH",
    "TRUSTIFY_DA_GRADLE_PATH",
    "TRUSTIFY_DA_NPM_PATH",
    "TRUSTIFY_DA_YARN_PATH",
    "TRUSTIFY_DA_PNPM_PATH",
    "TRUSTIFY_DA_GO_PATH",
    "TRUSTIFY_DA_MVN_USER_SETTINGS",
    "TRUSTIFY_DA_MVN_LOCAL_REPO",
    "TRUSTIFY_DA_PYTHON3_PATH",
    "TRUSTIFY_DA_PIP3_PATH",
    "TRUSTIFY_DA_GO_MVS_LOGIC_ENABLED",
    "MATCH_MANIFEST_VERSIONS",
    "TRUSTIFY_DA_PIP_PATH",
    "TRUSTIFY_DA_PIP_FREEZE",
    "TRUSTIFY_DA_PIP_SHOW",
    "TRUSTIFY_DA_PIP_USE_DEP_TREE",
    "TRUSTIFY_DA_PYTHON_INSTALL_BEST_EFFORTS",
    "TRUSTIFY_DA_PYTHON_VIRTUAL_ENV",
    "TRUSTIFY_DA_IGNORE_METHOD",
)

TRUSTIFY_DA_BACKEND_URL_PROPERTY = "TRUSTIFY_DA_BACKEND_URL"
RHDA_BACKEND_URL = "https://rhda.rhcloud.com"

_TRUTHY = {"true", "1", "yes"}


def set_trustify_da_system_properties(
    env_vars: Mapping[str, str] | None,
    target: MutableMapping[str, str] | None = None,
) -> None:
    """Copy the Trustify DA settings from ``env_vars`` into ``target``.

    Allow-listed keys missing from ``env_vars`` are removed from ``target``
    so nothing from a previous run survives. The backend URL falls back to
    the RHDA default instead of being removed.

    Args:
        env_vars: The build environment, or None when there is none.
        target: Mapping to write into; defaults to the process environment.

    """
    if target is None:
        target = os.environ
    env_vars = env_vars or {}

    backend_url = env_vars.get(TRUSTIFY_DA_BACKEND_URL_PROPERTY)
    target[TRUSTIFY_DA_BACKEND_URL_PROPERTY] = (
        backend_url if backend_url is not None else RHDA_BACKEND_URL
    )

    for prop in TRUSTIFY_DA_SYSTEM_PROPERTIES:
        value = env_vars.get(prop)
        if value is not None:
            target[prop] = value
        else:
            target.pop(prop, None)

    logger.debug(
        "Propagated Trustify DA properties",
        backend_url=target[TRUSTIFY_DA_BACKEND_URL_PROPERTY],
        properties=sorted(p for p in TRUSTIFY_DA_SYSTEM_PROPERTIES if p in target),
    )


class TrustifyDaConfig(BaseModel):
    """Trustify DA client settings for a single analysis run."""

    model_config = ConfigDict(frozen=True)

    backend_url: str = Field(default=RHDA_BACKEND_URL, description="Backend service URL")
    properties: dict[str, str] = Field(default_factory=dict)
    token: str | None = Field(default=None, description="Trustify DA token")
    consent_telemetry: bool = Field(default=False)

    @field_validator("properties")
    @classmethod
    def only_known_properties(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject keys the Trustify DA client does not understand."""
        unknown = sorted(set(v) - set(TRUSTIFY_DA_SYSTEM_PROPERTIES))
        if unknown:
            msg = f"Unknown Trustify DA properties: {', '.join(unknown)}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_env(cls, env_vars: Mapping[str, str] | None) -> TrustifyDaConfig:
        """Build the run configuration from a build environment.

        Args:
            env_vars: The build environment, or None when there is none.

        Returns:
            TrustifyDaConfig holding only the allow-listed keys present.

        """
        env_vars = env_vars or {}
        backend_url = env_vars.get(TRUSTIFY_DA_BACKEND_URL_PROPERTY)
        consent = env_vars.get(CONSENT_TELEMETRY_PROPERTY) or ""
        return cls(
            backend_url=backend_url if backend_url is not None else RHDA_BACKEND_URL,
            properties={
                prop: env_vars[prop]
                for prop in TRUSTIFY_DA_SYSTEM_PROPERTIES
                if env_vars.get(prop) is not None
            },
            token=env_vars.get(TRUST_DA_TOKEN_PROPERTY) or None,
            consent_telemetry=consent.strip().lower() in _TRUTHY,
        )

    def as_environment(self) -> dict[str, str]:
        """Get the variables to hand to the analysis CLI process."""
        env = dict(self.properties)
        env[TRUSTIFY_DA_BACKEND_URL_PROPERTY] = self.backend_url
        env[TRUST_DA_SOURCE_PROPERTY] = TRUST_DA_SOURCE_VALUE
        env[CONSENT_TELEMETRY_PROPERTY] = "true" if self.consent_telemetry else "false"
        if self.token:
            env[TRUST_DA_TOKEN_PROPERTY] = self.token
        return env


class CliConfig(BaseModel):
    """Configuration for the Trustify DA command line client."""

    command: str = Field(default="trustify-da-javascript-client")
    timeout: int | None = Field(default=600, description="Seconds before the run is aborted")


class GateConfig(BaseModel):
    """Configuration for the build gate."""

    highest_allowed_severity: Severity = Field(default=Severity.MEDIUM)
    fail_on_exceeded: bool = Field(default=True)

    @field_validator("highest_allowed_severity", mode="before")
    @classmethod
    def parse_severity(cls, v: str | Severity) -> Severity:
        """Accept severity names in any case."""
        return Severity.from_value(v)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["json", "console"] = Field(default="console")


class AppConfig(BaseModel):
    """Main application configuration."""

    cli: CliConfig = Field(default_factory=CliConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Loaded AppConfig instance.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            yaml.YAMLError: If the YAML is invalid.
            ValidationError: If the config doesn't match the schema.

        """
        config_path = Path(path).expanduser().resolve()
        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data or {})

    @classmethod
    def from_settings(cls, settings: EnvSettings) -> AppConfig:
        """Build configuration from ``RHDA_*`` environment settings."""
        return cls(
            cli=CliConfig(command=settings.command, timeout=settings.timeout),
            gate=GateConfig(highest_allowed_severity=settings.highest_allowed_severity),
            logging=LoggingConfig(level=settings.log_level, format=settings.log_format),
        )


class EnvSettings(BaseSettings):
    """Environment-based settings (for CLI usage without YAML)."""

    model_config = SettingsConfigDict(
        env_prefix="RHDA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    command: str = Field(default="trustify-da-javascript-client")
    timeout: int | None = Field(default=600)
    highest_allowed_severity: str = Field(default="MEDIUM")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")
