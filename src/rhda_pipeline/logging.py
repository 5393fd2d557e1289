"""Logging utilities with security filtering.

This module provides logging helpers and filters to ensure the Trustify DA
token and proxy credentials are not exposed in log output.
"""

import re
from typing import Any

import structlog


class SensitiveDataFilter:
    """Filter sensitive data from log messages.

    This filter removes or masks sensitive information such as:
    - The TRUST_DA_TOKEN value
    - Tokens and passwords
    - Authorization headers
    - Credentials embedded in proxy or backend URLs
    """

    SENSITIVE_PATTERNS = [
        # Trustify DA token
        (re.compile(r'TRUST_DA_TOKEN["\s:=]+["\']?([^\s"\']+)["\']?'), r'TRUST_DA_TOKEN=***'),
        # Tokens
        (re.compile(r'(?<![A-Z_])token["\s:=]+["\']?([a-zA-Z0-9_-]{10,})["\']?', re.I), r'token=***'),
        # Passwords
        (re.compile(r'password["\s:=]+["\']?([^\s"\']+)["\']?', re.I), r'password=***'),
        # Authorization headers
        (re.compile(r'Authorization["\s:=]+["\']?([^\s"\']+)["\']?', re.I), r'Authorization=***'),
        # user:password@ in URLs
        (re.compile(r'(\b[a-z][a-z0-9+.-]*://)[^\s/@:]+:[^\s/@]+@', re.I), r'\1***:***@'),
    ]

    SENSITIVE_KEYS = {
        'trust_da_token', 'token', 'password', 'secret',
        'authorization', 'api_key',
    }

    @classmethod
    def filter_string(cls, text: str) -> str:
        """Filter sensitive data from a string.

        Args:
            text: The text to filter.

        Returns:
            The filtered text with sensitive data masked.
        """
        result = text
        for pattern, replacement in cls.SENSITIVE_PATTERNS:
            result = pattern.sub(replacement, result)
        return result

    @classmethod
    def filter_dict(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Filter sensitive data from a dictionary.

        Args:
            data: The dictionary to filter.

        Returns:
            A new dictionary with sensitive values masked.
        """
        result = {}
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in cls.SENSITIVE_KEYS:
                result[key] = '***'
            elif isinstance(value, str):
                result[key] = cls.filter_string(value)
            elif isinstance(value, dict):
                result[key] = cls.filter_dict(value)
            else:
                result[key] = value
        return result


def redact_sensitive_data(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor masking sensitive values in every event."""
    return SensitiveDataFilter.filter_dict(event_dict)


def mask_token(token: str) -> str:
    """Mask a token for safe logging.

    Shows only first 2 and last 2 characters.
    """
    if len(token) <= 4:
        return "****"
    return f"{token[:2]}***{token[-2:]}"


def create_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Create a configured logger instance."""
    return structlog.get_logger(name)
