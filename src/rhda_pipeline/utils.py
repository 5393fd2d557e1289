"""Helper probes used by the build steps.

JSON validation, URL reachability, host OS / architecture detection and a
thin wrapper around the command executor.
"""

from __future__ import annotations

import json
import platform
import struct
from collections.abc import Mapping, Sequence

import requests  # type: ignore
import structlog

from .executor import CommandExecutor

logger = structlog.get_logger(__name__)

HTTP_OK = 200


def do_execute(
    cmd: str | Sequence[str],
    envs: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> str:
    """Run a command with ``CommandExecutor`` and return its output."""
    return CommandExecutor().execute(cmd, envs=envs, timeout=timeout)


def is_json_valid(text: str | None) -> bool:
    """Check if ``text`` is a JSON object or a JSON array.

    Scalars such as ``"abc"`` or ``42`` are not accepted.
    """
    if not text:
        return False
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return False
    return isinstance(data, (dict, list))


def url_exists(url: str, timeout: float = 10) -> bool:
    """Check if a GET on ``url`` answers with HTTP 200.

    Transport errors are logged and reported as unreachable.
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("URL is not reachable", url=url, error=str(e))
        return False
    return response.status_code == HTTP_OK


def get_operating_system() -> str:
    """Get the host operating system name."""
    return platform.system()


def is_windows() -> bool:
    # "darwin" contains "win"
    os_name = get_operating_system().lower()
    return "win" in os_name and "darwin" not in os_name


def is_linux() -> bool:
    return "lin" in get_operating_system().lower()


def is_mac() -> bool:
    os_name = get_operating_system().lower()
    return "mac" in os_name or "darwin" in os_name


def get_data_model() -> str:
    """Get the pointer width of the running interpreter in bits."""
    return str(struct.calcsize("P") * 8)


def is_32() -> bool:
    return get_data_model() == "32"


def is_64() -> bool:
    return get_data_model() == "64"
