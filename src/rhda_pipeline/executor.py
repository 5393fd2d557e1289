"""Execution of the Trustify DA command line client."""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence

import structlog

from .exceptions import CommandExecutionError
from .logging import SensitiveDataFilter

logger = structlog.get_logger(__name__)

# Lines of stderr kept on CommandExecutionError
STDERR_TAIL_LINES = 20


class CommandExecutor:
    """Run an external command and capture its output."""

    def execute(
        self,
        cmd: str | Sequence[str],
        envs: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        """Run ``cmd`` and return what it wrote to stdout.

        Args:
            cmd: Argument vector, or a shell-style command string.
            envs: Variables overlaid on the current process environment.
            timeout: Seconds to wait before the process is killed.

        Returns:
            The captured standard output.

        Raises:
            CommandExecutionError: If the command cannot be started, times
                out or exits with a non-zero code.

        """
        args = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
        if not args:
            raise CommandExecutionError(stderr="empty command")

        env = dict(os.environ)
        if envs:
            env.update(envs)

        logger.info("Executing command", command=args[0], args=args[1:])

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                env=env,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("Command timed out", command=args[0], timeout=timeout)
            raise CommandExecutionError(args, stderr=f"timed out after {timeout}s") from e
        except (subprocess.SubprocessError, OSError) as e:
            logger.exception("Failed to start command", command=args[0], error=str(e))
            raise CommandExecutionError(args, stderr=str(e)) from e

        stderr = SensitiveDataFilter.filter_string((result.stderr or "").strip())
        if result.returncode != 0:
            tail = "\n".join(stderr.splitlines()[-STDERR_TAIL_LINES:])
            logger.error(
                "Command failed",
                command=args[0],
                exit_code=result.returncode,
                stderr=tail,
            )
            raise CommandExecutionError(args, exit_code=result.returncode, stderr=tail)

        if stderr:
            logger.debug("Command stderr", command=args[0], stderr=stderr)
        logger.info("Command finished", command=args[0], output_length=len(result.stdout))

        return result.stdout
