"""Exception classes for the RHDA pipeline toolkit.

This module defines custom exceptions used throughout the application.
Error messages never carry the Trustify DA token or proxy credentials.
"""

from typing import Optional, Sequence


class RhdaPipelineError(Exception):
    """Base exception class for the RHDA pipeline toolkit.

    All custom exceptions inherit from this class.

    Attributes:
        error_code: A unique error code for this exception type.
    """

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: str = "RHDA-000",
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message (must not contain sensitive data).
            error_code: Unique error code for this error type.
        """
        self.error_code = error_code
        super().__init__(message)


class CommandExecutionError(RhdaPipelineError):
    """Raised when the analysis CLI cannot be run or exits with a failure.

    Attributes:
        command: The executable that was invoked (arguments are not kept).
        exit_code: Process exit code, or None if the process never ran.
        stderr: Tail of the process error output.
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        """Initialize CommandExecutionError.

        Args:
            command: The argument vector that was executed.
            exit_code: Exit code of the process, if it started.
            stderr: Error output of the process.
        """
        self.command = command[0] if command else None
        self.exit_code = exit_code
        self.stderr = stderr

        name = self.command or "command"
        if exit_code is None:
            message = f"Failed to run {name}."
        else:
            message = f"{name} exited with code {exit_code}."
        if stderr:
            message = f"{message} {stderr}"

        super().__init__(message=message, error_code="RHDA-001")


class ConfigurationError(RhdaPipelineError):
    """Raised when there is a configuration error.

    Examples:
        - Manifest file not found
        - Invalid severity threshold
        - Configuration file not found
    """

    def __init__(self, message: str = "Configuration error occurred") -> None:
        super().__init__(message=message, error_code="RHDA-002")


class ReportParseError(RhdaPipelineError):
    """Raised when the analysis output is not a usable report.

    Attributes:
        details: Additional details about the parse failure.
    """

    def __init__(self, details: Optional[str] = None) -> None:
        """Initialize ReportParseError.

        Args:
            details: Additional error details.
        """
        self.details = details

        if details:
            message = f"Failed to parse analysis report: {details}"
        else:
            message = "Failed to parse analysis report."

        super().__init__(message=message, error_code="RHDA-003")
