"""Custom exception hierarchy for trackboard.

The metrics engine itself is total: missing or malformed optional fields
degrade to zero/None instead of raising. Errors only surface at the edges,
where raw records are obtained from a tracker export, or where the
caller supplies configuration.

Exception Hierarchy:
    TrackboardError (base)
    ├── DataSourceError - raw records could not be obtained
    │   ├── DataFetchError
    │   └── AttributionError
    ├── FileOperationError - File I/O
    │   └── FileReadError
    ├── ConfigurationError - Settings/configuration issues
    └── InvalidPeriodError - Unknown reporting period label

Usage:
    from trackboard.exceptions import DataFetchError

    try:
        tasks = source.get_tasks(list_id)
    except OSError as e:
        raise DataFetchError("Failed to fetch tasks", list_id=list_id) from e
"""

from typing import Any, Optional


class TrackboardError(Exception):
    """Base exception for all trackboard errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., IDs, paths)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Data Source Errors
# =============================================================================


class DataSourceError(TrackboardError):
    """Base exception for failures obtaining raw tracker records."""

    pass


class DataFetchError(DataSourceError):
    """Raw lists, tasks or time entries could not be fetched."""

    def __init__(
        self,
        message: str = "Failed to fetch tracker data",
        *,
        folder_id: Optional[str] = None,
        list_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if folder_id is not None:
            context["folder_id"] = folder_id
        if list_id is not None:
            context["list_id"] = list_id
        super().__init__(message, **context)


class AttributionError(DataSourceError):
    """Time entries cannot be attributed to projects.

    Raised when entry-accurate bucketing is requested without a
    task-to-project index to attribute entries with.
    """

    def __init__(self, message: str = "No task-to-project index available", **context: Any) -> None:
        super().__init__(message, **context)


# =============================================================================
# File Operation Errors
# =============================================================================


class FileOperationError(TrackboardError):
    """Base exception for file operations."""

    pass


class FileReadError(FileOperationError):
    """Failed to read a file."""

    def __init__(
        self,
        message: str = "Failed to read file",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TrackboardError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


class InvalidPeriodError(TrackboardError):
    """A reporting period label is not one of the known periods."""

    def __init__(self, period: str, valid: Optional[list[str]] = None) -> None:
        self.period = period
        context: dict[str, Any] = {}
        if valid:
            context["valid"] = valid
        super().__init__(f"Unknown period '{period}'", **context)
