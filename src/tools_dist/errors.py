"""Error handling for tools distribution."""

from enum import Enum
from typing import Any, Dict, Optional

from tools_dist.logging import get_logger

ErrorKind = Enum(
    "ErrorKind",
    ["NOT_FOUND", "MALFORMED_ENTRY", "BUILD_FAILURE", "ARCHIVE_INTEGRITY", "TRANSPORT"],
)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[Any] = None,
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, ToolsError):
        error_info["kind"] = error.kind.name
        error_info["details"] = error.details

    logger.error({"event": "tools_error", **error_info})


class ToolsError(Exception):
    """Base error class for tools distribution."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.TRANSPORT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.details = details or {}


class NotFoundError(ToolsError):
    """The queried storage has no matching tools."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, kind=ErrorKind.NOT_FOUND, details=details)


class MalformedEntryError(ToolsError):
    """A storage entry that is not a usable tools archive."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"skipping tools entry {name!r}: {reason}",
            kind=ErrorKind.MALFORMED_ENTRY,
            details={"name": name, "reason": reason},
        )


class BuildError(ToolsError):
    """The tools build failed."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(
            f"build failed: {message}; {output}" if output else f"build failed: {message}",
            kind=ErrorKind.BUILD_FAILURE,
            details={"output": output},
        )
        self.output = output


class ArchiveError(ToolsError):
    """A tools archive or one of its entries is unusable."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message,
            kind=ErrorKind.ARCHIVE_INTEGRITY,
            details={"path": path} if path else None,
        )


class TransportError(ToolsError):
    """Fetching tools over the network failed."""

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        details = {"url": url}
        if status is not None:
            details["status"] = status
        super().__init__(message, kind=ErrorKind.TRANSPORT, details=details)
