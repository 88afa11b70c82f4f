"""Error taxonomy for the directory watcher.

Per-file errors (:class:`MetadataUnavailable`) are absorbed where they
happen.  Per-cycle errors (:class:`TargetNoteMissing`,
:class:`StoreIOFailure`) end the current flush cycle only.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Machine-readable error codes."""

    UNKNOWN = 1000

    METADATA_UNAVAILABLE = 1001

    TARGET_NOTE_MISSING = 2001

    STORE_READ_FAILED = 3001
    STORE_WRITE_FAILED = 3002


class DirwatchError(Exception):
    """Base exception for all directory watcher errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class MetadataUnavailable(DirwatchError):
    """Metadata extraction failed for a single file."""

    code = ErrorCode.METADATA_UNAVAILABLE

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"No metadata for {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class TargetNoteMissing(DirwatchError):
    """The configured note does not resolve to a text note."""

    code = ErrorCode.TARGET_NOTE_MISSING

    def __init__(self, path: str) -> None:
        shown = path or "(not configured)"
        super().__init__(f"Target note is not a text note: {shown}", details={"path": path})


class StoreIOFailure(DirwatchError):
    """Reading or writing through the file store failed."""

    def __init__(self, path: str, operation: str, reason: str) -> None:
        code = ErrorCode.STORE_WRITE_FAILED if operation == "write" else ErrorCode.STORE_READ_FAILED
        super().__init__(
            f"Could not {operation} {path}: {reason}",
            code=code,
            details={"path": path, "operation": operation},
        )
