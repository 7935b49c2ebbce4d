"""Error codes and error handling utilities for Theme Manager."""

from __future__ import annotations

import errno
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for storage and theme operations."""

    # Lookup and I/O errors
    NOT_FOUND = auto()
    OPEN_FAILED = auto()
    READ_INCOMPLETE = auto()
    WRITE_INCOMPLETE = auto()
    MKDIR_FAILED = auto()

    # Filesystem transaction errors
    RENAME_FAILED = auto()
    RECURSIVE_DELETE_FAILED = auto()
    MERGE_FAILED = auto()

    # Content errors
    SIZE_OUT_OF_BOUNDS = auto()
    DECODE_FAILED = auto()
    MANIFEST_INVALID = auto()

    # Catch-all
    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NOT_FOUND: "The file or folder was not found on the storage volume.",
    ErrorCode.OPEN_FAILED: "The file could not be opened. Check that the card is mounted.",
    ErrorCode.READ_INCOMPLETE: "The file could not be read completely.",
    ErrorCode.WRITE_INCOMPLETE: "The file could not be written completely. The card may be full.",
    ErrorCode.MKDIR_FAILED: "The folder could not be created.",

    ErrorCode.RENAME_FAILED: "Moving the folder failed. Nothing was changed.",
    ErrorCode.RECURSIVE_DELETE_FAILED: "The folder could not be removed completely.",
    ErrorCode.MERGE_FAILED: "Copying the theme files failed. The previous theme is kept as a backup.",

    ErrorCode.SIZE_OUT_OF_BOUNDS: "The file size or image dimensions are outside the supported range.",
    ErrorCode.DECODE_FAILED: "The image data could not be decoded.",
    ErrorCode.MANIFEST_INVALID: "The manifest is missing its header line.",

    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
}


@dataclass
class ThemeManagerError(Exception):
    """Base exception for Theme Manager with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nPath: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(
    exc: Exception,
    path: Path | None = None,
    *,
    default: ErrorCode = ErrorCode.OPERATION_FAILED,
) -> ThemeManagerError:
    """Classify a generic exception into a ThemeManagerError.

    ``default`` is used for OS errors that do not map to a more specific code,
    so callers can say which operation was in progress.
    """
    if isinstance(exc, ThemeManagerError):
        return exc

    exc_str = str(exc)
    if isinstance(exc, FileNotFoundError):
        return ThemeManagerError(ErrorCode.NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError):
        return ThemeManagerError(ErrorCode.OPEN_FAILED, path=path, details={"original": exc_str})
    if isinstance(exc, OSError) and exc.errno == errno.ENOSPC:
        return ThemeManagerError(
            ErrorCode.WRITE_INCOMPLETE, path=path, details={"original": exc_str}
        )
    if isinstance(exc, OSError):
        return ThemeManagerError(default, path=path, details={"original": exc_str})

    return ThemeManagerError(
        default,
        message=f"{type(exc).__name__}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: ThemeManagerError | Exception) -> str:
    """Format an error for display with the suggested follow-up."""
    if isinstance(error, ThemeManagerError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        if error.path:
            parts.append(f"\n\nPath: {error.path.name}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
