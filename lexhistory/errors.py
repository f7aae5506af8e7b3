"""Type-safe exception hierarchy and error codes.

Storage problems never reach callers of the mutation API: they are logged
and absorbed there. These types exist so the layers below can say precisely
what went wrong, and so the CLI can render it.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Type-safe error codes."""

    # Storage
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    STORAGE_UNAVAILABLE = "storage_unavailable"

    # Data
    CORRUPT_HISTORY = "corrupt_history"
    INVALID_TRANSLATION = "invalid_translation"

    # Lookup
    ENTRY_NOT_FOUND = "entry_not_found"


class ErrorDetail(BaseModel):
    """Structured error information."""

    code: ErrorCode
    message: str
    context: dict = Field(default_factory=dict)


class HistoryError(Exception):
    """Base exception for all history errors."""

    def __init__(self, code: ErrorCode, message: str, **context):
        self.code = code
        self.message = message
        self.context = context
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        """Convert to a serializable error detail."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            context=self.context
        )


# ═════════════════════════════════════════════════════════════════════════════
# Storage Errors
# ═════════════════════════════════════════════════════════════════════════════

class StorageError(HistoryError):
    """Key-value backend operation failed."""

    def __init__(
        self,
        operation: str,
        key: str,
        reason: str,
        code: ErrorCode = ErrorCode.STORAGE_WRITE_FAILED,
        **context
    ):
        super().__init__(
            code=code,
            message=f"Storage {operation} failed for '{key}': {reason}",
            operation=operation,
            key=key,
            reason=reason,
            **context
        )


class CorruptHistoryError(HistoryError):
    """Persisted collection cannot be deserialized."""

    def __init__(self, key: str, reason: str, **context):
        super().__init__(
            code=ErrorCode.CORRUPT_HISTORY,
            message=f"History under '{key}' is corrupted: {reason}",
            key=key,
            reason=reason,
            **context
        )


# ═════════════════════════════════════════════════════════════════════════════
# Lookup Errors
# ═════════════════════════════════════════════════════════════════════════════

class EntryNotFoundError(HistoryError):
    """No history entry with the given id."""

    def __init__(self, entry_id: str):
        super().__init__(
            code=ErrorCode.ENTRY_NOT_FOUND,
            message=f"History entry not found: {entry_id}",
            entry_id=entry_id
        )


class InvalidTranslationError(HistoryError):
    """Upstream payload does not match either translation shape."""

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(
            code=ErrorCode.INVALID_TRANSLATION,
            message=f"Invalid translation: {reason}",
            field=field,
            reason=reason
        )
