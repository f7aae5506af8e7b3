"""lexhistory - persisted history of translation and dictionary lookups.

Save, pin, remove, search and summarize past lookups kept in a key-value
store.
"""

__version__ = "0.1.0"

# Observability exports for convenience
from lexhistory.observ import get_logger, timer, timed
from lexhistory.errors import (
    HistoryError,
    ErrorCode,
    StorageError,
    CorruptHistoryError,
    EntryNotFoundError,
    InvalidTranslationError,
)
from lexhistory.services import HistoryService

__all__ = [
    # Version
    "__version__",
    # Logging
    "get_logger",
    "timer",
    "timed",
    # Errors
    "HistoryError",
    "ErrorCode",
    "StorageError",
    "CorruptHistoryError",
    "EntryNotFoundError",
    "InvalidTranslationError",
    # Service
    "HistoryService",
]
