"""Entry store: the whole history under a single key.

Every mutation reads the complete collection and writes the complete new
one back. There is no partial write and no transaction log, which keeps
the format trivial and is fine for hundreds to low thousands of entries.
"""

from typing import Literal

from pydantic import ValidationError

from lexhistory.core import HistoryEntry
from lexhistory.core.contracts import IKeyValueBackend
from lexhistory.errors import CorruptHistoryError, StorageError
from lexhistory.observ import get_logger
from lexhistory.storage.ordering import sort_entries

logger = get_logger(__name__)

DEFAULT_HISTORY_KEY = "translationHistory"


class EntryStore:
    """Loads and persists the history collection through a key-value backend.

    Reads never raise for I/O problems: a failed read is logged and looks
    like an empty history. ``load(strict=True)`` raises ``StorageError``
    instead, for read-modify-write callers that must not write back an
    empty collection over one they could not read. Writes raise
    ``StorageError`` and leave it to the caller to decide how loud to be.

    Corrupted data (a value that is not a JSON array, or records that no
    longer deserialize) is handled per ``on_corrupt``:

    - ``"discard"``: a non-array value reads as empty; bad records inside an
      array are skipped and the rest survive.
    - ``"raise"``: ``load`` raises ``CorruptHistoryError``.
    """

    def __init__(
        self,
        backend: IKeyValueBackend,
        key: str = DEFAULT_HISTORY_KEY,
        on_corrupt: Literal["discard", "raise"] = "discard"
    ):
        self._backend = backend
        self._key = key
        self._on_corrupt = on_corrupt

    @property
    def key(self) -> str:
        return self._key

    async def load(self, strict: bool = False) -> list[HistoryEntry]:
        """Return the stored entries in storage order, or [] if none.

        Raises:
            StorageError: backend read failed and ``strict`` is set
        """
        try:
            raw = await self._backend.get(self._key)
        except StorageError as e:
            if strict:
                raise
            logger.error("history_load_failed", key=self._key, error=str(e))
            return []
        except CorruptHistoryError as e:
            return self._corrupted(e.context.get("reason", str(e)))

        if raw is None:
            return []
        return self._decode(raw)

    async def persist(self, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        """Overwrite the stored collection, sorted.

        Returns the entries in the order they were written.

        Raises:
            StorageError: backend write failed
        """
        ordered = sort_entries(entries)
        payload = [
            entry.model_dump(mode="json", exclude_none=True)
            for entry in ordered
        ]
        await self._backend.set(self._key, payload)
        logger.debug("history_persisted", key=self._key, count=len(ordered))
        return ordered

    async def clear(self) -> None:
        """Delete the stored collection.

        Raises:
            StorageError: backend remove failed
        """
        await self._backend.remove(self._key)

    async def size_bytes(self) -> int:
        """Bytes the backend reports for the collection; 0 on failure."""
        try:
            return await self._backend.size(self._key)
        except StorageError as e:
            logger.error("history_size_failed", key=self._key, error=str(e))
            return 0

    def _decode(self, raw: object) -> list[HistoryEntry]:
        if not isinstance(raw, list):
            return self._corrupted(f"expected a JSON array, got {type(raw).__name__}")

        entries = []
        for index, item in enumerate(raw):
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                if self._on_corrupt == "raise":
                    raise CorruptHistoryError(
                        self._key, f"record {index} is invalid", index=index
                    ) from e
                logger.warning(
                    "history_entry_skipped",
                    key=self._key,
                    index=index,
                    errors=e.error_count(),
                )
        return entries

    def _corrupted(self, reason: str) -> list[HistoryEntry]:
        if self._on_corrupt == "raise":
            raise CorruptHistoryError(self._key, reason)
        logger.error("history_corrupted", key=self._key, reason=reason)
        return []
