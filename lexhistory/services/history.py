"""History service: the mutation API plus read-side entry points.

Every mutation is one read-modify-write of the whole collection:

    load -> change -> sort -> persist

Storage failures never reach the caller. They are logged and the
operation quietly does nothing, so "nothing changed" and "storage failed"
look the same from outside. A lookup history is a cache of convenience;
availability wins over error reporting.

Concurrency: mutations issued through one ``HistoryService`` are queued
behind a single lock, so they never overwrite each other. Separate
instances (other processes, other tabs) sharing the same backend are not
coordinated: the last full write wins and silently discards whatever a
concurrent writer did in between.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Union

from lexhistory.config import Settings, get_settings
from lexhistory.core import (
    DictionaryEntry,
    HistoryEntry,
    LanguageAnalysis,
    SentenceTranslation,
    UsageReport,
    parse_translation,
)
from lexhistory.core.contracts import IKeyValueBackend
from lexhistory.errors import StorageError
from lexhistory.observ import get_logger, timed
from lexhistory.services.display import entries_usage
from lexhistory.services.search import SearchEngine, ScoredEntry
from lexhistory.services.stats import StatisticsAggregator
from lexhistory.storage import EntryStore, build_backend

logger = get_logger(__name__)

Mutation = Callable[[list[HistoryEntry]], list[HistoryEntry]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_entry_id() -> str:
    return str(uuid.uuid4())


class HistoryService:
    """Save, pin, remove and query past lookups."""

    def __init__(
        self,
        store: EntryStore,
        fuzzy_threshold: float = 0.4,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_entry_id
    ):
        self._store = store
        self._clock = clock
        self._new_id = id_factory
        self._write_lock = asyncio.Lock()
        self._search = SearchEngine(store, fuzzy_threshold=fuzzy_threshold)
        self._statistics = StatisticsAggregator(store)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        backend: Optional[IKeyValueBackend] = None
    ) -> "HistoryService":
        """Wire a service from configuration."""
        settings = settings or get_settings()
        store = EntryStore(
            backend or build_backend(settings),
            key=settings.history_key,
            on_corrupt=settings.on_corrupt,
        )
        return cls(store, fuzzy_threshold=settings.fuzzy_threshold)

    @property
    def store(self) -> EntryStore:
        return self._store

    # ─────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────

    async def save(
        self,
        translation: Union[dict, DictionaryEntry, SentenceTranslation]
    ) -> Optional[HistoryEntry]:
        """Record a new lookup, unpinned, stamped now.

        Returns the new entry, or None if it could not be written.

        Raises:
            InvalidTranslationError: a raw dict fits neither translation shape
        """
        entry = HistoryEntry(
            id=self._new_id(),
            timestamp=self._clock(),
            translation=parse_translation(translation),
        )

        written = await self._mutate(
            "save",
            lambda entries: [entry, *entries],
            entry_id=entry.id,
        )
        if written is None:
            return None

        logger.info("history_saved", entry_id=entry.id, kind=entry.translation.kind)
        return entry

    async def remove(self, entry_id: str) -> None:
        """Drop one entry. Removing an unknown id is a no-op write."""
        await self._mutate(
            "remove",
            lambda entries: [entry for entry in entries if entry.id != entry_id],
            entry_id=entry_id,
        )

    async def remove_many(self, entry_ids: Iterable[str]) -> None:
        """Drop several entries with a single write."""
        doomed = set(entry_ids)
        await self._mutate(
            "remove_many",
            lambda entries: [entry for entry in entries if entry.id not in doomed],
            count=len(doomed),
        )

    async def toggle_pin(self, entry_id: str) -> Optional[HistoryEntry]:
        """Pin an unpinned entry (now) or unpin a pinned one.

        Returns the entry as written, or None if the id is unknown or the
        write failed.
        """
        now = self._clock()

        def flip(entries: list[HistoryEntry]) -> list[HistoryEntry]:
            return [
                entry.model_copy(
                    update={"pinned_at": None if entry.is_pinned else now}
                ) if entry.id == entry_id else entry
                for entry in entries
            ]

        written = await self._mutate("toggle_pin", flip, entry_id=entry_id)
        for entry in written or ():
            if entry.id == entry_id:
                return entry
        return None

    async def clear(self) -> None:
        """Delete the whole history."""
        async with self._write_lock:
            try:
                await self._store.clear()
            except StorageError as e:
                logger.error("history_clear_failed", error=str(e))
                return
        logger.info("history_cleared")

    async def _mutate(
        self,
        operation: str,
        change: Mutation,
        **context
    ) -> Optional[list[HistoryEntry]]:
        async with self._write_lock:
            try:
                entries = await self._store.load(strict=True)
                return await self._store.persist(change(entries))
            except StorageError as e:
                logger.error(
                    f"history_{operation}_failed",
                    error=str(e),
                    **context
                )
                return None

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    async def list_entries(self) -> list[HistoryEntry]:
        """All entries in storage order."""
        return await self._store.load()

    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in await self._store.load():
            if entry.id == entry_id:
                return entry
        return None

    @timed(logger)
    async def search(self, query: str) -> list[HistoryEntry]:
        """Hybrid operator + fuzzy search; see ``SearchEngine``."""
        return await self._search.search(query)

    async def search_scored(self, query: str) -> list[ScoredEntry]:
        return await self._search.search_scored(query)

    async def analyze(self) -> LanguageAnalysis:
        """Language distribution over all entries."""
        return await self._statistics.analyze()

    async def usage(self) -> Optional[UsageReport]:
        """Entry count, serialized size, and the size the backend reports."""
        report = entries_usage(await self._store.load())
        if report is None:
            return None
        return report.model_copy(update={"stored_bytes": await self._store.size_bytes()})
