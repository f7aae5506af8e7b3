"""Total order of the persisted history.

Every write of the collection goes through ``sort_entries``; the store
never holds any other order. Pinned entries come first, oldest pin first
so a freshly pinned entry lands at the end of the pinned block. Unpinned
entries follow, newest first.
"""

from typing import Iterable

from lexhistory.core import HistoryEntry


def _sort_key(entry: HistoryEntry) -> tuple:
    if entry.pinned_at is not None:
        return (0, entry.pinned_at.timestamp())
    return (1, -entry.timestamp.timestamp())


def sort_entries(entries: Iterable[HistoryEntry]) -> list[HistoryEntry]:
    """Return a new list in storage order. Equal keys keep input order."""
    return sorted(entries, key=_sort_key)


def is_sorted(entries: list[HistoryEntry]) -> bool:
    """Check that entries already satisfy the storage order."""
    keys = [_sort_key(entry) for entry in entries]
    return all(a <= b for a, b in zip(keys, keys[1:]))
