"""Language usage statistics over the history."""

from collections import Counter
from typing import Iterable

from lexhistory.core import HistoryEntry, LanguageAnalysis, LanguageStat
from lexhistory.storage import EntryStore


def _breakdown(codes: Iterable[str], total: int) -> list[LanguageStat]:
    # Counter keeps first-seen order, and sorted() is stable
    counts = Counter(codes)
    stats = [
        LanguageStat(code=code, count=count, percentage=count / total * 100)
        for code, count in counts.items()
    ]
    return sorted(stats, key=lambda stat: stat.count, reverse=True)


def analyze_entries(entries: list[HistoryEntry]) -> LanguageAnalysis:
    """Count source and target language codes.

    Codes are taken verbatim, so "en" and "EN" are different languages.
    Percentages are not rounded.
    """
    total = len(entries)
    if total == 0:
        return LanguageAnalysis()

    return LanguageAnalysis(
        source_languages=_breakdown(
            (entry.translation.source_language_code for entry in entries), total
        ),
        target_languages=_breakdown(
            (entry.translation.translated_language_code for entry in entries), total
        ),
        total_entries=total,
    )


class StatisticsAggregator:
    """Reads the stored history and summarizes its languages."""

    def __init__(self, store: EntryStore):
        self._store = store

    async def analyze(self) -> LanguageAnalysis:
        return analyze_entries(await self._store.load())
