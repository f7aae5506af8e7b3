"""Hybrid history search.

Two stages:

1. Exact filter: every ``source:``/``target:`` operator in the query must
   match the entry's language code (case-insensitive). No operators, no
   filtering.
2. Fuzzy ranking over the fields each surviving entry exposes (see
   ``extract_search_fields``), only when free text remains. Without free
   text the filtered entries are returned as stored, unranked.

Similarity is a partial alignment ratio: the query is compared against the
best-aligned window of each field, so a short query scores well against a
long definition that contains something close to it. A verbatim substring
scores 1.0. Entries whose best field scores below ``min_similarity`` drop
out; the rest come back best first, storage order breaking ties.
"""

from dataclasses import dataclass
from difflib import SequenceMatcher

from lexhistory.core import HistoryEntry, ParsedQuery, SearchOperatorType
from lexhistory.observ import get_logger, timer
from lexhistory.services.extract import extract_search_fields
from lexhistory.services.query import parse_query
from lexhistory.storage import EntryStore

logger = get_logger(__name__)

# 0.0 = perfect match only, 1.0 = match anything
DEFAULT_FUZZY_THRESHOLD = 0.4


def partial_ratio(query: str, text: str) -> float:
    """Similarity of query to the closest same-length window of text."""
    if not query or not text:
        return 0.0
    if query in text:
        return 1.0
    if len(query) >= len(text):
        return SequenceMatcher(None, query, text, autojunk=False).ratio()

    # Anchor candidate windows on the blocks the two strings share
    matcher = SequenceMatcher(None, query, text, autojunk=False)
    best = 0.0
    for query_start, text_start, _ in matcher.get_matching_blocks():
        start = max(0, text_start - query_start)
        window = text[start:start + len(query)]
        score = SequenceMatcher(None, query, window, autojunk=False).ratio()
        if score > best:
            best = score
            if best == 1.0:
                break
    return best


def score_fields(query: str, fields: list[str]) -> float:
    """Best partial ratio of the query over all fields, case-insensitive."""
    needle = query.casefold()
    return max(
        (partial_ratio(needle, field.casefold()) for field in fields if field),
        default=0.0,
    )


def matches_operators(entry: HistoryEntry, parsed: ParsedQuery) -> bool:
    """True when the entry satisfies every operator (AND)."""
    translation = entry.translation
    for operator in parsed.operators:
        if operator.type is SearchOperatorType.SOURCE:
            code = translation.source_language_code
        else:
            code = translation.translated_language_code
        if code.lower() != operator.value:
            return False
    return True


@dataclass(frozen=True)
class ScoredEntry:
    """Search hit with its similarity."""

    entry: HistoryEntry
    score: float


class SearchEngine:
    """Operator filtering plus fuzzy ranking over the stored history."""

    def __init__(
        self,
        store: EntryStore,
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    ):
        self._store = store
        self._min_similarity = 1.0 - fuzzy_threshold

    @property
    def min_similarity(self) -> float:
        return self._min_similarity

    async def search(self, query: str) -> list[HistoryEntry]:
        """Search the stored history. Zero hits is an empty list."""
        entries = await self._store.load()
        return self.search_entries(entries, query)

    async def search_scored(self, query: str) -> list[ScoredEntry]:
        """Like ``search`` but keeps scores; unranked hits score 1.0."""
        entries = await self._store.load()
        parsed = parse_query(query)
        filtered = [entry for entry in entries if matches_operators(entry, parsed)]
        if not parsed.text:
            return [ScoredEntry(entry, 1.0) for entry in filtered]
        return self.rank(filtered, parsed.text)

    def search_entries(self, entries: list[HistoryEntry], query: str) -> list[HistoryEntry]:
        """Apply a query to an already loaded collection."""
        parsed = parse_query(query)
        filtered = [entry for entry in entries if matches_operators(entry, parsed)]

        if not parsed.text:
            logger.debug(
                "search_completed",
                operators=len(parsed.operators),
                results=len(filtered),
                ranked=False,
            )
            return filtered

        hits = [hit.entry for hit in self.rank(filtered, parsed.text)]
        logger.debug(
            "search_completed",
            operators=len(parsed.operators),
            candidates=len(filtered),
            results=len(hits),
            ranked=True,
        )
        return hits

    def rank(self, entries: list[HistoryEntry], text: str) -> list[ScoredEntry]:
        """Score entries against text, best first, below-threshold dropped."""
        with timer(logger, "fuzzy_rank", candidates=len(entries)):
            scored = [
                ScoredEntry(entry, score_fields(text, extract_search_fields(entry)))
                for entry in entries
            ]
        hits = [hit for hit in scored if hit.score >= self._min_similarity]
        # sorted() is stable: equal scores keep storage order
        return sorted(hits, key=lambda hit: hit.score, reverse=True)
