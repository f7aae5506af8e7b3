"""Tests for hybrid search: operator filtering and fuzzy ranking."""

import pytest

from lexhistory.services import SearchEngine, partial_ratio
from lexhistory.storage import EntryStore, MemoryBackend

from conftest import dictionary, make_entry, sentence


class TestPartialRatio:

    def test_substring_is_perfect(self):
        assert partial_ratio("morning", "good morning everyone") == 1.0

    def test_typo_still_close(self):
        assert partial_ratio("helo", "hello world") >= 0.6

    def test_unrelated_is_low(self):
        assert partial_ratio("qqqq", "hello world") < 0.6

    def test_empty(self):
        assert partial_ratio("", "abc") == 0.0
        assert partial_ratio("abc", "") == 0.0

    def test_longer_query_than_text(self):
        assert 0.0 < partial_ratio("hello there", "hello") < 1.0


class TestSearchEngine:

    async def _engine(self, entries):
        store = EntryStore(MemoryBackend())
        await store.persist(entries)
        return SearchEngine(store)

    async def test_source_operator_filters_unranked(self):
        entries = [
            make_entry("en-old", 1, translation=sentence(source="en")),
            make_entry("fr", 2, translation=sentence(source="fr")),
            make_entry("en-new", 3, translation=sentence(source="en")),
        ]
        engine = await self._engine(entries)

        results = await engine.search("source:en")
        assert [e.id for e in results] == ["en-new", "en-old"]

    async def test_operator_codes_case_insensitive(self):
        engine = await self._engine([make_entry("a", 1, translation=sentence(source="EN"))])
        assert [e.id for e in await engine.search("source:en")] == ["a"]

    async def test_operators_are_anded(self):
        engine = await self._engine([
            make_entry("en-vi", 1, translation=sentence(source="en", target="vi")),
            make_entry("en-fr", 2, translation=sentence(source="en", target="fr")),
        ])
        assert [e.id for e in await engine.search("source:en target:vi")] == ["en-vi"]

    async def test_conflicting_operators_match_nothing(self):
        engine = await self._engine([make_entry("a", 1, translation=sentence(source="en"))])
        assert await engine.search("source:en source:fr") == []

    async def test_operator_without_matches_is_empty(self):
        engine = await self._engine([make_entry("a", 1)])
        assert await engine.search("target:ja") == []

    async def test_empty_query_returns_everything_in_storage_order(self):
        entries = [make_entry("a", 1), make_entry("b", 2), make_entry("p", 0, pinned_at=5)]
        engine = await self._engine(entries)
        assert [e.id for e in await engine.search("")] == ["p", "b", "a"]
        assert [e.id for e in await engine.search("   ")] == ["p", "b", "a"]

    async def test_text_ranks_best_first(self):
        engine = await self._engine([
            make_entry("close", 2, translation=sentence("Good mornin", "Chào")),
            make_entry("exact", 1, translation=sentence("Good morning", "Chào buổi sáng")),
            make_entry("other", 3, translation=sentence("Thank you", "Cảm ơn")),
        ])
        results = await engine.search("good morning")
        assert [e.id for e in results] == ["exact", "close"]

    async def test_ranking_is_case_insensitive(self):
        engine = await self._engine([make_entry("a", 1, translation=sentence("GOOD NIGHT", "Chúc ngủ ngon"))])
        assert [e.id for e in await engine.search("good night")] == ["a"]

    async def test_no_match_is_empty(self):
        engine = await self._engine([make_entry("a", 1)])
        assert await engine.search("qqqqqq") == []

    async def test_operator_and_text_combined(self):
        engine = await self._engine([
            make_entry("fr", 1, translation=sentence("Good morning", "Bonjour", target="fr")),
            make_entry("vi", 2, translation=sentence("Good morning", "Chào buổi sáng", target="vi")),
        ])
        assert [e.id for e in await engine.search("target:fr morning")] == ["fr"]

    async def test_finds_nested_idiom_example_translation(self):
        engine = await self._engine([
            make_entry("run", 1, translation=dictionary()),
            make_entry("other", 2, translation=sentence("Thank you", "Cảm ơn")),
        ])
        results = await engine.search("kiệt sức hoàn toàn")
        assert [e.id for e in results] == ["run"]

    async def test_finds_variant_ipa(self):
        engine = await self._engine([make_entry("run", 1, translation=dictionary())])
        assert [e.id for e in await engine.search("ɹʌn")] == ["run"]

    async def test_equal_scores_keep_storage_order(self):
        engine = await self._engine([
            make_entry("older", 1, translation=sentence("tea time", "x")),
            make_entry("newer", 2, translation=sentence("tea party", "y")),
        ])
        assert [e.id for e in await engine.search("tea")] == ["newer", "older"]

    async def test_scored_results(self):
        engine = await self._engine([make_entry("a", 1, translation=sentence("Good morning", "Chào"))])
        hits = await engine.search_scored("morning")
        assert len(hits) == 1
        assert hits[0].score == pytest.approx(1.0)

    async def test_tighter_threshold_drops_typos(self):
        store = EntryStore(MemoryBackend())
        await store.persist([make_entry("a", 1, translation=sentence("hello", "xin chào"))])
        assert await SearchEngine(store, fuzzy_threshold=0.4).search("helo")
        assert await SearchEngine(store, fuzzy_threshold=0.0).search("helo") == []
