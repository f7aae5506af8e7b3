"""Tests for the storage order: pinned by pin time, then newest first."""

from hypothesis import given, strategies as st

from lexhistory.storage import is_sorted, sort_entries

from conftest import make_entry


class TestSortEntries:

    def test_unpinned_newest_first(self):
        entries = [make_entry("old", 1), make_entry("new", 3), make_entry("mid", 2)]
        assert [e.id for e in sort_entries(entries)] == ["new", "mid", "old"]

    def test_pinned_before_unpinned(self):
        entries = [make_entry("fresh", 100), make_entry("pinned", 1, pinned_at=50)]
        assert [e.id for e in sort_entries(entries)] == ["pinned", "fresh"]

    def test_latest_pin_goes_last_among_pins(self):
        entries = [
            make_entry("b", 2, pinned_at=20),
            make_entry("a", 1, pinned_at=10),
            make_entry("c", 3, pinned_at=30),
            make_entry("u", 4),
        ]
        assert [e.id for e in sort_entries(entries)] == ["a", "b", "c", "u"]

    def test_returns_new_list(self):
        entries = [make_entry("a", 1), make_entry("b", 2)]
        result = sort_entries(entries)
        assert result is not entries
        assert [e.id for e in entries] == ["a", "b"]

    def test_empty(self):
        assert sort_entries([]) == []
        assert is_sorted([])

    def test_is_sorted(self):
        assert is_sorted([make_entry("p", 1, pinned_at=5), make_entry("b", 2), make_entry("a", 1)])
        assert not is_sorted([make_entry("a", 1), make_entry("b", 2)])


entry_specs = st.lists(
    st.tuples(
        st.integers(min_value=0, max_value=10_000),
        st.one_of(st.none(), st.integers(min_value=0, max_value=10_000)),
    ),
    max_size=30,
)


class TestOrderingProperties:
    """Properties that hold for any collection."""

    @given(entry_specs)
    def test_result_satisfies_order(self, specs):
        entries = [make_entry(str(i), ts, pin) for i, (ts, pin) in enumerate(specs)]
        result = sort_entries(entries)
        assert is_sorted(result)
        assert sorted(e.id for e in result) == sorted(e.id for e in entries)

    @given(entry_specs)
    def test_pins_precede_unpinned(self, specs):
        entries = [make_entry(str(i), ts, pin) for i, (ts, pin) in enumerate(specs)]
        flags = [e.is_pinned for e in sort_entries(entries)]
        assert flags == sorted(flags, reverse=True)

    @given(entry_specs)
    def test_idempotent(self, specs):
        entries = [make_entry(str(i), ts, pin) for i, (ts, pin) in enumerate(specs)]
        once = sort_entries(entries)
        assert sort_entries(once) == once
