"""Tests for srcmap.lookup position resolution."""
from __future__ import annotations

import pytest

from srcmap.errors import (
    InvalidColumnNumber,
    InvalidLineNumber,
    NoPrecedingMapping,
    UnresolvedIndex,
)
from srcmap.lookup import find_entry, lookup, resolve_entry
from srcmap.mappings import parse_mappings
from srcmap.types import Entry, OriginalMapping, SourceMap


SAMPLE_MAPPINGS = "AAAAA,QAAQC;;AACA,IAAIA,CACCC;C,CAAA;;GACIE"


def _make_map(
    mappings: str,
    *,
    sources: tuple[str, ...] = ("a.ts", "b.ts", "c.ts"),
    names: tuple[str, ...] = ("alpha", "beta", "gamma", "delta", "epsilon"),
) -> SourceMap:
    return SourceMap(
        version=3,
        file="out.js",
        source_root="",
        sources=sources,
        sources_content=(),
        names=names,
        mappings=parse_mappings(mappings),
    )


class TestLookupSample:
    @pytest.mark.parametrize(
        ("line", "column", "expected"),
        [
            (1, 1, OriginalMapping("a.ts", 1, 1, "alpha")),
            (1, 8, OriginalMapping("a.ts", 1, 1, "alpha")),
            (1, 9, OriginalMapping("a.ts", 1, 9, "beta")),
            (1, 100, OriginalMapping("a.ts", 1, 9, "beta")),
            # empty line falls back to the last entry of line 1
            (2, 1, OriginalMapping("a.ts", 1, 9, "beta")),
            (3, 1, OriginalMapping("a.ts", 2, 9, "")),
            (3, 5, OriginalMapping("a.ts", 2, 13, "beta")),
            (3, 6, OriginalMapping("b.ts", 3, 14, "gamma")),
            # query before the first entry of line 4
            (4, 1, OriginalMapping("b.ts", 3, 14, "gamma")),
            (4, 3, OriginalMapping("b.ts", 3, 14, "")),
            (5, 1, OriginalMapping("b.ts", 3, 14, "")),
            # skips the empty line 5 as well
            (6, 1, OriginalMapping("b.ts", 3, 14, "")),
            (6, 4, OriginalMapping("c.ts", 4, 18, "epsilon")),
        ],
    )
    def test_resolves(self, line: int, column: int, expected: OriginalMapping) -> None:
        source_map = _make_map(SAMPLE_MAPPINGS)
        assert lookup(source_map, line, column) == expected
        assert source_map.original_position(line, column) == expected

    def test_lookup_leaves_table_untouched(self) -> None:
        source_map = _make_map(SAMPLE_MAPPINGS)
        before = source_map.mappings
        lookup(source_map, 3, 6)
        assert source_map.mappings is before
        assert source_map.mappings == parse_mappings(SAMPLE_MAPPINGS)


class TestLookupSelection:
    def test_picks_rightmost_entry_not_first(self) -> None:
        source_map = _make_map("AAAA,IAAI")
        assert lookup(source_map, 1, 10) == OriginalMapping("a.ts", 1, 5, "")

    def test_duplicate_columns_resolve_to_first_in_encounter_order(self) -> None:
        source_map = _make_map("AAAA,AACA,CACA")
        assert lookup(source_map, 1, 1) == OriginalMapping("a.ts", 1, 1, "")
        assert lookup(source_map, 1, 2) == OriginalMapping("a.ts", 3, 1, "")

    def test_known_fixture_resolves(self) -> None:
        # "gBAEE" maps generated column 16 to original line 3, column 3.
        source_map = _make_map("AAAA,gBAEE")
        assert lookup(source_map, 1, 16) == OriginalMapping("a.ts", 1, 1, "")
        assert lookup(source_map, 1, 17) == OriginalMapping("a.ts", 3, 3, "")

    def test_falls_back_over_several_empty_lines(self) -> None:
        # line 5 is empty, line 4 is empty, line 3 has a single entry
        source_map = _make_map("AAAA;;AACA;;")
        assert len(source_map.mappings) == 5
        assert lookup(source_map, 5, 1) == OriginalMapping("a.ts", 2, 1, "")

    def test_falls_back_when_first_entry_is_right_of_column(self) -> None:
        source_map = _make_map("AAAA,KAAK;KACA")
        assert lookup(source_map, 2, 3) == OriginalMapping("a.ts", 1, 6, "")
        assert lookup(source_map, 2, 6) == OriginalMapping("a.ts", 2, 6, "")

    def test_find_entry_returns_table_entry(self) -> None:
        source_map = _make_map(SAMPLE_MAPPINGS)
        assert find_entry(source_map.mappings, 3, 6) is source_map.mappings[2][2]


class TestLookupErrors:
    @pytest.mark.parametrize("line", [0, -3, 7, 100])
    def test_invalid_line(self, line: int) -> None:
        source_map = _make_map(SAMPLE_MAPPINGS)
        with pytest.raises(InvalidLineNumber) as excinfo:
            lookup(source_map, line, 1)
        assert excinfo.value.line == line

    def test_line_equal_to_count_plus_one_is_rejected(self) -> None:
        # Upper bound is strict: only lines 1..len(table) exist.
        source_map = _make_map("AAAA;AAAA")
        assert lookup(source_map, 2, 1) == OriginalMapping("a.ts", 1, 1, "")
        with pytest.raises(InvalidLineNumber):
            lookup(source_map, 3, 1)

    def test_empty_table_rejects_every_line(self) -> None:
        with pytest.raises(InvalidLineNumber):
            lookup(_make_map(""), 1, 1)

    @pytest.mark.parametrize("column", [0, -1])
    def test_invalid_column(self, column: int) -> None:
        with pytest.raises(InvalidColumnNumber) as excinfo:
            lookup(_make_map(SAMPLE_MAPPINGS), 1, column)
        assert excinfo.value.column == column

    def test_no_preceding_mapping_for_empty_first_line(self) -> None:
        with pytest.raises(NoPrecedingMapping):
            lookup(_make_map(";AAAA"), 1, 1)

    def test_no_preceding_mapping_before_first_entry(self) -> None:
        with pytest.raises(NoPrecedingMapping):
            lookup(_make_map(";;CAAA"), 3, 1)

    def test_unmapped_entry_is_not_resolved(self) -> None:
        source_map = _make_map(SAMPLE_MAPPINGS)
        with pytest.raises(UnresolvedIndex):
            lookup(source_map, 4, 2)

    def test_unmapped_fallback_entry_is_not_resolved(self) -> None:
        with pytest.raises(UnresolvedIndex):
            lookup(_make_map("AAAA,C;"), 2, 1)

    def test_source_index_out_of_range(self) -> None:
        source_map = _make_map("AGAA", sources=("a.ts",))
        with pytest.raises(UnresolvedIndex):
            lookup(source_map, 1, 1)

    def test_name_index_out_of_range(self) -> None:
        source_map = _make_map("AAAAK", names=("only",))
        with pytest.raises(UnresolvedIndex):
            lookup(source_map, 1, 1)


class TestResolveEntry:
    def test_name_absent_resolves_to_empty_string(self) -> None:
        source_map = _make_map("")
        mapping = resolve_entry(source_map, Entry(0, 1, 4, 2))
        assert mapping == OriginalMapping("b.ts", 5, 3, "")

    def test_negative_source_index(self) -> None:
        with pytest.raises(UnresolvedIndex):
            resolve_entry(_make_map(""), Entry(0, -1, 0, 0))
