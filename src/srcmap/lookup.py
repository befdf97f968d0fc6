"""Generated-position to original-position lookup."""

from __future__ import annotations

import bisect

from srcmap.errors import (
    InvalidColumnNumber,
    InvalidLineNumber,
    NoPrecedingMapping,
    UnresolvedIndex,
)
from srcmap.types import Entry, Line, MappingTable, OriginalMapping, SourceMap


def _column_key(entry: Entry) -> int:
    return entry.generated_column


def _entry_covering(line: Line, column: int) -> Entry:
    """Entry with the greatest generated column <= ``column``.

    Ties on that column resolve to the first entry in encounter order.
    The caller guarantees ``line[0].generated_column <= column``.
    """
    idx = bisect.bisect_right(line, column, key=_column_key) - 1
    start = line[idx].generated_column
    return line[bisect.bisect_left(line, start, hi=idx + 1, key=_column_key)]


def _previous_line_entry(table: MappingTable, line_index: int) -> Entry:
    for idx in range(line_index - 1, -1, -1):
        line = table[idx]
        if line:
            return line[-1]
    raise NoPrecedingMapping(line_index + 1)


def find_entry(table: MappingTable, line: int, column: int) -> Entry:
    """Select the table entry for a 1-based generated line/column.

    Falls back to the last entry of the nearest preceding non-empty line when
    the target line has no entry at or before ``column``.
    """
    line_index = line - 1
    column_index = column - 1

    # line == len(table) + 1 is rejected as well.
    if line_index < 0 or line_index >= len(table):
        raise InvalidLineNumber(line)
    if column_index < 0:
        raise InvalidColumnNumber(column)

    entries = table[line_index]
    if not entries or entries[0].generated_column > column_index:
        return _previous_line_entry(table, line_index)
    return _entry_covering(entries, column_index)


def resolve_entry(source_map: SourceMap, entry: Entry) -> OriginalMapping:
    """Turn a mapped entry into file/line/column/name strings."""
    if (
        entry.source_file_id is None
        or entry.source_line is None
        or entry.source_column is None
    ):
        raise UnresolvedIndex(
            f"entry at generated column {entry.generated_column} has no source position",
        )
    if not 0 <= entry.source_file_id < len(source_map.sources):
        raise UnresolvedIndex(
            f"source index {entry.source_file_id} out of range "
            f"({len(source_map.sources)} sources)",
        )

    name = ""
    if entry.name_id is not None:
        if not 0 <= entry.name_id < len(source_map.names):
            raise UnresolvedIndex(
                f"name index {entry.name_id} out of range ({len(source_map.names)} names)",
            )
        name = source_map.names[entry.name_id]

    return OriginalMapping(
        file=source_map.sources[entry.source_file_id],
        line=entry.source_line + 1,
        column=entry.source_column + 1,
        name=name,
    )


def lookup(source_map: SourceMap, line: int, column: int) -> OriginalMapping:
    """Map a 1-based generated line/column back to the original source."""
    entry = find_entry(source_map.mappings, line, column)
    return resolve_entry(source_map, entry)
