"""Parser for the delta-encoded ``mappings`` string of a v3 source map."""

from __future__ import annotations

from dataclasses import dataclass

from srcmap.errors import MalformedEntry
from srcmap.types import Entry, Line, MappingTable
from srcmap.vlq import CharReader, decode_vlq


LINE_SEPARATOR = ";"
ENTRY_SEPARATOR = ","

UNMAPPED_FIELD_COUNT = 1
MAPPED_FIELD_COUNT = 4
NAMED_FIELD_COUNT = 5


@dataclass(slots=True)
class _ParseState:
    """Running counters carried across entries.

    ``generated_column`` restarts at every line; the others persist for the
    whole string.
    """

    generated_column: int = 0
    source_file_id: int = 0
    source_line: int = 0
    source_column: int = 0
    name_id: int = 0


def _entry_completed(reader: CharReader) -> bool:
    char = reader.peek()
    return char is None or char == LINE_SEPARATOR or char == ENTRY_SEPARATOR


def _new_entry(state: _ParseState, values: list[int], position: int) -> Entry:
    count = len(values)
    if count not in (UNMAPPED_FIELD_COUNT, MAPPED_FIELD_COUNT, NAMED_FIELD_COUNT):
        raise MalformedEntry(
            f"unexpected number of values in entry at offset {position}: {count}",
            position=position,
            value_count=count,
        )

    generated_column = state.generated_column + values[0]
    if generated_column < 0:
        raise MalformedEntry(
            f"negative generated column {generated_column} at offset {position}",
            position=position,
            value_count=count,
        )
    state.generated_column = generated_column
    if count == UNMAPPED_FIELD_COUNT:
        return Entry(generated_column=generated_column)

    state.source_file_id += values[1]
    state.source_line += values[2]
    state.source_column += values[3]
    name_id: int | None = None
    if count == NAMED_FIELD_COUNT:
        state.name_id += values[4]
        name_id = state.name_id

    return Entry(
        generated_column=generated_column,
        source_file_id=state.source_file_id,
        source_line=state.source_line,
        source_column=state.source_column,
        name_id=name_id,
    )


def parse_mappings(text: str) -> MappingTable:
    """Decode a ``mappings`` string into a table of lines.

    An empty string yields no lines at all; otherwise the table holds one
    line per ``;``-separated segment, empty segments included. Any decoding
    failure aborts the parse.
    """
    if not text:
        return ()

    reader = CharReader(text)
    state = _ParseState()
    lines: list[Line] = []
    current: list[Entry] = []

    while not reader.at_end:
        if reader.peek() == LINE_SEPARATOR:
            reader.read()
            lines.append(tuple(current))
            current = []
            state.generated_column = 0
            continue

        start = reader.position
        values: list[int] = []
        while not _entry_completed(reader):
            values.append(decode_vlq(reader))
        current.append(_new_entry(state, values, start))

        if reader.peek() == ENTRY_SEPARATOR:
            reader.read()

    lines.append(tuple(current))
    return tuple(lines)
