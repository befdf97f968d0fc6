"""Core types for decoded source maps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class Entry:
    """One decoded segment of a generated line.

    Only ``generated_column`` is always present. Unmapped segments carry
    ``None`` for every source field.
    """

    generated_column: int
    source_file_id: int | None = None
    source_line: int | None = None
    source_column: int | None = None
    name_id: int | None = None

    def __post_init__(self) -> None:
        if self.generated_column < 0:
            raise ValueError(f"generated_column must be >= 0, got {self.generated_column}")

    @property
    def is_mapped(self) -> bool:
        return (
            self.source_file_id is not None
            and self.source_line is not None
            and self.source_column is not None
        )


Line: TypeAlias = tuple[Entry, ...]
MappingTable: TypeAlias = tuple[Line, ...]


@dataclass(frozen=True, slots=True)
class OriginalMapping:
    """Resolved position in an original source file (1-based)."""

    file: str
    line: int
    column: int
    name: str = ""


@dataclass(frozen=True, slots=True)
class SourceMap:
    """Decoded source map envelope plus its mapping table."""

    version: int
    file: str
    source_root: str
    sources: tuple[str, ...]
    sources_content: tuple[str | None, ...]
    names: tuple[str, ...]
    mappings: MappingTable

    @property
    def line_count(self) -> int:
        return len(self.mappings)

    @property
    def entry_count(self) -> int:
        return sum(len(line) for line in self.mappings)

    def original_position(self, line: int, column: int) -> OriginalMapping:
        """Find the original mapping for a 1-based generated line/column."""
        from srcmap.lookup import lookup

        return lookup(self, line, column)


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    return {
        "generated_column": entry.generated_column,
        "source_file_id": entry.source_file_id,
        "source_line": entry.source_line,
        "source_column": entry.source_column,
        "name_id": entry.name_id,
    }


def mapping_to_dict(mapping: OriginalMapping) -> dict[str, Any]:
    return {
        "file": mapping.file,
        "line": mapping.line,
        "column": mapping.column,
        "name": mapping.name,
    }


def source_map_to_dict(source_map: SourceMap) -> dict[str, Any]:
    """Serialize a decoded map, including its table, to plain JSON types."""
    return {
        "version": source_map.version,
        "file": source_map.file,
        "source_root": source_map.source_root,
        "sources": list(source_map.sources),
        "sources_content": list(source_map.sources_content),
        "names": list(source_map.names),
        "mappings": [
            [entry_to_dict(entry) for entry in line]
            for line in source_map.mappings
        ],
    }
