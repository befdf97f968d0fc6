"""DuckDB-backed store for decoded source maps.

Persists many decoded maps into one database file so that mapping tables
can be reloaded without re-parsing their ``mappings`` strings.

Tables:
    source_maps      — one row per map (envelope fields + line count)
    sources          — ordered "sources" list per map
    sources_content  — ordered "sourcesContent" list per map
    names            — ordered "names" list per map
    entries          — one row per decoded entry, NULL for absent fields
    _schema_version  — schema version tracking
"""
from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from srcmap.types import Entry, Line, SourceMap

# Dynamic DuckDB import for pyright compatibility
_duckdb_mod = importlib.import_module("duckdb")

log = logging.getLogger(__name__)

SCHEMA_VERSION = "0.1.0"

_SCHEMA_DDL = f"""\
CREATE TABLE _schema_version (
    table_name VARCHAR PRIMARY KEY,
    version VARCHAR NOT NULL,
    created_at TIMESTAMP DEFAULT current_timestamp
);

INSERT INTO _schema_version VALUES ('mappings', '{SCHEMA_VERSION}', current_timestamp);

CREATE TABLE source_maps (
    map_id VARCHAR PRIMARY KEY,
    version BIGINT NOT NULL,
    file VARCHAR DEFAULT '',
    source_root VARCHAR DEFAULT '',
    line_count BIGINT NOT NULL
);

CREATE TABLE sources (
    map_id VARCHAR NOT NULL,
    source_index BIGINT NOT NULL,
    source VARCHAR NOT NULL,
    PRIMARY KEY (map_id, source_index)
);

CREATE TABLE sources_content (
    map_id VARCHAR NOT NULL,
    source_index BIGINT NOT NULL,
    content VARCHAR,
    PRIMARY KEY (map_id, source_index)
);

CREATE TABLE names (
    map_id VARCHAR NOT NULL,
    name_index BIGINT NOT NULL,
    name VARCHAR NOT NULL,
    PRIMARY KEY (map_id, name_index)
);

CREATE TABLE entries (
    map_id VARCHAR NOT NULL,
    line_index BIGINT NOT NULL,
    entry_index BIGINT NOT NULL,
    generated_column BIGINT NOT NULL,
    source_file_id BIGINT,
    source_line BIGINT,
    source_column BIGINT,
    name_id BIGINT,
    PRIMARY KEY (map_id, line_index, entry_index)
)
"""


class SchemaVersionError(RuntimeError):
    """Raised when a mapping store schema version does not match expected."""


def _read_schema_version(conn: Any) -> str:
    """Read store schema version from an open DuckDB connection."""
    try:
        result = conn.execute(
            "SELECT version FROM _schema_version WHERE table_name = 'mappings'"
        ).fetchone()
        return str(result[0]) if result else "unknown"
    except _duckdb_mod.Error:
        return "unknown"


def ensure_schema_version(
    conn: Any,
    *,
    db_path: Path | None = None,
    expected: str = SCHEMA_VERSION,
) -> str:
    """Validate schema version for an open DuckDB connection.

    Returns actual schema version on success.
    Raises SchemaVersionError on mismatch.
    """
    actual = _read_schema_version(conn)
    if actual != expected:
        where = f" in {db_path}" if db_path is not None else ""
        raise SchemaVersionError(
            f"Schema version mismatch{where}: expected {expected}, got {actual}"
        )
    return actual


def _entry_rows(map_id: str, source_map: SourceMap) -> list[tuple[Any, ...]]:
    rows: list[tuple[Any, ...]] = []
    for line_index, line in enumerate(source_map.mappings):
        for entry_index, entry in enumerate(line):
            rows.append((
                map_id,
                line_index,
                entry_index,
                entry.generated_column,
                entry.source_file_id,
                entry.source_line,
                entry.source_column,
                entry.name_id,
            ))
    return rows


class MappingStoreError(RuntimeError):
    """Raised when decoded maps cannot be written to a mapping store."""


def _insert_source_map(conn: Any, map_id: str, source_map: SourceMap) -> int:
    conn.execute(
        "INSERT INTO source_maps VALUES (?, ?, ?, ?, ?)",
        [
            map_id,
            source_map.version,
            source_map.file,
            source_map.source_root,
            source_map.line_count,
        ],
    )
    if source_map.sources:
        conn.executemany(
            "INSERT INTO sources VALUES (?, ?, ?)",
            [(map_id, i, s) for i, s in enumerate(source_map.sources)],
        )
    if source_map.sources_content:
        conn.executemany(
            "INSERT INTO sources_content VALUES (?, ?, ?)",
            [(map_id, i, c) for i, c in enumerate(source_map.sources_content)],
        )
    if source_map.names:
        conn.executemany(
            "INSERT INTO names VALUES (?, ?, ?)",
            [(map_id, i, n) for i, n in enumerate(source_map.names)],
        )
    rows = _entry_rows(map_id, source_map)
    if rows:
        conn.executemany(
            "INSERT INTO entries VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            rows,
        )
    log.debug("stored map %s: %d lines, %d entries", map_id, source_map.line_count, len(rows))
    return len(rows)


def _remove_db_files(path: Path) -> None:
    path.unlink(missing_ok=True)
    path.with_name(path.name + ".wal").unlink(missing_ok=True)


def write_mapping_store(db_path: Path, maps: Mapping[str, SourceMap]) -> int:
    """Create a new store at ``db_path`` holding ``maps`` keyed by map id.

    The store is built next to ``db_path`` and moved over it only once every
    map is written, so a failed build leaves an existing store untouched.
    Returns the number of entry rows written.

    Raises:
        MappingStoreError: DuckDB rejected a row (e.g. a value outside BIGINT).
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = db_path.with_name(db_path.name + ".tmp")
    _remove_db_files(tmp_path)

    total = 0
    try:
        conn: Any = _duckdb_mod.connect(str(tmp_path))
        try:
            for stmt in _SCHEMA_DDL.split(";"):
                stmt = stmt.strip()
                if stmt:
                    conn.execute(stmt)
            for map_id, source_map in maps.items():
                total += _insert_source_map(conn, map_id, source_map)
        finally:
            conn.close()
    except (_duckdb_mod.Error, OverflowError) as exc:
        _remove_db_files(tmp_path)
        raise MappingStoreError(f"failed to write mapping store {db_path}: {exc}") from exc

    db_path.with_name(db_path.name + ".wal").unlink(missing_ok=True)
    tmp_path.replace(db_path)
    log.info("wrote %d maps (%d entries) to %s", len(maps), total, db_path)
    return total


class MappingStore:
    """Read-only interface to a DuckDB mapping store."""

    def __init__(self, db_path: Path, *, enforce_schema: bool = True) -> None:
        self._db_path = db_path
        self._conn: Any = _duckdb_mod.connect(str(db_path), read_only=True)
        if enforce_schema:
            try:
                ensure_schema_version(self._conn, db_path=db_path)
            except SchemaVersionError:
                self._conn.close()
                raise

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> MappingStore:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    @property
    def schema_version(self) -> str:
        return _read_schema_version(self._conn)

    def map_ids(self) -> list[str]:
        """All stored map ids, sorted."""
        rows = self._conn.execute("SELECT map_id FROM source_maps ORDER BY map_id").fetchall()
        return [str(r[0]) for r in rows]

    def entry_count(self, map_id: str) -> int:
        result = self._conn.execute(
            "SELECT COUNT(*) FROM entries WHERE map_id = ?", [map_id]
        ).fetchone()
        return int(result[0]) if result else 0

    def _ordered_column(self, table: str, column: str, index_column: str, map_id: str) -> list[Any]:
        rows = self._conn.execute(
            f"SELECT {column} FROM {table} WHERE map_id = ? ORDER BY {index_column}",
            [map_id],
        ).fetchall()
        return [r[0] for r in rows]

    def get_source_map(self, map_id: str) -> SourceMap | None:
        """Rebuild a stored map, or None when ``map_id`` is unknown."""
        header = self._conn.execute(
            "SELECT version, file, source_root, line_count FROM source_maps WHERE map_id = ?",
            [map_id],
        ).fetchone()
        if not header:
            return None

        lines: list[list[Entry]] = [[] for _ in range(int(header[3]))]
        rows = self._conn.execute(
            "SELECT line_index, generated_column, source_file_id, source_line, "
            "source_column, name_id "
            "FROM entries WHERE map_id = ? ORDER BY line_index, entry_index",
            [map_id],
        ).fetchall()
        for r in rows:
            lines[int(r[0])].append(
                Entry(
                    generated_column=int(r[1]),
                    source_file_id=int(r[2]) if r[2] is not None else None,
                    source_line=int(r[3]) if r[3] is not None else None,
                    source_column=int(r[4]) if r[4] is not None else None,
                    name_id=int(r[5]) if r[5] is not None else None,
                )
            )
        mappings: tuple[Line, ...] = tuple(tuple(line) for line in lines)

        return SourceMap(
            version=int(header[0]),
            file=str(header[1] or ""),
            source_root=str(header[2] or ""),
            sources=tuple(
                str(s) for s in self._ordered_column("sources", "source", "source_index", map_id)
            ),
            sources_content=tuple(
                self._ordered_column("sources_content", "content", "source_index", map_id)
            ),
            names=tuple(
                str(n) for n in self._ordered_column("names", "name", "name_index", map_id)
            ),
            mappings=mappings,
        )
