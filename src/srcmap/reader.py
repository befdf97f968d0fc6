"""Read the JSON envelope of a v3 source map into a ``SourceMap``."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson

from srcmap.errors import MalformedSourceMap, UnsupportedVersion
from srcmap.io_utils import load_json, loads_json
from srcmap.mappings import parse_mappings
from srcmap.types import SourceMap

log = logging.getLogger(__name__)

SUPPORTED_VERSION = 3


def _coerce_name(value: Any) -> str:
    # Some producers emit bare integers in "names".
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return ""


def _list_field(payload: Mapping[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedSourceMap(f"{key!r} must be a list, got {type(value).__name__}")
    return value


def _text_field(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedSourceMap(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _coerce_version(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def read_source_map(
    payload: bytes | str | Mapping[str, Any],
    *,
    strict: bool = True,
) -> SourceMap:
    """Decode a source map envelope and its ``mappings`` table.

    Args:
        payload: Raw JSON (bytes or text) or an already decoded object.
        strict: When True, a version other than 3 raises
            ``UnsupportedVersion`` with the populated map attached. When
            False, the mismatch is logged and the map is returned.

    Raises:
        MalformedSourceMap: The envelope is not a JSON object or a field has
            the wrong type.
        SourceMapError: Any failure while parsing ``mappings``.
    """
    if isinstance(payload, Mapping):
        data: Any = payload
    else:
        try:
            data = loads_json(payload)
        except orjson.JSONDecodeError as exc:
            raise MalformedSourceMap(f"invalid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise MalformedSourceMap(f"source map must be a JSON object, got {type(data).__name__}")

    raw_version = data.get("version")
    sources_content: list[str | None] = []
    for value in _list_field(data, "sourcesContent"):
        sources_content.append(value if isinstance(value, str) else None)

    source_map = SourceMap(
        version=_coerce_version(raw_version),
        file=_text_field(data, "file"),
        source_root=_text_field(data, "sourceRoot"),
        sources=tuple(
            value if isinstance(value, str) else ""
            for value in _list_field(data, "sources")
        ),
        sources_content=tuple(sources_content),
        names=tuple(_coerce_name(value) for value in _list_field(data, "names")),
        mappings=parse_mappings(_text_field(data, "mappings")),
    )
    log.debug(
        "decoded source map %r: %d lines, %d entries, %d sources, %d names",
        source_map.file,
        source_map.line_count,
        source_map.entry_count,
        len(source_map.sources),
        len(source_map.names),
    )

    if source_map.version != SUPPORTED_VERSION:
        if strict:
            raise UnsupportedVersion(raw_version, source_map)
        log.warning("unsupported source map version %r for %r", raw_version, source_map.file)
    return source_map


def load_source_map(path: Path, *, strict: bool = True) -> SourceMap:
    """Read a source map from a JSON file."""
    try:
        data = load_json(path)
    except orjson.JSONDecodeError as exc:
        raise MalformedSourceMap(f"invalid JSON in {path}: {exc}") from exc
    return read_source_map(data, strict=strict)
