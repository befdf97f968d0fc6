"""JSON I/O helpers backed by orjson."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import orjson


def loads_json(raw: bytes | str) -> Any:
    """Decode a JSON document from bytes or text."""
    return orjson.loads(raw)


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def dump_json(obj: object) -> None:
    """Write indented JSON to stdout."""
    sys.stdout.flush()
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()
