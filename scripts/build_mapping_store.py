#!/usr/bin/env python3
"""Decode source maps and persist them to a DuckDB mapping store.

Maps given on the command line are stored under their file name, maps found
with --dir under their path relative to that directory. Maps that
fail to decode are reported and skipped unless --fail-fast is given.

Usage:
    python3 scripts/build_mapping_store.py --out maps.duckdb dist/*.map

    python3 scripts/build_mapping_store.py --out maps.duckdb --dir dist
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from srcmap.errors import SourceMapError
from srcmap.io_utils import dump_json
from srcmap.reader import load_source_map
from srcmap.store import MappingStoreError, write_mapping_store
from srcmap.types import SourceMap

log = logging.getLogger("build_mapping_store")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build a DuckDB store of decoded source maps.")
    parser.add_argument("maps", nargs="*", type=Path, help="Source map files")
    parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Also include every *.map file under this directory",
    )
    parser.add_argument("--out", type=Path, required=True, help="Output DuckDB path")
    parser.add_argument("--lenient", action="store_true")
    parser.add_argument("--fail-fast", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def collect_map_paths(paths: list[Path], directory: Path | None) -> list[tuple[str, Path]]:
    """Pair each map with its store id.

    Explicit paths come first and are keyed by file name; ``*.map`` files
    under ``directory`` follow in sorted order, keyed by their POSIX path
    relative to ``directory``.
    """
    out: list[tuple[str, Path]] = []
    seen: set[Path] = set()
    candidates = [(path.name, path) for path in paths]
    if directory is not None:
        candidates.extend(
            (path.relative_to(directory).as_posix(), path)
            for path in sorted(directory.rglob("*.map"))
        )
    for map_id, path in candidates:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            out.append((map_id, path))
    return out


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    pairs = collect_map_paths(args.maps, args.dir)
    if not pairs:
        print("Error: no source maps given", file=sys.stderr)
        return 1

    t0 = time.time()
    decoded: dict[str, SourceMap] = {}
    origins: dict[str, Path] = {}
    failures: dict[str, str] = {}
    for map_id, path in pairs:
        if map_id in decoded:
            message = f"map id {map_id!r} already taken by {origins[map_id]}"
        else:
            try:
                decoded[map_id] = load_source_map(path, strict=not args.lenient)
                origins[map_id] = path
                continue
            except (OSError, SourceMapError) as exc:
                message = str(exc)
        if args.fail_fast:
            print(f"Error: {path}: {message}", file=sys.stderr)
            return 1
        log.warning("skipping %s: %s", path, message)
        failures[str(path)] = message

    if not decoded:
        print(f"Error: no source map could be decoded; {args.out} left unchanged", file=sys.stderr)
        dump_json({"maps_stored": 0, "entries_stored": 0, "failures": failures})
        return 1

    try:
        entries = write_mapping_store(args.out, decoded)
    except MappingStoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    dump_json({
        "maps_stored": len(decoded),
        "entries_stored": entries,
        "failures": failures,
        "output": str(args.out),
        "elapsed_s": round(time.time() - t0, 3),
    })
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
