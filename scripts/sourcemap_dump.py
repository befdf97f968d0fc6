#!/usr/bin/env python3
"""Dump a decoded source map, including its mapping table, as JSON.

Usage:
    python3 scripts/sourcemap_dump.py --map dist/app.js.map --out decoded.json

    cat dist/app.js.map | python3 scripts/sourcemap_dump.py
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from srcmap.errors import SourceMapError
from srcmap.io_utils import dump_json, save_json
from srcmap.reader import load_source_map, read_source_map
from srcmap.types import source_map_to_dict

log = logging.getLogger("sourcemap_dump")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode a v3 source map to JSON.")
    parser.add_argument(
        "--map",
        type=Path,
        default=None,
        help="Path to the source map (default: read from stdin)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write the decoded map here instead of stdout",
    )
    parser.add_argument("--lenient", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.map is not None:
            source_map = load_source_map(args.map, strict=not args.lenient)
        else:
            source_map = read_source_map(sys.stdin.buffer.read(), strict=not args.lenient)
    except (OSError, SourceMapError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    payload = source_map_to_dict(source_map)
    if args.out is not None:
        save_json(payload, args.out)
        log.info("wrote %d lines to %s", source_map.line_count, args.out)
    else:
        dump_json(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
