#!/usr/bin/env python3
"""Find the original position for a generated line/column.

Reads a v3 source map from a file (or stdin) and prints the resolved
mapping as JSON.

Usage:
    python3 scripts/sourcemap_lookup.py --map dist/app.js.map --line 12 --column 5

    cat dist/app.js.map | python3 scripts/sourcemap_lookup.py --line 12 --column 5
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
from srcmap.io_utils import dump_json
from srcmap.reader import load_source_map, read_source_map
from srcmap.types import mapping_to_dict

log = logging.getLogger("sourcemap_lookup")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Map a generated line/column back to its original source."
    )
    parser.add_argument(
        "--map",
        type=Path,
        default=None,
        help="Path to the source map (default: read from stdin)",
    )
    parser.add_argument("--line", type=int, required=True, help="1-based generated line")
    parser.add_argument("--column", type=int, required=True, help="1-based generated column")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Accept source maps whose version is not 3",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.map is not None and not args.map.exists():
        print(f"Error: source map not found: {args.map}", file=sys.stderr)
        return 1

    try:
        if args.map is not None:
            source_map = load_source_map(args.map, strict=not args.lenient)
        else:
            source_map = read_source_map(sys.stdin.buffer.read(), strict=not args.lenient)
        mapping = source_map.original_position(args.line, args.column)
    except (OSError, SourceMapError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    log.debug("resolved %d:%d -> %s", args.line, args.column, mapping)
    dump_json(mapping_to_dict(mapping))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
