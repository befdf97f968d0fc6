"""Source Map v3 decoding and generated-to-original position lookup."""

from srcmap.errors import (
    InvalidColumnNumber,
    InvalidLineNumber,
    MalformedEntry,
    MalformedSourceMap,
    NoPrecedingMapping,
    SourceMapError,
    UnexpectedEndOfInput,
    UnresolvedIndex,
    UnsupportedVersion,
)
from srcmap.lookup import find_entry, lookup, resolve_entry
from srcmap.mappings import parse_mappings
from srcmap.reader import SUPPORTED_VERSION, load_source_map, read_source_map
from srcmap.types import (
    Entry,
    Line,
    MappingTable,
    OriginalMapping,
    SourceMap,
    entry_to_dict,
    mapping_to_dict,
    source_map_to_dict,
)
from srcmap.vlq import CharReader, decode_vlq, decode_vlq_values

__all__ = [
    "CharReader",
    "Entry",
    "InvalidColumnNumber",
    "InvalidLineNumber",
    "Line",
    "MalformedEntry",
    "MalformedSourceMap",
    "MappingTable",
    "NoPrecedingMapping",
    "OriginalMapping",
    "SUPPORTED_VERSION",
    "SourceMap",
    "SourceMapError",
    "UnexpectedEndOfInput",
    "UnresolvedIndex",
    "UnsupportedVersion",
    "decode_vlq",
    "decode_vlq_values",
    "entry_to_dict",
    "find_entry",
    "load_source_map",
    "lookup",
    "mapping_to_dict",
    "parse_mappings",
    "read_source_map",
    "resolve_entry",
    "source_map_to_dict",
]
