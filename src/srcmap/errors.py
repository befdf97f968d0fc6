"""Typed failures raised while decoding and querying source maps."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from srcmap.types import SourceMap


class SourceMapError(ValueError):
    """Base class for every source map decoding or lookup failure."""


class MalformedSourceMap(SourceMapError):
    """Raised when the JSON envelope does not have the expected shape."""


class UnexpectedEndOfInput(SourceMapError):
    """Raised when a VLQ value is cut off before its terminating character."""

    def __init__(self, position: int) -> None:
        super().__init__(f"unexpected end of input at offset {position}")
        self.position = position


class MalformedEntry(SourceMapError):
    """Raised when a mappings entry violates the 1/4/5 field arity."""

    def __init__(self, message: str, *, position: int, value_count: int | None = None) -> None:
        super().__init__(message)
        self.position = position
        self.value_count = value_count


class UnsupportedVersion(SourceMapError):
    """Raised when the envelope version is not 3.

    The fully populated map is attached so callers can still inspect it.
    """

    def __init__(self, version: object, source_map: SourceMap | None = None) -> None:
        super().__init__(f"unsupported version: {version!r}")
        self.version = version
        self.source_map = source_map


class InvalidLineNumber(SourceMapError):
    def __init__(self, line: int) -> None:
        super().__init__(f"invalid line number: {line}")
        self.line = line


class InvalidColumnNumber(SourceMapError):
    def __init__(self, column: int) -> None:
        super().__init__(f"invalid column number: {column}")
        self.column = column


class NoPrecedingMapping(SourceMapError):
    def __init__(self, line: int) -> None:
        super().__init__(f"cannot find previous line mapping for line {line}")
        self.line = line


class UnresolvedIndex(SourceMapError):
    """Raised when a selected entry cannot be resolved to a source position."""
