"""Base64 VLQ decoding for the source map ``mappings`` field."""

from __future__ import annotations

from dataclasses import dataclass

from srcmap.errors import MalformedEntry, UnexpectedEndOfInput


BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

_DECODE_MAP: dict[str, int] = {char: idx for idx, char in enumerate(BASE64_ALPHABET)}

VLQ_BASE_SHIFT = 5
VLQ_BASE = 1 << VLQ_BASE_SHIFT  # 0b100000
VLQ_BASE_MASK = VLQ_BASE - 1  # 0b011111
VLQ_CONTINUATION_BIT = VLQ_BASE


@dataclass(slots=True)
class CharReader:
    """Forward-only cursor over a string."""

    text: str
    position: int = 0

    @property
    def remaining(self) -> int:
        return len(self.text) - self.position

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.text)

    def peek(self) -> str | None:
        if self.at_end:
            return None
        return self.text[self.position]

    def read(self) -> str:
        if self.at_end:
            raise UnexpectedEndOfInput(self.position)
        char = self.text[self.position]
        self.position += 1
        return char


def _from_vlq_signed(value: int) -> int:
    magnitude = value >> 1
    return -magnitude if value & 1 else magnitude


def decode_vlq(reader: CharReader) -> int:
    """Decode the next VLQ value from ``reader``.

    Consumes exactly the characters of one value. Raises
    ``UnexpectedEndOfInput`` if the reader runs out before a character
    without the continuation bit is seen.
    """
    result = 0
    shift = 0
    while True:
        position = reader.position
        char = reader.read()
        digit = _DECODE_MAP.get(char)
        if digit is None:
            raise MalformedEntry(
                f"invalid base64 VLQ character {char!r} at offset {position}",
                position=position,
            )
        # Groups arrive least significant first.
        result += (digit & VLQ_BASE_MASK) << shift
        shift += VLQ_BASE_SHIFT
        if not digit & VLQ_CONTINUATION_BIT:
            return _from_vlq_signed(result)


def decode_vlq_values(text: str) -> list[int]:
    """Decode a dense run of VLQ values with no separators."""
    reader = CharReader(text)
    values: list[int] = []
    while not reader.at_end:
        values.append(decode_vlq(reader))
    return values
