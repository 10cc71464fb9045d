"""12-bit VERA colors and the helpers that convert to and from them."""

# Reference: VERA palette entry (2 bytes, little-endian word 0000RRRR GGGGBBBB)
# Byte | Bits 7-4 | Bits 3-0
# -----|----------|---------
# 0    | Green    | Blue
# 1    | unused   | Red

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidOptionError

RGBA = Tuple[int, int, int, int]

OPAQUE = 15
TRANSPARENT = 0


def to_4bit(value: int) -> int:
    """Round an 8-bit channel to the nearest 4-bit step, clipped to 15."""
    return min((value + 8) // 16, 15)


@dataclass(frozen=True)
class VeraColor:
    """A color as VERA stores it: 4 bits per channel plus an on/off alpha.

    Semi-transparent source colors count as opaque; only an 8-bit alpha of
    zero produces ``a == 0``.
    """

    a: int
    r: int
    g: int
    b: int

    @classmethod
    def from_rgba(cls, rgba: RGBA) -> "VeraColor":
        r, g, b, a = rgba
        return cls(
            a=OPAQUE if a > 0 else TRANSPARENT,
            r=to_4bit(r),
            g=to_4bit(g),
            b=to_4bit(b),
        )

    @property
    def word(self) -> int:
        return (self.r << 8) | (self.g << 4) | self.b

    def to_bytes(self) -> bytes:
        return bytes([(self.g << 4) | self.b, self.r])

    def to_basic_data(self) -> str:
        return f"${self.g:X}{self.b:X},$0{self.r:X}"

    def __str__(self) -> str:
        return f"$0{self.r:X}{self.g:X}{self.b:X}"


def quantize(rgba: RGBA) -> VeraColor:
    return VeraColor.from_rgba(rgba)


def parse_argb(text: str) -> RGBA:
    """Parse a ``$AARRGGBB`` literal into an ``(r, g, b, a)`` tuple.

    ``#`` or no prefix is accepted as well; case is ignored.
    """

    raw = text.strip()
    if raw[:1] in ("$", "#"):
        raw = raw[1:]
    if len(raw) != 8 or not all(c in "0123456789abcdefABCDEF" for c in raw):
        raise InvalidOptionError(
            f"The value {text} for transparent color is not valid. "
            "It should be a 32 bit hexadecimal number with format $aarrggbb."
        )
    value = int(raw, 16)
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, (value >> 24) & 0xFF)


def format_argb(rgba: RGBA) -> str:
    r, g, b, a = rgba
    return f"${a:02X}{r:02X}{g:02X}{b:02X}"
