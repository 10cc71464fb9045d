"""Conversion targets and the color depth VERA uses for each of them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, Tuple

from .errors import CapacityExceededError


class ConversionMode(StrEnum):
    IMAGE = "image"
    BMX = "bmx"
    TILES = "tiles"
    SPRITES = "sprites"

    @property
    def is_tiled(self) -> bool:
        return self in (ConversionMode.TILES, ConversionMode.SPRITES)


BITMAP_COLOR_COUNTS: Tuple[int, ...] = (2, 4, 16, 256)
SPRITE_COLOR_COUNTS: Tuple[int, ...] = (16, 256)

# Value written to the color depth field of the layer (or sprite) registers.
BITMAP_COLOR_DEPTHS: Dict[int, int] = {2: 0, 4: 1, 16: 2, 256: 3}
SPRITE_COLOR_DEPTHS: Dict[int, int] = {16: 0, 256: 1}


@dataclass(frozen=True)
class ColorMode:
    color_count: int
    bits_per_pixel: int
    pixels_per_byte: int
    color_depth: int


def resolve_color_mode(palette_size: int, mode: ConversionMode | str = ConversionMode.IMAGE) -> ColorMode:
    """Pick the smallest color count the target supports that fits ``palette_size``.

    Sprites only support 16 and 256 colors; bitmaps and tiles support 2, 4,
    16 and 256.
    """

    mode = ConversionMode(mode)
    if palette_size < 0:
        raise ValueError("Color count cannot be a negative number.")
    if mode is ConversionMode.SPRITES:
        counts, depths = SPRITE_COLOR_COUNTS, SPRITE_COLOR_DEPTHS
    else:
        counts, depths = BITMAP_COLOR_COUNTS, BITMAP_COLOR_DEPTHS

    for count in counts:
        if count >= palette_size:
            bits = count.bit_length() - 1
            return ColorMode(
                color_count=count,
                bits_per_pixel=bits,
                pixels_per_byte=8 // bits,
                color_depth=depths[count],
            )
    raise CapacityExceededError(palette_size, palette_size, counts[-1])
