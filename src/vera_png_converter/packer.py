"""Pack palette indices into VERA bitmap, tile and sprite data."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from .color import quantize
from .color_mode import ColorMode
from .errors import InternalConsistencyError
from .image_source import SourceImage
from .palette import Palette


def iter_tile_origins(width: int, height: int, tile_width: int, tile_height: int) -> Iterator[Tuple[int, int]]:
    """Yield the top-left corner of every tile, row by row."""
    for row in range(height // tile_height):
        for col in range(width // tile_width):
            yield col * tile_width, row * tile_height


def pixel_indices(source: SourceImage, palette: Palette, x0: int, y0: int, width: int, height: int) -> List[int]:
    """Return the palette index of every pixel in a rectangle, row-major.

    Fully transparent pixels always map to index 0, whatever their RGB.
    """

    indices: List[int] = []
    for y in range(y0, y0 + height):
        row_offset = y * source.width
        for x in range(x0, x0 + width):
            rgba = source.pixels[row_offset + x]
            if rgba[3] == 0:
                indices.append(0)
                continue
            try:
                indices.append(palette.index_of(quantize(rgba)))
            except KeyError as exc:
                raise InternalConsistencyError(
                    f"Color {quantize(rgba)} at ({x}, {y}) is missing from the palette"
                ) from exc
    return indices


def pack_indices(indices: List[int], bits_per_pixel: int) -> bytes:
    """Pack indices most-significant-bits first; a partial last byte is zero-padded."""

    pixels_per_byte = 8 // bits_per_pixel
    mask = (1 << bits_per_pixel) - 1
    out = bytearray()
    for start in range(0, len(indices), pixels_per_byte):
        value = 0
        shift = 8
        for index in indices[start : start + pixels_per_byte]:
            shift -= bits_per_pixel
            value |= (index & mask) << shift
        out.append(value)
    return bytes(out)


def unpack_indices(data: bytes, bits_per_pixel: int, count: int | None = None) -> List[int]:
    """Reverse :func:`pack_indices`, optionally trimming to ``count`` indices."""

    pixels_per_byte = 8 // bits_per_pixel
    mask = (1 << bits_per_pixel) - 1
    indices: List[int] = []
    for value in data:
        for slot in range(pixels_per_byte):
            shift = 8 - (slot + 1) * bits_per_pixel
            indices.append((value >> shift) & mask)
    if count is not None:
        indices = indices[:count]
    return indices


def pack_pixels(
    source: SourceImage,
    palette: Palette,
    color_mode: ColorMode,
    tile_size: Tuple[int, int] | None = None,
) -> bytes:
    """Pack the whole image, or each tile in turn when ``tile_size`` is given.

    Tiles are emitted row by row across the image; inside a tile, pixels are
    read row by row. Tile dimensions must divide the image dimensions.
    """

    tile_width, tile_height = tile_size or (source.width, source.height)
    out = bytearray()
    for x0, y0 in iter_tile_origins(source.width, source.height, tile_width, tile_height):
        indices = pixel_indices(source, palette, x0, y0, tile_width, tile_height)
        out += pack_indices(indices, color_mode.bits_per_pixel)
    return bytes(out)
