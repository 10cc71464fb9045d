"""Decode PNG files into the pixel data the converter works on."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from PIL import Image

from .color import RGBA
from .errors import SourceImageError


@dataclass
class SourceImage:
    """A decoded image: row-major RGBA pixels plus the original palette, if any."""

    width: int
    height: int
    pixels: List[RGBA]
    palette: List[RGBA] | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise SourceImageError(f"Image has no pixels ({self.width}x{self.height})")
        if len(self.pixels) != self.width * self.height:
            raise SourceImageError(
                f"Expected {self.width * self.height} pixels for a "
                f"{self.width}x{self.height} image, got {len(self.pixels)}"
            )

    @property
    def is_indexed(self) -> bool:
        return self.palette is not None

    def pixel(self, x: int, y: int) -> RGBA:
        return self.pixels[y * self.width + x]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[RGBA]], palette: Sequence[RGBA] | None = None) -> "SourceImage":
        height = len(rows)
        width = len(rows[0]) if rows else 0
        pixels = [tuple(color) for row in rows for color in row]
        return cls(
            width=width,
            height=height,
            pixels=pixels,  # type: ignore[arg-type]
            palette=[tuple(c) for c in palette] if palette is not None else None,  # type: ignore[misc]
        )


def _palette_alphas(image: Image.Image, count: int) -> List[int]:
    transparency = image.info.get("transparency")
    alphas = [255] * count
    if isinstance(transparency, int):
        if 0 <= transparency < count:
            alphas[transparency] = 0
    elif isinstance(transparency, (bytes, bytearray)):
        for index, alpha in enumerate(transparency[:count]):
            alphas[index] = alpha
    return alphas


def _read_palette(image: Image.Image) -> List[RGBA]:
    flat = image.getpalette() or []
    count = len(flat) // 3
    alphas = _palette_alphas(image, count)
    return [
        (flat[i * 3], flat[i * 3 + 1], flat[i * 3 + 2], alphas[i])
        for i in range(count)
    ]


# 16-bit grayscale PNGs open in one of these modes with samples up to 65535.
HIGH_BIT_DEPTH_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")


def _to_8bit_gray(image: Image.Image) -> Image.Image:
    """Scale 16-bit samples down to 8 bits; plain ``convert`` would clip them at 255."""
    # point() truncates, the 0.5 offset rounds to the nearest 8-bit value
    return image.convert("I").point(lambda v: v / 257 + 0.5).convert("L")


def _rgba_pixels(image: Image.Image) -> List[RGBA]:
    data = image.tobytes()
    return [tuple(data[i : i + 4]) for i in range(0, len(data), 4)]  # type: ignore[misc]


def source_from_image(image: Image.Image) -> SourceImage:
    """Build a :class:`SourceImage` from an in-memory Pillow image.

    Palette-mode (``P``) images keep their palette so index 0 of the original
    can become index 0 of the converted palette.
    """

    palette = _read_palette(image) if image.mode == "P" else None
    if image.mode in HIGH_BIT_DEPTH_MODES:
        image = _to_8bit_gray(image)
    rgba = image.convert("RGBA")
    width, height = rgba.size
    return SourceImage(
        width=width,
        height=height,
        pixels=_rgba_pixels(rgba),
        palette=palette,
    )


def load_png(path: str | Path) -> SourceImage:
    path = Path(path)
    try:
        with Image.open(path) as img:
            if img.format != "PNG":
                raise SourceImageError(f"The image format is not png: {path}")
            img.load()
            return source_from_image(img)
    except FileNotFoundError as exc:
        raise SourceImageError(f"Input file not found: {path}") from exc
    except OSError as exc:
        raise SourceImageError(f"Failed to read PNG: {path}") from exc
