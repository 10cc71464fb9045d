"""Build the VERA palette for an image.

Index 0 of a VERA palette is special: sprites and layers render it as
transparent. The color that receives index 0 is chosen by the first matching
rule below, then every other color is numbered in order of first appearance.

1. An explicit transparent color requested by the caller (must exist in the
   image, or in its palette for indexed images).
2. For indexed images, the color at index 0 of the original palette.
3. The first fully transparent pixel in row-major order.
4. The top-left pixel.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .color import RGBA, VeraColor, format_argb, quantize
from .errors import CapacityExceededError, TransparentColorNotFoundError
from .image_source import SourceImage

MAX_COLORS = 256


class Palette:
    """Ordered mapping from :class:`VeraColor` to palette index.

    Also records which original colors were merged into every VERA color.
    """

    def __init__(self) -> None:
        self._indices: Dict[VeraColor, int] = {}
        self._origins: Dict[VeraColor, Dict[RGBA, None]] = {}

    def add(self, rgba: RGBA) -> bool:
        """Record ``rgba``; return True when it introduced a new palette entry."""
        color = quantize(rgba)
        origins = self._origins.get(color)
        if origins is None:
            self._indices[color] = len(self._indices)
            self._origins[color] = {rgba: None}
            return True
        origins.setdefault(rgba, None)
        return False

    def index_of(self, color: VeraColor) -> int:
        return self._indices[color]

    def originals(self, color: VeraColor) -> List[RGBA]:
        return list(self._origins[color])

    @property
    def colors(self) -> List[VeraColor]:
        return list(self._indices)

    @property
    def provenance(self) -> Dict[VeraColor, List[RGBA]]:
        return {color: list(origins) for color, origins in self._origins.items()}

    @property
    def original_color_count(self) -> int:
        return sum(len(origins) for origins in self._origins.values())

    def items(self) -> Iterator[Tuple[VeraColor, int]]:
        return iter(self._indices.items())

    def __len__(self) -> int:
        return len(self._indices)

    def __contains__(self, color: object) -> bool:
        return color in self._indices

    def __iter__(self) -> Iterator[VeraColor]:
        return iter(self._indices)


TransparencyRule = Callable[[SourceImage, Optional[RGBA]], Optional[RGBA]]


def _requested_color(source: SourceImage, requested: RGBA | None) -> RGBA | None:
    if requested is None:
        return None
    candidates: Iterable[RGBA] = source.palette if source.is_indexed else source.pixels
    for rgba in candidates:
        if rgba == requested:
            return rgba
    raise TransparentColorNotFoundError(format_argb(requested))


def _original_index_zero(source: SourceImage, requested: RGBA | None) -> RGBA | None:
    if source.is_indexed and source.palette:
        return source.palette[0]
    return None


def _first_transparent_pixel(source: SourceImage, requested: RGBA | None) -> RGBA | None:
    for rgba in source.pixels:
        if rgba[3] == 0:
            return rgba
    return None


def _top_left_pixel(source: SourceImage, requested: RGBA | None) -> RGBA | None:
    return source.pixels[0]


TRANSPARENCY_RULES: Sequence[TransparencyRule] = (
    _requested_color,
    _original_index_zero,
    _first_transparent_pixel,
    _top_left_pixel,
)


def select_transparent_color(source: SourceImage, requested: RGBA | None = None) -> RGBA:
    """Return the original color that will receive palette index 0."""

    for rule in TRANSPARENCY_RULES:
        rgba = rule(source, requested)
        if rgba is not None:
            return rgba
    raise AssertionError("top-left rule always selects a color")


def collect_palette(source: SourceImage, requested: RGBA | None = None) -> Palette:
    """Build the palette without enforcing the 256 color limit."""

    palette = Palette()
    palette.add(select_transparent_color(source, requested))
    for rgba in source.palette if source.is_indexed else source.pixels:
        palette.add(rgba)
    return palette


def check_capacity(palette: Palette, limit: int = MAX_COLORS) -> None:
    if len(palette) > limit:
        raise CapacityExceededError(len(palette), palette.original_color_count, limit)


def build_palette(source: SourceImage, requested: RGBA | None = None, limit: int = MAX_COLORS) -> Palette:
    palette = collect_palette(source, requested)
    check_capacity(palette, limit)
    return palette
