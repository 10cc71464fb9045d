"""Conversion session: validate options, build every output in memory, write it."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Dict, List, Tuple

from .color import RGBA, parse_argb
from .color_mode import ColorMode, ConversionMode, resolve_color_mode
from .demo import demo_unavailable_reason, render_demo
from .errors import ConversionError, DimensionMismatchError, InvalidOptionError, OutputWriteError
from .image_source import SourceImage, load_png
from .packer import pack_pixels
from .palette import Palette, build_palette, collect_palette
from .writer import (
    build_binary_palette,
    build_bmx_file,
    build_raw_image,
    format_palette_asm,
    format_palette_basic,
    write_file,
)

BITMAP_WIDTHS = (320, 640)
TILE_SIZES = (8, 16)
SPRITE_SIZES = (8, 16, 32, 64)
FREE_VRAM_BYTES = 126 * 1024


class PaletteFormat(StrEnum):
    BINARY = "bin"
    ASSEMBLER = "asm"
    BASIC = "bas"


@dataclass
class ConvertOptions:
    """Options for a single conversion.

    ``mode`` left as None means "analyze only".
    """

    mode: ConversionMode | None = None
    width: int = 0  # tile/sprite width
    height: int = 0  # tile/sprite height
    transparent_color: str | None = None  # $AARRGGBB
    palette_format: PaletteFormat | None = None
    demo: bool = False

    def validate(self) -> None:
        if self.mode is not None:
            try:
                self.mode = ConversionMode(self.mode)
            except ValueError as exc:
                raise InvalidOptionError(
                    f"Conversion mode {self.mode} is not valid. Use image, bmx, tiles or sprites."
                ) from exc
        if self.palette_format is not None:
            try:
                self.palette_format = PaletteFormat(self.palette_format)
            except ValueError as exc:
                raise InvalidOptionError(
                    f"The value {self.palette_format} for palette file format is not valid. "
                    'It should be "bin", "bas" or "asm".'
                ) from exc
        if self.transparent_color is not None:
            parse_argb(self.transparent_color)

        if self.mode is None:
            return
        if not self.mode.is_tiled:
            if self.width or self.height:
                raise InvalidOptionError("Width and height should not be set when converting an image.")
            return

        word = "tile" if self.mode is ConversionMode.TILES else "sprite"
        allowed = TILE_SIZES if self.mode is ConversionMode.TILES else SPRITE_SIZES
        for label, size in (("width", self.width), ("height", self.height)):
            if not size:
                raise InvalidOptionError(f"The {word} {label} is not specified.")
            if size not in allowed:
                values = ", ".join(str(v) for v in allowed)
                raise InvalidOptionError(
                    f"The value for {word} {label} must be one of {values} when converting {self.mode.value}."
                )

    @property
    def tile_size(self) -> Tuple[int, int] | None:
        if self.mode is not None and self.mode.is_tiled:
            return self.width, self.height
        return None

    @property
    def requested_color(self) -> RGBA | None:
        if self.transparent_color is None:
            return None
        return parse_argb(self.transparent_color)


@dataclass(frozen=True)
class OutputNames:
    """File names derived from the input file name."""

    name: str

    @property
    def raw_image(self) -> str:
        return f"{self.name.upper()}.BIN"

    @property
    def bmx_image(self) -> str:
        return f"{self.name.upper()}.BMX"

    @property
    def binary_palette(self) -> str:
        return f"{self.name.upper()}-PALETTE.BIN"

    @property
    def asm_palette(self) -> str:
        return f"{self.name}_palette.asm"

    @property
    def basic_palette(self) -> str:
        return f"{self.name}_BASIC_palette.txt"

    @property
    def demo_program(self) -> str:
        return f"{self.name}_demo.txt"

    def palette_file(self, palette_format: PaletteFormat) -> str:
        return {
            PaletteFormat.BINARY: self.binary_palette,
            PaletteFormat.ASSEMBLER: self.asm_palette,
            PaletteFormat.BASIC: self.basic_palette,
        }[palette_format]


def possible_sizes(size: int) -> List[int]:
    """Tile/sprite sizes (8, 16, 32, 64) that divide ``size`` evenly."""
    return [candidate for candidate in SPRITE_SIZES if size % candidate == 0]


@dataclass
class Analysis:
    source: SourceImage
    options: ConvertOptions
    palette: Palette
    color_mode: ColorMode | None
    possible_widths: List[int]
    possible_heights: List[int]

    @property
    def fits_palette(self) -> bool:
        return len(self.palette) <= 256

    @property
    def bitmap_width_ok(self) -> bool:
        return self.source.width in BITMAP_WIDTHS


@dataclass
class ConversionResult:
    source: SourceImage
    options: ConvertOptions
    names: OutputNames
    palette: Palette
    color_mode: ColorMode
    packed: bytes
    image_file: str
    files: Dict[str, bytes] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def image_size(self) -> int:
        """Bytes of pixel data, without headers or palette."""
        return len(self.packed)

    @property
    def tile_count(self) -> int:
        tile_size = self.options.tile_size
        if tile_size is None:
            return 1
        return (self.source.width // tile_size[0]) * (self.source.height // tile_size[1])


def analyze(source: SourceImage, options: ConvertOptions | None = None) -> Analysis:
    """Collect palette facts for a report without enforcing the color limit."""

    options = options or ConvertOptions()
    options.validate()
    palette = collect_palette(source, options.requested_color)
    color_mode = None
    if len(palette) <= 256:
        color_mode = resolve_color_mode(len(palette), options.mode or ConversionMode.IMAGE)
    return Analysis(
        source=source,
        options=options,
        palette=palette,
        color_mode=color_mode,
        possible_widths=possible_sizes(source.width),
        possible_heights=possible_sizes(source.height),
    )


def check_dimensions(source: SourceImage, options: ConvertOptions) -> None:
    tile_size = options.tile_size
    if tile_size is None:
        if source.width not in BITMAP_WIDTHS:
            raise DimensionMismatchError(
                f"The width of the image is {source.width}, it must be either 320 or 640. "
                "(Height has no restrictions.)"
            )
        return
    tile_width, tile_height = tile_size
    if source.width % tile_width:
        raise DimensionMismatchError(f"The width of the image ({source.width}) is not divisible by {tile_width}.")
    if source.height % tile_height:
        raise DimensionMismatchError(f"The height of the image ({source.height}) is not divisible by {tile_height}.")


def _palette_outputs(result: ConversionResult) -> None:
    names = result.names
    colors = result.palette.colors
    palette_format = result.options.palette_format or PaletteFormat.BINARY
    if palette_format is PaletteFormat.BINARY:
        data = build_binary_palette(colors)
    elif palette_format is PaletteFormat.ASSEMBLER:
        data = format_palette_asm(colors).encode("ascii")
    else:
        data = format_palette_basic(colors).encode("ascii")
    result.files[names.palette_file(palette_format)] = data
    if result.options.demo and palette_format is not PaletteFormat.BINARY:
        # demo programs load the binary palette
        result.files[names.binary_palette] = build_binary_palette(colors)


def _demo_output(result: ConversionResult) -> None:
    mode = result.options.mode
    reason = demo_unavailable_reason(mode, result.source.width, result.image_size)
    if reason is not None:
        result.warnings.append(reason)
        warnings.warn(reason, RuntimeWarning, stacklevel=3)
        return
    program = render_demo(
        result.names.name.upper(),
        mode,
        result.color_mode,
        result.source.width,
        result.source.height,
        result.options.width,
        result.options.height,
    )
    result.files[result.names.demo_program] = program.encode("ascii")


def convert(source: SourceImage, options: ConvertOptions, name: str = "image") -> ConversionResult:
    """Convert ``source`` and return every output file as bytes.

    Nothing touches the file system here; see :func:`write_outputs`.
    """

    options.validate()
    if options.mode is None:
        raise InvalidOptionError("Conversion mode is not set. Use image, bmx, tiles or sprites.")
    mode = options.mode

    palette = build_palette(source, options.requested_color)
    check_dimensions(source, options)
    color_mode = resolve_color_mode(len(palette), mode)
    packed = pack_pixels(source, palette, color_mode, options.tile_size)

    names = OutputNames(name)
    if mode is ConversionMode.BMX:
        image_file = names.bmx_image
        image_bytes = build_bmx_file(source.width, source.height, color_mode, palette.colors, packed)
    else:
        image_file = names.raw_image
        image_bytes = build_raw_image(packed)

    result = ConversionResult(
        source=source,
        options=options,
        names=names,
        palette=palette,
        color_mode=color_mode,
        packed=packed,
        image_file=image_file,
    )
    result.files[image_file] = image_bytes
    if mode is not ConversionMode.BMX:
        _palette_outputs(result)
    if options.demo:
        _demo_output(result)

    if result.image_size > FREE_VRAM_BYTES:
        message = "The amount of free VRAM is 126 KB, the converted image is larger."
        result.warnings.append(message)
        warnings.warn(message, RuntimeWarning, stacklevel=2)
    return result


def write_outputs(result: ConversionResult, output_dir: str | Path, force: bool = False) -> Dict[Path, int]:
    """Write every output file of ``result``; return bytes written per path."""

    output_dir = Path(output_dir)
    targets = [output_dir / name for name in result.files]
    conflicts = [str(target) for target in targets if target.exists() and not force]
    if conflicts:
        raise ConversionError(
            "Output files already exist (use --force to overwrite):\n" + "\n".join(conflicts)
        )

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(output_dir, exc) from exc

    written: Dict[Path, int] = {}
    for target, data in zip(targets, result.files.values()):
        written[target] = write_file(target, data)
    return written


def convert_png(path: str | Path, options: ConvertOptions) -> ConversionResult:
    path = Path(path)
    return convert(load_png(path), options, name=path.stem)
