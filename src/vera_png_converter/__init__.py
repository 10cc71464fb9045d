"""PNG to Commander X16 VERA converter.

Reduces PNG colors to the 12-bit VERA palette, packs pixels at 1, 2, 4 or 8
bits per pixel and writes raw bitmap, tile, sprite or BMX files. It can be
invoked through the CLI (``python -m vera_png_converter``) or imported to
convert images in memory.
"""

from .color import VeraColor, format_argb, parse_argb, quantize
from .color_mode import ColorMode, ConversionMode, resolve_color_mode
from .converter import (
    ConversionResult,
    ConvertOptions,
    PaletteFormat,
    analyze,
    convert,
    convert_png,
    write_outputs,
)
from .errors import (
    CapacityExceededError,
    ConversionError,
    DimensionMismatchError,
    InternalConsistencyError,
    InvalidOptionError,
    OutputWriteError,
    SourceImageError,
    TransparentColorNotFoundError,
)
from .image_source import SourceImage, load_png, source_from_image
from .packer import pack_pixels, unpack_indices
from .palette import Palette, build_palette, select_transparent_color
from .writer import (
    build_binary_palette,
    build_bmx_file,
    build_bmx_header,
    build_raw_image,
    format_palette_asm,
    format_palette_basic,
)

__all__ = [
    "CapacityExceededError",
    "ColorMode",
    "ConversionError",
    "ConversionMode",
    "ConversionResult",
    "ConvertOptions",
    "DimensionMismatchError",
    "InternalConsistencyError",
    "InvalidOptionError",
    "OutputWriteError",
    "Palette",
    "PaletteFormat",
    "SourceImage",
    "SourceImageError",
    "TransparentColorNotFoundError",
    "VeraColor",
    "analyze",
    "build_binary_palette",
    "build_bmx_file",
    "build_bmx_header",
    "build_palette",
    "build_raw_image",
    "convert",
    "convert_png",
    "format_argb",
    "format_palette_asm",
    "format_palette_basic",
    "load_png",
    "pack_pixels",
    "parse_argb",
    "quantize",
    "resolve_color_mode",
    "select_transparent_color",
    "source_from_image",
    "unpack_indices",
    "write_outputs",
]
