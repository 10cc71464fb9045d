"""Human-readable summaries of an analysis or a finished conversion."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from .color import format_argb
from .color_mode import ColorMode, ConversionMode
from .converter import Analysis, ConversionResult, ConvertOptions, PaletteFormat
from .image_source import SourceImage
from .palette import Palette

RULE = "-" * 40
TILE_TABLE_COLUMNS = 16
TILE_TABLE_MAX_TILES = 1000
LONG_LIST_MAX_ORIGINALS = 2048


def _join(values: Sequence[int]) -> str:
    return ", ".join(str(v) for v in values)


def describe_source(source: SourceImage, palette: Palette) -> List[str]:
    kind = (
        "Indexed (each pixel has a color taken from a limited palette)"
        if source.is_indexed
        else "Full-color (each pixel has its own ARGB value)"
    )
    return [
        "Original image:",
        RULE,
        f"Image width     : {source.width}",
        f"Image height    : {source.height}",
        f"Number of colors: {palette.original_color_count}",
        f"Color type      : {kind}",
        "",
    ]


def describe_valid_options(analysis: Analysis) -> List[str]:
    lines = ["Valid options:", RULE]
    if not analysis.fits_palette:
        lines.append(
            "FATAL PROBLEM: The image has to be color reduced before conversion. "
            f"With the current number of colors the conversion would result in {len(analysis.palette)} colors, "
            "maximum is 256."
        )
    width = analysis.source.width
    if analysis.bitmap_width_ok:
        lines.append(f"Conversion to a bitmap image is possible because the width is {width}.")
    else:
        lines.append(
            "Conversion to a bitmap image is not possible because the width is not 320 or 640. "
            "(Height has no restrictions.)"
        )
    lines.append("")
    widths, heights = analysis.possible_widths, analysis.possible_heights
    if widths and heights:
        lines += [
            "If converting to sprites, valid sizes are:",
            f"Width : {_join(widths)}",
            f"Height: {_join(heights)}",
            "If converting to tiles, valid sizes are:",
            f"Width : {_join([w for w in widths if w < 32])}",
            f"Height: {_join([h for h in heights if h < 32])}",
        ]
    else:
        lines += [
            "The image cannot be converted to tiles or sprites. Width and height must be divisible by 8.",
            "This is because sprites can be 8, 16, 32 or 64 pixels wide/high and tiles can be 8 or 16.",
        ]
    return lines


def describe_color_mode(palette: Palette, color_mode: ColorMode | None) -> List[str]:
    if color_mode is None:
        return []
    return [
        f"Number of colors     : {len(palette)}",
        f"Bits per pixel (BPP) : {color_mode.bits_per_pixel}",
        f"Pixels per byte      : {color_mode.pixels_per_byte}",
        f"Color depth          : {color_mode.color_depth}",
        "",
    ]


def describe_palette(palette: Palette) -> List[str]:
    """List every VERA color with the original colors merged into it."""

    if len(palette) > 16:
        return _describe_long_palette(palette)
    lines = ["Palette:", "Index  VERA colors  Original colors"]
    for color, index in palette.items():
        originals = ", ".join(format_argb(rgba) for rgba in palette.originals(color))
        lines.append(f"{index:5}  {color}         {originals}")
    return lines


def _describe_long_palette(palette: Palette) -> List[str]:
    if len(palette) > 256 or palette.original_color_count > LONG_LIST_MAX_ORIGINALS:
        return []
    lines = [
        "Palette:",
        "At the top of each column is the 12-bit VERA color, below corresponding color(s) in the original image.",
        RULE,
    ]
    colors = palette.colors
    for start in range(0, len(colors), 16):
        chunk = colors[start : start + 16]
        label = f"{start}-{start + len(chunk) - 1} ".rjust(8)
        lines.append(label + "".join(f"  {color}   " for color in chunk))
        columns = [palette.originals(color) for color in chunk]
        for row in range(max(len(c) for c in columns)):
            cells = [format_argb(c[row]) + " " if row < len(c) else ".         " for c in columns]
            lines.append(" " * 8 + "".join(cells))
    return lines


def describe_tile_order(columns: int, rows: int) -> List[str]:
    """Draw the order in which tiles were read from the image."""

    def cells(row: int) -> List[int]:
        start = row * columns
        indices = list(range(start, start + columns))
        if columns > TILE_TABLE_COLUMNS:
            indices = indices[:TILE_TABLE_COLUMNS] + [-1, indices[-1]]
        return indices

    def border(count: int) -> str:
        return "|-----" * count + "|"

    lines: List[str] = []
    shown = 0
    for row in range(rows):
        if (row + 1) * columns > TILE_TABLE_MAX_TILES:
            break
        row_cells = cells(row)
        lines.append("".join("|     " if i == -1 else "|-----" for i in row_cells) + "|")
        lines.append("".join("| ... " if i == -1 else f"| {i:3} " for i in row_cells) + "|")
        shown += 1
    lines.append(border(len(cells(0))))
    if shown < rows:
        lines.append("   .  " * len(cells(0)))
        lines.append("   .  " * len(cells(0)))
    return lines


def describe_conversion(source: SourceImage, options: ConvertOptions, palette: Palette, color_mode: ColorMode | None) -> List[str]:
    lines = ["Conversion:", RULE]
    mode = options.mode
    if mode is not None and mode.is_tiled and color_mode is not None:
        word = "tile" if mode is ConversionMode.TILES else "sprite"
        count = (source.height // options.height) * (source.width // options.width)
        lines += [
            f"{word.capitalize()} width       : {options.width}",
            f"{word.capitalize()} height      : {options.height}",
            f"Number of {mode.value}  : {count}",
            f"Size of each {word}: {options.width * options.height // color_mode.pixels_per_byte} bytes",
            "",
        ]
    lines += describe_color_mode(palette, color_mode)
    lines += describe_palette(palette)
    if mode is not None and mode.is_tiled:
        lines += ["", f"The {mode.value} were read from the original image in the following order:", ""]
        lines += describe_tile_order(source.width // options.width, source.height // options.height)
    return lines


def format_analysis(analysis: Analysis) -> str:
    lines = [""]
    lines += describe_source(analysis.source, analysis.palette)
    lines += describe_valid_options(analysis)
    lines.append("")
    lines += describe_conversion(analysis.source, analysis.options, analysis.palette, analysis.color_mode)
    return "\n".join(lines)


def format_conversion(result: ConversionResult, written: Dict[Path, int], filename: str) -> str:
    """Summarize a conversion once its files are on disk."""

    sizes = {path.name: count for path, count in written.items()}
    lines = ["", f"The file {filename} was successfully converted.", ""]
    lines += describe_source(result.source, result.palette)
    lines += describe_conversion(result.source, result.options, result.palette, result.color_mode)
    lines += ["", "File information:"]

    image_written = sizes.get(result.image_file, 0)
    if result.options.mode is ConversionMode.BMX:
        lines += [
            f"{image_written} bytes were written to {result.image_file}.",
            "The file format is BMX version 1.0 and the file contains:",
            "1. A header of 32 bytes.",
            f"2. A palette of {len(result.palette)} colors (2 bytes each).",
            f"3. {result.image_size} bytes of image data.",
        ]
    else:
        palette_format = result.options.palette_format or PaletteFormat.BINARY
        palette_files = [result.names.palette_file(palette_format)]
        if result.names.binary_palette not in palette_files and result.names.binary_palette in sizes:
            palette_files.append(result.names.binary_palette)
        lines += [
            f"Size of image : {result.image_size} bytes (height * width / pixels per byte).",
            f"Data written  : {image_written} bytes were written to {result.image_file} including a header of 2 bytes.",
            f"Colors written: {len(result.palette)} colors were written to {' and '.join(palette_files)}.",
        ]

    if result.names.demo_program in sizes:
        lines += [
            "",
            "Demo:",
            f"The program {result.names.demo_program} is a simple BASIC program to display the {result.options.mode.value}.",
            f'Start the emulator with "x16emu -bas {result.names.demo_program} -run" to load and run it.',
        ]
    return "\n".join(lines)
