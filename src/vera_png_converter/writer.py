"""Serialize packed pixels and palettes into the files VERA programs load."""

# Reference: BMX header (32 bytes)
# Offset | Size | Field
# -------|------|----------------------------------------------------------
# 0      | 3    | Magic "BMX"
# 3      | 1    | Version (1)
# 4      | 1    | Bits per pixel (1, 2, 4, 8)
# 5      | 1    | VERA color depth register value (0-3)
# 6      | 2    | Width in pixels (little-endian)
# 8      | 2    | Height in pixels (little-endian)
# 10     | 1    | Palette entries used (0 means 256)
# 11     | 1    | First palette index (always 0)
# 12     | 2    | Offset of the image data (little-endian)
# 14     | 1    | Compression (0 = none)
# 15     | 1    | VERA border color
# 16     | 16   | Reserved

from __future__ import annotations

import struct
from pathlib import Path
from typing import List, Sequence

from .color import VeraColor
from .color_mode import ColorMode
from .errors import OutputWriteError

BMX_MAGIC = b"BMX"
BMX_VERSION = 1
BMX_HEADER_SIZE = 32
RAW_HEADER = bytes([0x00, 0x00])

ASM_COLORS_PER_LINE = 16
BASIC_COLORS_PER_LINE = 8
BASIC_FIRST_LINE = 1000
BASIC_LINE_STEP = 10

_BMX_HEADER = struct.Struct("<3sBBBHHBBHBB16x")


def encode_palette(colors: Sequence[VeraColor]) -> bytes:
    return b"".join(color.to_bytes() for color in colors)


def build_bmx_header(width: int, height: int, color_mode: ColorMode, palette_count: int) -> bytes:
    return _BMX_HEADER.pack(
        BMX_MAGIC,
        BMX_VERSION,
        color_mode.bits_per_pixel,
        color_mode.color_depth,
        width,
        height,
        palette_count & 0xFF,  # 256 wraps to 0
        0,
        palette_count * 2 + BMX_HEADER_SIZE,
        0,  # no compression
        0,  # border color
    )


def build_bmx_file(
    width: int,
    height: int,
    color_mode: ColorMode,
    colors: Sequence[VeraColor],
    packed: bytes,
) -> bytes:
    header = build_bmx_header(width, height, color_mode, len(colors))
    return header + encode_palette(colors) + packed


def build_raw_image(packed: bytes) -> bytes:
    return RAW_HEADER + packed


def build_binary_palette(colors: Sequence[VeraColor]) -> bytes:
    return RAW_HEADER + encode_palette(colors)


def format_palette_asm(colors: Sequence[VeraColor]) -> str:
    """Format the palette as ``.word`` directives, 16 colors per line."""

    lines: List[str] = []
    for start in range(0, len(colors), ASM_COLORS_PER_LINE):
        chunk = colors[start : start + ASM_COLORS_PER_LINE]
        lines.append(".word " + ", ".join(str(color) for color in chunk))
    return "\n".join(lines) + "\n"


def format_palette_basic(colors: Sequence[VeraColor], first_line: int = BASIC_FIRST_LINE) -> str:
    """Format the palette as numbered BASIC ``DATA`` lines, 8 colors per line."""

    lines: List[str] = []
    for row, start in enumerate(range(0, len(colors), BASIC_COLORS_PER_LINE)):
        chunk = colors[start : start + BASIC_COLORS_PER_LINE]
        number = first_line + row * BASIC_LINE_STEP
        lines.append(f"{number} DATA " + ",".join(color.to_basic_data() for color in chunk))
    return "\n".join(lines) + "\n"


def write_file(path: str | Path, data: bytes | str) -> int:
    """Write ``data`` to ``path`` and return the number of bytes written."""

    path = Path(path)
    payload = data.encode("ascii") if isinstance(data, str) else bytes(data)
    try:
        path.write_bytes(payload)
    except OSError as exc:
        raise OutputWriteError(path, exc) from exc
    return len(payload)
