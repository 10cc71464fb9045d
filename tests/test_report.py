from pathlib import Path

from vera_png_converter.color_mode import ConversionMode
from vera_png_converter.converter import ConvertOptions, analyze, convert
from vera_png_converter.image_source import SourceImage
from vera_png_converter.report import describe_tile_order, format_analysis, format_conversion


def make_source(width, height, colors):
    pixels = [colors[(x + y) % len(colors)] for y in range(height) for x in range(width)]
    return SourceImage(width=width, height=height, pixels=pixels)


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
DARK_RED = (250, 2, 3, 255)


def test_analysis_lists_valid_sizes():
    text = format_analysis(analyze(make_source(48, 16, [RED, BLUE])))

    assert "Image width     : 48" in text
    assert "Full-color" in text
    assert "not possible because the width is not 320 or 640" in text
    assert "Width : 8, 16" in text
    assert "Height: 8, 16" in text


def test_analysis_reports_unconvertible_sizes():
    text = format_analysis(analyze(make_source(12, 12, [RED])))

    assert "cannot be converted to tiles or sprites" in text


def test_analysis_flags_too_many_colors():
    colors = [((i % 16) * 16, ((i // 16) % 16) * 16, (i // 256) * 16, 255) for i in range(300)]
    text = format_analysis(analyze(make_source(320, 1, colors)))

    assert "FATAL PROBLEM" in text
    assert "300 colors" in text


def test_palette_lists_merged_originals():
    text = format_analysis(analyze(make_source(320, 2, [RED, DARK_RED, BLUE])))

    assert "$0F00" in text
    assert "$FFFF0000, $FFFA0203" in text


def test_tile_order_table():
    lines = describe_tile_order(3, 2)

    assert lines[1] == "|   0 |   1 |   2 |"
    assert lines[3] == "|   3 |   4 |   5 |"
    assert lines[-1] == "|-----|-----|-----|"


def test_wide_tile_order_table_is_elided():
    lines = describe_tile_order(40, 1)

    assert "| ... |  39 |" in lines[1]


def test_conversion_summary_mentions_files():
    result = convert(make_source(320, 8, [RED, BLUE]), ConvertOptions(mode=ConversionMode.IMAGE), name="pic")
    written = {Path("out") / name: len(data) for name, data in result.files.items()}

    text = format_conversion(result, written, "pic.png")

    assert "The file pic.png was successfully converted." in text
    assert f"{2 + 320 * 8 // 8} bytes were written to PIC.BIN" in text
    assert "2 colors were written to PIC-PALETTE.BIN" in text


def test_bmx_summary():
    result = convert(make_source(320, 8, [RED, BLUE]), ConvertOptions(mode=ConversionMode.BMX), name="pic")
    written = {Path(name): len(data) for name, data in result.files.items()}

    text = format_conversion(result, written, "pic.png")

    assert "The file format is BMX version 1.0" in text
    assert "A palette of 2 colors" in text
