import warnings

import pytest

from vera_png_converter.color_mode import ConversionMode
from vera_png_converter.converter import (
    ConvertOptions,
    OutputNames,
    PaletteFormat,
    analyze,
    convert,
    possible_sizes,
    write_outputs,
)
from vera_png_converter.errors import (
    ConversionError,
    DimensionMismatchError,
    InvalidOptionError,
    TransparentColorNotFoundError,
)
from vera_png_converter.image_source import SourceImage


def _palette(count):
    return [((i % 16) * 16, ((i // 16) % 16) * 16, (i // 256) * 16, 255) for i in range(count)]


def make_source(width, height, color_count):
    colors = _palette(color_count)
    pixels = [colors[(x + y * width) % color_count] for y in range(height) for x in range(width)]
    return SourceImage(width=width, height=height, pixels=pixels)


def test_image_mode_outputs_raw_image_and_binary_palette():
    result = convert(make_source(320, 8, 4), ConvertOptions(mode=ConversionMode.IMAGE), name="pic")

    assert list(result.files) == ["PIC.BIN", "PIC-PALETTE.BIN"]
    assert result.color_mode.bits_per_pixel == 2
    assert result.image_size == 320 * 8 // 4
    assert len(result.files["PIC.BIN"]) == 2 + 320 * 8 // 4
    assert result.files["PIC.BIN"][:2] == b"\x00\x00"
    assert len(result.files["PIC-PALETTE.BIN"]) == 2 + 4 * 2


def test_bmx_mode_embeds_header_and_palette():
    result = convert(make_source(320, 200, 16), ConvertOptions(mode="bmx"), name="pic")

    assert list(result.files) == ["PIC.BMX"]
    data = result.files["PIC.BMX"]
    assert data[4] == 4
    assert data[5] == 2
    assert data[6:8] == (320).to_bytes(2, "little")
    assert data[8:10] == (200).to_bytes(2, "little")
    assert data[10] == 16
    assert data[12:14] == (64).to_bytes(2, "little")
    assert len(data) == 32 + 16 * 2 + 320 * 200 // 2


def test_bitmap_width_must_be_320_or_640():
    with pytest.raises(DimensionMismatchError):
        convert(make_source(100, 8, 2), ConvertOptions(mode=ConversionMode.IMAGE))


def test_tile_size_must_divide_image():
    options = ConvertOptions(mode=ConversionMode.TILES, width=16, height=16)
    with pytest.raises(DimensionMismatchError):
        convert(make_source(24, 16, 2), options)


def test_sprites_use_at_least_16_colors():
    options = ConvertOptions(mode=ConversionMode.SPRITES, width=8, height=16)
    result = convert(make_source(16, 32, 3), options, name="ship")

    assert result.color_mode.color_count == 16
    assert result.tile_count == 4
    assert len(result.packed) == 16 * 32 // 2
    assert list(result.files) == ["SHIP.BIN", "SHIP-PALETTE.BIN"]


@pytest.mark.parametrize(
    "options",
    [
        ConvertOptions(mode=ConversionMode.TILES, width=32, height=8),
        ConvertOptions(mode=ConversionMode.SPRITES, width=16),
        ConvertOptions(mode=ConversionMode.IMAGE, width=8),
        ConvertOptions(mode=ConversionMode.IMAGE, palette_format="png"),
        ConvertOptions(mode="video"),
        ConvertOptions(mode=ConversionMode.IMAGE, transparent_color="red"),
    ],
)
def test_invalid_options(options):
    with pytest.raises(InvalidOptionError):
        options.validate()


def test_convert_requires_mode():
    with pytest.raises(InvalidOptionError):
        convert(make_source(320, 8, 2), ConvertOptions())


def test_missing_transparent_color_writes_nothing(tmp_path):
    options = ConvertOptions(mode=ConversionMode.IMAGE, transparent_color="$FF102030")
    with pytest.raises(TransparentColorNotFoundError):
        result = convert(make_source(320, 8, 4), options)
        write_outputs(result, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_text_palette_with_demo_also_writes_binary_palette():
    options = ConvertOptions(mode=ConversionMode.IMAGE, palette_format=PaletteFormat.ASSEMBLER, demo=True)
    result = convert(make_source(320, 8, 4), options, name="pic")

    assert list(result.files) == ["PIC.BIN", "pic_palette.asm", "PIC-PALETTE.BIN", "pic_demo.txt"]
    assert result.files["pic_palette.asm"].startswith(b".word $0000, $0100")


def test_basic_palette_file_name():
    options = ConvertOptions(mode=ConversionMode.IMAGE, palette_format="bas")
    result = convert(make_source(320, 8, 4), options, name="pic")

    assert list(result.files) == ["PIC.BIN", "pic_BASIC_palette.txt"]
    assert result.files["pic_BASIC_palette.txt"].startswith(b"1000 DATA ")


def test_wide_bmx_demo_is_skipped_with_warning():
    options = ConvertOptions(mode=ConversionMode.BMX, demo=True)
    with pytest.warns(RuntimeWarning, match="320 pixels"):
        result = convert(make_source(640, 8, 2), options, name="pic")

    assert list(result.files) == ["PIC.BMX"]
    assert result.warnings


def test_write_outputs_refuses_to_overwrite(tmp_path):
    result = convert(make_source(320, 8, 2), ConvertOptions(mode=ConversionMode.IMAGE), name="pic")

    written = write_outputs(result, tmp_path / "out")
    assert written == {
        tmp_path / "out" / "PIC.BIN": 2 + 320 * 8 // 8,
        tmp_path / "out" / "PIC-PALETTE.BIN": 2 + 2 * 2,
    }
    assert (tmp_path / "out" / "PIC.BIN").read_bytes() == result.files["PIC.BIN"]

    with pytest.raises(ConversionError):
        write_outputs(result, tmp_path / "out")
    assert write_outputs(result, tmp_path / "out", force=True) == written


def test_analyze_reports_too_many_colors_without_failing():
    analysis = analyze(make_source(20, 15, 300))

    assert not analysis.fits_palette
    assert analysis.color_mode is None
    assert len(analysis.palette) == 300


def test_analyze_lists_possible_sizes():
    analysis = analyze(make_source(320, 200, 4))

    assert analysis.bitmap_width_ok
    assert analysis.possible_widths == [8, 16, 32, 64]
    assert analysis.possible_heights == [8]
    assert analysis.color_mode.color_count == 4


def test_possible_sizes():
    assert possible_sizes(64) == [8, 16, 32, 64]
    assert possible_sizes(48) == [8, 16]
    assert possible_sizes(12) == []


def test_output_names():
    names = OutputNames("Hero")
    assert names.raw_image == "HERO.BIN"
    assert names.bmx_image == "HERO.BMX"
    assert names.binary_palette == "HERO-PALETTE.BIN"
    assert names.asm_palette == "Hero_palette.asm"
    assert names.basic_palette == "Hero_BASIC_palette.txt"
    assert names.demo_program == "Hero_demo.txt"


def test_image_larger_than_free_vram_warns():
    options = ConvertOptions(mode=ConversionMode.IMAGE)
    with pytest.warns(RuntimeWarning, match="126 KB"):
        result = convert(make_source(640, 400, 17), options, name="big")

    assert result.color_mode.bits_per_pixel == 8
    assert result.image_size == 640 * 400
    assert any("126 KB" in message for message in result.warnings)


def test_image_of_exactly_free_vram_does_not_warn():
    options = ConvertOptions(mode=ConversionMode.TILES, width=8, height=8)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = convert(make_source(512, 504, 16), options, name="full")

    assert result.image_size == 126 * 1024
    assert result.warnings == []
