from vera_png_converter.color_mode import ConversionMode, resolve_color_mode
from vera_png_converter.demo import DEMO_MAX_IMAGE_BYTES, demo_unavailable_reason, render_demo


def _numbered(program):
    lines = program.splitlines()
    assert lines
    for line in lines:
        assert line.split(" ", 1)[0].isdigit(), line
    return lines


def test_image_demo_320():
    program = render_demo("PIC", ConversionMode.IMAGE, resolve_color_mode(16), 320, 200)
    lines = _numbered(program)

    assert 'VLOAD "PIC.BIN",8,0,$4000' in program
    assert 'VLOAD "PIC-PALETTE.BIN",8,1,$FA00' in program
    assert "140 SCREEN 3:REM 320X240" in lines
    assert "POKE $9F2D,4+2:REM BITMAP MODE, BPP=4" in program
    assert "POKE $9F2F,32+0" in program


def test_image_demo_640():
    program = render_demo("PIC", ConversionMode.IMAGE, resolve_color_mode(2), 640, 480)
    _numbered(program)

    assert "SCREEN 3" not in program.split("150 ")[0]
    assert "POKE $9F2F,32+1" in program
    assert "BPP=1" in program


def test_bmx_demo_strips_template_comments():
    program = render_demo("PIC", ConversionMode.BMX, resolve_color_mode(256), 320, 240)
    _numbered(program)

    assert 'BLOAD "PIC.BMX",8,1,$A000' in program
    assert 'BVLOAD "PIC.BMX",8,0,$800-OF' in program
    assert "#" not in program


def test_tiles_demo():
    program = render_demo("MAP", ConversionMode.TILES, resolve_color_mode(4), 32, 16, 16, 8)
    _numbered(program)

    assert "POKE $9F2F,32+1" in program
    assert "IF I>3 THEN I=0" in program
    assert "BPP=2" in program


def test_sprites_demo():
    program = render_demo("SHIP", ConversionMode.SPRITES, resolve_color_mode(3, "sprites"), 64, 16, 16, 16)
    _numbered(program)

    assert "$FA20:REM PALETTE OFFSET 1" in program
    assert "VPOKE 1,REG+7,%01010001" in program
    assert "ADDR=ADDR+128" in program
    assert "FOR I=0 TO 3" in program


def test_full_palette_sprites_use_offset_zero():
    program = render_demo("SHIP", ConversionMode.SPRITES, resolve_color_mode(200, "sprites"), 64, 64, 64, 64)

    assert "$FA00:REM PALETTE OFFSET 0" in program
    assert "VPOKE 1,REG+1,128+ADDR/8192" in program
    assert "VPOKE 1,REG+7,%11110000" in program


def test_demo_unavailable_reason():
    assert demo_unavailable_reason(ConversionMode.IMAGE, 320, DEMO_MAX_IMAGE_BYTES) is None
    assert demo_unavailable_reason(ConversionMode.IMAGE, 320, DEMO_MAX_IMAGE_BYTES + 1)
    assert demo_unavailable_reason(ConversionMode.BMX, 640, 100)
    assert demo_unavailable_reason(ConversionMode.SPRITES, 64, 100) is None
