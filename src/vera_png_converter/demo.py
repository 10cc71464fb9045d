"""Generate Commander X16 BASIC programs that display converted data.

The programs are meant to be passed to the emulator, e.g.
``x16emu -bas image_demo.txt -run``.
"""

from __future__ import annotations

import math
from typing import List

import jinja2

from .color_mode import ColorMode, ConversionMode

DEMO_MAX_IMAGE_BYTES = 110 * 1024

# First 16 entries of the default VERA palette, restored when a demo exits.
_DEFAULT_PALETTE_DATA = """\
{{ restore_line }} DATA $00,$00,$FF,$0F,$00,$08,$FE,$0A,$4C,$0C,$C5,$00,$0A,$00,$E7,$0E
{{ restore_line + 10 }} DATA $85,$0D,$40,$06,$77,$0F,$33,$03,$77,$07,$F6,$0A,$8F,$00,$BB,$0B"""

bmx_template = """100 REM *** LOAD IMAGE TO BANKED RAM ***
110 BLOAD "{{ name }}.BMX",8,1,$A000
# header fields: color depth at 5, palette size at 10, data offset at 12
120 CD=PEEK($A005):CL=PEEK($A00A)
130 OF=PEEK($A00D)*256+PEEK($A00C)
140 REM *** SET PALETTE ***
150 IF CL=0 THEN CL=256
160 FOR I=0 TO CL*2-1
170 VPOKE 1,$FA00+I,PEEK($A020+I)
180 NEXT
190 REM *** LOAD IMAGE DATA TO VRAM ***
200 BVLOAD "{{ name }}.BMX",8,0,$800-OF
210 SCREEN 3:REM 320X240
220 POKE $9F29,16+1:REM LAYER 0, VGA OUTPUT
230 POKE $9F2D,4+CD:REM BITMAP MODE, BPP={{ mode.bits_per_pixel }}
240 POKE $9F2F,4:REM BITMAP BASE=$800, WIDTH=320
250 GET A$:IF A$="" THEN 250
260 REM *** RESTORE SCREEN ***
270 COLOR 1,6
280 POKE $9F29,32+1:REM LAYER 1, VGA OUTPUT
290 FOR I=0 TO 31
300 READ C
310 VPOKE 1,$FA00+I,C
320 NEXT
330 SCREEN 0:CLS
""" + _DEFAULT_PALETTE_DATA

image_template = """100 REM *** LOAD BINARY FILES ***
110 VLOAD "{{ name }}.BIN",8,0,$4000
120 VLOAD "{{ name }}-PALETTE.BIN",8,1,$FA00
130 REM *** SETUP SCREEN ***
{% if width == 320 %}
140 SCREEN 3:REM 320X240
{% else %}
140 REM KEEP 640X480
{% endif %}
150 POKE $9F29,16+1:REM LAYER 0, VGA OUTPUT
160 POKE $9F2D,4+{{ mode.color_depth }}:REM BITMAP MODE, BPP={{ mode.bits_per_pixel }}
170 POKE $9F2F,32+{{ 0 if width == 320 else 1 }}:REM BITMAP BASE=$4000, WIDTH={{ width }}
180 GET A$:IF A$="" THEN 180
190 REM *** RESTORE SCREEN ***
200 COLOR 1,6
210 POKE $9F29,32+1:REM LAYER 1, VGA OUTPUT
220 PRINT CHR$($8E):REM RELOAD CHARACTER SET
230 FOR I=0 TO 31
240 READ C
250 VPOKE 1,$FA00+I,C
260 NEXT
270 SCREEN 0:CLS
""" + _DEFAULT_PALETTE_DATA

tiles_template = """100 REM *** LOAD BINARY FILES ***
110 VLOAD "{{ name }}.BIN",8,0,$4000
120 VLOAD "{{ name }}-PALETTE.BIN",8,1,$FA00
130 REM *** SETUP SCREEN ***
140 SCREEN 3:REM 320X240
150 POKE $9F29,16+1:REM LAYER 0, VGA OUTPUT
160 POKE $9F2D,{{ mode.color_depth }}:REM MAP 32X32, BPP={{ mode.bits_per_pixel }}
170 POKE $9F2E,16+8:REM MAP BASE=$3000
180 POKE $9F2F,32+{{ tile_size_bits }}:REM TILE BASE=$4000, TILE {{ tile_width }}X{{ tile_height }}
190 REM *** FILL MAP WITH ALL TILES ***
200 I=0
210 FOR ROW=0 TO 31
220 FOR COL=0 TO 31
230 ADDR=$3000+ROW*64+COL*2
240 VPOKE 0,ADDR,I
250 VPOKE 0,ADDR+1,0
260 I=I+1:IF I>{{ last_index }} THEN I=0
270 NEXT COL
280 NEXT ROW
290 GET A$:IF A$="" THEN 290
300 REM *** RESTORE SCREEN ***
310 SCREEN 0
320 COLOR 1,6
330 POKE $9F29,32+1:REM LAYER 1, VGA OUTPUT
340 PRINT CHR$($8E):REM RELOAD CHARACTER SET
350 FOR I=0 TO 31
360 READ C
370 VPOKE 1,$FA00+I,C
380 NEXT
390 CLS
""" + _DEFAULT_PALETTE_DATA

sprites_template = """100 REM *** LOAD BINARY FILES ***
110 ADDR=$4000
120 VLOAD "{{ name }}.BIN",8,0,ADDR
130 VLOAD "{{ name }}-PALETTE.BIN",8,1,$FA{{ palette_offset_hex }}:REM PALETTE OFFSET {{ palette_offset }}
140 REM *** SETUP SCREEN ***
150 SCREEN 3:REM 320X240
160 POKE $9F29,PEEK($9F29) OR %01000000:REM ENABLE SPRITES
170 REM *** SET UP SPRITE ATTRIBUTES ***
180 REG=$FC00
190 X=0:Y=0
200 FOR I=0 TO {{ last_index }}
210 VPOKE 1,REG,ADDR/32 AND 255
220 VPOKE 1,REG+1,{{ 128 if mode.color_depth else 0 }}+ADDR/8192
230 VPOKE 1,REG+2,X AND 255
240 VPOKE 1,REG+3,X/256
250 VPOKE 1,REG+4,Y AND 255
260 VPOKE 1,REG+5,Y/256
270 VPOKE 1,REG+6,%00001100:REM Z-DEPTH
280 VPOKE 1,REG+7,%{{ height_bits }}{{ width_bits }}{{ palette_offset_bits }}:REM {{ tile_width }}X{{ tile_height }}
290 REG=REG+8
300 ADDR=ADDR+{{ sprite_bytes }}
310 X=X+{{ tile_width }}
320 IF X>=320 THEN X=0:Y=Y+{{ tile_height }}
330 IF Y>240-{{ tile_height }} THEN 350
340 NEXT
350 GET A$:IF A$="" THEN 350
360 REM *** RESTORE SCREEN ***
370 POKE $9F29,PEEK($9F29) AND %10111111:REM DISABLE SPRITES
380 SCREEN 0
390 PRINT CHR$($8E):REM RELOAD CHARACTER SET"""

TEMPLATES = {
    ConversionMode.BMX: bmx_template,
    ConversionMode.IMAGE: image_template,
    ConversionMode.TILES: tiles_template,
    ConversionMode.SPRITES: sprites_template,
}


def demo_unavailable_reason(mode: ConversionMode, width: int, image_bytes: int) -> str | None:
    """Return why no demo can be generated, or None when one can."""

    if image_bytes > DEMO_MAX_IMAGE_BYTES:
        return "No demo program in BASIC has been created, a size of 110 KB is maximum for this."
    if mode is ConversionMode.BMX and width != 320:
        return "No demo program in BASIC has been created, only BMX images with a width of 320 pixels are supported."
    return None


def _size_bits(size: int) -> str:
    return format(int(math.log2(size // 8)), "02b")


def render_demo(
    name: str,
    mode: ConversionMode,
    color_mode: ColorMode,
    width: int,
    height: int,
    tile_width: int = 0,
    tile_height: int = 0,
) -> str:
    """Render the BASIC demo program for ``mode``.

    ``name`` is the upper-case base name of the generated data files.
    """

    mode = ConversionMode(mode)
    context = {
        "name": name,
        "mode": color_mode,
        "width": width,
        "height": height,
        "tile_width": tile_width,
        "tile_height": tile_height,
        "restore_line": 900,
    }
    if mode.is_tiled:
        context["last_index"] = (height // tile_height) * (width // tile_width) - 1
    if mode is ConversionMode.TILES:
        context["tile_size_bits"] = (2 if tile_height == 16 else 0) + (1 if tile_width == 16 else 0)
    if mode is ConversionMode.SPRITES:
        full_palette = color_mode.color_count == 256
        context.update(
            palette_offset=0 if full_palette else 1,
            palette_offset_hex="00" if full_palette else "20",
            palette_offset_bits="0000" if full_palette else "0001",
            height_bits=_size_bits(tile_height),
            width_bits=_size_bits(tile_width),
            sprite_bytes=tile_width * tile_height // color_mode.pixels_per_byte,
        )

    template = jinja2.Template(TEMPLATES[mode], trim_blocks=True, lstrip_blocks=True)
    lines: List[str] = template.render(**context).splitlines()
    lines = [line for line in lines if line.strip() and not line.strip().startswith("#")]
    return "\n".join(lines) + "\n"
