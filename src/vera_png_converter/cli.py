"""Command line interface for the VERA PNG converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path

from .color_mode import ConversionMode
from .converter import ConvertOptions, PaletteFormat, analyze, convert, write_outputs
from .errors import ConversionError
from .image_source import load_png
from .report import format_analysis, format_conversion


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Convert PNG images to data the VERA video controller of the Commander X16 can load.\n"
            "Both indexed and full-color images are supported. Colors are reduced to 12 bits,\n"
            "semi-transparent colors are treated as solid.\n"
            "Palette index 0 (transparent for sprites and upper layers) is given to:\n"
            "  1. the color passed with --transparent,\n"
            "  2. otherwise index 0 of the original palette for indexed images,\n"
            "  3. otherwise the first fully transparent pixel,\n"
            "  4. otherwise the top-left pixel.\n"
            "Without --mode the image is only analyzed."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("input", help="PNG file to convert")
    parser.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in ConversionMode],
        help=(
            "Conversion mode. image/bmx need a width of 320 or 640 pixels;\n"
            "bmx writes a single file in the X16 graphics format."
        ),
    )
    parser.add_argument(
        "-W",
        "--width",
        type=int,
        default=0,
        help="Tile or sprite width (tiles: 8, 16; sprites: 8, 16, 32, 64)",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=int,
        default=0,
        help="Tile or sprite height (same values as width)",
    )
    parser.add_argument(
        "-t",
        "--transparent",
        metavar="$AARRGGBB",
        help="Color that receives palette index 0",
    )
    parser.add_argument(
        "-p",
        "--palette",
        choices=[fmt.value for fmt in PaletteFormat],
        help="Palette file format: bin (default), asm (assembly source) or bas (BASIC DATA lines)",
    )
    parser.add_argument(
        "-d",
        "--demo",
        action="store_true",
        help="Also generate a BASIC demo program (run with: x16emu -bas NAME_demo.txt -run)",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        help="Destination directory (defaults to the directory of the input file)",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> ConvertOptions:
    options = ConvertOptions(
        mode=ConversionMode(args.mode) if args.mode else None,
        width=args.width,
        height=args.height,
        transparent_color=args.transparent,
        palette_format=PaletteFormat(args.palette) if args.palette else None,
        demo=args.demo,
    )
    options.validate()
    return options


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = options_from_args(args)
        input_path = Path(args.input)
        source = load_png(input_path)

        if options.mode is None:
            print(format_analysis(analyze(source, options)))
            return 0

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = convert(source, options, name=input_path.stem)
        output_dir = Path(args.output_dir) if args.output_dir else input_path.parent
        written = write_outputs(result, output_dir, force=args.force)
        for target in written:
            print(f"wrote {target}")
        print(format_conversion(result, written, input_path.name))
        for warning in caught:
            print(f"Warning: {warning.message}")
        return 0
    except ConversionError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
