#!/usr/bin/env python3
"""
gfxfontconv — convert fonts to Adafruit GFX font headers.

Creates a GFXfont header file (<Name>.h) for Arduino/ESP32 display sketches,
either by rendering an outline font (installed family or TTF/OTF file) with
FreeType, or by extracting the bitmaps of a Windows bitmap font (FON).

Usage:
  gfxfontconv --path out --ttf DejaVuSans.ttf --size 9
  gfxfontconv --path out --family "DejaVu Sans" --size 12 --style Bold+Italic --range 7
  gfxfontconv --path out --fon VGAOEM.FON [--preserve-cell-box]
  gfxfontconv --path previews --ttf DejaVuSans.ttf --size 9 --test
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import (
    DEFAULT_POINT_SIZE,
    DPI,
    FIRST_CHAR,
    LINE_ADVANCE_FACTOR,
    TEST_CHARACTERS,
    ConvertOptions,
    last_char_for_range,
    parse_style,
)
from .emit import write_font
from .errors import FontConvertError, ResourceError
from .fon import read_fon
from .font import FontModel, build_legacy_font, build_outline_font


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gfxfontconv",
        description="Convert an installed font, a TTF/OTF file or a FON bitmap font to a GFXfont header.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-p", "--path", required=True, type=Path,
                        help="Folder where the resulting code file (*.h) will be stored.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-f", "--family", help="Name of the installed font family to convert.")
    source.add_argument("-n", "--ttf", type=Path, help="Path of the TTF/OTF font file to convert.")
    source.add_argument("-b", "--fon", type=Path, help="Path of the FON bitmap font file to convert.")
    parser.add_argument("-s", "--size", type=float, default=DEFAULT_POINT_SIZE,
                        help=f"Size in pt, may be fractional (default: {DEFAULT_POINT_SIZE}). Ignored for FON.")
    parser.add_argument("-a", "--style", type=parse_style, default=frozenset(),
                        help="Style: Regular, Bold, Italic, Underline, Strikeout. Combine with '+' (Bold+Italic).")
    parser.add_argument("-r", "--range", dest="bits", type=int, choices=(7, 8), default=8,
                        help="ASCII (7 bits, 0x20-0x7f) or ANSI (8 bits, 0x20-0xff) range (default: 8).")
    parser.add_argument("--dpi", type=int, default=DPI, help=f"Rendering resolution (default: {DPI}).")
    parser.add_argument("--preserve-cell-box", action="store_true",
                        help="FON only: keep full character cells instead of cropping blank edges.")
    parser.add_argument("--resource", type=int, default=-1,
                        help="FON only: index of the font resource to convert (default: last).")
    parser.add_argument("-t", "--test", action="store_true",
                        help="Outline fonts only: write PNG previews of a few characters instead of the header.")
    return parser


def check_source_options(parser: argparse.ArgumentParser, args) -> None:
    """Reject or point out options that do not apply to the chosen font source."""
    if args.fon:
        if args.test:
            parser.error("--test renders outline fonts only; it cannot be used with --fon")
        ignored = [name for name, used in (
            ("--size", args.size != DEFAULT_POINT_SIZE),
            ("--style", bool(args.style)),
            ("--dpi", args.dpi != DPI),
        ) if used]
    else:
        ignored = [name for name, used in (
            ("--preserve-cell-box", args.preserve_cell_box),
            ("--resource", args.resource != -1),
        ) if used]
    if ignored:
        source = "FON" if args.fon else "outline"
        print(f"Note: {', '.join(ignored)} ignored for {source} fonts.", file=sys.stderr)


def convert_fon(path: Path, options: ConvertOptions, resource_index: int = -1) -> FontModel:
    fonts = read_fon(path)
    try:
        resource = fonts[resource_index]
    except IndexError:
        raise ResourceError(f"{path} has {len(fonts)} font resource(s), no index {resource_index}.") from None
    print(f"Read '{resource.face_name}' {resource.max_width}x{resource.cell_height} "
          f"(0x{resource.first_char:02x}-0x{resource.last_char:02x}) from {path}")
    return build_legacy_font(resource, options.first, options.last, options.preserve_cell_box)


def open_rasterizer(args, options: ConvertOptions):
    # Imported here so FON conversion works without FreeType installed.
    try:
        from .rasterizer import FreeTypeRasterizer, find_installed_font
    except ImportError as err:
        raise ResourceError(
            f"{err.name or 'freetype'} is not installed. Run: pip install freetype-py Pillow"
        ) from err

    font_path = args.ttf if args.ttf else find_installed_font(args.family, options.style)
    return FreeTypeRasterizer(font_path, options.point_size, options.style, options.dpi)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    check_source_options(parser, args)

    try:
        options = ConvertOptions(
            first=FIRST_CHAR,
            last=last_char_for_range(args.bits),
            point_size=args.size,
            style=args.style,
            dpi=args.dpi,
            line_advance_factor=LINE_ADVANCE_FACTOR,
            preserve_cell_box=args.preserve_cell_box,
        )

        if args.fon:
            model = convert_fon(args.fon, options, args.resource)
        else:
            rasterizer = open_rasterizer(args, options)
            if args.test:
                from .preview import write_previews

                written = write_previews(rasterizer, TEST_CHARACTERS, args.path)
                print(f"Written {len(written)} previews to {args.path}")
                return 0
            model = build_outline_font(rasterizer, options.first, options.last,
                                       line_advance_factor=options.line_advance_factor)

        try:
            header = write_font(model, args.path)
        except OSError as err:
            raise ResourceError(f"Cannot write header to {args.path}: {err}") from err
    except FontConvertError as err:
        parser.print_usage(sys.stderr)
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print("Font file successfully created:")
    print(header)
    return 0


if __name__ == "__main__":
    sys.exit(main())
