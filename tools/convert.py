#!/usr/bin/env python3
"""
NGP 2BPP Tile Codec - Converter

Converts Neo Geo Pocket 2BPP tile data to editable PNG images and back.
Surplus bytes at the end of the tile data are kept in the PNG and written
back on export, so an unedited image converts back byte-for-byte.
"""

import argparse
import sys
from pathlib import Path

from PIL import Image

from ngpgfx.core.converter import export_packed, import_packed
from ngpgfx.core.errors import CodecError
from ngpgfx.core.geometry import NGP_2BPP
from ngpgfx.core.palettes import PALETTES, Palette
from ngpgfx.rendering.pil_image import (
    from_image,
    palette_from_image,
    save_png,
    surplus_from_image,
    to_indexed_image,
    to_rgba_image,
)


def import_tiles(
    input_path: Path,
    output_path: Path,
    palette_name: str,
    width: int,
    scale: int = 1,
    trace_path: str | None = None,
):
    """Convert a packed tile binary to PNG."""
    with open(input_path, "rb") as f:
        packed = f.read()

    palette = Palette.named(palette_name)
    imported = import_packed(
        packed,
        load_colors=lambda geometry: palette,
        width=width,
        trace_path=trace_path,
    )

    if scale == 1:
        img = to_indexed_image(imported.pixels, imported.palette, imported.surplus)
    else:
        # Scaled previews are for viewing only and can't be exported back
        img = to_rgba_image(imported.pixels, imported.palette, scale)

    save_png(img, str(output_path))
    print(f"Saved: {output_path} ({img.width}x{img.height})")


def export_tiles(
    input_path: Path,
    output_path: Path,
    palette_name: str,
    keep_empty_tiles: bool = False,
    trace_path: str | None = None,
):
    """Convert an edited PNG back to a packed tile binary."""
    img = Image.open(input_path)
    img.load()

    palette = palette_from_image(img) or Palette.named(palette_name)
    pixels = from_image(img, palette)
    surplus = surplus_from_image(img)

    packed = export_packed(
        pixels,
        surplus,
        elide_empty_tiles=not keep_empty_tiles,
        trace_path=trace_path,
    )

    with open(output_path, "wb") as f:
        f.write(packed)
    print(f"Saved: {output_path} ({len(packed)} bytes)")


def main():
    parser = argparse.ArgumentParser(
        description="Convert Neo Geo Pocket 2BPP tile data to and from PNG images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Import tiles for editing:
    python tools/convert.py import font.bin font.png

  Import with a wider image and the LCD-tinted palette:
    python tools/convert.py import font.bin font.png --width 256 --palette ngp-mono

  Export edited tiles (transparent tiles are dropped):
    python tools/convert.py export font.png font.bin

  Export keeping every tile, with a row-by-row trace:
    python tools/convert.py export font.png font.bin --keep-empty-tiles --trace trace.json
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Packed tiles -> PNG")
    import_parser.add_argument("input", help="Packed tile binary")
    import_parser.add_argument("output", nargs="?", help="Output PNG (default: <input>.png)")
    import_parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=NGP_2BPP.image_width_default,
        help=f"Image width in pixels (default: {NGP_2BPP.image_width_default})",
    )
    import_parser.add_argument(
        "-s",
        "--scale",
        type=int,
        default=1,
        help="Scale factor for an RGBA preview (default: 1, editable indexed PNG)",
    )

    export_parser = subparsers.add_parser("export", help="PNG -> packed tiles")
    export_parser.add_argument("input", help="Edited PNG")
    export_parser.add_argument("output", nargs="?", help="Output binary (default: <input>.bin)")
    export_parser.add_argument(
        "--keep-empty-tiles",
        action="store_true",
        help="Write fully transparent tiles instead of dropping them",
    )

    for sub in (import_parser, export_parser):
        sub.add_argument(
            "-p",
            "--palette",
            choices=sorted(PALETTES),
            default="grayscale",
            help="Palette for import, or for non-indexed PNGs on export (default: grayscale)",
        )
        sub.add_argument("--trace", metavar="PATH", help="Write a JSON codec trace to PATH")

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "import":
            output_path = Path(args.output) if args.output else input_path.with_suffix(".png")
            import_tiles(
                input_path, output_path, args.palette, args.width, args.scale, args.trace
            )
        else:
            output_path = Path(args.output) if args.output else input_path.with_suffix(".bin")
            export_tiles(
                input_path, output_path, args.palette, args.keep_empty_tiles, args.trace
            )
    except CodecError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
