"""
NGP 2BPP Tile Codec - Import/Export Pipelines

Wires the codec to its collaborators:

Import: packed size -> image dimensions -> stash surplus bytes -> decode
        -> color map
Export: encode (dropping empty tiles) -> re-append stashed surplus bytes
"""

from dataclasses import dataclass, replace

from .decoder import TileDecoder
from .encoder import TileEncoder
from .errors import InvalidInput
from .geometry import NGP_2BPP, TileGeometry
from .instrumented_codec import InstrumentedTileDecoder, InstrumentedTileEncoder
from .palettes import ColorLoader, Palette, load_default_colors
from ..formats.pixel_buffer import PixelBuffer


class SurplusStore:
    """
    Holds trailing bytes that aren't image data between import and export.

    The bytes are opaque: they are stored and written back unmodified.
    """

    def __init__(self, tail: bytes = b""):
        self.tail = bytes(tail)

    def stash(self, tail: bytes):
        """Set aside surplus bytes from an import."""
        if tail is None:
            raise InvalidInput("Surplus buffer is missing")
        self.tail = bytes(tail)

    def append(self, packed: bytes) -> bytes:
        """Return packed data with the stashed surplus bytes appended."""
        if packed is None:
            raise InvalidInput("Packed data buffer is missing")
        return bytes(packed) + self.tail

    def __len__(self):
        return len(self.tail)


@dataclass
class ImportedImage:
    """Result of importing packed tile data."""

    pixels: PixelBuffer
    palette: Palette
    surplus: SurplusStore
    truncated_tiles: int = 0


def import_packed(
    packed: bytes,
    geometry: TileGeometry = NGP_2BPP,
    load_colors: ColorLoader = load_default_colors,
    width: int | None = None,
    trace_path: str | None = None,
) -> ImportedImage:
    """
    Import packed tile data as an indexed image with transparency.

    Args:
        packed: Packed tile data
        geometry: Tile geometry (default: NGP_2BPP)
        load_colors: Collaborator that supplies the color map
        width: Image width in pixels (default: geometry.image_width_default)
        trace_path: If set, write a JSON trace of every row read here

    Returns:
        ImportedImage with pixels, palette and stashed surplus bytes

    Raises:
        InvalidInput: If packed is missing or too small for a single tile
    """
    if packed is None:
        raise InvalidInput("Packed data buffer is missing")

    if width is not None:
        geometry = replace(geometry, image_width_default=width)

    img_width, img_height = geometry.resolve_dimensions(len(packed))

    body_size = len(packed) - geometry.surplus_size(len(packed))
    surplus = SurplusStore()
    surplus.stash(packed[body_size:])

    if trace_path:
        decoder = InstrumentedTileDecoder(packed[:body_size], geometry)
        decoder.annotate(f"import {len(packed)} bytes")
    else:
        decoder = TileDecoder(packed[:body_size], geometry)
    pixels, _ = decoder.decode(img_width, img_height)

    palette = load_colors(geometry)
    if len(palette.to_bytes()) != geometry.palette_bytes:
        raise InvalidInput(
            f"Color loader returned {len(palette.to_bytes())} bytes, "
            f"expected {geometry.palette_bytes}"
        )

    if trace_path:
        decoder.write_trace(trace_path)

    print(
        f"Imported {len(packed)} bytes: {img_width}x{img_height} "
        f"({decoder.truncated_tiles} empty tiles, {len(surplus)} surplus bytes)"
    )
    return ImportedImage(pixels, palette, surplus, decoder.truncated_tiles)


def export_packed(
    pixels: PixelBuffer,
    surplus: SurplusStore | None = None,
    geometry: TileGeometry = NGP_2BPP,
    elide_empty_tiles: bool = True,
    trace_path: str | None = None,
) -> bytes:
    """
    Export an indexed image as packed tile data.

    Args:
        pixels: Source pixel buffer
        surplus: Surplus bytes stashed at import, appended after the tiles
        geometry: Tile geometry (default: NGP_2BPP)
        elide_empty_tiles: Drop fully transparent tiles (default: True)
        trace_path: If set, write a JSON trace of every row written here

    Returns:
        Packed bytes

    Raises:
        InvalidInput: If pixels is missing or its dimensions are invalid
    """
    if trace_path:
        encoder = InstrumentedTileEncoder(pixels, geometry, elide_empty_tiles)
        encoder.annotate(f"export {pixels.width}x{pixels.height}")
    else:
        encoder = TileEncoder(pixels, geometry, elide_empty_tiles)
    packed, empty_tiles = encoder.encode()

    if trace_path:
        encoder.write_trace(trace_path)

    if surplus is not None:
        packed = surplus.append(packed)

    print(
        f"Exported {pixels.width}x{pixels.height}: {len(packed)} bytes "
        f"({empty_tiles} empty tiles, {len(surplus) if surplus else 0} surplus bytes)"
    )
    return packed
