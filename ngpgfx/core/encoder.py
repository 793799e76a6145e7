"""
NGP 2BPP Tile Codec - Encoder

Packs an indexed pixel buffer into 2BPP tile data.

Tiles whose 64 pixels are all transparent are counted as empty and, by
default, left out of the output entirely. Later tiles move up to fill the
gap, so the returned data is exactly the non-empty tiles in tile order.
"""

from .errors import InvalidInput, allocate
from .geometry import NGP_2BPP, TileGeometry
from .tile_codec import pack_row, word_to_bytes
from ..formats.pixel_buffer import PixelBuffer


class TileEncoder:
    """
    Encodes a PixelBuffer into packed tile data.

    Usage:
        encoder = TileEncoder(pixels)
        packed, empty_tiles = encoder.encode()
    """

    def __init__(
        self,
        pixels: PixelBuffer,
        geometry: TileGeometry = NGP_2BPP,
        elide_empty_tiles: bool = True,
    ):
        """
        Args:
            pixels: Source pixel buffer
            geometry: Tile geometry
            elide_empty_tiles: Drop fully transparent tiles from the output

        Raises:
            InvalidInput: If pixels is None or empty
        """
        if pixels is None:
            raise InvalidInput("Pixel buffer is missing")
        if not pixels.data or pixels.width <= 0 or pixels.height <= 0:
            raise InvalidInput(
                f"Pixel buffer is empty ({pixels.width}x{pixels.height})"
            )

        self.pixels = pixels
        self.geometry = geometry
        self.elide_empty_tiles = elide_empty_tiles

    def write_row(
        self, output: bytearray, offset: int, word: int, tile_x: int, tile_y: int, row: int
    ):
        """Store a row word at offset. Overridden by the instrumented encoder."""
        output[offset : offset + self.geometry.row_bytes] = word_to_bytes(word)

    def encode(self) -> tuple[bytes, int]:
        """
        Encode the whole image.

        Returns:
            Tuple of (packed, empty_tile_count)

        Raises:
            InvalidDimensions: If the image doesn't fit the tile grid
            AllocationFailure: If the output buffer can't be allocated
        """
        geometry = self.geometry
        tiles_x = geometry.tiles_x(self.pixels.width)
        tiles_y = geometry.tiles_y(self.pixels.height)
        full_size = geometry.packed_size(self.pixels.width, self.pixels.height)

        output = allocate(full_size)
        offset = 0
        empty_tile_count = 0

        for tile_y in range(tiles_y):
            for tile_x in range(tiles_x):
                tile_start = offset
                all_transparent = True

                for row in range(geometry.tile_height):
                    cursor = self.pixels.row_cursor(tile_x, tile_y, row, geometry)
                    word = pack_row(cursor.indices(), geometry)
                    all_transparent = all_transparent and all(cursor.transparent())

                    self.write_row(output, offset, word, tile_x, tile_y, row)
                    offset += geometry.row_bytes

                if all_transparent:
                    empty_tile_count += 1
                    if self.elide_empty_tiles:
                        # Rewind so the next tile overwrites this one
                        offset = tile_start

        return bytes(output[:offset]), empty_tile_count


def encode(
    pixels: PixelBuffer,
    geometry: TileGeometry = NGP_2BPP,
    elide_empty_tiles: bool = True,
) -> tuple[bytes, int]:
    """
    Encode a pixel buffer into packed 2BPP tiles.

    Args:
        pixels: Source pixel buffer (index + optional alpha)
        geometry: Tile geometry (default: NGP_2BPP)
        elide_empty_tiles: Drop fully transparent tiles (default: True)

    Returns:
        Tuple of (packed, empty_tile_count). With elision, len(packed) is
        packed_size - empty_tile_count * tile_bytes.

    Raises:
        InvalidInput: If pixels is None or a dimension is invalid
    """
    return TileEncoder(pixels, geometry, elide_empty_tiles).encode()
