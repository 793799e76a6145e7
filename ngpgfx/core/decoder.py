"""
NGP 2BPP Tile Codec - Decoder

Unpacks 2BPP tile data into an indexed pixel buffer.

Tiles are decoded top-to-bottom, left-to-right. If the packed data runs out
before the image is full, every remaining pixel is written transparent so
those tiles are recognized as empty (and dropped again) on encode. Bytes
past the last complete tile are handed back as surplus for re-appending.
"""

from enum import Enum

from .errors import InvalidInput
from .geometry import NGP_2BPP, TileGeometry
from .tile_codec import read_word, unpack_row
from ..formats.pixel_buffer import PixelBuffer


class DecodeState(Enum):
    """Decoder data state. TRUNCATED is terminal for the rest of a decode."""

    ACTIVE = "active"
    TRUNCATED = "truncated"


class TileDecoder:
    """
    Decodes packed tile data into a PixelBuffer.

    Usage:
        decoder = TileDecoder(packed)
        pixels, surplus = decoder.decode(128, 64)
    """

    def __init__(self, packed: bytes, geometry: TileGeometry = NGP_2BPP):
        """
        Args:
            packed: Packed tile data (may be truncated)
            geometry: Tile geometry

        Raises:
            InvalidInput: If packed is None
        """
        if packed is None:
            raise InvalidInput("Packed data buffer is missing")

        self.packed = bytes(packed)
        self.geometry = geometry
        self.truncated_rows = 0

    def split_surplus(self, tile_count: int) -> tuple[bytes, bytes]:
        """
        Split packed data into decodable tiles and surplus tail.

        Args:
            tile_count: Number of tiles in the target image

        Returns:
            Tuple of (body, surplus)
        """
        whole_tiles = min(len(self.packed) // self.geometry.tile_bytes, tile_count)
        body_size = whole_tiles * self.geometry.tile_bytes
        return self.packed[:body_size], self.packed[body_size:]

    def next_state(self, state: DecodeState, offset: int, body: bytes) -> DecodeState:
        """State for the next row, given the read offset into body."""
        if state is DecodeState.TRUNCATED:
            return state
        if offset + self.geometry.row_bytes > len(body):
            return DecodeState.TRUNCATED
        return DecodeState.ACTIVE

    def read_row(self, body: bytes, offset: int, tile_x: int, tile_y: int, row: int) -> int:
        """Read the row word at offset. Overridden by the instrumented decoder."""
        return read_word(body, offset)

    def decode(
        self, width: int, height: int, bytes_per_pixel: int = 2
    ) -> tuple[PixelBuffer, bytes]:
        """
        Decode into a new width x height pixel buffer.

        Args:
            width: Target image width in pixels (multiple of tile width)
            height: Target image height in pixels (multiple of tile height)
            bytes_per_pixel: 1 for index only, 2 for index + alpha

        Returns:
            Tuple of (pixels, surplus) where surplus holds the bytes that
            weren't decoded into any complete tile

        Raises:
            InvalidDimensions: If width or height doesn't fit the tile grid
            AllocationFailure: If the pixel buffer can't be allocated
        """
        geometry = self.geometry
        tiles_x = geometry.tiles_x(width)
        tiles_y = geometry.tiles_y(height)
        body, surplus = self.split_surplus(tiles_x * tiles_y)

        pixels = PixelBuffer(width, height, bytes_per_pixel)
        blank_row = [0] * geometry.tile_width

        state = DecodeState.ACTIVE
        offset = 0
        self.truncated_rows = 0

        for tile_y in range(tiles_y):
            for tile_x in range(tiles_x):
                for row in range(geometry.tile_height):
                    cursor = pixels.row_cursor(tile_x, tile_y, row, geometry)

                    state = self.next_state(state, offset, body)
                    if state is DecodeState.TRUNCATED:
                        cursor.write(blank_row, transparent=True)
                        self.truncated_rows += 1
                        continue

                    word = self.read_row(body, offset, tile_x, tile_y, row)
                    offset += geometry.row_bytes
                    cursor.write(unpack_row(word, geometry))

        return pixels, surplus

    @property
    def truncated_tiles(self) -> int:
        return self.truncated_rows // self.geometry.tile_height


def decode(
    packed: bytes,
    width: int,
    height: int,
    geometry: TileGeometry = NGP_2BPP,
    bytes_per_pixel: int = 2,
) -> tuple[PixelBuffer, bytes]:
    """
    Decode packed 2BPP tiles into a pixel buffer.

    Args:
        packed: Packed tile data (may be truncated or carry surplus bytes)
        width: Target image width in pixels
        height: Target image height in pixels
        geometry: Tile geometry (default: NGP_2BPP)
        bytes_per_pixel: 1 for index only, 2 for index + alpha

    Returns:
        Tuple of (pixels, surplus)

    Raises:
        InvalidInput: If packed is None or a dimension is invalid
    """
    return TileDecoder(packed, geometry).decode(width, height, bytes_per_pixel)
