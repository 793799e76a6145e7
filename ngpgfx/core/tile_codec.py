"""
NGP 2BPP Tile Codec - Row and Tile Packing

Shared 2BPP row transcoding used by the decoder, the encoder and the tools.

A tile row is a 16-bit little-endian word. Pixels are read most-significant
two bits first, so the word 0xC000 (bytes 00 C0) is a row whose leftmost
pixel is 3 and whose other pixels are 0.
"""

from typing import List, Sequence

from .geometry import NGP_2BPP, TileGeometry

WORD_MASK = 0xFFFF


def read_word(data: bytes, offset: int) -> int:
    """
    Read 16-bit little-endian word.

    Args:
        data: Packed bytes
        offset: Offset of the low byte

    Returns:
        16-bit value
    """
    return data[offset] | (data[offset + 1] << 8)


def unpack_row(word: int, geometry: TileGeometry = NGP_2BPP) -> List[int]:
    """
    Unpack one tile row word into palette indices, left to right.

    Args:
        word: 16-bit row word
        geometry: Tile geometry

    Returns:
        List of tile_width palette indices
    """
    shift = 16 - geometry.bits_per_pixel
    pixels = []
    for _ in range(geometry.tile_width):
        pixels.append((word >> shift) & geometry.pixel_mask)
        # Upshift source bits to prepare for next pixel bits
        word = (word << geometry.bits_per_pixel) & WORD_MASK
    return pixels


def pack_row(indices: Sequence[int], geometry: TileGeometry = NGP_2BPP) -> int:
    """
    Pack one tile row of palette indices into a row word.

    Index bits above the pixel depth are ignored.

    Args:
        indices: tile_width palette indices, left to right

    Returns:
        16-bit row word
    """
    output = 0
    for index in indices:
        output = ((output << geometry.bits_per_pixel) | (index & geometry.pixel_mask)) & WORD_MASK
    return output


def word_to_bytes(word: int) -> bytes:
    """Split a row word into its two stored bytes, low byte first."""
    return bytes((word & 0xFF, (word >> 8) & 0xFF))


def decode_tile(
    tile_data: bytes, tile_idx: int = 0, geometry: TileGeometry = NGP_2BPP
) -> List[List[int]]:
    """
    Decode a single 8x8 tile into 2-bit pixel values.

    Args:
        tile_data: Either a packed tile blob or a single 16-byte tile
        tile_idx: Tile index if tile_data holds more than one tile (default: 0)
        geometry: Tile geometry

    Returns:
        8x8 array of pixel values (0-3), where each value is a palette index

    Raises:
        IndexError: If the tile lies past the end of tile_data
    """
    offset = tile_idx * geometry.tile_bytes
    if offset < 0 or offset + geometry.tile_bytes > len(tile_data):
        raise IndexError(f"Tile {tile_idx} is out of range for {len(tile_data)} bytes")

    pixels = []
    for row in range(geometry.tile_height):
        word = read_word(tile_data, offset + row * geometry.row_bytes)
        pixels.append(unpack_row(word, geometry))
    return pixels


def encode_tile(
    pixels: Sequence[Sequence[int]], geometry: TileGeometry = NGP_2BPP
) -> bytes:
    """
    Encode an 8x8 array of palette indices into one packed tile.

    Args:
        pixels: tile_height rows of tile_width palette indices

    Returns:
        16 bytes of packed tile data

    Raises:
        ValueError: If pixels isn't tile_width x tile_height
    """
    if len(pixels) != geometry.tile_height:
        raise ValueError(f"Expected {geometry.tile_height} rows, got {len(pixels)}")

    output = bytearray()
    for row_idx, row in enumerate(pixels):
        if len(row) != geometry.tile_width:
            raise ValueError(
                f"Row {row_idx} has {len(row)} pixels, expected {geometry.tile_width}"
            )
        output += word_to_bytes(pack_row(row, geometry))
    return bytes(output)


class PackedTileset:
    """
    Random access to the tiles of a packed 2BPP blob.

    Trailing bytes that don't form a complete tile are kept in ``surplus``.
    """

    def __init__(self, data: bytes, geometry: TileGeometry = NGP_2BPP):
        self.data = bytes(data)
        self.geometry = geometry
        self.num_tiles = len(self.data) // geometry.tile_bytes
        self.surplus = self.data[self.num_tiles * geometry.tile_bytes :]

    @classmethod
    def from_file(cls, path: str, geometry: TileGeometry = NGP_2BPP) -> "PackedTileset":
        with open(path, "rb") as f:
            return cls(f.read(), geometry)

    def decode_tile(self, tile_idx: int) -> List[List[int]]:
        """
        Decode a single tile from the loaded data.

        Args:
            tile_idx: Index of tile to decode (0-based)

        Returns:
            8x8 array of pixel values (0-3)
        """
        return decode_tile(self.data, tile_idx, self.geometry)

    def get_tile_data(self, tile_idx: int) -> bytes:
        """
        Get raw 16-byte tile data.

        Raises:
            IndexError: If tile_idx is out of range
        """
        if not 0 <= tile_idx < self.num_tiles:
            raise IndexError(f"Tile {tile_idx} is out of range ({self.num_tiles} tiles)")

        offset = tile_idx * self.geometry.tile_bytes
        return self.data[offset : offset + self.geometry.tile_bytes]
