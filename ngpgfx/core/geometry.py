"""
NGP 2BPP Tile Codec - Tile Geometry

Format constants and address math for the Neo Geo Pocket 2BPP tile format.

Reference: https://mrclick.zophar.net/TilEd/download/consolegfx.txt

    9. 2BPP Neo Geo Pocket Color
      Colors Per Tile - 0-3
      Space Used - 2 bits per pixel.  16 bytes per 8x8 tile.

      [p4-7 r0: bp*], [p0-3 r0: bp*], [p15-12 r1: bp*], [p11-8 r1: bp*]

Each tile row is a 16-bit little-endian word. The leftmost pixel sits in the
top two bits of the word, so pixels 0-3 of a row are stored in the row's
second byte and pixels 4-7 in the first.
"""

from dataclasses import dataclass

from .errors import InvalidDimensions


@dataclass(frozen=True)
class TileGeometry:
    """
    Immutable description of a tiled, packed raster format.

    Build one instance per format and pass it to the codec explicitly.
    """

    tile_width: int = 8
    tile_height: int = 8
    bits_per_pixel: int = 2
    num_colors: int = 4  # Colors in palette
    bytes_per_color: int = 3  # R, G, B
    image_width_default: int = 128  # Decoded images default to 16 tiles wide

    @property
    def pixels_per_byte(self) -> int:
        return 8 // self.bits_per_pixel

    @property
    def row_bytes(self) -> int:
        """Packed bytes per tile row (2 for 2BPP)."""
        return self.tile_width // self.pixels_per_byte

    @property
    def tile_bytes(self) -> int:
        """Packed bytes per tile (16 for 2BPP)."""
        return (self.tile_width * self.tile_height) // self.pixels_per_byte

    @property
    def palette_bytes(self) -> int:
        return self.num_colors * self.bytes_per_color

    @property
    def pixel_mask(self) -> int:
        return (1 << self.bits_per_pixel) - 1

    def tiles_x(self, width: int) -> int:
        """
        Number of tiles across an image.

        Args:
            width: Image width in pixels

        Returns:
            Tile count

        Raises:
            InvalidDimensions: If width is not a positive multiple of the tile width
        """
        if width is None or width <= 0:
            raise InvalidDimensions(f"Image width must be positive, got {width}")
        if width % self.tile_width:
            raise InvalidDimensions(
                f"Image width {width} is not a multiple of {self.tile_width}"
            )
        return width // self.tile_width

    def tiles_y(self, height: int) -> int:
        """
        Number of tiles down an image.

        Raises:
            InvalidDimensions: If height is not a positive multiple of the tile height
        """
        if height is None or height <= 0:
            raise InvalidDimensions(f"Image height must be positive, got {height}")
        if height % self.tile_height:
            raise InvalidDimensions(
                f"Image height {height} is not a multiple of {self.tile_height}"
            )
        return height // self.tile_height

    def tile_count(self, width: int, height: int) -> int:
        return self.tiles_x(width) * self.tiles_y(height)

    def packed_size(self, width: int, height: int) -> int:
        """
        Size of a whole image in packed bytes.

        Args:
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            tiles_x * tiles_y * tile_bytes
        """
        return self.tile_count(width, height) * self.tile_bytes

    def tile_index(self, tile_x: int, tile_y: int, width: int) -> int:
        """Row-major index of a tile within the image."""
        return tile_y * self.tiles_x(width) + tile_x

    def pixel_offset(
        self, x: int, y: int, width: int, bytes_per_pixel: int = 1
    ) -> int:
        """
        Offset of pixel (x, y) within an unpacked pixel buffer.

        Args:
            x: Pixel column
            y: Pixel row
            width: Image width in pixels
            bytes_per_pixel: Stride between adjacent pixels

        Returns:
            Byte offset of the pixel's first channel
        """
        return (y * width + x) * bytes_per_pixel

    def row_offset(
        self, tile_x: int, tile_y: int, row: int, width: int, bytes_per_pixel: int = 1
    ) -> int:
        """Offset of the first pixel of a tile row within an unpacked pixel buffer."""
        return self.pixel_offset(
            tile_x * self.tile_width,
            tile_y * self.tile_height + row,
            width,
            bytes_per_pixel,
        )

    def packed_offset(self, x: int, y: int, width: int) -> int:
        """
        Offset of the packed byte that holds pixel (x, y).

        Args:
            x: Pixel column
            y: Pixel row
            width: Image width in pixels

        Returns:
            Byte offset into the packed buffer
        """
        tile_x, col = divmod(x, self.tile_width)
        tile_y, row = divmod(y, self.tile_height)
        tile_start = self.tile_index(tile_x, tile_y, width) * self.tile_bytes

        # Row words are little-endian, leftmost pixels in the last byte
        byte_in_row = self.row_bytes - 1 - col // self.pixels_per_byte
        return tile_start + row * self.row_bytes + byte_in_row

    def surplus_size(self, packed_size: int) -> int:
        """Number of trailing bytes that don't form a complete tile."""
        return packed_size % self.tile_bytes

    def resolve_dimensions(self, packed_size: int) -> tuple[int, int]:
        """
        Pick decoded image dimensions for a packed buffer.

        The image is image_width_default pixels wide and tall enough to hold
        every complete tile. Trailing tiles in the last tile row that have
        no data decode as transparent.

        Args:
            packed_size: Packed buffer length in bytes

        Returns:
            Tuple of (width, height) in pixels

        Raises:
            InvalidDimensions: If the buffer doesn't hold a single complete tile
        """
        whole_tiles = packed_size // self.tile_bytes
        if whole_tiles == 0:
            raise InvalidDimensions(
                f"Packed data of {packed_size} bytes is smaller than one "
                f"{self.tile_bytes}-byte tile"
            )

        tiles_across = self.tiles_x(self.image_width_default)
        tile_rows = (whole_tiles + tiles_across - 1) // tiles_across
        return (self.image_width_default, tile_rows * self.tile_height)


# Neo Geo Pocket (Color) 2BPP
NGP_2BPP = TileGeometry()
