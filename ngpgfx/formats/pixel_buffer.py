"""
NGP 2BPP Tile Codec - Pixel Buffer

Unpacked indexed-color image data as handed to and from an image editor.
Each pixel is bytes_per_pixel bytes: the palette index first, then an
optional alpha byte (0 = transparent, 255 = opaque).
"""

from typing import List, Optional, Sequence

from ..core.errors import InvalidInput, allocate
from ..core.geometry import NGP_2BPP, TileGeometry

INDEX_CHANNEL = 0
ALPHA_CHANNEL = 1
ALPHA_TRANSPARENT = 0
ALPHA_OPAQUE = 255


class PixelCursor:
    """
    View of consecutive pixels in one image row, stepping by a fixed stride.

    Reads and writes go through bytearray extended slices, so a cursor can
    never step outside the buffer it was created on.
    """

    def __init__(self, data: bytearray, offset: int, count: int, stride: int):
        end = offset + count * stride
        if offset < 0 or end > len(data):
            raise InvalidInput(
                f"Cursor at offset {offset} for {count} pixels overruns "
                f"{len(data)}-byte buffer"
            )
        self._data = data
        self.offset = offset
        self.count = count
        self.stride = stride

    def _channel(self, channel: int) -> slice:
        start = self.offset + channel
        return slice(start, start + self.count * self.stride, self.stride)

    def indices(self) -> bytes:
        """Palette indices of the pixels under the cursor."""
        return bytes(self._data[self._channel(INDEX_CHANNEL)])

    def transparent(self) -> List[bool]:
        """Per-pixel transparency; always opaque without an alpha channel."""
        if self.stride <= ALPHA_CHANNEL:
            return [False] * self.count
        return [a == ALPHA_TRANSPARENT for a in self._data[self._channel(ALPHA_CHANNEL)]]

    def write(self, indices: Sequence[int], transparent: bool = False):
        """
        Store palette indices under the cursor.

        Args:
            indices: One palette index per pixel
            transparent: Mark every written pixel transparent
        """
        if len(indices) != self.count:
            raise InvalidInput(f"Expected {self.count} pixels, got {len(indices)}")

        self._data[self._channel(INDEX_CHANNEL)] = bytes(indices)
        if self.stride > ALPHA_CHANNEL:
            alpha = ALPHA_TRANSPARENT if transparent else ALPHA_OPAQUE
            self._data[self._channel(ALPHA_CHANNEL)] = bytes([alpha]) * self.count


class PixelBuffer:
    """Rectangular indexed image, optionally with an alpha channel."""

    def __init__(
        self,
        width: int,
        height: int,
        bytes_per_pixel: int = 2,
        data: Optional[bytearray] = None,
    ):
        """
        Create a pixel buffer.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            bytes_per_pixel: 1 for index only, 2 for index + alpha
            data: Existing pixel data (allocated zero-filled if omitted)

        Raises:
            InvalidInput: If a dimension is zero or data has the wrong length
            AllocationFailure: If the buffer can't be allocated
        """
        if width is None or height is None or width <= 0 or height <= 0:
            raise InvalidInput(f"Image dimensions must be positive, got {width}x{height}")
        if bytes_per_pixel not in (1, 2):
            raise InvalidInput(f"bytes_per_pixel must be 1 or 2, got {bytes_per_pixel}")

        size = width * height * bytes_per_pixel
        if data is None:
            data = allocate(size)
        elif len(data) != size:
            raise InvalidInput(
                f"Pixel data is {len(data)} bytes, expected {size} for "
                f"{width}x{height}x{bytes_per_pixel}"
            )

        self.width = width
        self.height = height
        self.bytes_per_pixel = bytes_per_pixel
        self.data = data if isinstance(data, bytearray) else bytearray(data)

    @property
    def has_alpha(self) -> bool:
        return self.bytes_per_pixel > ALPHA_CHANNEL

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[int]],
        transparent: Optional[Sequence[Sequence[bool]]] = None,
    ) -> "PixelBuffer":
        """
        Build an index + alpha buffer from 2D palette indices.

        Args:
            rows: Palette index rows, all the same length
            transparent: Optional matching rows of transparency flags

        Returns:
            New PixelBuffer with bytes_per_pixel=2
        """
        if not rows or not rows[0]:
            raise InvalidInput("rows cannot be empty")

        width = len(rows[0])
        buf = cls(width, len(rows), bytes_per_pixel=2)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise InvalidInput(f"Row {y} has {len(row)} pixels, expected {width}")
            for x, value in enumerate(row):
                offset = buf.offset(x, y)
                buf.data[offset] = value
                hidden = transparent is not None and transparent[y][x]
                buf.data[offset + ALPHA_CHANNEL] = (
                    ALPHA_TRANSPARENT if hidden else ALPHA_OPAQUE
                )
        return buf

    def offset(self, x: int, y: int) -> int:
        return (y * self.width + x) * self.bytes_per_pixel

    def row_cursor(
        self, tile_x: int, tile_y: int, row: int, geometry: TileGeometry = NGP_2BPP
    ) -> PixelCursor:
        """
        Cursor over the pixels of one tile row.

        Args:
            tile_x: Tile column
            tile_y: Tile row
            row: Row within the tile (0 to tile_height - 1)
            geometry: Tile geometry

        Returns:
            PixelCursor positioned at the row's leftmost pixel
        """
        offset = geometry.row_offset(tile_x, tile_y, row, self.width, self.bytes_per_pixel)
        return PixelCursor(self.data, offset, geometry.tile_width, self.bytes_per_pixel)

    def get_index(self, x: int, y: int) -> int:
        return self.data[self.offset(x, y)]

    def is_transparent(self, x: int, y: int) -> bool:
        """Whether pixel (x, y) is marked transparent."""
        if not self.has_alpha:
            return False
        return self.data[self.offset(x, y) + ALPHA_CHANNEL] == ALPHA_TRANSPARENT

    def index_rows(self) -> List[List[int]]:
        """Palette indices as a 2D list."""
        return [
            [self.get_index(x, y) for x in range(self.width)]
            for y in range(self.height)
        ]

    def transparent_count(self) -> int:
        if not self.has_alpha:
            return 0
        alpha = self.data[ALPHA_CHANNEL :: self.bytes_per_pixel]
        return alpha.count(ALPHA_TRANSPARENT)
