"""
NGP 2BPP Tile Codec - Instrumented Codec

Instrumented versions of TileDecoder and TileEncoder that log every row
read from or written to packed data, allowing generation of "tile maps"
showing which bytes belong to which tile row.
"""

import json

from .decoder import DecodeState, TileDecoder
from .encoder import TileEncoder
from .geometry import NGP_2BPP, TileGeometry
from ..formats.hex_utils import format_hex_bytes
from ..formats.pixel_buffer import PixelBuffer


class _TraceMixin:
    """Annotation and trace bookkeeping shared by the decoder and encoder."""

    def _init_trace(self, require_annotations: bool):
        self._annotation: str | None = None
        self._require_annotations = require_annotations
        self._trace: list[dict] = []

    def annotate(self, description: str):
        """
        Annotate the next decode/encode call.

        Args:
            description: Human-readable description of the operation

        Returns:
            self (for method chaining)
        """
        self._annotation = description
        return self

    def _check_annotation(self, op_type: str):
        if self._annotation is None and self._require_annotations:
            raise RuntimeError(f"{op_type.capitalize()} without annotation")

    def _log(self, op_type: str, offset: int, data: bytes, tile_x: int, tile_y: int, row: int):
        """Log a row operation to the trace."""
        self._trace.append({
            "type": op_type,
            "annotation": self._annotation or "[no annotation]",
            "tile": [tile_x, tile_y],
            "row": row,
            "offset": offset,
            "value_hex": format_hex_bytes(data),
        })

    def get_trace(self) -> list[dict]:
        """Get the list of logged operations."""
        return self._trace

    def write_trace(self, path: str):
        """
        Write trace to JSON file.

        Args:
            path: Output file path
        """
        with open(path, "w") as f:
            json.dump({"entries": self._trace}, f, indent=2)
        print(f"Wrote codec trace ({len(self._trace)} entries) to: {path}")


class InstrumentedTileDecoder(_TraceMixin, TileDecoder):
    """
    TileDecoder subclass that logs each row read and the point of truncation.

    Usage:
        decoder = InstrumentedTileDecoder(packed)
        pixels, surplus = decoder.annotate("title font").decode(128, 64)
        decoder.write_trace("decode_trace.json")
    """

    def __init__(
        self,
        packed: bytes,
        geometry: TileGeometry = NGP_2BPP,
        require_annotations: bool = False,
    ):
        super().__init__(packed, geometry)
        self._init_trace(require_annotations)
        self._position: tuple[int, int, int] = (0, 0, 0)

    def next_state(self, state: DecodeState, offset: int, body: bytes) -> DecodeState:
        new_state = super().next_state(state, offset, body)
        if new_state is not state:
            tile_x, tile_y, row = self._position
            self._trace.append({
                "type": "truncated",
                "annotation": self._annotation or "[no annotation]",
                "tile": [tile_x, tile_y],
                "row": row,
                "offset": offset,
                "remaining": len(body) - offset,
            })
        return new_state

    def read_row(self, body: bytes, offset: int, tile_x: int, tile_y: int, row: int) -> int:
        """Read the row word with logging."""
        word = super().read_row(body, offset, tile_x, tile_y, row)
        self._log("read", offset, body[offset : offset + self.geometry.row_bytes], tile_x, tile_y, row)
        self._position = self._advance(tile_x, tile_y, row)
        return word

    def _advance(self, tile_x: int, tile_y: int, row: int) -> tuple[int, int, int]:
        """Position of the row after (tile_x, tile_y, row) in decode order."""
        if row + 1 < self.geometry.tile_height:
            return (tile_x, tile_y, row + 1)
        tiles_x = self.geometry.tiles_x(self._width)
        if tile_x + 1 < tiles_x:
            return (tile_x + 1, tile_y, 0)
        return (0, tile_y + 1, 0)

    def decode(
        self, width: int, height: int, bytes_per_pixel: int = 2
    ) -> tuple[PixelBuffer, bytes]:
        self._check_annotation("decode")
        self._width = width
        self._position = (0, 0, 0)
        try:
            return super().decode(width, height, bytes_per_pixel)
        finally:
            self._annotation = None


class InstrumentedTileEncoder(_TraceMixin, TileEncoder):
    """
    TileEncoder subclass that logs each row written and each elided tile.

    Usage:
        encoder = InstrumentedTileEncoder(pixels)
        packed, empty = encoder.annotate("title font").encode()
        encoder.write_trace("encode_trace.json")
    """

    def __init__(
        self,
        pixels: PixelBuffer,
        geometry: TileGeometry = NGP_2BPP,
        elide_empty_tiles: bool = True,
        require_annotations: bool = False,
    ):
        super().__init__(pixels, geometry, elide_empty_tiles)
        self._init_trace(require_annotations)

    def write_row(
        self, output: bytearray, offset: int, word: int, tile_x: int, tile_y: int, row: int
    ):
        """Store the row word with logging."""
        super().write_row(output, offset, word, tile_x, tile_y, row)
        self._log("write", offset, bytes(output[offset : offset + self.geometry.row_bytes]), tile_x, tile_y, row)

    def encode(self) -> tuple[bytes, int]:
        self._check_annotation("encode")
        try:
            packed, empty_tiles = super().encode()
        finally:
            self._annotation = None
        self._mark_elided()
        return packed, empty_tiles

    def _mark_elided(self):
        """Flag trace entries of tiles that were entirely transparent."""
        geometry = self.geometry
        empty: dict[tuple[int, int], bool] = {}
        for entry in self._trace:
            if entry["type"] != "write" or "elided" in entry:
                continue
            tile_x, tile_y = entry["tile"]
            if (tile_x, tile_y) not in empty:
                empty[(tile_x, tile_y)] = all(
                    all(self.pixels.row_cursor(tile_x, tile_y, row, geometry).transparent())
                    for row in range(geometry.tile_height)
                )
            entry["elided"] = self.elide_empty_tiles and empty[(tile_x, tile_y)]
