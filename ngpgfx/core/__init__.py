"""
Core codec functionality.

This package contains the tile geometry model, the 2BPP decoder and encoder
(ngpgfx.core.decoder, ngpgfx.core.encoder), their instrumented variants,
palettes, and the import/export pipelines for Neo Geo Pocket tile graphics.

Only leaf modules are re-exported here; the codec modules depend on
ngpgfx.formats.pixel_buffer, which in turn imports from this package.
"""

from .errors import AllocationFailure, CodecError, InvalidDimensions, InvalidInput
from .geometry import NGP_2BPP, TileGeometry
from .palettes import Palette

__all__ = [
    "AllocationFailure",
    "CodecError",
    "InvalidDimensions",
    "InvalidInput",
    "NGP_2BPP",
    "TileGeometry",
    "Palette",
]
