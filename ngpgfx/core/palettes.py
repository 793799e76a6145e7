"""
NGP 2BPP Tile Codec - Color Palettes

The decoded image carries a fixed-size color map: 4 entries of 3 bytes
(R, G, B). Loading colors from disk is left to the caller; these are the
built-in defaults.
"""

from typing import Callable, Iterable, List, Tuple

from .errors import InvalidInput
from .geometry import NGP_2BPP, TileGeometry

# Type alias for RGB color
RGBColor = Tuple[int, int, int]

# Default 4-shade ramp, lightest first (NGP tiles conventionally use 0 as background)
GRAYSCALE_PALETTE: List[RGBColor] = [
    (0xFF, 0xFF, 0xFF),
    (0xAA, 0xAA, 0xAA),
    (0x55, 0x55, 0x55),
    (0x00, 0x00, 0x00),
]

# Monochrome NGP LCD tint
NGP_MONO_PALETTE: List[RGBColor] = [
    (0xE0, 0xE8, 0xD0),
    (0xA0, 0xA8, 0x90),
    (0x60, 0x68, 0x50),
    (0x20, 0x28, 0x18),
]

PALETTES = {
    "grayscale": GRAYSCALE_PALETTE,
    "ngp-mono": NGP_MONO_PALETTE,
}


class Palette:
    """Fixed-size indexed RGB color map."""

    def __init__(self, colors: Iterable[RGBColor], geometry: TileGeometry = NGP_2BPP):
        """
        Args:
            colors: Exactly num_colors RGB tuples

        Raises:
            InvalidInput: If the color count or a component is out of range
        """
        colors = [tuple(c) for c in colors]
        if len(colors) != geometry.num_colors:
            raise InvalidInput(
                f"Palette has {len(colors)} colors, expected {geometry.num_colors}"
            )
        for idx, color in enumerate(colors):
            if len(color) != geometry.bytes_per_color or not all(
                0 <= c <= 0xFF for c in color
            ):
                raise InvalidInput(f"Invalid color {color} at palette index {idx}")

        self.colors: List[RGBColor] = colors
        self.geometry = geometry

    @classmethod
    def from_bytes(cls, data: bytes, geometry: TileGeometry = NGP_2BPP) -> "Palette":
        """
        Build a palette from a packed RGB buffer.

        Args:
            data: num_colors * bytes_per_color bytes

        Raises:
            InvalidInput: If data is missing or the wrong size
        """
        if data is None or len(data) != geometry.palette_bytes:
            size = None if data is None else len(data)
            raise InvalidInput(
                f"Palette buffer is {size} bytes, expected {geometry.palette_bytes}"
            )
        step = geometry.bytes_per_color
        return cls(
            [tuple(data[i : i + step]) for i in range(0, len(data), step)], geometry
        )

    @classmethod
    def named(cls, name: str) -> "Palette":
        try:
            return cls(PALETTES[name])
        except KeyError:
            raise InvalidInput(
                f"Unknown palette '{name}' (choose from {', '.join(PALETTES)})"
            ) from None

    def to_bytes(self) -> bytes:
        return bytes(c for color in self.colors for c in color)

    def to_pil_palette(self) -> List[int]:
        """Flat 768-entry palette list for PIL.Image.putpalette()."""
        flat = list(self.to_bytes())
        return flat + [0] * (768 - len(flat))

    def nearest_index(self, color: RGBColor) -> int:
        """Index of the palette entry closest to an RGB color."""
        r, g, b = color[:3]
        return min(
            range(len(self.colors)),
            key=lambda i: (self.colors[i][0] - r) ** 2
            + (self.colors[i][1] - g) ** 2
            + (self.colors[i][2] - b) ** 2,
        )

    def __eq__(self, other):
        return isinstance(other, Palette) and self.colors == other.colors

    def __repr__(self):
        return f"Palette({self.colors!r})"


# Called by the import pipeline to fill the color map
ColorLoader = Callable[[TileGeometry], Palette]


def load_default_colors(geometry: TileGeometry = NGP_2BPP) -> Palette:
    """Default color loader: the grayscale ramp."""
    return Palette(GRAYSCALE_PALETTE, geometry)
