"""Shared pytest fixtures for codec tests."""

import json
import random
from pathlib import Path

import pytest

from ngpgfx.core.geometry import NGP_2BPP
from ngpgfx.formats.hex_utils import parse_hex_bytes, parse_pixel_rows
from ngpgfx.formats.pixel_buffer import PixelBuffer


@pytest.fixture
def geometry():
    """The NGP 2BPP tile geometry."""
    return NGP_2BPP


@pytest.fixture
def sample_tiles():
    """Load hand-crafted tiles with their expected pixel rows, keyed by name."""
    path = Path(__file__).parent / "fixtures" / "sample_tiles.json"
    with open(path) as f:
        data = json.load(f)
    return {
        tile["name"]: {
            "packed": parse_hex_bytes(tile["packed"]),
            "rows": parse_pixel_rows(tile["rows"]),
        }
        for tile in data["tiles"]
    }


@pytest.fixture
def make_pixels():
    """Factory for index + alpha buffers filled with one index, optionally transparent."""

    def _make(width, height, index=0, transparent=False):
        rows = [[index] * width for _ in range(height)]
        mask = [[transparent] * width for _ in range(height)]
        return PixelBuffer.from_rows(rows, mask)

    return _make


@pytest.fixture
def random_pixels():
    """Factory for opaque buffers of seeded random indices."""

    def _make(width, height, seed=0):
        rng = random.Random(seed)
        rows = [[rng.randrange(4) for _ in range(width)] for _ in range(height)]
        return PixelBuffer.from_rows(rows)

    return _make
