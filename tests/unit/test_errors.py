"""Unit tests for the codec error taxonomy."""

import pytest

from ngpgfx.core import errors
from ngpgfx.core.encoder import encode
from ngpgfx.core.errors import (
    AllocationFailure,
    CodecError,
    InvalidDimensions,
    InvalidInput,
    allocate,
)
from ngpgfx.formats.pixel_buffer import PixelBuffer


def _out_of_memory(size):
    raise MemoryError()


class TestTaxonomy:
    """Test exception class relationships."""

    def test_invalid_input_is_value_error(self):
        assert issubclass(InvalidInput, ValueError)
        assert issubclass(InvalidInput, CodecError)

    def test_invalid_dimensions_is_invalid_input(self):
        assert issubclass(InvalidDimensions, InvalidInput)

    def test_allocation_failure_is_memory_error(self):
        assert issubclass(AllocationFailure, MemoryError)
        assert issubclass(AllocationFailure, CodecError)


class TestAllocate:
    """Tests for allocate()."""

    def test_zero_filled(self):
        assert allocate(4) == bytearray(4)

    def test_memory_error_raises_allocation_failure(self, monkeypatch):
        monkeypatch.setattr(errors, "bytearray", _out_of_memory, raising=False)
        with pytest.raises(AllocationFailure, match="Unable to allocate 16 bytes"):
            allocate(16)

    def test_encode_reports_allocation_failure(self, monkeypatch):
        pixels = PixelBuffer(8, 8)
        monkeypatch.setattr(errors, "bytearray", _out_of_memory, raising=False)
        with pytest.raises(AllocationFailure):
            encode(pixels)
