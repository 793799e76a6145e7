"""Unit tests for the 2BPP tile decoder."""

import pytest

from ngpgfx.core.decoder import DecodeState, TileDecoder, decode
from ngpgfx.core.errors import InvalidDimensions, InvalidInput


class TestDecode:
    """Tests for decoding complete data."""

    def test_single_tile(self, sample_tiles):
        pixels, surplus = decode(sample_tiles["gradient"]["packed"], 8, 8)
        assert pixels.index_rows() == sample_tiles["gradient"]["rows"]
        assert pixels.transparent_count() == 0
        assert surplus == b""

    def test_tiles_left_to_right_then_down(self, sample_tiles):
        """Tile order is row-major across the target grid."""
        names = ["gradient", "corner", "solid", "halves"]
        packed = b"".join(sample_tiles[n]["packed"] for n in names)
        pixels, _ = decode(packed, 16, 16)
        rows = pixels.index_rows()

        top_left = [row[:8] for row in rows[:8]]
        top_right = [row[8:] for row in rows[:8]]
        bottom_left = [row[:8] for row in rows[8:]]
        bottom_right = [row[8:] for row in rows[8:]]
        assert top_left == sample_tiles["gradient"]["rows"]
        assert top_right == sample_tiles["corner"]["rows"]
        assert bottom_left == sample_tiles["solid"]["rows"]
        assert bottom_right == sample_tiles["halves"]["rows"]

    def test_bit_order_fixture(self):
        """First row bytes 00 FC decode to 3, 3, 3, 0, 0, 0, 0, 0."""
        packed = bytes([0x00, 0xFC]) + bytes(14)
        pixels, _ = decode(packed, 8, 8)
        assert pixels.index_rows()[0] == [3, 3, 3, 0, 0, 0, 0, 0]

    def test_single_channel_output(self, sample_tiles):
        pixels, _ = decode(sample_tiles["halves"]["packed"], 8, 8, bytes_per_pixel=1)
        assert pixels.bytes_per_pixel == 1
        assert pixels.index_rows() == sample_tiles["halves"]["rows"]


class TestTruncation:
    """Tests for data that runs out before the image is full."""

    def test_missing_tiles_are_transparent(self, sample_tiles):
        decoder = TileDecoder(sample_tiles["solid"]["packed"])
        pixels, _ = decoder.decode(16, 8)

        assert all(not pixels.is_transparent(x, y) for y in range(8) for x in range(8))
        assert all(pixels.is_transparent(x, y) for y in range(8) for x in range(8, 16))
        assert decoder.truncated_tiles == 1

    def test_truncated_pixels_use_index_zero(self, sample_tiles):
        pixels, _ = decode(sample_tiles["solid"]["packed"], 16, 8)
        assert all(pixels.get_index(x, 0) == 0 for x in range(8, 16))

    def test_empty_data_is_all_transparent(self):
        pixels, surplus = decode(b"", 16, 16)
        assert pixels.transparent_count() == 16 * 16
        assert surplus == b""

    def test_partial_tile_becomes_surplus(self, sample_tiles):
        """A partial trailing tile is not decoded; its bytes are surplus."""
        packed = sample_tiles["solid"]["packed"] + b"\xff\xff\xff\xff"
        pixels, surplus = decode(packed, 16, 8)
        assert surplus == b"\xff\xff\xff\xff"
        assert all(pixels.is_transparent(x, 0) for x in range(8, 16))

    def test_transparent_count_never_drops_as_data_shrinks(self, sample_tiles):
        """Shorter data never yields fewer transparent pixels."""
        packed = sample_tiles["solid"]["packed"] * 4
        previous = -1
        for length in range(len(packed), -1, -1):
            pixels, _ = decode(packed[:length], 16, 16)
            count = pixels.transparent_count()
            assert count >= previous, f"Failed at length {length}"
            previous = count
        assert previous == 16 * 16

    def test_single_channel_truncation(self):
        """Without alpha, missing pixels are written as index 0."""
        pixels, _ = decode(b"\xff\xff" * 8, 16, 8, bytes_per_pixel=1)
        assert pixels.index_rows()[0] == [3] * 8 + [0] * 8
        assert pixels.transparent_count() == 0


class TestDecodeState:
    """Tests for the ACTIVE -> TRUNCATED state transition."""

    def test_active_with_data(self):
        decoder = TileDecoder(bytes(16))
        assert decoder.next_state(DecodeState.ACTIVE, 0, bytes(16)) is DecodeState.ACTIVE

    def test_truncated_at_end(self):
        decoder = TileDecoder(bytes(16))
        assert decoder.next_state(DecodeState.ACTIVE, 16, bytes(16)) is DecodeState.TRUNCATED

    def test_one_byte_left_is_truncated(self):
        decoder = TileDecoder(bytes(3))
        assert decoder.next_state(DecodeState.ACTIVE, 2, bytes(3)) is DecodeState.TRUNCATED

    def test_truncated_is_sticky(self):
        decoder = TileDecoder(bytes(16))
        assert decoder.next_state(DecodeState.TRUNCATED, 0, bytes(16)) is DecodeState.TRUNCATED


class TestSurplus:
    """Tests for bytes beyond the last complete tile."""

    def test_three_trailing_bytes(self, sample_tiles):
        packed = sample_tiles["corner"]["packed"] + b"\x01\x02\x03"
        pixels, surplus = decode(packed, 8, 8)
        assert surplus == b"\x01\x02\x03"
        assert pixels.index_rows() == sample_tiles["corner"]["rows"]

    def test_tiles_beyond_grid_are_surplus(self, sample_tiles):
        """Whole tiles that don't fit the target grid are returned, not dropped."""
        extra = sample_tiles["solid"]["packed"] + b"\x09"
        pixels, surplus = decode(sample_tiles["gradient"]["packed"] + extra, 8, 8)
        assert surplus == extra


class TestDecodeErrors:
    """Tests for rejected input."""

    def test_missing_buffer_raises_error(self):
        with pytest.raises(InvalidInput, match="missing"):
            decode(None, 8, 8)

    def test_zero_width_raises_error(self):
        with pytest.raises(InvalidInput, match="width must be positive"):
            decode(bytes(16), 0, 8)

    def test_zero_height_raises_error(self):
        with pytest.raises(InvalidInput, match="height must be positive"):
            decode(bytes(16), 8, 0)

    def test_unaligned_height_raises_error(self):
        with pytest.raises(InvalidDimensions, match="not a multiple of 8"):
            decode(bytes(16), 8, 12)
