"""
NGP 2BPP Tile Codec - Errors

Exception types raised by the codec. Invalid input is reported as a
ValueError subclass so callers that already guard with ``except ValueError``
keep working.
"""


class CodecError(Exception):
    """Base class for all codec failures."""

    pass


class InvalidInput(CodecError, ValueError):
    """Raised when a buffer is missing or malformed, or a dimension is zero."""

    pass


class InvalidDimensions(InvalidInput):
    """Raised when image dimensions don't fit the tile grid."""

    pass


class AllocationFailure(CodecError, MemoryError):
    """Raised when an output buffer can't be allocated."""

    pass


def allocate(size: int) -> bytearray:
    """
    Allocate a zero-filled output buffer.

    Args:
        size: Buffer size in bytes

    Returns:
        New bytearray of the requested size

    Raises:
        AllocationFailure: If the buffer can't be allocated
    """
    try:
        return bytearray(size)
    except MemoryError as e:
        raise AllocationFailure(f"Unable to allocate {size} bytes") from e
