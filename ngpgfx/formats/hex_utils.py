"""
NGP 2BPP Tile Codec - Hex String Utilities

Utilities for parsing and formatting hex byte strings used in codec traces,
test fixtures and image metadata.
"""

from typing import List


def parse_hex_bytes(hex_str: str) -> bytes:
    """
    Parse space-separated hex string to bytes.

    Args:
        hex_str: Space-separated hex string (e.g., "00 FC 3F")

    Returns:
        Parsed bytes

    Example:
        >>> parse_hex_bytes("00 FC 3F")
        b'\\x00\\xfc?'
    """
    return bytes(int(x, 16) for x in hex_str.split())


def format_hex_bytes(data: bytes, limit: int = 0) -> str:
    """
    Format bytes as space-separated uppercase hex string.

    Args:
        data: Bytes to format
        limit: If non-zero, show at most this many bytes followed by a count

    Example:
        >>> format_hex_bytes(b"\\x00\\xfc")
        '00 FC'
    """
    if limit and len(data) > limit:
        shown = " ".join(f"{b:02X}" for b in data[:limit])
        return f"{shown}... ({len(data)} bytes)"
    return " ".join(f"{b:02X}" for b in data)


def format_pixel_rows(rows: List[List[int]]) -> List[str]:
    """
    Format palette index rows as compact digit strings.

    Example:
        >>> format_pixel_rows([[3, 3, 3, 0, 0, 0, 0, 0]])
        ['33300000']
    """
    return ["".join(str(p) for p in row) for row in rows]


def parse_pixel_rows(rows: List[str]) -> List[List[int]]:
    """
    Parse compact digit strings back into palette index rows.

    Example:
        >>> parse_pixel_rows(["0123"])
        [[0, 1, 2, 3]]
    """
    return [[int(ch) for ch in row] for row in rows]
