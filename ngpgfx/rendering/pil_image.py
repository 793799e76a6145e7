"""
NGP 2BPP Tile Codec - PIL Image Bridge

Converts between PixelBuffers and PIL images so tile graphics can be edited
in any image editor. Surplus bytes from the packed data ride along in the
image's metadata ("ngp_surplus", hex text) and survive a PNG save/load.
"""

from typing import Optional

try:
    from PIL import Image
    from PIL.PngImagePlugin import PngInfo
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

from ..core.converter import SurplusStore
from ..core.errors import InvalidInput
from ..core.geometry import NGP_2BPP
from ..core.palettes import Palette
from ..formats.hex_utils import format_hex_bytes, parse_hex_bytes
from ..formats.pixel_buffer import ALPHA_OPAQUE, ALPHA_TRANSPARENT, PixelBuffer

SURPLUS_KEY = "ngp_surplus"

# Palette slot used for transparent pixels in indexed images
TRANSPARENT_INDEX = 4


def to_indexed_image(
    pixels: PixelBuffer,
    palette: Palette,
    surplus: Optional[SurplusStore] = None,
) -> Image.Image:
    """
    Render a pixel buffer as a palettized PIL image.

    Transparent pixels use TRANSPARENT_INDEX, which is declared as the
    image's transparency color.

    Args:
        pixels: Source pixel buffer
        palette: 4-color palette
        surplus: Surplus bytes to carry in image metadata (optional)

    Returns:
        PIL Image in mode "P"
    """
    img = Image.new("P", (pixels.width, pixels.height))
    img.putpalette(palette.to_pil_palette())

    data = []
    for y in range(pixels.height):
        for x in range(pixels.width):
            if pixels.is_transparent(x, y):
                data.append(TRANSPARENT_INDEX)
            else:
                data.append(pixels.get_index(x, y))
    img.putdata(data)

    img.info["transparency"] = TRANSPARENT_INDEX
    if surplus is not None and len(surplus):
        img.info[SURPLUS_KEY] = format_hex_bytes(surplus.tail)
    return img


def to_rgba_image(pixels: PixelBuffer, palette: Palette, scale: int = 1) -> Image.Image:
    """
    Render a pixel buffer to a PIL RGBA image with transparency.

    Args:
        pixels: Source pixel buffer
        palette: 4-color palette
        scale: Scaling factor (default: 1)

    Returns:
        PIL Image in mode "RGBA"
    """
    img = Image.new("RGBA", (pixels.width, pixels.height), (0, 0, 0, 0))
    img_pixels = img.load()
    assert img_pixels is not None

    for y in range(pixels.height):
        for x in range(pixels.width):
            if pixels.is_transparent(x, y):
                continue
            r, g, b = palette.colors[pixels.get_index(x, y) & 0x03]
            img_pixels[x, y] = (r, g, b, 255)

    if scale != 1:
        img = img.resize((pixels.width * scale, pixels.height * scale), Image.Resampling.NEAREST)
    return img


def _transparent_indices(img: Image.Image) -> set[int]:
    """Palette indices a "P" image declares transparent."""
    transparency = img.info.get("transparency")
    if transparency is None:
        return set()
    if isinstance(transparency, int):
        return {transparency}
    # Per-index alpha table (bytes)
    return {idx for idx, alpha in enumerate(transparency) if alpha == 0}


def from_image(img: Image.Image, palette: Optional[Palette] = None) -> PixelBuffer:
    """
    Convert a PIL image into a pixel buffer with an alpha channel.

    Palettized images keep their indices. Any other mode is converted to
    RGBA and each opaque pixel is mapped to the nearest palette color.

    Args:
        img: Source image
        palette: Palette for non-indexed images

    Returns:
        PixelBuffer with bytes_per_pixel=2

    Raises:
        InvalidInput: If img is missing, or is not indexed and no palette is given
    """
    if img is None:
        raise InvalidInput("Image is missing")

    width, height = img.size
    pixels = PixelBuffer(width, height, bytes_per_pixel=2)
    data = pixels.data

    if img.mode == "P":
        hidden = _transparent_indices(img)
        for i, value in enumerate(img.getdata()):
            transparent = value in hidden
            data[i * 2] = 0 if transparent else value & 0xFF
            data[i * 2 + 1] = ALPHA_TRANSPARENT if transparent else ALPHA_OPAQUE
        return pixels

    if palette is None:
        raise InvalidInput(f"A palette is required to convert {img.mode} images")

    cache: dict[tuple[int, int, int], int] = {}
    for i, (r, g, b, a) in enumerate(img.convert("RGBA").getdata()):
        if a == 0:
            data[i * 2] = 0
            data[i * 2 + 1] = ALPHA_TRANSPARENT
            continue
        if (r, g, b) not in cache:
            cache[(r, g, b)] = palette.nearest_index((r, g, b))
        data[i * 2] = cache[(r, g, b)]
        data[i * 2 + 1] = ALPHA_OPAQUE
    return pixels


def surplus_from_image(img: Image.Image) -> SurplusStore:
    """Recover surplus bytes carried in image metadata (empty if none)."""
    hex_str = img.info.get(SURPLUS_KEY, "")
    return SurplusStore(parse_hex_bytes(hex_str))


def palette_from_image(img: Image.Image) -> Optional[Palette]:
    """First 4 colors of a palettized image, or None for other modes."""
    if img.mode != "P":
        return None
    raw = img.getpalette()
    if raw is None or len(raw) < NGP_2BPP.palette_bytes:
        return None
    return Palette.from_bytes(bytes(raw[: NGP_2BPP.palette_bytes]))


def save_png(img: Image.Image, path: str):
    """
    Save an image as PNG, writing surplus bytes to a text chunk.

    Args:
        img: Image from to_indexed_image() or to_rgba_image()
        path: Output file path
    """
    pnginfo = PngInfo()
    if SURPLUS_KEY in img.info:
        pnginfo.add_text(SURPLUS_KEY, img.info[SURPLUS_KEY])

    kwargs = {"pnginfo": pnginfo}
    if "transparency" in img.info:
        kwargs["transparency"] = img.info["transparency"]
    img.save(path, "PNG", **kwargs)
