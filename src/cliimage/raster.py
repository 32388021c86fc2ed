import io
import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from cliimage.colour import int_to_hex, rgba_to_int
from cliimage.engine import SUPPORTED_FORMATS, ImageInput, resized_height
from cliimage.errors import DecodeError, PixelAccessError, ResizeError

logger = logging.getLogger(__name__)

RESAMPLE = Image.BOX

# multi-picture JPEGs (camera MPF streams) are still JPEG files
FORMAT_ALIASES = {"MPO": "JPEG"}


def pixel_to_hex(pixel: Sequence[int]) -> str:
    """Hex colour of an RGBA pixel, with a transparency prefix unless it is opaque."""
    red, green, blue, alpha = (int(channel) for channel in pixel)
    return int_to_hex(rgba_to_int(red, green, blue, alpha))


def open_image(image: ImageInput) -> Image.Image:
    """Decode a path or raw bytes into an RGBA image, accepting GIF, PNG and JPEG only."""
    source = io.BytesIO(image) if isinstance(image, bytes) else Path(image)
    try:
        with Image.open(source) as decoded:
            decoded.load()
            image_format = FORMAT_ALIASES.get(decoded.format, decoded.format)
            if image_format not in SUPPORTED_FORMATS:
                raise DecodeError(f"Unsupported image type {decoded.format}")
            return decoded.convert("RGBA")
    except UnidentifiedImageError as exc:
        raise DecodeError("Unable to create image from given data") from exc
    except OSError as exc:
        if isinstance(exc, FileNotFoundError):
            raise
        raise DecodeError(f"Unable to load image: {exc}") from exc


def resize_image(image: Image.Image, width: int) -> Image.Image:
    if width < 1:
        raise ResizeError(f"Unable to resize image to width {width}")
    height = max(1, resized_height(image.width, image.height, width))
    try:
        return image.resize((width, height), RESAMPLE)
    except (ValueError, OSError) as exc:
        raise ResizeError(f"Unable to resize image to {width}x{height}") from exc


class PillowEngine:
    """Pixel source backed by Pillow, downsampled with a box filter."""

    def __init__(self, image: ImageInput, width: int = 80):
        decoded = open_image(image)
        resized = resize_image(decoded, width)
        logger.debug("Pillow: resized %dx%d to %dx%d", decoded.width, decoded.height, resized.width, resized.height)
        self._pixels = np.asarray(resized)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def colour_at(self, x: int, y: int) -> str:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelAccessError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return pixel_to_hex(self._pixels[y, x])

    def close(self) -> None:
        pass
