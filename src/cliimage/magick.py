import logging
from pathlib import Path

from wand.color import Color
from wand.exceptions import WandException
from wand.image import Image

from cliimage.colour import int_to_hex, rgba_to_int
from cliimage.engine import SUPPORTED_FORMATS, ImageInput, resized_height
from cliimage.errors import DecodeError, PixelAccessError, ResizeError

logger = logging.getLogger(__name__)

RESAMPLE = "box"


def pixel_to_hex(colour: Color) -> str:
    """Hex colour of a Wand pixel, formatted exactly like the Pillow engine's."""
    return int_to_hex(rgba_to_int(colour.red_int8, colour.green_int8, colour.blue_int8, colour.alpha_int8))


def open_image(image: ImageInput) -> Image:
    if not isinstance(image, bytes) and not Path(image).is_file():
        raise FileNotFoundError(f"No such image file: {image}")

    try:
        decoded = Image(blob=image) if isinstance(image, bytes) else Image(filename=str(image))
    except WandException as exc:
        raise DecodeError("Unable to create image from given data") from exc

    if decoded.format not in SUPPORTED_FORMATS:
        decoded.close()
        raise DecodeError(f"Unsupported image type {decoded.format}")

    if len(decoded.sequence) > 1:
        # animated GIF: keep the first frame only
        first = Image(image=decoded.sequence[0])
        decoded.close()
        decoded = first

    return decoded


def resize_image(image: Image, width: int) -> Image:
    if width < 1:
        raise ResizeError(f"Unable to resize image to width {width}")
    height = max(1, resized_height(image.width, image.height, width))
    try:
        image.resize(width, height, filter=RESAMPLE)
    except WandException as exc:
        raise ResizeError(f"Unable to resize image to {width}x{height}") from exc
    if image.width != width:
        raise ResizeError(f"Resize produced width {image.width}, expected {width}")
    return image


class WandEngine:
    """Pixel source backed by ImageMagick through Wand, downsampled with a box filter."""

    def __init__(self, image: ImageInput, width: int = 80):
        self._image = open_image(image)
        original = self._image.size
        try:
            resize_image(self._image, width)
        except ResizeError:
            self._image.close()
            raise
        logger.debug("Wand: resized %dx%d to %dx%d", *original, self._image.width, self._image.height)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def colour_at(self, x: int, y: int) -> str:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelAccessError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        with self._image[x, y] as colour:
            return pixel_to_hex(colour)

    def close(self) -> None:
        self._image.close()
