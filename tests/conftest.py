import io

import pytest
from PIL import Image


def make_image(pixels: list[list[tuple[int, ...]]], mode: str = "RGB") -> Image.Image:
    """Build an image from rows of pixel tuples."""
    height = len(pixels)
    width = len(pixels[0])
    img = Image.new(mode, (width, height))
    img.putdata([pixel for row in pixels for pixel in row])
    return img


def encode(img: Image.Image, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def solid_png(tmp_path):
    """Write a solid-colour PNG and return its path."""

    def _make(size=(160, 100), colour=(10, 20, 30), name="solid.png"):
        path = tmp_path / name
        Image.new("RGB", size, colour).save(path)
        return path

    return _make
