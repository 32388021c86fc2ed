from __future__ import annotations

import importlib
from pathlib import Path
from typing import Protocol

from cliimage.errors import UnsupportedEngineError

ENGINE_PILLOW = "pillow"
ENGINE_WAND = "wand"

# name -> (module, class); modules are imported on first use so a missing
# ImageMagick install only matters to callers that ask for it
ENGINES = {
    ENGINE_PILLOW: ("cliimage.raster", "PillowEngine"),
    ENGINE_WAND: ("cliimage.magick", "WandEngine"),
}

SUPPORTED_FORMATS = ("GIF", "PNG", "JPEG")

ImageInput = str | Path | bytes


class ImageSource(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def colour_at(self, x: int, y: int) -> str:
        """Hex colour of the resized pixel at (x, y)."""
        ...


class Engine(ImageSource, Protocol):
    def close(self) -> None: ...


def resized_height(original_width: int, original_height: int, width: int) -> int:
    """Height that keeps the aspect ratio at ``width`` columns, rounded half up."""
    aspect_ratio = original_width / original_height
    return int(width / aspect_ratio + 0.5)


def create_engine(name: str, image: ImageInput, width: int = 80) -> Engine:
    if name not in ENGINES:
        raise UnsupportedEngineError(f"Unsupported engine type {name!r}")
    module_name, class_name = ENGINES[name]
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise UnsupportedEngineError(f"Engine {name!r} is not available: {exc}") from exc
    engine_class = getattr(module, class_name)
    return engine_class(image, width)
