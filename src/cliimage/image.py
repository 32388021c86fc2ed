from __future__ import annotations

import logging
from collections.abc import Mapping

from cliimage.colour import PRECISION_NONE, hex_to_int, int_to_lab_array
from cliimage.config import CliImageConfig
from cliimage.engine import ENGINE_PILLOW, Engine, ImageInput, create_engine
from cliimage.markers import MarkerOverlay
from cliimage.point import Point
from cliimage.projection import PROJECTION_KAVRAYSKIY_VII, project
from cliimage.renderer import DEFAULT_TRANSPARENT_COLOUR, TRANSPARENT, render_lines, translate_colour

logger = logging.getLogger(__name__)


class CliImage:
    """An image resized for the terminal, plus the markers drawn over it.

    ``image`` is a path or the raw bytes of a GIF, PNG or JPEG file. The image
    is decoded and resized once, on construction; every call to
    :meth:`ascii_lines` renders it again from the resized pixels.
    """

    def __init__(
        self,
        image: ImageInput,
        width: int = 80,
        engine: str = ENGINE_PILLOW,
        transparent: str = DEFAULT_TRANSPARENT_COLOUR,
        precision: int = PRECISION_NONE,
    ):
        self.config = CliImageConfig(width=width, engine=engine, transparent=transparent, precision=precision)
        self.markers = MarkerOverlay()
        self._engine: Engine = create_engine(engine, image, width)
        logger.debug("Loaded image with %s engine at %dx%d", engine, self.width, self.height)

    @classmethod
    def from_config(cls, image: ImageInput, config: CliImageConfig) -> CliImage:
        return cls(
            image,
            width=config.width,
            engine=config.engine,
            transparent=config.transparent,
            precision=config.precision,
        )

    @property
    def width(self) -> int:
        return self._engine.width

    @property
    def height(self) -> int:
        return self._engine.height

    @property
    def points(self) -> dict[str, Point]:
        return self.markers.as_dict()

    def set_points(self, points: Mapping[str, Point]) -> CliImage:
        self.markers.replace(points)
        return self

    def add_coordinate(self, colour: str, point: Point) -> CliImage:
        self.markers.add(colour, point)
        return self

    def add_coordinate_spherical(
        self,
        colour: str,
        latitude: float,
        longitude: float,
        projection: str = PROJECTION_KAVRAYSKIY_VII,
    ) -> CliImage:
        """Add a marker at a geographic coordinate, projected onto the resized image."""
        point = project(latitude, longitude, self.width, self.height, projection)
        logger.debug("Projected (%s, %s) to (%s, %s) for %s", latitude, longitude, point.x, point.y, colour)
        self.markers.add(colour, point)
        return self

    def colour_at(self, x: int, y: int) -> str:
        """Normalised '#RRGGBB' colour of the resized pixel, transparency prefix removed."""
        return translate_colour(self._engine.colour_at(x, y), transparent=TRANSPARENT)

    def lab_at(self, x: int, y: int) -> dict[str, float]:
        return int_to_lab_array(hex_to_int(self.colour_at(x, y)), self.config.precision)

    def ascii_lines(self) -> list[str]:
        return render_lines(self._engine, self.markers, self.config.transparent)

    def ascii_string(self) -> str:
        return "\n".join(self.ascii_lines())

    def close(self) -> None:
        self._engine.close()

    def __enter__(self) -> CliImage:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
