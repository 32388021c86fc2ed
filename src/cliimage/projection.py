import math

from cliimage.errors import (
    MissingDimensionsError,
    UnsupportedCoordinateSystemError,
    UnsupportedProjectionError,
)
from cliimage.point import Point

COORDINATE_SYSTEM_CARTESIAN = "cartesian"
COORDINATE_SYSTEM_SPHERICAL = "spherical"

PROJECTION_NONE = "none"
PROJECTION_KAVRAYSKIY_VII = "kavrayskiy-vii"

# Fitted to a world map that spans the projection with some margin
MAP_SCALE_X = 1.42
MAP_SCALE_Y = 1.25
MAP_SHIFT_X = 0.17
MAP_SHIFT_Y = 0.01


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def kavrayskiy_vii(latitude: float, longitude: float, width: int, height: int) -> tuple[int, int]:
    """Map a geographic coordinate to pixel (x, y) on a ``width`` x ``height`` raster.

    https://en.wikipedia.org/wiki/Kavrayskiy_VII_projection
    """
    width_map = width * MAP_SCALE_X
    height_map = height * MAP_SCALE_Y

    x_move = -width_map * MAP_SHIFT_X
    y_move = -height_map * MAP_SHIFT_Y

    width_degree = width_map / 360
    height_degree = height_map / 180

    x_middle = width_map / 2 + x_move
    y_middle = height_map / 2 + y_move

    latitude_radian = math.radians(latitude)
    longitude_radian = math.radians(longitude)
    projected_longitude = math.degrees(
        3 * longitude_radian / 2 * math.sqrt(1 / 3 - (latitude_radian / math.pi) ** 2)
    )

    return (
        round_half_away(x_middle + projected_longitude * width_degree),
        round_half_away(y_middle - latitude * height_degree),
    )


PROJECTIONS = {
    PROJECTION_KAVRAYSKIY_VII: kavrayskiy_vii,
}


def project(
    latitude: float,
    longitude: float,
    width: int | None,
    height: int | None,
    projection: str = PROJECTION_KAVRAYSKIY_VII,
) -> Point:
    """Project (latitude, longitude) to a pixel point with the named projection."""
    if projection not in PROJECTIONS:
        raise UnsupportedProjectionError(f"Invalid projection {projection!r}")
    if width is None or height is None:
        raise MissingDimensionsError("Spherical coordinates require width and height")
    x, y = PROJECTIONS[projection](latitude, longitude, width, height)
    return Point(x, y)


def create_point(
    first: float,
    second: float,
    coordinate_system: str = COORDINATE_SYSTEM_CARTESIAN,
    projection: str = PROJECTION_NONE,
    width: int | None = None,
    height: int | None = None,
) -> Point:
    """Build a point from (x, y) or, for spherical input, from (latitude, longitude)."""
    if coordinate_system == COORDINATE_SYSTEM_CARTESIAN:
        return Point(first, second)
    if coordinate_system == COORDINATE_SYSTEM_SPHERICAL:
        return project(first, second, width, height, projection)
    raise UnsupportedCoordinateSystemError(f"Invalid coordinate system {coordinate_system!r}")
