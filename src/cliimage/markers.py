from collections.abc import Iterator, Mapping

from cliimage.point import Point


class MarkerOverlay:
    """Colour tags bound to pixel points, drawn over the image when rendering.

    Adding a tag that already exists replaces its point; the tag keeps its
    original position in iteration order.
    """

    def __init__(self, points: Mapping[str, Point] | None = None):
        self._points: dict[str, Point] = dict(points or {})

    def add(self, colour: str, point: Point) -> None:
        self._points[colour] = point

    def replace(self, points: Mapping[str, Point]) -> None:
        self._points = dict(points)

    def as_dict(self) -> dict[str, Point]:
        return dict(self._points)

    def colour_at(self, cell_x: int, cell_y: int) -> str | None:
        """Return the first tag (in insertion order) whose point falls in the cell."""
        for colour, point in self._points.items():
            if point.cell == (cell_x, cell_y):
                return colour
        return None

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, colour: object) -> bool:
        return colour in self._points

    def __getitem__(self, colour: str) -> Point:
        return self._points[colour]
