from dataclasses import dataclass


@dataclass
class Point:
    """A position in image pixel space; cells are matched by truncating to int."""

    x: float
    y: float

    @property
    def cell(self) -> tuple[int, int]:
        return int(self.x), int(self.y)
