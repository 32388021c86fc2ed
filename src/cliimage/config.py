from dataclasses import dataclass

from cliimage.colour import PRECISION_NONE
from cliimage.engine import ENGINE_PILLOW, ENGINES
from cliimage.errors import InvalidColourFormatError, UnsupportedEngineError
from cliimage.renderer import DEFAULT_TRANSPARENT_COLOUR, HEX_COLOUR


@dataclass(frozen=True)
class CliImageConfig:
    """Options for turning one image into terminal text."""

    # output columns; the engine rejects non-positive widths when resizing
    width: int = 80
    engine: str = ENGINE_PILLOW
    # pixels of this colour are left blank
    transparent: str = DEFAULT_TRANSPARENT_COLOUR
    # decimal places for colour-space conversions, PRECISION_NONE for full precision
    precision: int = PRECISION_NONE

    def __post_init__(self):
        if self.engine not in ENGINES:
            raise UnsupportedEngineError(f"Unsupported engine type {self.engine!r}")
        if not HEX_COLOUR.fullmatch(self.transparent):
            raise InvalidColourFormatError(f"Transparent colour must look like '#RRGGBB', got {self.transparent!r}")
        if self.precision < PRECISION_NONE:
            raise ValueError(f"Precision must be >= 0 or PRECISION_NONE, got {self.precision}")
