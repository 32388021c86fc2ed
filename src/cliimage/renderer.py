"""Composite pairs of pixels into half-block terminal cells."""

import logging
import re

from cliimage.colour import hex_to_rgb_array
from cliimage.engine import ImageSource
from cliimage.errors import InvalidColourFormatError
from cliimage.markers import MarkerOverlay

logger = logging.getLogger(__name__)

TRANSPARENT = "transparent"
DEFAULT_TRANSPARENT_COLOUR = "#000000"

UPPER_HALF_BLOCK = "▀"
LOWER_HALF_BLOCK = "▄"

FOREGROUND = "\033[38;2;{r};{g};{b}m"
BACKGROUND = "\033[48;2;{r};{g};{b}m"
RESET = "\033[0m"

HEX_COLOUR = re.compile(r"#[0-9a-f]{6}", re.IGNORECASE)

# optional "#", optional 1-2 digit transparency prefix, RRGGBB
_HEX = re.compile(r"#?(?:[0-9a-f]{1,2})?([0-9a-f]{6})", re.IGNORECASE)


def translate_colour(colour: str, transparent: str = DEFAULT_TRANSPARENT_COLOUR) -> str:
    """Normalise a colour tag to '#RRGGBB', or to TRANSPARENT for the transparent colour."""
    if colour == TRANSPARENT:
        return TRANSPARENT

    match = _HEX.fullmatch(colour)
    if not match:
        raise InvalidColourFormatError(f"Unexpected colour given {colour!r}")
    colour = f"#{match.group(1)}"

    if colour.lower() == transparent.lower():
        return TRANSPARENT

    return colour


def format_cell(
    colour_top: str,
    colour_bottom: str | None = None,
    repeat: int = 1,
    transparent: str = DEFAULT_TRANSPARENT_COLOUR,
) -> str:
    """Render one cell (or ``repeat`` identical cells) showing two stacked colours."""
    if colour_bottom is None:
        colour_bottom = colour_top

    top = translate_colour(colour_top, transparent)
    bottom = translate_colour(colour_bottom, transparent)

    if top == TRANSPARENT and bottom == TRANSPARENT:
        return " " * repeat
    if top == TRANSPARENT:
        return FOREGROUND.format(**hex_to_rgb_array(bottom)) + LOWER_HALF_BLOCK * repeat + RESET
    if bottom == TRANSPARENT:
        return FOREGROUND.format(**hex_to_rgb_array(top)) + UPPER_HALF_BLOCK * repeat + RESET
    return (
        FOREGROUND.format(**hex_to_rgb_array(top))
        + BACKGROUND.format(**hex_to_rgb_array(bottom))
        + UPPER_HALF_BLOCK * repeat
        + RESET
    )


def resolve_colour(cell_x: int, cell_y: int, colour: str, markers: MarkerOverlay) -> str:
    """The marker colour if a marker sits on (cell_x, cell_y), else the pixel colour."""
    marker = markers.colour_at(cell_x, cell_y)
    return colour if marker is None else marker


def render_lines(
    source: ImageSource,
    markers: MarkerOverlay | None = None,
    transparent: str = DEFAULT_TRANSPARENT_COLOUR,
) -> list[str]:
    """One line per pair of pixel rows; an odd last row is dropped."""
    if markers is None:
        markers = MarkerOverlay()

    width = source.width
    height = source.height
    logger.debug("Rendering %dx%d image with %d marker(s)", width, height, len(markers))

    lines = []
    for line_y in range(height // 2):
        y_top = 2 * line_y
        y_bottom = 2 * line_y + 1
        cells = []
        for cell_x in range(width):
            colour_top = source.colour_at(cell_x, y_top)
            colour_bottom = source.colour_at(cell_x, y_bottom) if y_bottom < height else TRANSPARENT
            cells.append(
                format_cell(
                    resolve_colour(cell_x, y_top, colour_top, markers),
                    resolve_colour(cell_x, y_bottom, colour_bottom, markers),
                    transparent=transparent,
                )
            )
        lines.append("".join(cells))
    return lines


def render_string(
    source: ImageSource,
    markers: MarkerOverlay | None = None,
    transparent: str = DEFAULT_TRANSPARENT_COLOUR,
) -> str:
    return "\n".join(render_lines(source, markers, transparent))
