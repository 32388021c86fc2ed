import argparse
import logging
import sys
from pathlib import Path

from cliimage.engine import ENGINE_PILLOW, ENGINES
from cliimage.errors import CliImageError
from cliimage.image import CliImage
from cliimage.renderer import DEFAULT_TRANSPARENT_COLOUR

logger = logging.getLogger("cliimage")


def parse_marker(value: str) -> tuple[str, float, float]:
    """'#ff0000:40.71,-74.01' -> ('#ff0000', 40.71, -74.01)."""
    colour, sep, coordinate = value.partition(":")
    latitude, comma, longitude = coordinate.partition(",")
    if not sep or not comma:
        raise argparse.ArgumentTypeError(f"Expected COLOUR:LATITUDE,LONGITUDE, got {value!r}")
    try:
        return colour, float(latitude), float(longitude)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid coordinate in {value!r}") from None


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Print an image to the terminal using half-block characters")
    parser.add_argument("image", help="Path to input image (GIF, PNG or JPEG)")
    parser.add_argument("-s", "--size", type=int, default=80, help="Output width in columns (default: 80)")
    parser.add_argument(
        "-e", "--engine", default=ENGINE_PILLOW, choices=sorted(ENGINES), help="Image backend (default: pillow)"
    )
    parser.add_argument(
        "-t",
        "--transparent",
        default=DEFAULT_TRANSPARENT_COLOUR,
        help=f"Colour rendered as blank (default: {DEFAULT_TRANSPARENT_COLOUR})",
    )
    parser.add_argument(
        "-m",
        "--marker",
        action="append",
        type=parse_marker,
        default=[],
        metavar="COLOUR:LAT,LON",
        help="Draw a marker at a geographic coordinate, e.g. '#ff0000:40.71,-74.01'. Repeatable.",
    )
    parser.add_argument("-o", "--output", help="Also write the rendered text to this file")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug output to stderr")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    image_path = Path(args.image)
    if not image_path.is_file():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    try:
        with CliImage(image_path, width=args.size, engine=args.engine, transparent=args.transparent) as image:
            for colour, latitude, longitude in args.marker:
                image.add_coordinate_spherical(colour, latitude, longitude)
            text = image.ascii_string()
    except CliImageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(text)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Image saved to {args.output!r}.", file=sys.stderr)
