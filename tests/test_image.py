import pytest
from PIL import Image

from cliimage.colour import PRECISION_NONE
from cliimage.config import CliImageConfig
from cliimage.engine import ENGINES
from cliimage.errors import DecodeError, InvalidColourFormatError, ResizeError, UnsupportedEngineError
from cliimage.image import CliImage
from cliimage.point import Point
from tests.conftest import encode, make_image

CELL = "\033[38;2;10;20;30m\033[48;2;10;20;30m▀\033[0m"
RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_resizes_to_width_keeping_aspect_ratio(solid_png):
    image = CliImage(solid_png(size=(160, 100)))
    assert (image.width, image.height) == (80, 50)


def test_height_rounds_half_up(solid_png):
    # 80 / (100 / 7) = 5.6
    image = CliImage(solid_png(size=(100, 7)), width=80)
    assert image.height == 6


def test_solid_image_renders_uniform_cells(solid_png):
    image = CliImage(solid_png(size=(160, 100)))
    lines = image.ascii_lines()
    assert len(lines) == 25
    assert all(line == CELL * 80 for line in lines)
    assert image.ascii_string() == "\n".join([CELL * 80] * 25)


def test_world_markers_recolour_exact_cells(solid_png):
    image = CliImage(solid_png(size=(160, 100)), width=80)
    image.add_coordinate_spherical("#ff0000", 40.71, -74.01)
    image.add_coordinate_spherical("#00ff00", 59.91, 10.75)
    image.add_coordinate_spherical("#0000ff", 0.0, 0.0)

    assert image.points == {"#ff0000": Point(19, 16), "#00ff00": Point(40, 10), "#0000ff": Point(37, 31)}

    expected = [[CELL] * 80 for _ in range(25)]
    # rows 16 and 10 are top halves, row 31 is the bottom half of line 15
    expected[8][19] = "\033[38;2;255;0;0m\033[48;2;10;20;30m▀\033[0m"
    expected[5][40] = "\033[38;2;0;255;0m\033[48;2;10;20;30m▀\033[0m"
    expected[15][37] = "\033[38;2;10;20;30m\033[48;2;0;0;255m▀\033[0m"
    assert image.ascii_string() == "\n".join("".join(row) for row in expected)


def test_accepts_raw_bytes():
    data = encode(make_image([[RED, RED], [BLUE, BLUE]]))
    image = CliImage(data, width=2)
    assert image.ascii_lines() == ["\033[38;2;255;0;0m\033[48;2;0;0;255m▀\033[0m" * 2]


def test_accepts_jpeg_and_gif():
    img = Image.new("RGB", (8, 8), (255, 255, 255))
    for fmt in ("JPEG", "GIF"):
        image = CliImage(encode(img, fmt), width=4)
        assert (image.width, image.height) == (4, 4)
        assert len(image.ascii_lines()) == 2


def test_odd_height_drops_last_row():
    image = CliImage(encode(Image.new("RGB", (4, 5), RED)), width=4)
    assert image.height == 5
    assert len(image.ascii_lines()) == 2


def test_transparent_pixels_render_blank():
    pixels = [[(0, 0, 0, 0), (255, 0, 0, 255)], [(0, 0, 0, 0), (0, 0, 0, 0)]]
    image = CliImage(encode(make_image(pixels, mode="RGBA")), width=2)
    assert image.colour_at(0, 0) == "#000000"
    assert image.ascii_lines() == [" \033[38;2;255;0;0m▀\033[0m"]


def test_marker_overrides_pixel_colour():
    image = CliImage(encode(Image.new("RGB", (2, 2), BLUE)), width=2)
    image.add_coordinate("#FF0000", Point(1.8, 1.3))
    blue = "\033[38;2;0;0;255m\033[48;2;0;0;255m▀\033[0m"
    assert image.ascii_lines() == [blue + "\033[38;2;0;0;255m\033[48;2;255;0;0m▀\033[0m"]


def test_set_points_replaces_markers(solid_png):
    image = CliImage(solid_png())
    image.add_coordinate("#ff0000", Point(0, 0))
    assert image.set_points({"#00ff00": Point(1, 1)}) is image
    assert image.points == {"#00ff00": Point(1, 1)}


def test_custom_transparent_colour():
    image = CliImage(encode(Image.new("RGB", (2, 2), (255, 255, 255))), width=2, transparent="#FFFFFF")
    assert image.ascii_string() == "  "


def test_lab_at_uses_precision():
    image = CliImage(encode(Image.new("RGB", (2, 2), (255, 255, 255))), width=2, precision=1)
    assert image.lab_at(0, 0) == {"L": 100.0, "a": 0.0, "b": 0.0}


def test_from_config(solid_png):
    config = CliImageConfig(width=40, transparent="#0A141E")
    image = CliImage.from_config(solid_png(), config)
    assert image.width == 40
    assert image.config == config
    assert set(image.ascii_string()) == {" ", "\n"}


def test_context_manager_closes(solid_png):
    with CliImage(solid_png()) as image:
        assert image.width == 80


def test_unknown_engine(solid_png):
    with pytest.raises(UnsupportedEngineError, match="gd-image"):
        CliImage(solid_png(), engine="gd-image")


def test_invalid_transparent_colour(solid_png):
    with pytest.raises(InvalidColourFormatError):
        CliImage(solid_png(), transparent="black")


def test_unsupported_format():
    with pytest.raises(DecodeError, match="BMP"):
        CliImage(encode(Image.new("RGB", (4, 4)), "BMP"))


def test_garbage_bytes():
    with pytest.raises(DecodeError):
        CliImage(b"definitely not an image")


def test_zero_width(solid_png):
    with pytest.raises(ResizeError):
        CliImage(solid_png(), width=0)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CliImage(tmp_path / "missing.png")


def test_default_config():
    config = CliImageConfig()
    assert (config.width, config.engine, config.transparent, config.precision) == (80, "pillow", "#000000", PRECISION_NONE)


@pytest.mark.parametrize("transparent", ["transparent", "black", "000000", "#FF000000", "#12345"])
def test_transparent_colour_must_be_hex(transparent):
    with pytest.raises(InvalidColourFormatError):
        CliImageConfig(transparent=transparent)


def test_unavailable_engine_is_reported(monkeypatch, solid_png):
    monkeypatch.setitem(ENGINES, "broken", ("cliimage.no_such_backend", "BrokenEngine"))
    with pytest.raises(UnsupportedEngineError, match="not available"):
        CliImage(solid_png(), engine="broken")


def test_box_averaged_blocks_render_exact_escapes():
    # each 2x2 block averages to a known colour; the bottom-right one is black
    pixels = [
        [(200, 0, 0), (100, 0, 0), (0, 40, 80), (0, 60, 100)],
        [(100, 0, 0), (0, 0, 0), (0, 20, 60), (0, 40, 80)],
        [(10, 10, 10), (30, 30, 30), (0, 0, 0), (0, 0, 0)],
        [(50, 50, 50), (70, 70, 70), (0, 0, 0), (0, 0, 0)],
    ]
    image = CliImage(encode(make_image(pixels)), width=2)
    assert (image.width, image.height) == (2, 2)

    left = "\033[38;2;100;0;0m\033[48;2;40;40;40m▀\033[0m"
    assert image.ascii_lines() == [left + "\033[38;2;0;40;80m▀\033[0m"]

    image.add_coordinate("#00FF00", Point(1, 1))
    assert image.ascii_lines() == [left + "\033[38;2;0;40;80m\033[48;2;0;255;0m▀\033[0m"]
