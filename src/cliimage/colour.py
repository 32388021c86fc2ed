"""Conversions between integer RGB, hex strings, sRGB, CIE XYZ and CIE Lab.

Channel mappings use the keys below: ``r/g/b`` for RGB and sRGB, ``x/y/z``
for XYZ and ``L/a/b`` for Lab.
"""

import numpy as np

from cliimage.errors import InvalidInputError

PRECISION_NONE = -1

HASH = "#"

SRGB_LINEAR_THRESHOLD = 0.03928

# sRGB -> XYZ, http://www.brucelindbloom.com/index.html?Eqn_RGB_XYZ_Matrix.html
MATRIX_SRGB_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
MATRIX_SRGB_XYZ.flags.writeable = False

# D65 reference white
WHITE_D65 = (0.95047, 1.0, 1.08883)

RGB_KEYS = ("r", "g", "b")
SRGB_KEYS = ("r", "g", "b")
XYZ_KEYS = ("x", "y", "z")
LAB_KEYS = ("L", "a", "b")

RGB_RANGE = (0, 255)
SRGB_RANGE = (0.0, 1.0)
XYZ_RANGE = (0.0, 1.0)
LAB_LIGHTNESS_RANGE = (0.0, 100.0)
LAB_A_RANGE = (-128.0, 127.0)
LAB_B_RANGE = (-128.0, 127.0)

# Alpha is stored above the RGB bits as 7-bit transparency: 0 opaque, 127 transparent.
ALPHA_SHIFT = 24
ALPHA_MAX = 127


def _round(value: float, precision: int) -> float:
    if precision == PRECISION_NONE:
        return value
    return round(value, precision)


def rgb_to_hex(value: int, lowercase: bool = False) -> str:
    """Single channel: 255 -> 'FF'."""
    hex_value = f"{value:02X}"
    return hex_value.lower() if lowercase else hex_value


def rgb_to_srgb(value: int, precision: int = PRECISION_NONE) -> float:
    """Single channel: gamma-expand an 8-bit value to linear sRGB in [0, 1]."""
    value = value / 255
    srgb = value / 12.92 if value <= SRGB_LINEAR_THRESHOLD else ((value + 0.055) / 1.055) ** 2.4
    return _round(srgb, precision)


def xyz_to_lab(value: float, precision: int = PRECISION_NONE) -> float:
    """The CIELAB companding function f(t)."""
    lab = value ** (1 / 3) if value > 216 / 24389 else 841 * value / 108 + 4 / 29
    return _round(lab, precision)


def rgbs_to_int(red: int, green: int, blue: int) -> int:
    return red * 256 * 256 + green * 256 + blue


def rgbs_to_hex(red: int, green: int, blue: int, prepend_hash: bool = True, lowercase: bool = False) -> str:
    return int_to_hex(rgbs_to_int(red, green, blue), prepend_hash, lowercase)


def rgba_to_int(red: int, green: int, blue: int, alpha: int = 255) -> int:
    """Pack an 8-bit RGBA pixel as ``transparency << 24 | rgb``.

    A fully opaque pixel packs to its plain 24-bit value, anything else
    carries a 1-2 hex digit transparency prefix once formatted with
    :func:`int_to_hex`.
    """
    transparency = (255 - alpha) >> 1
    return (transparency << ALPHA_SHIFT) | rgbs_to_int(red, green, blue)


def int_to_hex(colour: int, prepend_hash: bool = True, lowercase: bool = False) -> str:
    """Full colour: 255 -> '#0000FF', 0x800080 -> '#800080'."""
    hex_value = (HASH if prepend_hash else "") + f"{colour:06X}"
    return hex_value.lower() if lowercase else hex_value


def int_to_rgb_array(colour: int) -> dict[str, int]:
    return {
        "r": colour >> 16 & 0xFF,
        "g": colour >> 8 & 0xFF,
        "b": colour & 0xFF,
    }


def int_to_lab_array(colour: int, precision: int = PRECISION_NONE) -> dict[str, float]:
    return xyz_array_to_lab_array(
        srgb_array_to_xyz_array(rgb_array_to_srgb_array(int_to_rgb_array(colour))),
        precision,
    )


def hex_to_int(colour: str) -> int:
    """'#800080' -> 0x800080."""
    return int(colour.removeprefix(HASH), 16)


def hex_to_rgb_array(colour: str) -> dict[str, int]:
    return int_to_rgb_array(hex_to_int(colour))


def rgb_array_to_int(rgb: dict[str, int]) -> int:
    _check_channels(rgb, RGB_KEYS, int, "RGB")
    return rgbs_to_int(rgb["r"], rgb["g"], rgb["b"])


def rgb_array_to_hex(rgb: dict[str, int], prepend_hash: bool = True, lowercase: bool = False) -> str:
    return int_to_hex(rgb_array_to_int(rgb), prepend_hash, lowercase)


def rgb_array_to_srgb_array(rgb: dict[str, int], precision: int = PRECISION_NONE) -> dict[str, float]:
    _check_channels(rgb, RGB_KEYS, int, "RGB")
    return {key: rgb_to_srgb(rgb[key], precision) for key in SRGB_KEYS}


def srgb_array_to_xyz_array(srgb: dict[str, float], precision: int = PRECISION_NONE) -> dict[str, float]:
    _check_channels(srgb, SRGB_KEYS, float, "sRGB")
    vector = np.array([srgb[key] for key in SRGB_KEYS], dtype=np.float64)
    xyz = MATRIX_SRGB_XYZ @ vector
    return {key: _round(float(value), precision) for key, value in zip(XYZ_KEYS, xyz)}


def xyz_array_to_lab_array(xyz: dict[str, float], precision: int = PRECISION_NONE) -> dict[str, float]:
    """XYZ -> Lab against the D65 white point, clamped to the Lab ranges.

    See https://en.wikipedia.org/wiki/CIELAB_color_space#From_CIEXYZ_to_CIELAB
    """
    _check_channels(xyz, XYZ_KEYS, float, "XYZ")
    xn, yn, zn = WHITE_D65

    fx = xyz_to_lab(xyz["x"] / xn)
    fy = xyz_to_lab(xyz["y"] / yn)
    fz = xyz_to_lab(xyz["z"] / zn)

    lab = {
        "L": correct_range(116 * fy - 16, *LAB_LIGHTNESS_RANGE),
        "a": correct_range(500 * (fx - fy), *LAB_A_RANGE),
        "b": correct_range(200 * (fy - fz), *LAB_B_RANGE),
    }
    return {key: _round(value, precision) for key, value in lab.items()}


def correct_range(value: float, min_value: float, max_value: float) -> float:
    return float(min(max(value, min_value), max_value))


def _check_channels(channels: dict, keys: tuple[str, ...], kind: type, name: str) -> None:
    for key in keys:
        if key not in channels:
            raise InvalidInputError(f"Missing {name} channel {key!r}")

    extra = set(channels) - set(keys)
    if extra:
        raise InvalidInputError(f"Unexpected {name} channel(s): {', '.join(sorted(map(str, extra)))}")

    for key in keys:
        value = channels[key]
        if isinstance(value, bool) or not isinstance(value, kind):
            raise InvalidInputError(
                f"Unexpected value for {name} channel {key!r}: {kind.__name__} expected, got {type(value).__name__}"
            )
