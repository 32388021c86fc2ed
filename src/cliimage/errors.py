class CliImageError(Exception):
    """Base class for every error raised by cliimage."""


class DecodeError(CliImageError):
    """Raw data is not a readable GIF, PNG or JPEG image."""


class ResizeError(CliImageError):
    """The image backend could not produce an image of the requested width."""


class InvalidColourFormatError(CliImageError, ValueError):
    pass


class InvalidInputError(CliImageError, ValueError):
    """A colour-space conversion got a channel mapping with missing, extra or mistyped keys."""


class UnsupportedProjectionError(CliImageError):
    pass


class UnsupportedCoordinateSystemError(CliImageError):
    pass


class MissingDimensionsError(CliImageError):
    pass


class UnsupportedEngineError(CliImageError):
    pass


class PixelAccessError(CliImageError, IndexError):
    pass
