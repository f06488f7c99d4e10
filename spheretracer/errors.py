"""Exceptions raised at the boundaries of the renderer."""


class SpheretracerError(Exception):
    """Base class for errors raised by spheretracer."""


class OptionsError(SpheretracerError, ValueError):
    """Raised when camera options are outside their valid domain."""


class ImageWriteError(SpheretracerError, OSError):
    """Raised when a rendered image cannot be written to disk."""
