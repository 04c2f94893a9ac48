"""Exception hierarchy for the artymap package."""

from __future__ import annotations


class ArtyMapError(Exception):
    """Base class for every error raised by artymap."""


class InvalidGeometryError(ArtyMapError, ValueError):
    """Raised for inverted rectangles or ratio queries on zero-height ones."""


class InvalidInputError(ArtyMapError, ValueError):
    """Raised when a planning call receives unusable arguments."""


class InvalidImageError(ArtyMapError, ValueError):
    """Raised when a pixel array does not have a ``(height, width, 3)`` shape."""


class EmptyImageError(InvalidImageError):
    """Raised when a pixel buffer has zero width or height."""


class ImageLoadError(ArtyMapError, OSError):
    """Raised when an image file cannot be read or decoded."""


class ClickGenerationError(ArtyMapError, RuntimeError):
    """Raised when one or more click-generation trials fail.

    All worker failures of the call are collected in :attr:`failures` so none
    of them is lost.
    """

    def __init__(self, message: str, failures: list[BaseException] | None = None) -> None:
        super().__init__(message)
        self.failures: list[BaseException] = list(failures or [])
