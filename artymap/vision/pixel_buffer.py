"""Mutable RGB pixel grid used (and destroyed) by one detection pass."""

from __future__ import annotations

import os
from typing import Optional

import cv2  # type: ignore
import numpy as np  # type: ignore
from loguru import logger

from ..core.config import config
from ..core.exceptions import EmptyImageError, ImageLoadError, InvalidImageError
from ..geometry import Rectangle

Pixel = tuple[int, int, int]

# One tick away from pure black. Pure black marks unexplored map area, so an
# off-image read must not look like it.
OFF_IMAGE_PIXEL: Pixel = (1, 1, 1)
BLACK: Pixel = (0, 0, 0)


class PixelBuffer:
    """``height x width`` grid of RGB pixels with clipped access.

    The scanner erases pixels as it claims them, so callers that need the
    original image afterwards should scan a :meth:`copy`.
    """

    def __init__(self, pixels: np.ndarray) -> None:
        """Wrap an ``(H, W, 3)`` array (converted to ``uint8``)."""
        array = np.asarray(pixels)
        if array.ndim != 3 or array.shape[2] != 3:
            raise InvalidImageError(f"Expected an (H, W, 3) RGB array, got shape {array.shape}")
        if array.shape[0] == 0 or array.shape[1] == 0:
            raise EmptyImageError("Pixel buffer must have non-zero width and height")
        self.pixels: np.ndarray = np.ascontiguousarray(array, dtype=np.uint8)

    @classmethod
    def from_file(cls, image_path: str) -> PixelBuffer:
        """Decode an image file into an RGB buffer."""
        if not os.path.exists(image_path):
            raise ImageLoadError(f"Image not found: {image_path}")
        image = cv2.imread(image_path, cv2.IMREAD_COLOR)
        if image is None:
            raise ImageLoadError(f"Failed to load image: {image_path}")
        logger.debug("Loaded {0} ({1}x{2})", image_path, image.shape[1], image.shape[0])
        return cls(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def dimensions(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Pixel:
        """Return the pixel at ``(x, y)``, or :data:`OFF_IMAGE_PIXEL` outside the image."""
        pixel = self.get_checked(x, y)
        return OFF_IMAGE_PIXEL if pixel is None else pixel

    def get_checked(self, x: int, y: int) -> Optional[Pixel]:
        """Return the pixel at ``(x, y)``, or None outside the image."""
        if not self.in_bounds(x, y):
            return None
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def put(self, x: int, y: int, pixel: Pixel) -> None:
        """Write a pixel; writes outside the image are ignored."""
        if self.in_bounds(x, y):
            self.pixels[y, x] = pixel

    def clip(self, rect: Rectangle) -> tuple[slice, slice]:
        """Return ``(rows, cols)`` slices of the pixels covered by *rect*, clipped to the image."""
        left = min(max(rect.top_left.x, 0), self.width)
        right = min(max(rect.bottom_right.x, 0), self.width)
        top = min(max(rect.top_left.y, 0), self.height)
        bottom = min(max(rect.bottom_right.y, 0), self.height)
        return slice(top, bottom), slice(left, right)

    def erase(self, rect: Rectangle) -> None:
        """Overwrite the in-bounds pixels of *rect* with the non-target erase color."""
        rows, cols = self.clip(rect)
        self.pixels[rows, cols] = config.erase_color

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.pixels.copy())
