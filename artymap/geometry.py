"""Geometry primitives shared by the scanner and the click generator."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np  # type: ignore

from .core.exceptions import InvalidGeometryError


@dataclass(frozen=True, slots=True)
class Point:
    """Integer pixel coordinate."""

    x: int
    y: int

    def as_tuple(self) -> tuple[int, int]:
        """Return point as ``(x, y)`` tuple."""
        return self.x, self.y


@dataclass(frozen=True, slots=True)
class Rectangle:
    """Axis-aligned rectangle spanning ``top_left`` to ``bottom_right``.

    For scanner output the covered pixels are ``top_left.x <= x < bottom_right.x``
    and ``top_left.y <= y < bottom_right.y``. Collision tests treat the rectangle
    as the closed region between both corners.
    """

    top_left: Point
    bottom_right: Point

    def __post_init__(self) -> None:
        if self.bottom_right.x < self.top_left.x or self.bottom_right.y < self.top_left.y:
            raise InvalidGeometryError(
                f"Inverted rectangle: {self.top_left.as_tuple()} -> {self.bottom_right.as_tuple()}"
            )

    @classmethod
    def from_size(cls, top_left: Point, width: int, height: int) -> Rectangle:
        """Build a rectangle from its top-left corner and size."""
        return cls(top_left, Point(top_left.x + width, top_left.y + height))

    @classmethod
    def from_bounds(cls, left: int, top: int, right: int, bottom: int) -> Rectangle:
        """Build a rectangle from ``(left, top, right, bottom)``."""
        return cls(Point(left, top), Point(right, bottom))

    def width(self) -> int:
        """Width in pixels."""
        return self.bottom_right.x - self.top_left.x

    def height(self) -> int:
        """Height in pixels."""
        return self.bottom_right.y - self.top_left.y

    def area(self) -> int:
        return self.width() * self.height()

    def aspect_ratio(self) -> float:
        """Return ``width / height``.

        Raises:
            InvalidGeometryError: If the rectangle has zero height.
        """
        if self.height() == 0:
            raise InvalidGeometryError("Aspect ratio of a zero-height rectangle is undefined")
        return self.width() / self.height()

    def ratio_within(self, low: float, high: float, *, include_high: bool = True) -> bool:
        """Return True if the aspect ratio lies in ``[low, high]``.

        Zero-height rectangles never match.
        """
        if self.height() == 0:
            return False
        ratio = self.aspect_ratio()
        if include_high:
            return low <= ratio <= high
        return low <= ratio < high

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return rectangle as ``(left, top, right, bottom)`` tuple."""
        return self.top_left.x, self.top_left.y, self.bottom_right.x, self.bottom_right.y

    def contains(self, point: Point) -> bool:
        """Return True if *point* lies inside the closed rectangle."""
        return (
            self.top_left.x <= point.x <= self.bottom_right.x
            and self.top_left.y <= point.y <= self.bottom_right.y
        )

    def is_close_enough_to_collide(self, pos: Point, radius: int) -> bool:
        """Cheap bounding-box pre-check for :meth:`collides_with_circle`."""
        return (
            self.top_left.x - radius <= pos.x <= self.bottom_right.x + radius
            and self.top_left.y - radius <= pos.y <= self.bottom_right.y + radius
        )

    def collides_with_circle(self, pos: Point, radius: int) -> bool:
        """Return True if a circle at *pos* with *radius* touches this rectangle."""
        if not self.is_close_enough_to_collide(pos, radius):
            return False
        # Closest point of the rectangle to pos
        test_x = min(max(pos.x, self.top_left.x), self.bottom_right.x)
        test_y = min(max(pos.y, self.top_left.y), self.bottom_right.y)
        dist_x = pos.x - test_x
        dist_y = pos.y - test_y
        return dist_x * dist_x + dist_y * dist_y <= radius * radius


def rects_to_array(rects: Sequence[Rectangle]) -> np.ndarray:
    """Pack rectangles into an ``(N, 4)`` int64 array of ``left, top, right, bottom``."""
    if not rects:
        return np.empty((0, 4), dtype=np.int64)
    return np.array([r.as_tuple() for r in rects], dtype=np.int64)


def circle_collisions(bounds: np.ndarray, points: np.ndarray, radius: int) -> np.ndarray:
    """Vectorized :meth:`Rectangle.collides_with_circle`.

    Args:
        bounds: ``(N, 4)`` array from :func:`rects_to_array`.
        points: ``(M, 2)`` array of ``x, y`` click candidates.
        radius: Circle radius in pixels.

    Returns:
        Boolean ``(M, N)`` matrix, True where point ``m`` collides with rectangle ``n``.
    """
    px = points[:, 0:1]
    py = points[:, 1:2]
    test_x = np.clip(px, bounds[:, 0], bounds[:, 2])
    test_y = np.clip(py, bounds[:, 1], bounds[:, 3])
    dist_sq = (px - test_x) ** 2 + (py - test_y) ** 2
    return dist_sq <= radius * radius
