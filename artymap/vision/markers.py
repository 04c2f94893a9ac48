"""Debug-marker detection.

With the game's debug overlay enabled, every spawner is drawn with a pure blue
marker and every worm with a magenta one, each the same size at any zoom
level. Matching those exact colors is a much cheaper input source for the
click generator than blob scanning.
"""

from __future__ import annotations

import numpy as np  # type: ignore
from loguru import logger

from ..core.config import config
from ..geometry import Point, Rectangle
from .pixel_buffer import Pixel, PixelBuffer


def find_marker_positions(buffer: PixelBuffer, color: Pixel, min_click_dist: int) -> list[Point]:
    """Return pixels of exactly *color*, at least *min_click_dist* apart on some axis.

    Pixels are visited row by row; a match is skipped when it lies within
    *min_click_dist* on both axes of a marker already found.
    """
    matches = np.argwhere(np.all(buffer.pixels == np.asarray(color, dtype=np.uint8), axis=-1))
    positions: list[Point] = []
    for y, x in matches:
        if any(abs(int(x) - p.x) < min_click_dist and abs(int(y) - p.y) < min_click_dist for p in positions):
            continue
        positions.append(Point(int(x), int(y)))
    logger.debug("Found {0} markers of color {1}", len(positions), color)
    return positions


def find_spawner_markers(buffer: PixelBuffer) -> list[Point]:
    return find_marker_positions(buffer, tuple(config.spawner_marker_color), config.spawner_marker_spacing)


def find_worm_markers(buffer: PixelBuffer) -> list[Point]:
    return find_marker_positions(buffer, tuple(config.worm_marker_color), config.worm_marker_spacing)


def spawner_offset_mask() -> Rectangle:
    """Offsets from a spawner marker pixel to its collision box."""
    return Rectangle.from_bounds(*config.spawner_marker_mask)


def worm_offset_mask() -> Rectangle:
    return Rectangle.from_bounds(*config.worm_marker_mask)


def remap_positions_to_rects(positions: list[Point], offset_mask: Rectangle) -> list[Rectangle]:
    """Turn marker points into rectangles by adding the corners of *offset_mask*."""
    return [
        Rectangle(
            Point(p.x + offset_mask.top_left.x, p.y + offset_mask.top_left.y),
            Point(p.x + offset_mask.bottom_right.x, p.y + offset_mask.bottom_right.y),
        )
        for p in positions
    ]
