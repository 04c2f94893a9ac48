import os

# Keep test runs from writing log files or debug images into the checkout
os.environ.setdefault("ARTYMAP_LOG_TO_FILE", "false")
os.environ.setdefault("ARTYMAP_SAVE_VISION_DEBUG", "false")

import numpy as np
import pytest

from artymap.vision.pixel_buffer import PixelBuffer

ENEMY = (200, 20, 25)
BACKGROUND = (40, 40, 40)


def blank_map(width, height, color=BACKGROUND):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


def paint(pixels, x, y, w, h, color=ENEMY):
    pixels[y:y + h, x:x + w] = color
    return pixels


@pytest.fixture
def two_target_map():
    """100x100 map with two 10 wide, 15 tall enemy blobs."""
    pixels = blank_map(100, 100)
    paint(pixels, 5, 5, 10, 15)
    paint(pixels, 50, 50, 10, 15)
    return PixelBuffer(pixels)


@pytest.fixture
def spawner_map():
    """Six 15x10 spawners, one double-wide blob and a speck of noise."""
    pixels = blank_map(200, 100)
    for x in (5, 30, 55, 80, 105, 130):
        paint(pixels, x, 5, 15, 10)
    paint(pixels, 5, 40, 30, 10)
    paint(pixels, 100, 60, 2, 2)
    return PixelBuffer(pixels)
