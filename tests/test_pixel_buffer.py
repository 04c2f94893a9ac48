import numpy as np
import pytest

from artymap.core.config import config
from artymap.core.exceptions import EmptyImageError, ImageLoadError, InvalidImageError
from artymap.geometry import Rectangle
from artymap.vision.pixel_buffer import BLACK, OFF_IMAGE_PIXEL, PixelBuffer

from conftest import BACKGROUND, blank_map


def test_out_of_range_reads():
    buffer = PixelBuffer(blank_map(4, 3, color=BLACK))
    assert buffer.get(0, 0) == BLACK
    assert buffer.get(-1, 0) == OFF_IMAGE_PIXEL
    assert buffer.get(4, 0) == OFF_IMAGE_PIXEL
    assert buffer.get(0, 3) == OFF_IMAGE_PIXEL
    assert OFF_IMAGE_PIXEL != BLACK
    assert buffer.get_checked(0, 3) is None
    assert buffer.get_checked(3, 2) == BLACK


def test_dimensions():
    buffer = PixelBuffer(blank_map(7, 5))
    assert buffer.dimensions() == (7, 5)
    assert buffer.width == 7
    assert buffer.height == 5


def test_put_ignores_out_of_range():
    buffer = PixelBuffer(blank_map(4, 4))
    buffer.put(1, 2, (9, 8, 7))
    buffer.put(10, 10, (9, 8, 7))
    assert buffer.get(1, 2) == (9, 8, 7)


def test_erase_is_clipped():
    buffer = PixelBuffer(blank_map(10, 10))
    buffer.erase(Rectangle.from_bounds(-5, -5, 3, 2))
    erased = tuple(config.erase_color)
    assert buffer.get(0, 0) == erased
    assert buffer.get(2, 1) == erased
    assert buffer.get(3, 1) == BACKGROUND
    assert buffer.get(2, 2) == BACKGROUND

    # Entirely off the image: nothing happens
    buffer.erase(Rectangle.from_bounds(20, 20, 30, 30))
    assert int((buffer.pixels == np.asarray(erased, dtype=np.uint8)).all(axis=-1).sum()) == 6


def test_copy_is_independent():
    buffer = PixelBuffer(blank_map(5, 5))
    clone = buffer.copy()
    clone.erase(Rectangle.from_bounds(0, 0, 5, 5))
    assert buffer.get(2, 2) == BACKGROUND


def test_malformed_buffers_are_rejected():
    with pytest.raises(EmptyImageError):
        PixelBuffer(np.zeros((0, 5, 3), dtype=np.uint8))
    with pytest.raises(InvalidImageError):
        PixelBuffer(np.zeros((5, 5), dtype=np.uint8))


def test_missing_file(tmp_path):
    with pytest.raises(ImageLoadError):
        PixelBuffer.from_file(str(tmp_path / "missing.png"))


def test_from_file_converts_to_rgb(tmp_path):
    import cv2

    bgr = np.zeros((4, 6, 3), dtype=np.uint8)
    bgr[:, :] = (25, 20, 200)  # enemy red in BGR order
    path = tmp_path / "map.png"
    cv2.imwrite(str(path), bgr)

    buffer = PixelBuffer.from_file(str(path))
    assert buffer.dimensions() == (6, 4)
    assert buffer.get(0, 0) == (200, 20, 25)
