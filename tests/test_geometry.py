import numpy as np
import pytest

from artymap.core.exceptions import InvalidGeometryError
from artymap.geometry import Point, Rectangle, circle_collisions, rects_to_array


@pytest.fixture
def square():
    return Rectangle.from_bounds(0, 0, 10, 10)


def test_collision_at_exact_radius(square):
    assert square.collides_with_circle(Point(15, 5), 5)
    assert not square.collides_with_circle(Point(16, 5), 5)


def test_collision_near_corner(square):
    # distance sqrt(18) from (10, 10)
    assert square.collides_with_circle(Point(13, 13), 5)
    # distance sqrt(32)
    assert not square.collides_with_circle(Point(14, 14), 5)


def test_point_inside_collides_with_zero_radius(square):
    assert square.collides_with_circle(Point(4, 7), 0)


def test_precheck_uses_height_bound():
    wide = Rectangle.from_bounds(0, 0, 100, 10)
    assert not wide.is_close_enough_to_collide(Point(50, 60), 5)
    assert not wide.collides_with_circle(Point(50, 60), 5)


def test_precheck_never_rejects_a_collision(square):
    for x in range(-10, 21):
        for y in range(-10, 21):
            p = Point(x, y)
            if square.collides_with_circle(p, 7):
                assert square.is_close_enough_to_collide(p, 7)


def test_vectorized_collisions_match_scalar():
    rects = [
        Rectangle.from_bounds(0, 0, 10, 10),
        Rectangle.from_bounds(20, 5, 26, 30),
        Rectangle.from_bounds(3, 3, 3, 3),
    ]
    points = np.array([(x, y) for x in range(-5, 35, 3) for y in range(-5, 40, 3)], dtype=np.int64)
    matrix = circle_collisions(rects_to_array(rects), points, 6)
    for m, (x, y) in enumerate(points):
        for n, rect in enumerate(rects):
            assert matrix[m, n] == rect.collides_with_circle(Point(int(x), int(y)), 6)


def test_size_properties():
    rect = Rectangle.from_size(Point(5, 5), 10, 15)
    assert rect.width() == 10
    assert rect.height() == 15
    assert rect.area() == 150
    assert rect.aspect_ratio() == pytest.approx(10 / 15)
    assert rect.as_tuple() == (5, 5, 15, 20)


def test_inverted_rectangle_is_rejected():
    with pytest.raises(InvalidGeometryError):
        Rectangle(Point(10, 0), Point(0, 10))
    with pytest.raises(InvalidGeometryError):
        Rectangle.from_size(Point(0, 0), 5, -1)


def test_zero_height_ratio_is_guarded():
    flat = Rectangle.from_size(Point(0, 0), 5, 0)
    assert flat.area() == 0
    with pytest.raises(InvalidGeometryError):
        flat.aspect_ratio()
    assert not flat.ratio_within(0.0, 100.0)


def test_ratio_window_bounds():
    rect = Rectangle.from_size(Point(0, 0), 5, 4)
    assert rect.ratio_within(1.25, 1.5)
    assert not rect.ratio_within(0.6, 1.25, include_high=False)
