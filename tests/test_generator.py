import threading

import numpy as np
import pytest

from artymap.core.exceptions import ClickGenerationError, InvalidInputError
from artymap.geometry import Point, Rectangle
from artymap.planning import generator
from artymap.planning.generator import (
    generate_clicks,
    generate_clicks_fixed,
    run_trial,
    select_best_plan,
    verify_cover,
)
from artymap.vision.scanner import detect_targets


def random_rects(seed, count, width=400, height=300):
    rng = np.random.default_rng(seed)
    rects = []
    for _ in range(count):
        x = int(rng.integers(0, width - 20))
        y = int(rng.integers(0, height - 20))
        rects.append(Rectangle.from_size(Point(x, y), int(rng.integers(1, 20)), int(rng.integers(1, 20))))
    return rects


@pytest.mark.parametrize("seed,radius", [(1, 0), (2, 5), (3, 25), (4, 60)])
def test_random_strategy_always_covers(seed, radius):
    rects = random_rects(seed, 40)
    clicks = generate_clicks(rects, radius, 400, 300, trials=4, samples=200)
    assert clicks
    assert verify_cover(rects, clicks, radius) == []


@pytest.mark.parametrize("seed,radius", [(5, 3), (6, 30)])
def test_fixed_strategy_always_covers(seed, radius):
    rects = random_rects(seed, 12)
    clicks = generate_clicks_fixed(rects, radius, 400, 300)
    assert verify_cover(rects, clicks, radius) == []


def test_one_click_covers_nearby_targets(two_target_map):
    rects, _ = detect_targets(two_target_map)
    assert len(rects) == 2

    clicks = generate_clicks(rects, 40, 100, 100)
    assert len(clicks) == 1
    assert all(rect.collides_with_circle(clicks[0], 40) for rect in rects)

    fixed = generate_clicks_fixed(rects, 40, 100, 100)
    assert len(fixed) == 1
    assert all(rect.collides_with_circle(fixed[0], 40) for rect in rects)


def test_shortest_plan_wins():
    plans = [[Point(i, 0) for i in range(n)] for n in (4, 3, 5, 3, 6)]
    best = select_best_plan(plans)
    assert len(best) == 3
    assert best is plans[1]


def test_no_plans_is_an_error():
    with pytest.raises(InvalidInputError):
        select_best_plan([])


def test_result_is_the_best_trial():
    rects = random_rects(7, 30)
    expected = min(len(run_trial(rects, 20, 400, 300, 50, 100 + i)) for i in range(6))
    clicks = generate_clicks(rects, 20, 400, 300, trials=6, samples=50, seed=100)
    assert len(clicks) == expected


def test_trials_are_reproducible():
    rects = random_rects(8, 25)
    first = generate_clicks(rects, 15, 400, 300, trials=3, samples=100, seed=9)
    second = generate_clicks(rects, 15, 400, 300, trials=3, samples=100, seed=9)
    assert first == second


def test_fixed_strategy_is_deterministic():
    rects = random_rects(10, 8)
    assert generate_clicks_fixed(rects, 10, 400, 300) == generate_clicks_fixed(rects, 10, 400, 300)


def test_unreachable_target_falls_back_to_corner():
    rect = Rectangle.from_bounds(200, 200, 210, 210)
    clicks = generate_clicks([rect], 5, 50, 50, trials=2, samples=20)
    assert clicks == [Point(200, 200)]
    assert generate_clicks_fixed([rect], 5, 50, 50) == [Point(200, 200)]


def test_duplicate_targets_need_one_click():
    rect = Rectangle.from_bounds(10, 10, 20, 20)
    clicks = generate_clicks([rect, rect, rect], 5, 100, 100, trials=2, samples=50)
    assert len(clicks) == 1


def test_empty_input():
    assert generate_clicks([], 10, 100, 100) == []
    assert generate_clicks_fixed([], 10, 100, 100) == []


@pytest.mark.parametrize("radius,width,height", [(-1, 100, 100), (10, 0, 100), (10, 100, -5)])
def test_invalid_requests(radius, width, height):
    rect = Rectangle.from_bounds(0, 0, 5, 5)
    with pytest.raises(InvalidInputError):
        generate_clicks([rect], radius, width, height)
    with pytest.raises(InvalidInputError):
        generate_clicks_fixed([rect], radius, width, height)


def test_failed_trials_are_reported_together(monkeypatch):
    def broken_trial(*args, **kwargs):
        raise RuntimeError("trial crashed")

    monkeypatch.setattr(generator, "run_trial", broken_trial)
    with pytest.raises(ClickGenerationError) as excinfo:
        generate_clicks([Rectangle.from_bounds(0, 0, 5, 5)], 10, 100, 100, trials=3, samples=10)
    assert len(excinfo.value.failures) == 3
    assert all(isinstance(exc, RuntimeError) for exc in excinfo.value.failures)


def test_every_trial_runs_concurrently(monkeypatch):
    trials = 12
    barrier = threading.Barrier(trials, timeout=5)

    def waiting_trial(rects, radius, width, height, samples, seed):
        barrier.wait()
        return [Point(seed, 0)]

    monkeypatch.setattr(generator, "run_trial", waiting_trial)
    clicks = generate_clicks([Rectangle.from_bounds(0, 0, 5, 5)], 10, 100, 100, trials=trials, samples=10, seed=0)
    assert clicks == [Point(0, 0)]


def test_verify_cover_reports_missed_targets():
    near = Rectangle.from_bounds(0, 0, 10, 10)
    far = Rectangle.from_bounds(100, 100, 110, 110)
    assert verify_cover([near, far], [Point(5, 5)], 10) == [far]
