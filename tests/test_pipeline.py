import numpy as np
import pytest

from artymap.core.config import Config, config
from artymap.geometry import Point, Rectangle
from artymap.planning.exclusion import filter_excluded
from artymap.planning.pipeline import plan_clicks


def test_plan_clicks_leaves_input_untouched(two_target_map):
    before = two_target_map.pixels.copy()
    plan = plan_clicks(two_target_map, radius=40)

    assert np.array_equal(two_target_map.pixels, before)
    assert len(plan.targets) == 2
    assert len(plan.clicks) == 1
    assert plan.excluded == 0


def test_fixed_plan(two_target_map):
    plan = plan_clicks(two_target_map, radius=40, fixed=True)
    assert len(plan.clicks) == 1


def test_filter_excluded_zones():
    points = [Point(5, 5), Point(50, 50), Point(99, 0)]
    zones = [Rectangle.from_bounds(0, 0, 10, 10), Rectangle.from_bounds(90, 0, 100, 5)]
    assert filter_excluded(points, zones) == [Point(50, 50)]
    assert filter_excluded(points, []) == points


def test_configured_zones_apply_to_plans(two_target_map, monkeypatch):
    monkeypatch.setattr(config, "excluded_zones", [(0, 0, 100, 100)])
    plan = plan_clicks(two_target_map, radius=40)
    assert plan.clicks == []
    assert plan.excluded == 1


def test_default_config_is_valid():
    assert config.validate_config()


@pytest.mark.parametrize(
    "overrides",
    [
        {"remote_radius": -1},
        {"click_trials": 0},
        {"target_red_range": (200, 100)},
        {"spawner_ratio_range": (1.5, 1.25)},
        {"min_area_fraction": 2.0},
    ],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ValueError):
        Config(**overrides).validate_config()


def test_overlay_rendering(two_target_map, monkeypatch, tmp_path):
    from artymap.vision.debug import render_overlay, save_debug_overlay

    rects = [Rectangle.from_bounds(5, 5, 15, 20)]
    clicks = [Point(30, 30)]
    image = render_overlay(two_target_map.pixels, rects, clicks, 40)
    assert image.shape == two_target_map.pixels.shape
    assert not np.array_equal(image[::, ::, ::-1], two_target_map.pixels)

    monkeypatch.setattr(config, "save_vision_debug", False)
    assert save_debug_overlay(two_target_map.pixels, rects, clicks, 40) is None

    monkeypatch.setattr(config, "save_vision_debug", True)
    monkeypatch.setattr(config, "vision_debug_dir", str(tmp_path))
    path = save_debug_overlay(two_target_map.pixels, rects, clicks, 40, "plan.png")
    assert path is not None and (tmp_path / "plan.png").exists()
