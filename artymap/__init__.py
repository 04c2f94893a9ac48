"""artymap: find enemy bases on a map screenshot and plan artillery clicks."""

from .geometry import Point, Rectangle
from .planning import ClickPlan, generate_clicks, generate_clicks_fixed, plan_clicks
from .vision import PixelBuffer, detect_targets

__all__ = [
    "ClickPlan",
    "PixelBuffer",
    "Point",
    "Rectangle",
    "detect_targets",
    "generate_clicks",
    "generate_clicks_fixed",
    "plan_clicks",
]
