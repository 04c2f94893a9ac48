"""Click planning: covering target rectangles with artillery clicks."""

from .exclusion import filter_excluded
from .generator import (
    generate_clicks,
    generate_clicks_fixed,
    run_trial,
    select_best_plan,
    verify_cover,
)
from .pipeline import ClickPlan, plan_clicks, plan_clicks_from_markers

__all__ = [
    "ClickPlan",
    "filter_excluded",
    "generate_clicks",
    "generate_clicks_fixed",
    "plan_clicks",
    "plan_clicks_from_markers",
    "run_trial",
    "select_best_plan",
    "verify_cover",
]
