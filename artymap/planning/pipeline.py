"""End-to-end helpers: screenshot buffer in, click plan out."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.config import config
from ..core.logger import log
from ..geometry import Point, Rectangle
from ..vision.markers import (
    find_spawner_markers,
    find_worm_markers,
    remap_positions_to_rects,
    spawner_offset_mask,
    worm_offset_mask,
)
from ..vision.pixel_buffer import PixelBuffer
from ..vision.scanner import detect_targets
from ..vision.trace import TraceRecorder
from .exclusion import filter_excluded
from .generator import generate_clicks, generate_clicks_fixed


@dataclass(slots=True)
class ClickPlan:
    """Clicks to dispatch plus the targets they were planned for."""

    clicks: list[Point]
    targets: list[Rectangle]
    unit_width: int = 0
    source: str = "scan"
    excluded: int = field(default=0)


def _generate(rects: list[Rectangle], radius: int, width: int, height: int, fixed: bool) -> list[Point]:
    if fixed:
        return generate_clicks_fixed(rects, radius, width, height)
    return generate_clicks(rects, radius, width, height)


def plan_clicks(
    buffer: PixelBuffer,
    *,
    radius: Optional[int] = None,
    fixed: bool = False,
    trace: Optional[TraceRecorder] = None,
) -> ClickPlan:
    """Detect targets in a copy of *buffer* and plan clicks covering them."""
    radius = config.remote_radius if radius is None else radius
    rects, unit_width = detect_targets(buffer.copy(), trace=trace)
    clicks = _generate(rects, radius, buffer.width, buffer.height, fixed)
    kept = filter_excluded(clicks)
    return ClickPlan(clicks=kept, targets=rects, unit_width=unit_width, excluded=len(clicks) - len(kept))


def plan_clicks_from_markers(
    buffer: PixelBuffer,
    *,
    radius: Optional[int] = None,
    fixed: bool = False,
) -> ClickPlan:
    """Plan clicks from debug-overlay markers instead of blob scanning."""
    radius = config.remote_radius if radius is None else radius
    rects = remap_positions_to_rects(find_spawner_markers(buffer), spawner_offset_mask())
    rects += remap_positions_to_rects(find_worm_markers(buffer), worm_offset_mask())
    log.info(f"Mapped {len(rects)} debug markers to target rectangles")
    clicks = _generate(rects, radius, buffer.width, buffer.height, fixed)
    kept = filter_excluded(clicks)
    return ClickPlan(clicks=kept, targets=rects, source="markers", excluded=len(clicks) - len(kept))
