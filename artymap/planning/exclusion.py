"""Drop clicks that would land on fixed UI elements of the map view."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from loguru import logger

from ..core.config import config
from ..geometry import Point, Rectangle


def configured_zones() -> list[Rectangle]:
    return [Rectangle.from_bounds(*zone) for zone in config.excluded_zones]


def filter_excluded(points: Sequence[Point], zones: Optional[Sequence[Rectangle]] = None) -> list[Point]:
    """Return *points* without those inside any of *zones* (configured zones by default)."""
    zones = configured_zones() if zones is None else zones
    kept = [p for p in points if not any(zone.contains(p) for zone in zones)]
    if len(kept) != len(points):
        logger.debug("Dropped {0} clicks inside excluded zones", len(points) - len(kept))
    return kept
