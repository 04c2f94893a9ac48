"""Vision debugging helpers: draw rectangles and click circles onto a map image."""

from __future__ import annotations

from pathlib import Path

import cv2  # type: ignore
import numpy as np  # type: ignore

from ..core.config import config
from ..geometry import Point, Rectangle


def render_overlay(
    pixels: np.ndarray,
    rects: list[Rectangle],
    clicks: list[Point],
    radius: int,
) -> np.ndarray:
    """Return a BGR copy of the RGB *pixels* with rectangles and click radii drawn on."""
    img = cv2.cvtColor(np.ascontiguousarray(pixels, dtype=np.uint8), cv2.COLOR_RGB2BGR)

    for rect in rects:
        x1, y1, x2, y2 = rect.as_tuple()
        cv2.rectangle(img, (x1, y1), (max(x1, x2 - 1), max(y1, y2 - 1)), (0, 255, 0), thickness=1)

    for index, click in enumerate(clicks):
        center = click.as_tuple()
        cv2.circle(img, center, radius, (255, 255, 0), thickness=1, lineType=cv2.LINE_AA)
        cv2.drawMarker(img, center, (0, 0, 255), markerType=cv2.MARKER_CROSS, markerSize=7)
        cv2.putText(
            img,
            str(index),
            (center[0] + 4, max(10, center[1] - 4)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.4,
            (0, 0, 255),
            thickness=1,
            lineType=cv2.LINE_AA,
        )
    return img


def save_debug_overlay(
    pixels: np.ndarray,
    rects: list[Rectangle],
    clicks: list[Point],
    radius: int,
    filename: str = "click_plan.png",
) -> str | None:
    """Draw the plan on the image and save it under the vision debug directory.

    Returns:
        The written path, or None when debug output is disabled.
    """
    if not config.save_vision_debug:
        return None

    debug_dir = Path(config.get_debug_path())
    debug_dir.mkdir(parents=True, exist_ok=True)
    path = debug_dir / filename
    cv2.imwrite(str(path), render_overlay(pixels, rects, clicks, radius))
    return str(path)
