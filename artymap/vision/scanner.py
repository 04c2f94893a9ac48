"""Enemy-base rectangle detection on map screenshots.

The scanner runs several passes over one mutable :class:`PixelBuffer`. Every
accepted rectangle is erased from the buffer straight away, so later passes
only see what the more confident earlier passes left behind. Detection works
better the more zoomed in the map is.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

import numpy as np  # type: ignore
from loguru import logger

from ..core.config import config
from ..core.logger import log
from ..geometry import Point, Rectangle
from ..utils.performance import timed
from .classifier import TargetClassifier
from .pixel_buffer import BLACK, PixelBuffer
from .trace import NullTraceRecorder, TraceRecorder


class Corner(Enum):
    """Kind of rectangle corner a pixel can be."""

    LEFT_TOP = "left_top"
    LEFT_BOTTOM = "left_bottom"
    RIGHT_TOP = "right_top"
    RIGHT_BOTTOM = "right_bottom"


# (left, up, right, down) neighbour classification -> corner kind
_CORNER_PATTERNS: dict[tuple[bool, bool, bool, bool], Corner] = {
    (True, True, False, False): Corner.RIGHT_BOTTOM,
    (False, True, True, False): Corner.LEFT_BOTTOM,
    (False, False, True, True): Corner.LEFT_TOP,
    (True, False, False, True): Corner.RIGHT_TOP,
}

# Offsets of the two outer neighbours of each corner kind
_OUTER_NEIGHBOURS: dict[Corner, tuple[tuple[int, int], tuple[int, int]]] = {
    Corner.LEFT_TOP: ((0, -1), (-1, 0)),
    Corner.LEFT_BOTTOM: ((0, 1), (-1, 0)),
    Corner.RIGHT_TOP: ((0, -1), (1, 0)),
    Corner.RIGHT_BOTTOM: ((0, 1), (1, 0)),
}


def corner_pixels(rect: Rectangle) -> dict[Corner, Point]:
    """Return the four corner pixels of a non-empty scanner rectangle."""
    left, top = rect.top_left.x, rect.top_left.y
    right, bottom = rect.bottom_right.x - 1, rect.bottom_right.y - 1
    return {
        Corner.LEFT_TOP: Point(left, top),
        Corner.RIGHT_TOP: Point(right, top),
        Corner.LEFT_BOTTOM: Point(left, bottom),
        Corner.RIGHT_BOTTOM: Point(right, bottom),
    }


def deduce_unit_size(rects: list[Rectangle]) -> Optional[Rectangle]:
    """Infer the canonical size of one entity from a population of rectangles.

    Rectangles are bucketed by exact area. Adjacent buckets whose areas differ
    by less than the merge tolerance are merged into the bucket with the larger
    count, and buckets seen only once are dropped; this runs
    ``config.unit_merge_passes`` times. The surviving bucket with the highest
    count wins, larger area breaking ties.

    Returns:
        One rectangle from the winning bucket, or None if no size recurs.
    """
    candidates = sorted((r for r in rects if r.area() > 0), key=lambda r: r.area())
    counts: dict[int, int] = {}
    for rect in candidates:
        counts[rect.area()] = counts.get(rect.area(), 0) + 1

    limit = 1.0 + config.unit_merge_tolerance
    for _ in range(config.unit_merge_passes):
        areas = sorted(counts)
        for area, next_area in zip(areas, areas[1:]):
            if next_area / area < limit:
                if counts[area] > counts[next_area]:
                    counts[area] += counts[next_area]
                    counts[next_area] = 0
                else:
                    counts[next_area] += counts[area]
                    counts[area] = 0
        counts = {area: count for area, count in counts.items() if count > 1}

    if not counts:
        logger.debug("No recurring rectangle area among {0} candidates", len(candidates))
        return None

    likely_area = max(counts, key=lambda area: (counts[area], area))
    return next(r for r in candidates if r.area() == likely_area)


def filter_rectangles(rects: list[Rectangle], unit: Optional[Rectangle]) -> list[Rectangle]:
    """Drop duplicates, empty rectangles and speckle smaller than a fraction of the unit."""
    unique = list(dict.fromkeys(rects))
    min_area = unit.area() * config.min_area_fraction if unit is not None else 0.0
    return [r for r in unique if r.area() > 0 and r.area() >= min_area]


class BlobScanner:
    """Segment target-colored blobs of a pixel buffer into rectangles."""

    def __init__(
        self,
        buffer: PixelBuffer,
        classifier: Optional[TargetClassifier] = None,
        trace: Optional[TraceRecorder] = None,
    ) -> None:
        self.buffer = buffer
        self.classifier = classifier or TargetClassifier.from_config()
        self.trace = trace or NullTraceRecorder()
        self._mask: np.ndarray = self.classifier.mask(buffer.pixels)

    # ------------------------------------------------------------------
    # Pixel predicates
    # ------------------------------------------------------------------
    def is_target(self, x: int, y: int) -> bool:
        # Off-image reads never look like a target
        if not self.buffer.in_bounds(x, y):
            return False
        return bool(self._mask[y, x])

    def is_black(self, x: int, y: int) -> bool:
        return self.buffer.get(x, y) == BLACK

    def at_edge(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` is a target pixel whose left neighbour is not."""
        return self.is_target(x, y) and not self.is_target(x - 1, y)

    def _row_is_target(self, y: int, x: int, length: int) -> bool:
        if y < 0 or y >= self.buffer.height or x < 0 or x + length > self.buffer.width:
            return False
        return bool(self._mask[y, x:x + length].all())

    def _column_is_target(self, x: int, y: int, length: int) -> bool:
        if x < 0 or x >= self.buffer.width or y < 0 or y + length > self.buffer.height:
            return False
        return bool(self._mask[y:y + length, x].all())

    def _edges(self) -> Iterator[tuple[int, int]]:
        # Erasing only ever removes target pixels, so the target columns of a
        # row taken at row start are a superset of the live ones.
        for y in range(self.buffer.height):
            for x in np.flatnonzero(self._mask[y]):
                if self.at_edge(int(x), y):
                    yield int(x), y

    # ------------------------------------------------------------------
    # Single blob bounding
    # ------------------------------------------------------------------
    def scan_horizontal(self, x: int, y: int) -> Rectangle:
        """Bound the blob at ``(x, y)``: run right, then grow up and down at that width."""
        run = 1
        while self.is_target(x + run, y):
            run += 1

        above = 0
        while self._row_is_target(y - above - 1, x, run):
            above += 1

        below = 0
        while self._row_is_target(y + below + 1, x, run):
            below += 1

        rect = Rectangle.from_size(Point(x, y - above), run, above + 1 + below)
        self.trace.on_scan(self.buffer, rect)
        return rect

    def scan_vertical(self, x: int, y: int) -> Rectangle:
        """Bound the blob at ``(x, y)``: run down, then grow right at that height."""
        run = 1
        while self.is_target(x, y + run):
            run += 1

        columns = 0
        while self._column_is_target(x + columns + 1, y, run):
            columns += 1

        rect = Rectangle.from_size(Point(x, y), columns + 1, run)
        self.trace.on_scan(self.buffer, rect)
        return rect

    # ------------------------------------------------------------------
    # Corner classification
    # ------------------------------------------------------------------
    def corner_at(self, x: int, y: int) -> Optional[Corner]:
        """Classify ``(x, y)`` by which of its four neighbours are targets."""
        if not self.is_target(x, y):
            return None
        pattern = (
            self.is_target(x - 1, y),
            self.is_target(x, y - 1),
            self.is_target(x + 1, y),
            self.is_target(x, y + 1),
        )
        return _CORNER_PATTERNS.get(pattern)

    def strict_corner_at(self, x: int, y: int) -> Optional[Corner]:
        """Like :meth:`corner_at`, but reject corners whose outer neighbours are pure black.

        Pure black is unexplored map area, where the blob may simply continue.
        """
        corner = self.corner_at(x, y)
        if corner is None:
            return None
        for dx, dy in _OUTER_NEIGHBOURS[corner]:
            if self.buffer.get_checked(x + dx, y + dy) == BLACK:
                return None
        return corner

    def has_corners(self, rect: Rectangle) -> bool:
        """Return True if all four corners of *rect* match the basic corner pattern."""
        if rect.area() == 0:
            return False
        return all(self.corner_at(p.x, p.y) is kind for kind, p in corner_pixels(rect).items())

    def has_well_defined_corners(self, rect: Rectangle) -> bool:
        """Return True if all four corners of *rect* are strict corners."""
        if rect.area() == 0:
            return False
        return all(self.strict_corner_at(p.x, p.y) is kind for kind, p in corner_pixels(rect).items())

    # ------------------------------------------------------------------
    # Claiming
    # ------------------------------------------------------------------
    def erase(self, rect: Rectangle) -> None:
        """Erase *rect* from the buffer and the target mask."""
        self.buffer.erase(rect)
        rows, cols = self.buffer.clip(rect)
        self._mask[rows, cols] = self.classifier.mask(self.buffer.pixels[rows, cols])
        self.trace.on_erase(self.buffer, rect)

    def _claim(self, rect: Rectangle, found: list[Rectangle], *, min_area: int = -1) -> None:
        self.erase(rect)
        if rect.area() > min_area:
            found.append(rect)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------
    def scan_rects(self, passes: int) -> list[Rectangle]:
        """Find rectangles shaped like spawners.

        The final pass also accepts squarer worm shapes, and splits well-formed
        rectangles that look like two worms side by side or stacked.
        """
        found: list[Rectangle] = []
        min_area = config.min_candidate_area
        for pass_index in range(passes):
            last_pass = pass_index + 1 == passes
            for x, y in self._edges():
                rect = self.scan_horizontal(x, y)
                if rect.ratio_within(*config.spawner_ratio_range):
                    self._claim(rect, found, min_area=min_area)
                elif not last_pass:
                    continue
                elif rect.ratio_within(*config.worm_ratio_range, include_high=False):
                    self._claim(rect, found, min_area=min_area)
                elif self.has_well_defined_corners(rect):
                    halves = self._split(rect)
                    if halves:
                        self.erase(rect)
                        found.extend(half for half in halves if half.area() > min_area)
        self.trace.on_pass("scan_rects", found)
        return found

    @staticmethod
    def _split(rect: Rectangle) -> list[Rectangle]:
        """Split a double-worm rectangle in two along its long axis."""
        low, high = config.split_ratio_range
        ratio = rect.aspect_ratio()
        tl = rect.top_left
        if low <= ratio / 2.0 <= high:
            # Side by side
            half = rect.width() // 2
            return [
                Rectangle.from_size(tl, half, rect.height()),
                Rectangle(Point(tl.x + half, tl.y), rect.bottom_right),
            ]
        if low <= ratio * 2.0 <= high:
            # Stacked
            half = rect.height() // 2
            return [
                Rectangle.from_size(tl, rect.width(), half),
                Rectangle(Point(tl.x, tl.y + half), rect.bottom_right),
            ]
        return []

    def scan_rects_of_size(self, unit: Rectangle) -> list[Rectangle]:
        """Carve unit-sized rectangles out of blobs at least as large as the unit."""
        found: list[Rectangle] = []
        unit_w, unit_h = unit.width(), unit.height()
        tolerance = config.unit_fit_tolerance
        for _ in range(config.template_scan_passes):
            for x, y in self._edges():
                rect = self.scan_horizontal(x, y)
                width_fits = abs(rect.width() - unit_w) <= tolerance
                height_fits = abs(rect.height() - unit_h) <= tolerance

                if rect.width() >= unit_w and rect.height() >= unit_h:
                    # The unit fits within this area
                    self._claim(Rectangle.from_size(rect.top_left, unit_w, unit_h), found)
                elif width_fits and self.is_black(rect.bottom_right.x - 1, rect.bottom_right.y):
                    # Pure black right below: probably cut off by unexplored area
                    self._claim(Rectangle.from_size(rect.top_left, unit_w, unit_h), found)

                if (width_fits or height_fits) and not self.has_well_defined_corners(rect):
                    corners = corner_pixels(rect)
                    lt = corners[Corner.LEFT_TOP]
                    rb = corners[Corner.RIGHT_BOTTOM]
                    if self.strict_corner_at(lt.x, lt.y) is Corner.LEFT_TOP:
                        self._claim(Rectangle.from_size(rect.top_left, unit_w, unit_h), found)
                    elif self.strict_corner_at(rb.x, rb.y) is Corner.RIGHT_BOTTOM:
                        # Anchor so the bottom-right corners line up
                        anchor = Point(rect.bottom_right.x - unit_w, rect.bottom_right.y - unit_h)
                        self._claim(Rectangle.from_size(anchor, unit_w, unit_h), found)
        self.trace.on_pass("scan_rects_of_size", found)
        return found

    def scan_isolated_rects(self, unit: Optional[Rectangle]) -> list[Rectangle]:
        """Accept blobs with four strict corners, capping an oversized side to the unit.

        This separates adjacent spawners that look twice as big as normal.
        """
        found: list[Rectangle] = []
        slack = config.isolated_oversize_tolerance
        for x, y in self._edges():
            rect = self.scan_horizontal(x, y)
            if not self.has_well_defined_corners(rect):
                continue
            if unit is not None and rect.width() > unit.width() + slack:
                # Too long
                self._claim(Rectangle.from_size(rect.top_left, unit.width(), rect.height()), found)
            elif unit is not None and rect.height() > unit.height() + slack:
                # Too tall
                self._claim(Rectangle.from_size(rect.top_left, rect.width(), unit.height()), found)
            else:
                self._claim(rect, found, min_area=config.min_candidate_area)
        self.trace.on_pass("scan_isolated_rects", found)
        return found

    def scan_rect_any_ratio(self, passes: int) -> list[Rectangle]:
        """Claim whatever is left, keeping the larger of horizontal and vertical growth."""
        found: list[Rectangle] = []
        for _ in range(passes):
            for x, y in self._edges():
                horizontal = self.scan_horizontal(x, y)
                vertical = self.scan_vertical(x, y)
                best = horizontal if horizontal.area() > vertical.area() else vertical
                self._claim(best, found)
        self.trace.on_pass("scan_rect_any_ratio", found)
        return found

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def detect(self) -> tuple[list[Rectangle], int]:
        """Run every pass and return the filtered rectangles and the unit width."""
        found = self.scan_rects(config.initial_scan_passes)
        log.log_detection_pass("ratio", len(found))

        spawner_like = [r for r in found if r.ratio_within(*config.spawner_ratio_range)]
        unit = deduce_unit_size(spawner_like)
        if unit is not None:
            log.log_unit_size(unit.width(), unit.height(), unit.area())
            sized = self.scan_rects_of_size(unit)
            log.log_detection_pass("unit size", len(sized))
            found.extend(sized)
        else:
            log.warning("Could not deduce a unit size; skipping unit-size pass")

        second = self.scan_rects(1)
        log.log_detection_pass("ratio (second)", len(second))
        found.extend(second)

        isolated = self.scan_isolated_rects(unit)
        log.log_detection_pass("isolated", len(isolated))
        found.extend(isolated)

        leftovers = self.scan_rect_any_ratio(config.any_ratio_scan_passes)
        log.log_detection_pass("any ratio", len(leftovers))
        found.extend(leftovers)

        rects = filter_rectangles(found, unit)
        unit_width = unit.width() if unit is not None else 0
        log.info(f"Detected {len(rects)} targets (unit width {unit_width})")
        return rects, unit_width


def detect_targets(
    buffer: PixelBuffer,
    *,
    classifier: Optional[TargetClassifier] = None,
    trace: Optional[TraceRecorder] = None,
) -> tuple[list[Rectangle], int]:
    """Detect target rectangles in *buffer*.

    The buffer is erased while scanning; pass ``buffer.copy()`` to keep the
    original pixels.

    Returns:
        ``(rectangles, unit_width)``; the width is 0 when no unit size was found.
    """
    with timed("detect_targets"):
        return BlobScanner(buffer, classifier=classifier, trace=trace).detect()
