"""Generate artillery clicks that cover a set of target rectangles.

Every rectangle must end up within ``radius`` of at least one click, using as
few clicks as the search can find. Both strategies are greedy: take a target,
pick the candidate point that also hits the most other remaining targets,
commit it, and drop everything it hits.
"""

from __future__ import annotations

import concurrent.futures
from collections.abc import Sequence

import numpy as np  # type: ignore
from loguru import logger

from ..core.config import config
from ..core.exceptions import ClickGenerationError, InvalidInputError
from ..core.logger import log
from ..geometry import Point, Rectangle, circle_collisions, rects_to_array
from ..utils.performance import timed


def _validate_request(radius: int, width: int, height: int) -> None:
    if radius < 0:
        raise InvalidInputError(f"Radius must not be negative, got {radius}")
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"Image size must be positive, got {width}x{height}")


def _search_window(bounds: np.ndarray, radius: int, width: int, height: int) -> tuple[int, int, int, int]:
    """Return inclusive ``(lo_x, hi_x, lo_y, hi_y)`` of the rectangle grown by *radius*, inside the image."""
    left, top, right, bottom = (int(v) for v in bounds)
    lo_x = min(max(left - radius, 0), width - 1)
    hi_x = min(max(right + radius, 0), width - 1)
    lo_y = min(max(top - radius, 0), height - 1)
    hi_y = min(max(bottom + radius, 0), height - 1)
    return lo_x, hi_x, lo_y, hi_y


def _best_click(target: np.ndarray, remaining: np.ndarray, candidates: np.ndarray, radius: int) -> Point:
    """Pick the candidate hitting *target* and the most of *remaining*.

    Ties go to the earliest candidate. Falls back to the target's top-left
    corner when no candidate reaches the target at all.
    """
    hits_target = circle_collisions(target[np.newaxis, :], candidates, radius)[:, 0]
    if not hits_target.any():
        return Point(int(target[0]), int(target[1]))
    candidates = candidates[hits_target]
    if len(remaining) == 0:
        best = 0
    else:
        best = int(np.argmax(circle_collisions(remaining, candidates, radius).sum(axis=1)))
    return Point(int(candidates[best, 0]), int(candidates[best, 1]))


def _greedy_cover(bounds: np.ndarray, radius: int, choose_candidates) -> list[Point]:
    remaining = bounds.copy()
    clicks: list[Point] = []
    while len(remaining):
        target = remaining[-1]
        remaining = remaining[:-1]
        click = _best_click(target, remaining, choose_candidates(target), radius)
        clicks.append(click)
        # Remove anything hit by the most recent click
        hit = circle_collisions(remaining, np.array([click.as_tuple()], dtype=np.int64), radius)[0]
        remaining = remaining[~hit]
    return clicks


def run_trial(
    rects: Sequence[Rectangle],
    radius: int,
    width: int,
    height: int,
    samples: int,
    seed: int,
) -> list[Point]:
    """One randomized greedy cover using *samples* random candidates per step."""
    rng = np.random.default_rng(seed)

    def sample(target: np.ndarray) -> np.ndarray:
        lo_x, hi_x, lo_y, hi_y = _search_window(target, radius, width, height)
        xs = rng.integers(lo_x, hi_x + 1, size=samples)
        ys = rng.integers(lo_y, hi_y + 1, size=samples)
        return np.column_stack((xs, ys)).astype(np.int64)

    return _greedy_cover(rects_to_array(rects), radius, sample)


def select_best_plan(plans: Sequence[list[Point]]) -> list[Point]:
    """Return the shortest plan; the first one wins ties."""
    if not plans:
        raise InvalidInputError("No click plans to choose from")
    return min(plans, key=len)


def generate_clicks(
    rects: Sequence[Rectangle],
    radius: int,
    width: int,
    height: int,
    *,
    trials: int | None = None,
    samples: int | None = None,
    seed: int | None = None,
) -> list[Point]:
    """Generate clicks from a set of target rectangles.

    Runs ``trials`` independent randomized greedy covers in a thread pool,
    trial ``i`` seeded with ``seed + i``, and keeps the shortest result.

    Args:
        rects: Targets to cover.
        radius: Artillery remote radius in pixels.
        width: Image width, keeps clicks in bounds.
        height: Image height, keeps clicks in bounds.
        trials: Number of trials (``config.click_trials`` by default).
        samples: Random candidates per greedy step (``config.click_samples`` by default).
        seed: Base seed (``config.click_seed`` by default).

    Raises:
        InvalidInputError: On a negative radius or empty image size.
        ClickGenerationError: If any trial fails.
    """
    _validate_request(radius, width, height)
    if not rects:
        return []
    trials = config.click_trials if trials is None else trials
    samples = config.click_samples if samples is None else samples
    seed = config.click_seed if seed is None else seed
    if trials <= 0 or samples <= 0:
        raise InvalidInputError("Trials and samples must be positive")

    with timed(f"generate_clicks ({trials} trials, {len(rects)} targets)"):
        with concurrent.futures.ThreadPoolExecutor(max_workers=trials) as executor:
            futures = [
                executor.submit(run_trial, list(rects), radius, width, height, samples, seed + trial)
                for trial in range(trials)
            ]

    plans: list[list[Point]] = []
    failures: list[BaseException] = []
    for future in futures:
        exc = future.exception()
        if exc is not None:
            failures.append(exc)
        else:
            plans.append(future.result())

    if failures:
        logger.error("{0} of {1} click trials failed: {2}", len(failures), trials, failures[0])
        raise ClickGenerationError(f"{len(failures)} of {trials} click trials failed", failures) from failures[0]

    best = select_best_plan(plans)
    log.log_click_plan(len(best), len(rects), sorted(len(plan) for plan in plans))
    return best


def generate_clicks_fixed(
    rects: Sequence[Rectangle],
    radius: int,
    width: int,
    height: int,
) -> list[Point]:
    """Deterministic variant of :func:`generate_clicks` that tries every grid point.

    Cost grows with the area of each grown rectangle, so keep this to small
    target counts or offline checks.
    """
    _validate_request(radius, width, height)
    if not rects:
        return []

    def grid(target: np.ndarray) -> np.ndarray:
        lo_x, hi_x, lo_y, hi_y = _search_window(target, radius, width, height)
        ys, xs = np.mgrid[lo_y:hi_y + 1, lo_x:hi_x + 1]
        return np.column_stack((xs.ravel(), ys.ravel())).astype(np.int64)

    with timed(f"generate_clicks_fixed ({len(rects)} targets)"):
        clicks = _greedy_cover(rects_to_array(rects), radius, grid)
    log.log_click_plan(len(clicks), len(rects))
    return clicks


def verify_cover(rects: Sequence[Rectangle], clicks: Sequence[Point], radius: int) -> list[Rectangle]:
    """Return the rectangles not hit by any click (empty for a valid cover)."""
    return [rect for rect in rects if not any(rect.collides_with_circle(c, radius) for c in clicks)]
