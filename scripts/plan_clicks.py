#!/usr/bin/env python3
"""Plan artillery clicks for a saved map screenshot.

Prints one ``x y`` line per click, in dispatch order.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger

from artymap.core.config import config
from artymap.core.exceptions import ArtyMapError
from artymap.planning import plan_clicks, plan_clicks_from_markers
from artymap.vision.debug import save_debug_overlay
from artymap.vision.pixel_buffer import PixelBuffer
from artymap.vision.trace import FrameTraceRecorder


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Plan artillery clicks for a map screenshot")
    parser.add_argument("image", help="Path to the screenshot")
    parser.add_argument("--radius", "-r", type=int, default=config.remote_radius,
                        help="Artillery remote radius in pixels")
    parser.add_argument("--fixed", action="store_true",
                        help="Use the deterministic grid search instead of random trials")
    parser.add_argument("--markers", action="store_true",
                        help="Read debug-overlay markers instead of scanning enemy colors")
    parser.add_argument("--overlay", default=None,
                        help="File name (or path) for a debug overlay image")
    parser.add_argument("--trace", default=None,
                        help="Write an animated GIF of the scanner passes to this path")

    args = parser.parse_args()

    try:
        config.validate_config()
        buffer = PixelBuffer.from_file(args.image)
        recorder = FrameTraceRecorder() if args.trace else None
        if args.markers:
            plan = plan_clicks_from_markers(buffer, radius=args.radius, fixed=args.fixed)
        else:
            plan = plan_clicks(buffer, radius=args.radius, fixed=args.fixed, trace=recorder)
    except (ArtyMapError, ValueError) as e:
        logger.error(f"Click planning failed: {e}")
        return 1

    logger.info(
        f"{len(plan.clicks)} clicks for {len(plan.targets)} targets "
        f"({plan.source}, {plan.excluded} excluded)"
    )
    for click in plan.clicks:
        print(f"{click.x} {click.y}")

    if args.overlay:
        path = save_debug_overlay(buffer.pixels, plan.targets, plan.clicks, args.radius, args.overlay)
        if path:
            logger.info(f"Overlay saved to {path}")
    if recorder is not None:
        recorder.save_animation(args.trace)
    return 0


if __name__ == "__main__":
    sys.exit(main())
