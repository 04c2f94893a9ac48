"""Optional recording of scanner activity for debug animations.

The scanner receives a :class:`TraceRecorder` explicitly. The default
:class:`NullTraceRecorder` does nothing; :class:`FrameTraceRecorder` keeps
annotated frames that can be exported as an animated GIF.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np  # type: ignore
from loguru import logger
from PIL import Image

from ..core.config import config
from ..geometry import Rectangle
from .pixel_buffer import PixelBuffer

SCAN_COLOR = (0, 255, 255)
ERASE_COLOR = (0, 255, 0)


class TraceRecorder:
    """Interface for scanner instrumentation. Every hook is a no-op here."""

    def on_scan(self, buffer: PixelBuffer, rect: Rectangle) -> None:
        """Called after a blob has been bounded, before it is judged."""

    def on_erase(self, buffer: PixelBuffer, rect: Rectangle) -> None:
        """Called after *rect* has been erased from *buffer*."""

    def on_pass(self, name: str, found: list[Rectangle]) -> None:
        """Called when a scanner pass finishes."""


class NullTraceRecorder(TraceRecorder):
    """Recorder used when no instrumentation was requested."""


class FrameTraceRecorder(TraceRecorder):
    """Collect one annotated frame per scanner event."""

    def __init__(self, max_frames: int | None = None) -> None:
        self.max_frames = config.trace_max_frames if max_frames is None else max_frames
        self.frames: list[np.ndarray] = []
        self.passes: list[tuple[str, int]] = []
        self.dropped = 0

    def _capture(self, buffer: PixelBuffer, rect: Rectangle, color: tuple[int, int, int]) -> None:
        if len(self.frames) >= self.max_frames:
            self.dropped += 1
            return
        frame = buffer.pixels.copy()
        rows, cols = buffer.clip(rect)
        if rows.start < rows.stop and cols.start < cols.stop:
            frame[rows.start, cols] = color
            frame[rows.stop - 1, cols] = color
            frame[rows, cols.start] = color
            frame[rows, cols.stop - 1] = color
        self.frames.append(frame)

    def on_scan(self, buffer: PixelBuffer, rect: Rectangle) -> None:
        self._capture(buffer, rect, SCAN_COLOR)

    def on_erase(self, buffer: PixelBuffer, rect: Rectangle) -> None:
        self._capture(buffer, rect, ERASE_COLOR)

    def on_pass(self, name: str, found: list[Rectangle]) -> None:
        self.passes.append((name, len(found)))

    def save_animation(self, path: str, *, frame_ms: int = 40) -> bool:
        """Write the collected frames to *path* as an animated GIF.

        Returns:
            True if a file was written, False when there was nothing to save.
        """
        if not self.frames:
            logger.warning("No trace frames collected; skipping {0}", path)
            return False
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        images = [Image.fromarray(frame) for frame in self.frames]
        images[0].save(
            path,
            save_all=True,
            append_images=images[1:],
            duration=frame_ms,
            loop=0,
        )
        logger.info("Saved {0} trace frames to {1} ({2} dropped)", len(images), path, self.dropped)
        return True
