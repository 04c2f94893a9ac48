"""Pixel classification for enemy-base colored pixels."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np  # type: ignore

from ..core.config import config


@dataclass(frozen=True, slots=True)
class TargetClassifier:
    """Inclusive per-channel range test.

    A range test rather than exact equality tolerates anti-aliasing and
    compression noise around the map's enemy color.
    """

    red: tuple[int, int]
    green: tuple[int, int]
    blue: tuple[int, int]

    @classmethod
    def from_config(cls) -> TargetClassifier:
        return cls(
            red=tuple(config.target_red_range),
            green=tuple(config.target_green_range),
            blue=tuple(config.target_blue_range),
        )

    def matches(self, pixel: tuple[int, int, int]) -> bool:
        """Return True if a single RGB pixel looks like a target."""
        r, g, b = int(pixel[0]), int(pixel[1]), int(pixel[2])
        return (
            self.red[0] <= r <= self.red[1]
            and self.green[0] <= g <= self.green[1]
            and self.blue[0] <= b <= self.blue[1]
        )

    def mask(self, pixels: np.ndarray) -> np.ndarray:
        """Classify every pixel of an ``(..., 3)`` RGB array at once."""
        r = pixels[..., 0]
        g = pixels[..., 1]
        b = pixels[..., 2]
        return (
            (r >= self.red[0]) & (r <= self.red[1])
            & (g >= self.green[0]) & (g <= self.green[1])
            & (b >= self.blue[0]) & (b <= self.blue[1])
        )
