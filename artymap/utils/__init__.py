"""Utility functions for artymap."""

from .performance import Stopwatch, timed

__all__ = [
    "Stopwatch",
    "timed",
]
