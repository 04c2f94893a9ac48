"""Structured logging for artymap."""

from __future__ import annotations

import os
import sys
from typing import Any

from loguru import logger

from .config import config


class Logger:
    """Structured logging wrapper around the shared *Loguru* logger."""

    def __init__(self, name: str = "artymap") -> None:
        """Initialize and configure a *Loguru* logger instance."""
        self.name = name
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger with proper formatting and handlers."""
        # Remove default handler
        logger.remove()

        # ------------------------------------------------------------------
        # Console handler
        # ------------------------------------------------------------------
        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level:<8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

        logger.add(
            sys.stderr,
            format=console_format,
            level=config.log_level,
            colorize=True,
        )

        if not config.log_to_file:
            return

        # ------------------------------------------------------------------
        # File handlers
        # ------------------------------------------------------------------
        os.makedirs(config.log_dir, exist_ok=True)
        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | "
            "{name}:{function}:{line} | {message}"
        )

        logger.add(
            os.path.join(config.log_dir, "artymap_{time:YYYY-MM-DD}.log"),
            format=file_format,
            level="DEBUG",
            rotation="1 day",
            retention="30 days",
            compression="zip",
        )

        # Separate error log
        logger.add(
            os.path.join(config.log_dir, "errors_{time:YYYY-MM-DD}.log"),
            format=file_format,
            level="ERROR",
            rotation="1 day",
            retention="90 days",
            compression="zip",
        )

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        logger.info(f"[{self.name}] {message}", **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        logger.debug(f"[{self.name}] {message}", **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        logger.warning(f"[{self.name}] {message}", **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        logger.error(f"[{self.name}] {message}", **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        """Log success message."""
        logger.success(f"[{self.name}] {message}", **kwargs)

    def log_detection_pass(self, pass_name: str, found: int) -> None:
        """Log how many rectangles one scanner pass produced."""
        self.debug(f"DETECTION PASS: {pass_name} found {found} rectangles")

    def log_unit_size(self, width: int, height: int, area: int) -> None:
        """Log the inferred unit rectangle."""
        self.info(f"UNIT SIZE: {width}x{height} (area {area})")

    def log_click_plan(self, clicks: int, targets: int, trial_lengths: list[int] | None = None) -> None:
        """Log the size of a generated click plan."""
        msg = f"CLICK PLAN: {clicks} clicks for {targets} targets"
        if trial_lengths:
            msg += f" | Trials: {trial_lengths}"
        self.info(msg)

    def log_performance(self, operation: str, duration_ms: float) -> None:
        """Log performance metrics."""
        self.debug(f"PERFORMANCE: {operation} took {duration_ms:.2f}ms")


# Global logger instance
log = Logger()
