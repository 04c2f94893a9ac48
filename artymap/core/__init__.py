"""Core components of artymap: configuration, logging and errors."""

from .config import Config, config
from .exceptions import (
    ArtyMapError,
    ClickGenerationError,
    EmptyImageError,
    ImageLoadError,
    InvalidGeometryError,
    InvalidImageError,
    InvalidInputError,
)
from .logger import Logger, log

__all__ = [
    "ArtyMapError",
    "ClickGenerationError",
    "Config",
    "EmptyImageError",
    "ImageLoadError",
    "InvalidGeometryError",
    "InvalidImageError",
    "InvalidInputError",
    "Logger",
    "config",
    "log",
]
