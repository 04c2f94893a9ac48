"""Configuration management for artymap."""

import os

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Configuration class for the artymap detection and planning core."""

    # Target classification (inclusive channel ranges of enemy-base red)
    target_red_range: tuple[int, int] = Field(default=(151, 255))
    target_green_range: tuple[int, int] = Field(default=(12, 34))
    target_blue_range: tuple[int, int] = Field(default=(15, 35))
    erase_color: tuple[int, int, int] = Field(default=(255, 255, 255), description="Color written over claimed pixels")

    # Blob scanner tuning
    spawner_ratio_range: tuple[float, float] = Field(default=(1.25, 1.5))
    worm_ratio_range: tuple[float, float] = Field(default=(0.6, 1.25))  # upper bound exclusive
    split_ratio_range: tuple[float, float] = Field(default=(0.7, 1.2))
    min_candidate_area: int = Field(default=4, description="Candidates must be strictly larger than this")
    unit_merge_tolerance: float = Field(default=0.05)
    unit_merge_passes: int = Field(default=2)
    unit_fit_tolerance: int = Field(default=1)  # pixels
    isolated_oversize_tolerance: int = Field(default=2)  # pixels
    min_area_fraction: float = Field(default=0.2, description="Final filter, fraction of the unit area")
    initial_scan_passes: int = Field(default=3)
    template_scan_passes: int = Field(default=2)
    any_ratio_scan_passes: int = Field(default=3)

    # Click generation
    remote_radius: int = Field(default=40, description="Artillery remote radius in pixels")
    click_trials: int = Field(default=10)
    click_samples: int = Field(default=1000)
    click_seed: int = Field(default=0)

    # Debug markers
    spawner_marker_color: tuple[int, int, int] = Field(default=(0, 0, 255))
    worm_marker_color: tuple[int, int, int] = Field(default=(255, 0, 255))
    spawner_marker_spacing: int = Field(default=30)
    worm_marker_spacing: int = Field(default=30)
    # Offsets from a blue marker pixel to the spawner collision box
    spawner_marker_mask: tuple[int, int, int, int] = Field(default=(-30, -11, 23, 31))
    # Worm markers are drawn the same size as spawner markers
    worm_marker_mask: tuple[int, int, int, int] = Field(default=(-30, -11, 23, 31))

    # Excluded UI zones as (left, top, right, bottom)
    excluded_zones: list[tuple[int, int, int, int]] = Field(default=[])

    # Framework Configuration
    log_level: str = Field(default="INFO")
    log_to_file: bool = Field(default=True)
    log_dir: str = Field(default="logs")
    save_vision_debug: bool = Field(default=True)
    vision_debug_dir: str = Field(default="vision_debug")
    trace_max_frames: int = Field(default=500)

    class Config:
        """Pydantic configuration for environment loading."""

        env_file = ".env"
        env_prefix = "ARTYMAP_"
        case_sensitive = False
        extra = "ignore"  # Ignore unexpected env vars rather than raising errors

    def validate_config(self) -> bool:
        """Validate configuration values."""
        for name in ("target_red_range", "target_green_range", "target_blue_range"):
            low, high = getattr(self, name)
            if not 0 <= low <= high <= 255:
                raise ValueError(f"{name} must satisfy 0 <= low <= high <= 255")

        for name in ("spawner_ratio_range", "worm_ratio_range", "split_ratio_range"):
            low, high = getattr(self, name)
            if low <= 0 or low > high:
                raise ValueError(f"{name} must be a positive, ordered range")

        if self.remote_radius < 0:
            raise ValueError("Remote radius must not be negative")

        if self.click_trials <= 0 or self.click_samples <= 0:
            raise ValueError("Click trials and samples must be positive")

        if not 0 <= self.min_area_fraction <= 1:
            raise ValueError("Minimum area fraction must be between 0 and 1")

        return True

    def get_debug_path(self) -> str:
        """Get the full path to the vision debug directory."""
        return os.path.join(os.getcwd(), self.vision_debug_dir)


# Global configuration instance
config = Config()
