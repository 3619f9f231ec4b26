"""
Configuration constants for msicomb.

This module centralizes the constants and default settings used by the
reconstruction pipeline so they can be tuned in a single place.
"""

# Path file layout
WAYPOINT_COLUMNS = 6  # y_i, x_i, y_i+1, x_i+1, y_i+2, x_i+2
TIMING_COLUMNS = 3  # t_i, t_i+1, t_i+2
PATH_FILE_DELIMITER = "\t"
MS_PER_SECOND = 1000.0

# Stage/instrument clock alignment
DEFAULT_TIME_OFFSET_S = 0.0

# Logarithmic mass axis: consecutive entries differ by a factor (N+1)/N
LOG_AXIS_RESOLUTION = 17000

# Gaussian peak spreading (window length in bins)
DEFAULT_KERNEL_WIDTH = 11
GAUSSIAN_WINDOW_ALPHA = 2.5  # same shape as MATLAB gausswin

# Gridding
EDGE_GUARD_UM = 1.0  # inset applied to min(x)/max(x) when selecting scans per line
PIXEL_COUNT_TOLERANCE = 1e-9  # absorbs rounding in (max(x) - min(x)) / pitch

# Persistence
CUBE_FORMAT_VERSION = 1

# Configuration classes
from dataclasses import dataclass
from typing import Optional


@dataclass
class ReconstructionConfig:
    """Configuration for image cube reconstruction"""
    time_offset_s: float = DEFAULT_TIME_OFFSET_S
    pixel_pitch_um: Optional[float] = None  # None derives the pitch from scans per line

    # Centroid rasterization
    resolution: int = LOG_AXIS_RESOLUTION
    kernel_width: int = DEFAULT_KERNEL_WIDTH

    edge_guard_um: float = EDGE_GUARD_UM
    show_progress: bool = True

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.pixel_pitch_um is not None and self.pixel_pitch_um <= 0:
            raise ValueError(f"pixel_pitch_um must be positive, got {self.pixel_pitch_um}")

        if self.resolution < 1:
            raise ValueError(f"resolution must be at least 1, got {self.resolution}")

        if self.kernel_width < 1 or self.kernel_width % 2 == 0:
            raise ValueError(
                f"kernel_width must be a positive odd number, got {self.kernel_width}"
            )

        if self.edge_guard_um < 0:
            raise ValueError(f"edge_guard_um must be non-negative, got {self.edge_guard_um}")

    def get_summary(self) -> dict:
        """Get configuration summary for logging and cache keys"""
        return {
            "time_offset_s": self.time_offset_s,
            "pixel_pitch_um": self.pixel_pitch_um,
            "resolution": self.resolution,
            "kernel_width": self.kernel_width,
            "edge_guard_um": self.edge_guard_um,
        }
