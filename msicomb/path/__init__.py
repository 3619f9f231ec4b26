# msicomb/path/__init__.py

"""
Stage path handling for comb raster acquisitions.

This package loads the planned stage path, estimates where the stage was
when each scan was acquired and labels the sweep direction of each scan.
"""

from .comb_path import CombPath, load_comb_path
from .direction import (
    ScanDirections,
    SweepDirection,
    classify_scan_directions,
    detect_first_pass,
    select_first_pass,
)
from .positions import ScanPositions, estimate_scan_positions

__all__ = [
    "CombPath",
    "load_comb_path",
    "ScanPositions",
    "estimate_scan_positions",
    "ScanDirections",
    "SweepDirection",
    "classify_scan_directions",
    "detect_first_pass",
    "select_first_pass",
]
