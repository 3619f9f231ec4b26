# msicomb/path/positions.py

"""
Stage position estimation for each scan.

The stage position at every scan's acquisition time is linearly
interpolated from the waypoint timeline, independently for x and y.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TIME_OFFSET_S
from ..exceptions import LengthMismatchError, RangeWarning
from .comb_path import CombPath


@dataclass
class ScanPositions:
    """Interpolated stage positions, NaN where a scan falls outside the path."""

    x: NDArray[np.float64]
    y: NDArray[np.float64]
    lines: NDArray[np.float64]  # lines that received at least part of the scan range
    n_out_of_range: int = 0

    @property
    def valid(self) -> NDArray[np.bool_]:
        return ~(np.isnan(self.x) | np.isnan(self.y))

    @property
    def n_valid(self) -> int:
        return int(np.count_nonzero(self.valid))


def estimate_scan_positions(
    scan_times: NDArray[np.float64],
    path: CombPath,
    time_offset: float = DEFAULT_TIME_OFFSET_S,
) -> ScanPositions:
    """
    Interpolate (x, y) stage positions at each scan time.

    Args:
        scan_times: Acquisition times in seconds since the instrument started
        path: Comb path waypoints with cumulative times
        time_offset: Seconds added to every scan time to align instrument and stage clocks

    Returns:
        ScanPositions for every scan and the lines that the scans actually cover

    Raises:
        LengthMismatchError: If the path's x, y and time sequences differ in length
    """
    if not (len(path.x) == len(path.y) == len(path.times)):
        raise LengthMismatchError(len(path.x), len(path.y), len(path.times))

    query_times = np.asarray(scan_times, dtype=np.float64) + time_offset

    n_beyond = int(np.count_nonzero(query_times > path.duration))
    if n_beyond:
        message = (
            f"{n_beyond} MS scans exceed the stage path "
            f"(last scan at {np.max(query_times):.2f} s, path ends at {path.duration:.2f} s); "
            "additional scans ignored"
        )
        logging.warning(message)
        warnings.warn(message, RangeWarning, stacklevel=2)

    scan_x = np.interp(query_times, path.times, path.x, left=np.nan, right=np.nan)
    scan_y = np.interp(query_times, path.times, path.y, left=np.nan, right=np.nan)

    n_out_of_range = int(np.count_nonzero(np.isnan(scan_x)))

    # Ignore lines that don't actually have data
    if n_out_of_range == len(scan_x):
        lines = np.array([], dtype=np.float64)
    else:
        y_min, y_max = np.nanmin(scan_y), np.nanmax(scan_y)
        lines = path.lines[(path.lines >= y_min) & (path.lines <= y_max)]

    dropped = len(path.lines) - len(lines)
    if dropped:
        logging.info(f"Dropped {dropped} line(s) without scan coverage")
    logging.info(
        f"Estimated positions for {len(scan_x) - n_out_of_range} of {len(scan_x)} scans "
        f"on {len(lines)} lines"
    )

    return ScanPositions(x=scan_x, y=scan_y, lines=lines, n_out_of_range=n_out_of_range)
