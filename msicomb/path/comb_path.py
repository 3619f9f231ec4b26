# msicomb/path/comb_path.py

"""
Stage path model for comb-shaped raster acquisitions.

The waypoint file lists the stage positions of the comb pattern, six
tab-delimited numbers per row::

    y_i    x_i    y_i+1    x_i+1    y_i+2    x_i+2

in micrometers. The timing file lists, three per row, the time in
milliseconds the stage took to move from the previous waypoint to the
current one. Both files are flattened row by row into one chronological
sequence of waypoints, and the running sum of the timings gives the
absolute time at which the stage reaches each waypoint.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from ..config import MS_PER_SECOND, PATH_FILE_DELIMITER, TIMING_COLUMNS, WAYPOINT_COLUMNS
from ..exceptions import FormatError, LengthMismatchError


@dataclass
class CombPath:
    """Flattened, time-ordered waypoints of the comb path."""

    x: NDArray[np.float64]  # micrometers
    y: NDArray[np.float64]  # micrometers
    times: NDArray[np.float64]  # cumulative seconds
    lines: NDArray[np.float64]  # sorted unique y-values, one per sweep
    waypoint_file: Optional[Path] = None
    timing_file: Optional[Path] = None

    def __post_init__(self):
        if not (len(self.x) == len(self.y) == len(self.times)):
            raise LengthMismatchError(len(self.x), len(self.y), len(self.times))

    @classmethod
    def from_arrays(
        cls,
        x: NDArray[np.float64],
        y: NDArray[np.float64],
        durations_ms: NDArray[np.float64],
    ) -> "CombPath":
        """Build a path from per-waypoint positions and leg durations in milliseconds."""
        x = np.asarray(x, dtype=np.float64).ravel()
        y = np.asarray(y, dtype=np.float64).ravel()
        times = np.cumsum(np.asarray(durations_ms, dtype=np.float64).ravel() / MS_PER_SECOND)
        return cls(x=x, y=y, times=times, lines=np.unique(y))

    @property
    def n_waypoints(self) -> int:
        return len(self.times)

    @property
    def start_time(self) -> float:
        return float(self.times[0])

    @property
    def duration(self) -> float:
        """Time at which the stage reaches the last waypoint, in seconds."""
        return float(self.times[-1])


def _widest_row(path: Path) -> int:
    """Field count of the widest row pandas rejects, ignoring trailing empty fields."""
    widths = []

    def _record(fields):
        while fields and fields[-1] == "":
            fields = fields[:-1]
        widths.append(len(fields))
        return None

    pd.read_csv(
        path, sep=PATH_FILE_DELIMITER, header=None, engine="python", on_bad_lines=_record
    )
    return max(widths) if widths else 0


def read_delimited_table(
    path: Union[str, Path], expected_columns: int, label: str
) -> NDArray[np.float64]:
    """
    Read a headerless tab-delimited numeric table and check its width.

    Columns that are entirely empty (produced by trailing delimiters) are
    ignored before the column count is checked.

    Raises:
        FormatError: If the table is empty, non-numeric or has the wrong number of columns
    """
    path = Path(path)
    try:
        table = pd.read_csv(path, sep=PATH_FILE_DELIMITER, header=None)
    except pd.errors.EmptyDataError as e:
        raise FormatError(f"{label} file is empty", path=path) from e
    except pd.errors.ParserError as e:
        # A later row has more fields than the first one
        raise FormatError(
            f"{label} file should have exactly {expected_columns} columns",
            path=path,
            expected_columns=expected_columns,
            actual_columns=_widest_row(path),
        ) from e

    table = table.dropna(axis=1, how="all")
    if table.shape[1] != expected_columns:
        raise FormatError(
            f"{label} file should have exactly {expected_columns} columns",
            path=path,
            expected_columns=expected_columns,
            actual_columns=table.shape[1],
        )

    try:
        values = table.to_numpy(dtype=np.float64)
    except ValueError as e:
        raise FormatError(f"{label} file contains non-numeric values", path=path) from e

    if np.isnan(values).any():
        raise FormatError(f"{label} file has missing values", path=path)

    return values


def load_comb_path(
    waypoint_file: Union[str, Path], timing_file: Union[str, Path]
) -> CombPath:
    """
    Load the comb path from its waypoint and timing files.

    Args:
        waypoint_file: Tab-delimited file with six columns (y, x pairs) per row
        timing_file: Tab-delimited file with three leg durations (ms) per row

    Returns:
        CombPath with one (x, y, cumulative time) sample per waypoint

    Raises:
        FormatError: If either file has the wrong number of columns
        LengthMismatchError: If the flattened positions and times differ in length
    """
    waypoint_file = Path(waypoint_file)
    timing_file = Path(timing_file)

    positions = read_delimited_table(waypoint_file, WAYPOINT_COLUMNS, "Position")
    durations = read_delimited_table(timing_file, TIMING_COLUMNS, "Time")

    # Row-major flattening keeps waypoints in acquisition order
    flat = positions.ravel()
    y = flat[0::2]
    x = flat[1::2]

    path = CombPath.from_arrays(x, y, durations.ravel())
    path.waypoint_file = waypoint_file
    path.timing_file = timing_file

    logging.info(
        f"Loaded comb path with {path.n_waypoints} waypoints on {len(path.lines)} lines, "
        f"duration {path.duration:.1f} s"
    )
    return path
