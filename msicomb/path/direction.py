# msicomb/path/direction.py

"""
Sweep direction labelling for scans along the comb path.

A scan belongs to a left-to-right sweep when the stage moved right both
before and after it without changing lines, and to a right-to-left sweep
when it moved left on both sides. Turnarounds, line changes, the first and
last scan, and scans without a position belong to neither sweep.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray


class SweepDirection(str, Enum):
    LEFT_TO_RIGHT = "left_to_right"
    RIGHT_TO_LEFT = "right_to_left"

    @property
    def opposite(self) -> "SweepDirection":
        if self is SweepDirection.LEFT_TO_RIGHT:
            return SweepDirection.RIGHT_TO_LEFT
        return SweepDirection.LEFT_TO_RIGHT


@dataclass
class ScanDirections:
    """Per-scan sweep labels. The two masks are never true for the same scan."""

    left_to_right: NDArray[np.bool_]
    right_to_left: NDArray[np.bool_]

    @property
    def labeled(self) -> NDArray[np.bool_]:
        return self.left_to_right | self.right_to_left

    def mask(self, direction: SweepDirection) -> NDArray[np.bool_]:
        if direction is SweepDirection.LEFT_TO_RIGHT:
            return self.left_to_right
        return self.right_to_left


def classify_scan_directions(
    x: NDArray[np.float64], y: NDArray[np.float64]
) -> ScanDirections:
    """
    Label each scan as part of a left-to-right or right-to-left sweep.

    Args:
        x: Time series of scan x-coordinates
        y: Time series of scan y-coordinates

    Returns:
        ScanDirections with boolean masks the same length as ``x``
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValueError(f"x ({x.shape}) and y ({y.shape}) must have the same shape")

    n = len(x)
    left_to_right = np.zeros(n, dtype=bool)
    right_to_left = np.zeros(n, dtype=bool)
    if n < 3:
        return ScanDirections(left_to_right, right_to_left)

    dx = np.diff(x)
    dy = np.diff(y)

    # NaN comparisons are False, so scans without a position stay unlabeled
    same_line = (dy[:-1] == 0) & (dy[1:] == 0)
    left_to_right[1:-1] = (dx[:-1] > 0) & (dx[1:] > 0) & same_line
    right_to_left[1:-1] = (dx[:-1] < 0) & (dx[1:] < 0) & same_line

    return ScanDirections(left_to_right, right_to_left)


def initial_motion_direction(x: NDArray[np.float64]) -> Optional[SweepDirection]:
    """
    Direction of the first x movement between consecutive positioned scans.

    Returns None when the stage never moves in x.
    """
    x = np.asarray(x, dtype=np.float64)
    x = x[~np.isnan(x)]
    moves = np.flatnonzero(np.diff(x) != 0)
    if moves.size == 0:
        return None
    i = moves[0]
    if x[i + 1] > x[i]:
        return SweepDirection.LEFT_TO_RIGHT
    return SweepDirection.RIGHT_TO_LEFT


def detect_first_pass(
    directions: ScanDirections, x: NDArray[np.float64]
) -> Tuple[SweepDirection, bool]:
    """
    Determine the sweep direction of the first pass over the sample.

    The first pass is the direction of the earliest labeled scan. The initial
    x movement is also checked: when the acquisition starts in a turnaround
    or during a line change the two can disagree, and the labeled scan wins.
    Sparse sampling can leave every scan unlabeled; the initial x movement
    then decides on its own.

    Returns:
        Tuple of (first pass direction, whether the initial x movement agrees)

    Raises:
        ValueError: If no scan is labeled and the stage never moves in x
    """
    initial = initial_motion_direction(x)

    labeled = np.flatnonzero(directions.labeled)
    if labeled.size == 0:
        if initial is None:
            raise ValueError(
                "No scans were acquired during a left-to-right or right-to-left sweep "
                "and the stage never moves in x"
            )
        logging.warning(
            f"No scan lies inside a sweep; using the initial stage motion ({initial.value}) "
            "as first pass direction"
        )
        logging.info(f"First pass direction: {initial.value}")
        return initial, True

    first = labeled[0]
    if directions.left_to_right[first]:
        first_pass = SweepDirection.LEFT_TO_RIGHT
    else:
        first_pass = SweepDirection.RIGHT_TO_LEFT

    agrees = initial is first_pass
    if not agrees:
        logging.warning(
            f"Initial stage motion ({initial.value if initial else 'none'}) disagrees with the "
            f"first labeled sweep ({first_pass.value} at scan {first}); "
            "acquisition may have started mid-turnaround"
        )

    logging.info(f"First pass direction: {first_pass.value}")
    return first_pass, agrees


def select_first_pass(
    directions: ScanDirections,
    first_pass: SweepDirection,
    valid: NDArray[np.bool_],
) -> NDArray[np.bool_]:
    """
    Scans used to build the image: positioned scans not on a return sweep.

    Turnaround and line-change scans are kept; gridding discards those off
    a line or at the x extremes.
    """
    return np.asarray(valid, dtype=bool) & ~directions.mask(first_pass.opposite)
