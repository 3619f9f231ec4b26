"""Exceptions and warning categories raised by the reconstruction pipeline."""

from pathlib import Path
from typing import Optional, Union


class MSICombError(Exception):
    """Base class for msicomb errors."""
    pass


class FormatError(MSICombError, ValueError):
    """Raised when an input file does not have the expected layout."""

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        expected_columns: Optional[int] = None,
        actual_columns: Optional[int] = None,
    ):
        self.path = Path(path) if path is not None else None
        self.expected_columns = expected_columns
        self.actual_columns = actual_columns

        details = []
        if self.path is not None:
            details.append(f"file: {self.path}")
        if expected_columns is not None:
            details.append(f"expected {expected_columns} columns, found {actual_columns}")
        if details:
            message = f"{message} ({'; '.join(details)})"
        super().__init__(message)


class LengthMismatchError(MSICombError, ValueError):
    """Raised when flattened waypoint and timing sequences disagree in length."""

    def __init__(self, n_x: int, n_y: int, n_times: int):
        self.n_x = n_x
        self.n_y = n_y
        self.n_times = n_times
        super().__init__(
            "Stage path sequences have different lengths: "
            f"x={n_x}, y={n_y}, time={n_times}"
        )


class CacheMismatchError(MSICombError):
    """Raised when an existing cube artifact was built from different inputs."""
    pass


class RangeWarning(UserWarning):
    """Scan times fall outside the stage path; those scans get no position."""
    pass


class DegenerateLineWarning(UserWarning):
    """A line has too few scans to interpolate and was zero-filled."""
    pass
