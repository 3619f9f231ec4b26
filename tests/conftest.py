# tests/conftest.py

"""
Shared fixtures: synthetic comb-path files and spectrum series.
"""

from pathlib import Path

import numpy as np
import pytest

from msicomb.core.spectra import SpectrumSeries


def write_table(path: Path, rows) -> Path:
    """Write rows of numbers as a tab-delimited text file."""
    path.write_text("\n".join("\t".join(f"{value:.3f}" for value in row) for row in rows) + "\n")
    return path


def comb_rows(line_ys, x_left=0.0, x_right=100.0, leg_ms=1000.0):
    """Waypoint and timing rows of a comb path sweeping each line right then back left."""
    waypoints = [[y, x_left, y, x_right, y, x_left] for y in line_ys]
    timings = [[leg_ms, leg_ms, leg_ms] for _ in line_ys]
    return waypoints, timings


@pytest.fixture
def path_files(tmp_path):
    """Factory writing waypoint/timing files for the given lines."""

    def _make(line_ys=(100.0, 90.0), **kwargs):
        waypoints, timings = comb_rows(line_ys, **kwargs)
        return (
            write_table(tmp_path / "positions.txt", waypoints),
            write_table(tmp_path / "times.txt", timings),
        )

    return _make


@pytest.fixture
def two_line_files(path_files):
    """Two lines (y=100, y=90) from x=0 to x=100, one second per leg."""
    return path_files((100.0, 90.0))


@pytest.fixture
def flat_profile_series():
    """Scans every 100 ms with intensity 1.0 at m/z 500."""
    scan_times = np.arange(61) / 10.0
    return SpectrumSeries.from_profile(scan_times, np.ones((61, 1)), [500.0])


@pytest.fixture
def table_writer():
    """The write_table helper, for tests that build their own path files."""
    return write_table
