# tests/unit/path/test_comb_path.py

"""
Tests for loading the comb stage path.
"""

import numpy as np
import pytest

from msicomb.exceptions import FormatError, LengthMismatchError
from msicomb.path.comb_path import CombPath, load_comb_path


class TestLoadCombPath:
    """Test cases for load_comb_path."""

    def test_flattens_waypoints_in_acquisition_order(self, tmp_path, table_writer):
        """Rows are read left to right, top to bottom as (y, x) pairs."""
        positions = table_writer(
            tmp_path / "pos.txt",
            [[6713.84, 62190.25, 6713.84, 53190.25, 6713.84, 62191.25],
             [6513.84, 62191.25, 6513.84, 53191.25, 6513.84, 62192.012]],
        )
        times = table_writer(
            tmp_path / "time.txt",
            [[1512.0, 60193.0, 60206.0], [1513.0, 60201.0, 60199.0]],
        )

        path = load_comb_path(positions, times)

        np.testing.assert_allclose(
            path.x, [62190.25, 53190.25, 62191.25, 62191.25, 53191.25, 62192.012]
        )
        np.testing.assert_allclose(path.y, [6713.84] * 3 + [6513.84] * 3)
        assert path.n_waypoints == 6

    def test_cumulative_times_in_seconds(self, two_line_files):
        path = load_comb_path(*two_line_files)

        np.testing.assert_allclose(path.times, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        assert path.start_time == 1.0
        assert path.duration == 6.0

    def test_lines_are_sorted_unique_y_values(self, path_files):
        path = load_comb_path(*path_files((300.0, 100.0, 200.0)))

        np.testing.assert_array_equal(path.lines, [100.0, 200.0, 300.0])
        assert path.waypoint_file.name == "positions.txt"
        assert path.timing_file.name == "times.txt"

    def test_trailing_delimiters_are_ignored(self, tmp_path):
        positions = tmp_path / "pos.txt"
        positions.write_text("10\t0\t10\t50\t10\t0\t\n")
        times = tmp_path / "time.txt"
        times.write_text("500\t500\t500\t\n")

        path = load_comb_path(positions, times)

        np.testing.assert_allclose(path.x, [0.0, 50.0, 0.0])
        np.testing.assert_allclose(path.times, [0.5, 1.0, 1.5])

    def test_wrong_waypoint_column_count(self, tmp_path, table_writer):
        positions = table_writer(tmp_path / "pos.txt", [[10.0, 0.0, 10.0, 50.0]])
        times = table_writer(tmp_path / "time.txt", [[500.0, 500.0, 500.0]])

        with pytest.raises(FormatError, match="expected 6 columns, found 4") as exc_info:
            load_comb_path(positions, times)

        assert exc_info.value.path == positions
        assert exc_info.value.expected_columns == 6
        assert exc_info.value.actual_columns == 4

    def test_wrong_timing_column_count(self, tmp_path, table_writer):
        positions = table_writer(tmp_path / "pos.txt", [[10.0, 0.0, 10.0, 50.0, 10.0, 0.0]])
        times = table_writer(tmp_path / "time.txt", [[500.0, 500.0]])

        with pytest.raises(FormatError, match="Time file should have exactly 3 columns"):
            load_comb_path(positions, times)

    def test_row_with_extra_fields(self, tmp_path, table_writer):
        """A later row wider than the first is a column count error, not a parser crash."""
        positions = tmp_path / "pos.txt"
        positions.write_text("100\t0\t100\t100\t100\t0\n90\t0\t90\t100\t90\t0\t7\n")
        times = table_writer(tmp_path / "time.txt", [[500.0, 500.0, 500.0]] * 2)

        with pytest.raises(FormatError, match="expected 6 columns, found 7") as exc_info:
            load_comb_path(positions, times)

        assert exc_info.value.path == positions
        assert exc_info.value.actual_columns == 7

    def test_empty_file(self, tmp_path, table_writer):
        positions = tmp_path / "pos.txt"
        positions.write_text("")
        times = table_writer(tmp_path / "time.txt", [[500.0, 500.0, 500.0]])

        with pytest.raises(FormatError, match="empty"):
            load_comb_path(positions, times)

    def test_row_count_mismatch(self, tmp_path, table_writer):
        positions = table_writer(
            tmp_path / "pos.txt",
            [[10.0, 0.0, 10.0, 50.0, 10.0, 0.0], [20.0, 0.0, 20.0, 50.0, 20.0, 0.0]],
        )
        times = table_writer(tmp_path / "time.txt", [[500.0, 500.0, 500.0]])

        with pytest.raises(LengthMismatchError, match="x=6, y=6, time=3"):
            load_comb_path(positions, times)


class TestCombPath:
    """Test cases for CombPath construction."""

    def test_from_arrays(self):
        path = CombPath.from_arrays([0.0, 10.0], [5.0, 5.0], [250.0, 750.0])

        np.testing.assert_allclose(path.times, [0.25, 1.0])
        np.testing.assert_array_equal(path.lines, [5.0])

    def test_mismatched_arrays(self):
        with pytest.raises(LengthMismatchError) as exc_info:
            CombPath(
                x=np.zeros(3), y=np.zeros(3), times=np.zeros(2), lines=np.zeros(1)
            )

        assert (exc_info.value.n_x, exc_info.value.n_y, exc_info.value.n_times) == (3, 3, 2)
