# tests/unit/core/test_spectra.py

"""
Tests for spectrum series containers.
"""

import numpy as np
import pytest

from msicomb.core.spectra import CentroidPeaks, SpectrumSeries


class TestCentroidPeaks:
    """Test cases for CentroidPeaks."""

    def test_basic(self):
        peaks = CentroidPeaks(mz=[100.0, 200.0], intensity=[1.0, 3.0])

        assert len(peaks) == 2
        assert peaks.total_intensity == 4.0
        assert peaks.mz.dtype == np.float64

    def test_empty_scan(self):
        peaks = CentroidPeaks(mz=np.array([]), intensity=np.array([]))

        assert len(peaks) == 0
        assert peaks.total_intensity == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="same shape"):
            CentroidPeaks(mz=[100.0, 200.0], intensity=[1.0])

    def test_non_positive_mz(self):
        with pytest.raises(ValueError, match="must be positive"):
            CentroidPeaks(mz=[0.0, 200.0], intensity=[1.0, 1.0])


class TestSpectrumSeries:
    """Test cases for SpectrumSeries."""

    def test_profile_series(self):
        series = SpectrumSeries.from_profile([0.0, 0.5], np.ones((2, 3)), [100.0, 200.0, 300.0])

        assert series.n_scans == 2
        assert not series.is_centroided
        assert series.mass_bounds() == (100.0, 300.0)

    def test_single_channel_profile(self):
        series = SpectrumSeries.from_profile([0.0, 0.5, 1.0], np.ones(3), [500.0])

        assert series.intensities.shape == (3, 1)

    def test_profile_shape_mismatch(self):
        with pytest.raises(ValueError, match="expected \\(2, 3\\)"):
            SpectrumSeries.from_profile([0.0, 0.5], np.ones((3, 2)), [100.0, 200.0, 300.0])

    def test_centroided_series(self):
        series = SpectrumSeries.from_centroids(
            [0.0, 0.5, 1.0], [[150.0], [], [90.0, 400.0]], [[1.0], [], [2.0, 3.0]]
        )

        assert series.is_centroided
        assert series.n_scans == 3
        assert series.mass_bounds() == (90.0, 400.0)

    def test_centroided_without_peaks(self):
        series = SpectrumSeries.from_centroids([0.0], [[]], [[]])

        with pytest.raises(ValueError, match="contains no peaks"):
            series.mass_bounds()

    def test_peak_count_mismatch(self):
        with pytest.raises(ValueError, match="2 peak lists for 3 scan times"):
            SpectrumSeries.from_centroids([0.0, 0.5, 1.0], [[1.0], [2.0]], [[1.0], [2.0]])

    def test_requires_exactly_one_representation(self):
        with pytest.raises(ValueError, match="not both"):
            SpectrumSeries(scan_times=[0.0])

    def test_profile_requires_axis(self):
        with pytest.raises(ValueError, match="require an mz_axis"):
            SpectrumSeries(scan_times=[0.0], intensities=np.ones((1, 1)))

    def test_empty_times(self):
        with pytest.raises(ValueError, match="non-empty"):
            SpectrumSeries.from_profile([], np.zeros((0, 1)), [100.0])

    def test_shifted(self):
        series = SpectrumSeries.from_profile([0.0, 0.5], np.ones((2, 1)), [100.0])

        shifted = series.shifted(2.0)

        np.testing.assert_array_equal(shifted.scan_times, [2.0, 2.5])
        np.testing.assert_array_equal(series.scan_times, [0.0, 0.5])
        assert shifted.intensities is series.intensities
