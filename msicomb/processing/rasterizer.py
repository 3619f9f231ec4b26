# msicomb/processing/rasterizer.py

"""
Conversion of centroided spectra to a dense common mass axis.

Each scan's peaks are snapped to the nearest bin of a logarithmically
spaced mass axis and then spread over neighbouring bins with a normalized
Gaussian window, which stands in for the instrument's mass resolution and
makes scans with slightly different centroid positions comparable.
Profile spectra already share a mass axis and pass through unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import convolve1d
from scipy.signal.windows import gaussian
from tqdm import tqdm

from ..config import DEFAULT_KERNEL_WIDTH, GAUSSIAN_WINDOW_ALPHA, LOG_AXIS_RESOLUTION
from ..core.spectra import SpectrumSeries
from .mass_axis import LogMassAxisGenerator


@dataclass
class RasterizedSpectra:
    """Dense intensities (scans x mass channels) on a shared mass axis."""

    intensities: NDArray[np.float64]
    mz_axis: NDArray[np.float64]
    centroided: bool

    def __post_init__(self):
        """Validate the result after initialization."""
        if self.intensities.ndim != 2:
            raise ValueError("intensities must be a 2-D (scans x channels) array")
        if self.intensities.shape[1] != len(self.mz_axis):
            raise ValueError(
                f"intensities have {self.intensities.shape[1]} channels but the mass axis "
                f"has {len(self.mz_axis)} entries"
            )

    @property
    def n_channels(self) -> int:
        return len(self.mz_axis)


def gaussian_window(width: int, alpha: float = GAUSSIAN_WINDOW_ALPHA) -> NDArray[np.float64]:
    """Normalized Gaussian window of ``width`` samples (MATLAB ``gausswin`` shape)."""
    if width < 1:
        raise ValueError(f"width must be at least 1, got {width}")
    if width == 1:
        return np.ones(1)
    std = (width - 1) / (2.0 * alpha)
    window = gaussian(width, std=std, sym=True)
    return window / np.sum(window)


class CentroidRasterizer:
    """
    Bin centroided spectra onto a logarithmic mass axis and smooth them.

    The unpadded axis spans the global minimum to maximum centroid m/z of
    the series. It is extended by ``kernel_width - 1`` zero bins on each
    side so that smoothing never truncates peaks at the ends of the axis.
    """

    def __init__(
        self,
        resolution: int = LOG_AXIS_RESOLUTION,
        kernel_width: int = DEFAULT_KERNEL_WIDTH,
        show_progress: bool = False,
    ):
        """
        Initialize the rasterizer.

        Args:
            resolution: N of the axis spacing factor (N+1)/N
            kernel_width: Length of the Gaussian smoothing window in bins (odd)
            show_progress: Display a progress bar while binning scans
        """
        if kernel_width < 1 or kernel_width % 2 == 0:
            raise ValueError(f"kernel_width must be a positive odd number, got {kernel_width}")

        self.axis_generator = LogMassAxisGenerator(resolution)
        self.kernel_width = kernel_width
        self.show_progress = show_progress

    @property
    def padding(self) -> int:
        return self.kernel_width - 1

    def bin_centroids(self, series: SpectrumSeries) -> Tuple[NDArray[np.float64], float]:
        """
        Accumulate each scan's centroids into the nearest unpadded axis bin.

        Centroids of one scan that snap to the same bin are summed, so the
        total intensity of every scan is preserved.

        Returns:
            Tuple of (binned intensities (scans x bins), minimum m/z of the axis)
        """
        if not series.is_centroided:
            raise ValueError("bin_centroids requires a centroided spectrum series")

        min_mz, max_mz = series.mass_bounds()
        n_bins = self.axis_generator.n_steps(min_mz, max_mz) + 1

        binned = np.zeros((series.n_scans, n_bins), dtype=np.float64)
        for scan_idx, peaks in enumerate(
            tqdm(
                series.peaks,
                desc="Inserting peaks into profile",
                unit="scan",
                disable=not self.show_progress,
            )
        ):
            if not len(peaks):
                continue
            indices = self.axis_generator.nearest_index(peaks.mz, min_mz)
            np.add.at(binned[scan_idx], indices, peaks.intensity)

        return binned, min_mz

    def rasterize(self, series: SpectrumSeries) -> RasterizedSpectra:
        """
        Convert a centroided series into dense, smoothed spectra.

        Args:
            series: Centroided spectrum series

        Returns:
            RasterizedSpectra on the padded logarithmic mass axis
        """
        min_mz, max_mz = series.mass_bounds()
        logging.info(f"Centroided data, m/z range {min_mz:.4f} - {max_mz:.4f}")

        binned, min_mz = self.bin_centroids(series)
        mz_axis = self.axis_generator.generate(min_mz, max_mz, padding=self.padding)

        padded = np.pad(binned, ((0, 0), (self.padding, self.padding)))
        window = gaussian_window(self.kernel_width)
        smoothed = convolve1d(padded, window, axis=1, mode="constant", cval=0.0)

        logging.info(
            f"Rasterized {series.n_scans} scans onto {len(mz_axis)} mass channels "
            f"(ratio ({self.axis_generator.resolution}+1)/{self.axis_generator.resolution}, "
            f"window {self.kernel_width})"
        )
        return RasterizedSpectra(intensities=smoothed, mz_axis=mz_axis, centroided=True)


def rasterize_spectra(
    series: SpectrumSeries,
    resolution: int = LOG_AXIS_RESOLUTION,
    kernel_width: int = DEFAULT_KERNEL_WIDTH,
    show_progress: bool = False,
) -> RasterizedSpectra:
    """Return dense spectra for the series, rasterizing centroided data only."""
    if not series.is_centroided:
        logging.info(f"Profile data with {len(series.mz_axis)} mass channels")
        return RasterizedSpectra(
            intensities=series.intensities, mz_axis=series.mz_axis, centroided=False
        )

    rasterizer = CentroidRasterizer(resolution, kernel_width, show_progress)
    return rasterizer.rasterize(series)
