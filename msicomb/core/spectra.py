# msicomb/core/spectra.py

"""
Time-ordered spectrum series acquired along the stage path.

A series holds one acquisition time per scan and either a dense intensity
matrix on a shared mass axis (profile data) or one variable-length peak
list per scan (centroided data).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class CentroidPeaks:
    """Peak-picked m/z and intensity values of a single scan."""

    mz: NDArray[np.float64]
    intensity: NDArray[np.float64]

    def __post_init__(self):
        mz = np.atleast_1d(np.asarray(self.mz, dtype=np.float64))
        intensity = np.atleast_1d(np.asarray(self.intensity, dtype=np.float64))
        if mz.shape != intensity.shape:
            raise ValueError(
                f"Centroid m/z ({mz.shape}) and intensity ({intensity.shape}) "
                "must have the same shape"
            )
        if mz.ndim != 1:
            raise ValueError("Centroid arrays must be one-dimensional")
        if mz.size and np.any(mz <= 0):
            raise ValueError("Centroid m/z values must be positive")
        object.__setattr__(self, "mz", mz)
        object.__setattr__(self, "intensity", intensity)

    def __len__(self) -> int:
        return len(self.mz)

    @property
    def total_intensity(self) -> float:
        return float(np.sum(self.intensity))


@dataclass
class SpectrumSeries:
    """
    Spectra recorded while the stage follows the comb path.

    Attributes:
        scan_times: Acquisition time of each scan in seconds since instrument start
        intensities: Profile intensities (scans x mass channels), None for centroided data
        mz_axis: Shared mass axis of the profile intensities
        peaks: Per-scan centroid lists, None for profile data
    """

    scan_times: NDArray[np.float64]
    intensities: Optional[NDArray[np.float64]] = None
    mz_axis: Optional[NDArray[np.float64]] = None
    peaks: Optional[List[CentroidPeaks]] = field(default=None, repr=False)

    def __post_init__(self):
        self.scan_times = np.atleast_1d(np.asarray(self.scan_times, dtype=np.float64))
        if self.scan_times.ndim != 1 or self.scan_times.size == 0:
            raise ValueError("scan_times must be a non-empty one-dimensional array")

        if (self.intensities is None) == (self.peaks is None):
            raise ValueError("Provide either profile intensities or centroid peaks, not both")

        if self.peaks is not None:
            self.peaks = list(self.peaks)
            if len(self.peaks) != self.n_scans:
                raise ValueError(
                    f"Got {len(self.peaks)} peak lists for {self.n_scans} scan times"
                )
            return

        self.intensities = np.asarray(self.intensities, dtype=np.float64)
        if self.mz_axis is None:
            raise ValueError("Profile intensities require an mz_axis")
        self.mz_axis = np.atleast_1d(np.asarray(self.mz_axis, dtype=np.float64))
        if self.intensities.ndim == 1:
            self.intensities = self.intensities[:, np.newaxis]
        if self.intensities.shape != (self.n_scans, len(self.mz_axis)):
            raise ValueError(
                f"Profile intensities have shape {self.intensities.shape}, expected "
                f"({self.n_scans}, {len(self.mz_axis)}) for scans x mass channels"
            )

    @classmethod
    def from_profile(
        cls,
        scan_times: Sequence[float],
        intensities: NDArray[np.float64],
        mz_axis: Sequence[float],
    ) -> "SpectrumSeries":
        """Build a series of dense spectra sharing one mass axis."""
        return cls(scan_times=scan_times, intensities=intensities, mz_axis=mz_axis)

    @classmethod
    def from_centroids(
        cls,
        scan_times: Sequence[float],
        mz_lists: Sequence[Sequence[float]],
        intensity_lists: Sequence[Sequence[float]],
    ) -> "SpectrumSeries":
        """Build a series of centroided spectra from parallel m/z and intensity lists."""
        if len(mz_lists) != len(intensity_lists):
            raise ValueError("mz_lists and intensity_lists must have the same length")
        peaks = [
            CentroidPeaks(mz=np.asarray(mz), intensity=np.asarray(intensity))
            for mz, intensity in zip(mz_lists, intensity_lists)
        ]
        return cls(scan_times=scan_times, peaks=peaks)

    @property
    def n_scans(self) -> int:
        return len(self.scan_times)

    @property
    def is_centroided(self) -> bool:
        return self.peaks is not None

    def mass_bounds(self) -> Tuple[float, float]:
        """
        Return the (min, max) m/z of the series.

        For centroided data this is the global extent of all peak lists,
        for profile data the extent of the shared axis.
        """
        if not self.is_centroided:
            return float(np.min(self.mz_axis)), float(np.max(self.mz_axis))

        non_empty = [p.mz for p in self.peaks if len(p)]
        if not non_empty:
            raise ValueError("Centroided series contains no peaks")
        return (
            float(min(np.min(mz) for mz in non_empty)),
            float(max(np.max(mz) for mz in non_empty)),
        )

    def shifted(self, seconds: float) -> "SpectrumSeries":
        """Return a copy with every acquisition time shifted by ``seconds``."""
        return SpectrumSeries(
            scan_times=self.scan_times + seconds,
            intensities=self.intensities,
            mz_axis=self.mz_axis,
            peaks=self.peaks,
        )
