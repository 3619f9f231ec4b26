"""
msicomb - Reconstruct mass spectrometry images from comb-path acquisitions.

This package turns a time series of mass spectra, recorded while the sample
stage follows a comb-shaped raster path, into a (line, pixel, m/z) image
cube using the planned stage waypoints and their timing.
"""

from .config import ReconstructionConfig
from .core.spectra import CentroidPeaks, SpectrumSeries
from .exceptions import (
    CacheMismatchError,
    DegenerateLineWarning,
    FormatError,
    LengthMismatchError,
    RangeWarning,
)
from .path.comb_path import load_comb_path
from .processing.gridding import ImageCube
from .readers.mat_reader import load_spectrum_series
from .reconstruct import ReconstructionResult, reconstruct_image_cube

__version__ = "0.3.0"

# Expose main API
__all__ = [
    "__version__",
    "reconstruct_image_cube",
    "ReconstructionConfig",
    "ReconstructionResult",
    "SpectrumSeries",
    "CentroidPeaks",
    "ImageCube",
    "load_comb_path",
    "load_spectrum_series",
    "FormatError",
    "LengthMismatchError",
    "CacheMismatchError",
    "RangeWarning",
    "DegenerateLineWarning",
]
