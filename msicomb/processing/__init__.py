# msicomb/processing/__init__.py

"""
Spectral and spatial processing for image cube reconstruction.

This package contains the logarithmic mass axis, the rasterization of
centroided spectra onto it, the per-line gridding of scans into an image
cube and the diagnostics report of a run.
"""

from .gridding import ImageCube, ImageGridder
from .mass_axis import LogMassAxisGenerator
from .rasterizer import CentroidRasterizer, RasterizedSpectra, rasterize_spectra
from .report import ReconstructionReport

__all__ = [
    "CentroidRasterizer",
    "ImageCube",
    "ImageGridder",
    "LogMassAxisGenerator",
    "RasterizedSpectra",
    "ReconstructionReport",
    "rasterize_spectra",
]
