# msicomb/core/__init__.py

from .spectra import CentroidPeaks, SpectrumSeries

__all__ = ["CentroidPeaks", "SpectrumSeries"]
