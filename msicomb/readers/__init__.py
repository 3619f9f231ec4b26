from .mat_reader import load_spectrum_series

__all__ = ["load_spectrum_series"]
