# msicomb/readers/mat_reader.py

"""
Reader for time-series mass spectra stored in MATLAB files.

The file holds a struct ``out.scan`` with the fields ``retentionTime``
(seconds), ``mz`` and ``intensity``. Centroided acquisitions store one
m/z and one intensity vector per scan in cell arrays; profile acquisitions
store a shared ``mz`` vector and a channels x scans intensity matrix.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from scipy.io import loadmat

from ..core.spectra import SpectrumSeries
from ..exceptions import FormatError

SCAN_FIELDS = ("retentionTime", "mz", "intensity")


def _get_field(obj, name, path: Path):
    value = getattr(obj, name, None)
    if value is None:
        raise FormatError(f"MAT file is missing field '{name}'", path=path)
    return value


def _unwrap_struct(value):
    """The single struct held by an unsqueezed 1x1 MATLAB struct array."""
    if isinstance(value, np.ndarray):
        return value.ravel()[0]
    return value


def _is_cell_array(value) -> bool:
    return isinstance(value, np.ndarray) and value.dtype == object


def load_spectrum_series(mat_path: Union[str, Path]) -> SpectrumSeries:
    """
    Load the spectrum series of an acquisition from a MAT file.

    Arrays are read without squeezing so that a one-scan centroided file
    keeps its 1x1 cell arrays.

    Args:
        mat_path: Path to the MAT file (format v5 to v7.2)

    Returns:
        SpectrumSeries with profile or centroided spectra

    Raises:
        FormatError: If the file lacks the ``out.scan`` fields
    """
    mat_path = Path(mat_path)
    contents = loadmat(str(mat_path), squeeze_me=False, struct_as_record=False)

    out = contents.get("out")
    if out is None:
        raise FormatError("MAT file has no 'out' struct", path=mat_path)
    scan = _unwrap_struct(_get_field(_unwrap_struct(out), "scan", mat_path))
    scan_times, mz, intensity = (_get_field(scan, name, mat_path) for name in SCAN_FIELDS)
    scan_times = np.asarray(scan_times, dtype=np.float64).ravel()

    if _is_cell_array(intensity):
        if not _is_cell_array(mz) or mz.size != intensity.size:
            raise FormatError(
                "Centroided MAT file needs one m/z cell per intensity cell", path=mat_path
            )
        logging.info(f"Loaded {intensity.size} centroided scans from {mat_path}")
        return SpectrumSeries.from_centroids(
            scan_times,
            [np.asarray(m, dtype=np.float64).ravel() for m in mz.ravel()],
            [np.asarray(i, dtype=np.float64).ravel() for i in intensity.ravel()],
        )

    # Profile intensities are stored channels x scans
    intensities = np.atleast_2d(np.asarray(intensity, dtype=np.float64))
    mz_axis = np.asarray(mz, dtype=np.float64).ravel()
    if intensities.shape[0] != len(mz_axis) and intensities.shape[1] == len(mz_axis):
        intensities = intensities.T
    logging.info(
        f"Loaded {intensities.shape[1]} profile scans with {len(mz_axis)} channels from {mat_path}"
    )
    return SpectrumSeries.from_profile(scan_times, intensities.T, mz_axis)
