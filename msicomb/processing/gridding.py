# msicomb/processing/gridding.py

"""
Image cube assembly from positioned scans.

Scans from a single sweep direction are grouped by line, and along each
line every mass channel is linearly interpolated from the scan
x-positions onto a regular pixel grid. Pixels outside the range covered by
a line's scans are set to zero rather than extrapolated.
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy.interpolate import interp1d
from tqdm import tqdm

from ..config import EDGE_GUARD_UM, PIXEL_COUNT_TOLERANCE
from ..exceptions import DegenerateLineWarning

# Fewest scans on a line that still define a linear interpolant
MIN_SCANS_PER_LINE = 2


@dataclass
class ImageCube:
    """
    Reconstructed image indexed (line, pixel, mass channel).

    Attributes:
        image: Intensities with shape (len(y_axis), len(x_axis), len(mz_axis))
        x_axis: Pixel x-coordinates in micrometers
        y_axis: Line y-coordinates in micrometers
        mz_axis: Mass channel m/z values
        pixel_pitch: Spacing of x_axis in micrometers
        degenerate_lines: y-values of lines that had too few scans and were zero-filled
    """

    image: NDArray[np.float64]
    x_axis: NDArray[np.float64]
    y_axis: NDArray[np.float64]
    mz_axis: NDArray[np.float64]
    pixel_pitch: float
    degenerate_lines: List[float] = field(default_factory=list)

    def __post_init__(self):
        expected = (len(self.y_axis), len(self.x_axis), len(self.mz_axis))
        if self.image.shape != expected:
            raise ValueError(f"image has shape {self.image.shape}, axes imply {expected}")

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.image.shape

    def to_pixel_table(
        self,
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """
        Flatten the cube to one row per pixel.

        Returns:
            Tuple of (intensities (lines*pixels x channels), pixel x, pixel y)
            in line-major order
        """
        n_lines, n_pixels, n_channels = self.image.shape
        table = self.image.reshape(n_lines * n_pixels, n_channels)
        pixel_y, pixel_x = np.meshgrid(self.y_axis, self.x_axis, indexing="ij")
        return table, pixel_x.ravel(), pixel_y.ravel()


def count_scans_per_line(y: NDArray[np.float64], lines: NDArray[np.float64]) -> NDArray[np.int_]:
    """Number of scans whose y equals each line value."""
    return np.array([np.count_nonzero(y == line) for line in lines], dtype=np.int_)


def derive_pixel_pitch(
    x: NDArray[np.float64], y: NDArray[np.float64], lines: NDArray[np.float64]
) -> float:
    """
    Pixel pitch that gives each line as many pixels as the median line has scans.

    Raises:
        ValueError: If the median line has fewer than two scans
    """
    scans_per_line = float(np.median(count_scans_per_line(y, lines)))
    if scans_per_line < MIN_SCANS_PER_LINE:
        raise ValueError(
            f"Cannot derive pixel pitch: median of {scans_per_line:g} scans per line, "
            f"need at least {MIN_SCANS_PER_LINE}"
        )
    x_range = float(np.max(x) - np.min(x))
    if x_range <= 0:
        raise ValueError("Cannot derive pixel pitch: all scans share the same x-position")
    return x_range / (scans_per_line - 1)


def average_repeated_positions(
    x: NDArray[np.float64], intensities: NDArray[np.float64]
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Merge scans recorded at the same x-position by averaging their intensities.

    Returns:
        Tuple of (sorted unique x, mean intensities per unique x)
    """
    unique_x, inverse, counts = np.unique(x, return_inverse=True, return_counts=True)
    summed = np.zeros((len(unique_x),) + intensities.shape[1:], dtype=np.float64)
    np.add.at(summed, inverse.ravel(), intensities)
    return unique_x, summed / counts[:, np.newaxis]


def build_pixel_axis(x_min: float, x_max: float, pitch: float) -> NDArray[np.float64]:
    """Regular x-grid from x_min towards x_max stepping by pitch."""
    n_pixels = int(np.floor((x_max - x_min) / pitch + PIXEL_COUNT_TOLERANCE)) + 1
    return x_min + pitch * np.arange(n_pixels, dtype=np.float64)


class ImageGridder:
    """Interpolate positioned scans onto a regular (line, pixel) grid."""

    def __init__(
        self,
        pixel_pitch: Optional[float] = None,
        edge_guard: float = EDGE_GUARD_UM,
        show_progress: bool = False,
    ):
        """
        Initialize the gridder.

        Args:
            pixel_pitch: Pixel width in micrometers, None to derive it from scans per line
            edge_guard: Scans within this distance of min(x)/max(x) are not used
            show_progress: Display a progress bar over lines
        """
        if pixel_pitch is not None and pixel_pitch <= 0:
            raise ValueError(f"pixel_pitch must be positive, got {pixel_pitch}")
        self.pixel_pitch = pixel_pitch
        self.edge_guard = edge_guard
        self.show_progress = show_progress

    def grid(
        self,
        x: NDArray[np.float64],
        y: NDArray[np.float64],
        intensities: NDArray[np.float64],
        lines: NDArray[np.float64],
        mz_axis: NDArray[np.float64],
    ) -> ImageCube:
        """
        Build the image cube.

        Args:
            x: Scan x-positions (valid, single sweep direction)
            y: Scan y-positions aligned with ``x``
            intensities: Scan intensities (scans x mass channels) aligned with ``x``
            lines: Line y-values; their order is the order of the cube's first axis
            mz_axis: Mass axis of the intensity columns

        Returns:
            ImageCube with one row per line

        Raises:
            ValueError: If the inputs are empty or misaligned
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        lines = np.asarray(lines, dtype=np.float64)
        intensities = np.asarray(intensities, dtype=np.float64)

        if x.size == 0:
            raise ValueError("No scans to grid")
        if not (len(x) == len(y) == intensities.shape[0]):
            raise ValueError(
                f"Scan arrays are misaligned: x={len(x)}, y={len(y)}, "
                f"intensities={intensities.shape[0]}"
            )
        if np.isnan(x).any() or np.isnan(y).any():
            raise ValueError("Scan positions must not contain NaN")

        x_min, x_max = float(np.min(x)), float(np.max(x))
        if self.pixel_pitch is None:
            pitch = derive_pixel_pitch(x, y, lines)
        else:
            pitch = float(self.pixel_pitch)
        x_axis = build_pixel_axis(x_min, x_max, pitch)

        n_channels = intensities.shape[1]
        image = np.zeros((len(lines), len(x_axis), n_channels), dtype=np.float64)
        inside = (x > x_min + self.edge_guard) & (x < x_max - self.edge_guard)

        degenerate_lines = []
        for line_idx, line in enumerate(
            tqdm(lines, desc="Gridding lines", unit="line", disable=not self.show_progress)
        ):
            selected = (y == line) & inside
            line_x, line_intensities = average_repeated_positions(
                x[selected], intensities[selected]
            )
            logging.debug(
                f"Line y={line:g}: {int(np.count_nonzero(selected))} scans "
                f"at {len(line_x)} positions"
            )

            if len(line_x) < MIN_SCANS_PER_LINE:
                degenerate_lines.append(float(line))
                message = (
                    f"Line y={line:g} has {len(line_x)} usable scan(s); "
                    f"at least {MIN_SCANS_PER_LINE} are needed, line filled with zeros"
                )
                logging.warning(message)
                warnings.warn(message, DegenerateLineWarning, stacklevel=2)
                continue

            interpolant = interp1d(
                line_x,
                line_intensities,
                kind="linear",
                axis=0,
                bounds_error=False,
                fill_value=0.0,
                assume_sorted=True,
            )
            image[line_idx] = interpolant(x_axis)

        logging.info(
            f"Gridded {len(x)} scans into {len(lines)} lines x {len(x_axis)} pixels "
            f"x {n_channels} channels, pitch {pitch:.3f} um"
        )

        return ImageCube(
            image=image,
            x_axis=x_axis,
            y_axis=lines.copy(),
            mz_axis=np.asarray(mz_axis, dtype=np.float64),
            pixel_pitch=pitch,
            degenerate_lines=degenerate_lines,
        )
