"""Logarithmic mass axis generator for centroid rasterization."""

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from ..config import LOG_AXIS_RESOLUTION


class LogMassAxisGenerator:
    """Generate a logarithmically spaced mass axis.

    Consecutive entries differ by the constant factor (N+1)/N, so the bin
    width grows in proportion to m/z. Large N gives fine, nearly linear
    looking spacing over narrow mass ranges.
    """

    def __init__(self, resolution: int = LOG_AXIS_RESOLUTION):
        """Initialize the generator.

        Args:
            resolution: N in the spacing factor (N+1)/N
        """
        if resolution < 1:
            raise ValueError(f"resolution must be at least 1, got {resolution}")
        self.resolution = resolution

    @property
    def ratio(self) -> float:
        """Factor between consecutive axis entries."""
        return (self.resolution + 1) / self.resolution

    @property
    def log_step(self) -> float:
        return np.log(self.resolution + 1) - np.log(self.resolution)

    def n_steps(self, min_mass: float, max_mass: float) -> int:
        """Number of ratio steps needed to reach max_mass from min_mass."""
        self._validate_parameters((min_mass, max_mass))
        return int(np.ceil((np.log(max_mass) - np.log(min_mass)) / self.log_step))

    def generate(self, min_mass: float, max_mass: float, padding: int = 0) -> NDArray[np.float64]:
        """Generate the mass axis spanning [min_mass, max_mass].

        Args:
            min_mass: First axis entry
            max_mass: Mass the axis must reach or exceed
            padding: Extra bins added on each side of the axis

        Returns:
            Strictly increasing array with ``n_steps + 1 + 2 * padding`` entries

        Raises:
            ValueError: If the mass range or padding is invalid
        """
        if padding < 0:
            raise ValueError(f"padding must be non-negative, got {padding}")
        n_steps = self.n_steps(min_mass, max_mass)
        exponents = np.arange(-padding, n_steps + padding + 1, dtype=np.float64)
        return min_mass * np.power(self.ratio, exponents)

    def nearest_index(self, mz: NDArray[np.float64], min_mass: float) -> NDArray[np.int_]:
        """Index of the unpadded axis entry nearest to each m/z (in log space)."""
        mz = np.asarray(mz, dtype=np.float64)
        return np.rint(np.log(mz / min_mass) / self.log_step).astype(np.int_)

    def _validate_parameters(self, mass_range: Tuple[float, float]) -> None:
        """Validate the mass range.

        Raises:
            ValueError: If the range is not positive or not ordered
        """
        min_mass, max_mass = mass_range
        if min_mass <= 0:
            raise ValueError(f"Mass values must be positive, got min={min_mass}")

        if min_mass > max_mass:
            raise ValueError(
                f"Invalid mass range: min ({min_mass}) > max ({max_mass})"
            )
