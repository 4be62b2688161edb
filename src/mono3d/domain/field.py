"""Scalar brightness field sampled from an image."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class ScalarField:
    """A square grid of values in [0, 1].

    Row 0 is the top row of the source image. The backing array is copied
    on construction and marked read-only.

    Attributes:
        values: Array of shape (resolution, resolution)
    """

    values: NDArray[np.float64]

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64, copy=True)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"Scalar field must be square, got shape {values.shape}")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def resolution(self) -> int:
        """Side length of the grid."""
        return int(self.values.shape[0])

    def coverage(self, threshold: float) -> float:
        """Fraction of samples strictly above ``threshold``."""
        if self.values.size == 0:
            return 0.0
        return float(np.count_nonzero(self.values > threshold)) / self.values.size
