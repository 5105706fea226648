"""Scan configuration: grid geometry and detection thresholds."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from blobstream.engine.errors import ConfigurationError


@dataclass
class ScanConfig:
    """Controls one row-scan pass over a width x height grid."""

    width: int = 0
    height: int = 0

    # A pixel is foreground iff value > threshold (strict)
    threshold: float = 0.0

    # Blobs with fewer pixels are dropped; 0 keeps everything
    min_pixels: int = 0

    @classmethod
    def for_array(cls, grid: NDArray, threshold: float = 0.0, min_pixels: int = 0) -> "ScanConfig":
        """Derive dimensions from a (height, width) array."""
        try:
            arr = np.asarray(grid, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Grid is not a rectangular numeric array: {e}") from e
        if arr.ndim != 2:
            raise ConfigurationError(f"Grid must be 2-D, got {arr.ndim} dimension(s)")
        height, width = arr.shape
        return cls(width=int(width), height=int(height), threshold=threshold, min_pixels=min_pixels)

    def validate(self) -> "ScanConfig":
        if not _is_int(self.width) or self.width <= 0:
            raise ConfigurationError(f"width must be a positive integer, got {self.width!r}")
        if not _is_int(self.height) or self.height <= 0:
            raise ConfigurationError(f"height must be a positive integer, got {self.height!r}")
        if not isinstance(self.threshold, numbers.Real) or not math.isfinite(self.threshold):
            raise ConfigurationError(f"threshold must be a finite number, got {self.threshold!r}")
        if not _is_int(self.min_pixels) or self.min_pixels < 0:
            raise ConfigurationError(f"min_pixels must be a non-negative integer, got {self.min_pixels!r}")
        return self

    @property
    def cells(self) -> int:
        return self.width * self.height


def _is_int(value: object) -> bool:
    # bool is an int subclass but never a valid dimension
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
