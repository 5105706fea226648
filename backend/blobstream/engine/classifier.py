"""Per-pixel value lookup and foreground decision over a read-only grid."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Union

import numpy as np
from numpy.typing import NDArray

from blobstream.engine.errors import ConfigurationError

GridReader = Callable[[int, int], float]


class PixelClassifier:
    """Answers value(x, y) and is_foreground(x, y) for a fixed grid.

    The grid is only ever read; it must stay unchanged for the
    duration of a scan. Out-of-range coordinates are the caller's problem.
    Subclasses may override value() or accepts() to change how samples
    are read or judged; is_foreground() is value() followed by accepts().
    """

    def __init__(
        self,
        reader: GridReader | None,
        threshold: float = 0.0,
        shape: tuple[int, int] | None = None,
    ) -> None:
        if reader is None or not callable(reader):
            raise ConfigurationError("A grid accessor is required")
        self._read = reader
        self.threshold = threshold
        # (height, width) when the backing store knows its own size
        self.shape = shape

    @classmethod
    def from_array(cls, grid: NDArray | Sequence[Sequence[float]], threshold: float = 0.0) -> "PixelClassifier":
        """Wrap a (height, width) array; x indexes columns, y indexes rows."""
        if grid is None:
            raise ConfigurationError("A grid accessor is required")
        try:
            arr = np.asarray(grid, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Grid is not a rectangular numeric array: {e}") from e
        if arr.ndim != 2:
            raise ConfigurationError(f"Grid must be 2-D, got {arr.ndim} dimension(s)")
        height, width = arr.shape
        return cls(lambda x, y: arr[y, x], threshold, shape=(int(height), int(width)))

    @classmethod
    def from_buffer(
        cls, samples: Sequence[float] | NDArray, width: int, height: int, threshold: float = 0.0,
    ) -> "PixelClassifier":
        """Wrap a flat row-major buffer of width*height samples."""
        if samples is None:
            raise ConfigurationError("A grid accessor is required")
        if len(samples) != width * height:
            raise ConfigurationError(
                f"Buffer holds {len(samples)} samples, expected {width}x{height}={width * height}"
            )
        return cls(lambda x, y: samples[width * y + x], threshold, shape=(height, width))

    def value(self, x: int, y: int) -> float:
        return float(self._read(x, y))

    def accepts(self, value: float, threshold: float | None = None) -> bool:
        """Foreground test for an already-read sample (strictly above threshold)."""
        return value > (self.threshold if threshold is None else threshold)

    def is_foreground(self, x: int, y: int) -> bool:
        return self.accepts(self.value(x, y))


GridSource = Union[PixelClassifier, NDArray, Sequence[Sequence[float]], GridReader]


def as_classifier(source: Any, threshold: float = 0.0) -> PixelClassifier:
    """Coerce an array, nested list, reader callable or classifier."""
    if source is None:
        raise ConfigurationError("A grid accessor is required")
    if isinstance(source, PixelClassifier):
        return source
    if isinstance(source, (np.ndarray, list, tuple)):
        return PixelClassifier.from_array(source, threshold)
    if callable(source):
        return PixelClassifier(source, threshold)
    raise ConfigurationError(f"Unsupported grid accessor type: {type(source).__name__}")
