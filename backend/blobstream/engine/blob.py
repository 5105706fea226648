"""Pixel records and the finished-blob aggregate.

A Blob keeps its summary fields (bounds, value range, running sum) in step
with its pixel list on every insertion, so reading them is O(1). Positions
are unique within a blob: appending a pixel at an occupied position is a
no-op.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

import numpy as np


@dataclass(frozen=True)
class Pixel:
    """One grid sample: column x, row y, its value and centroid weight scale.

    Immutable: a pixel held by a Blob changes only through Blob methods.
    """

    x: int
    y: int
    value: float = 0.0
    scale: float = 1.0

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    def __float__(self) -> float:
        return float(self.value)

    def __lt__(self, other: "Pixel") -> bool:
        return self.value < other.value

    def __gt__(self, other: "Pixel") -> bool:
        return self.value > other.value


class Blob:
    """An 8-connected group of foreground pixels plus running statistics."""

    def __init__(self, pixels: Iterable[Pixel] = ()) -> None:
        self._pixels: list[Pixel] = []
        self._positions: set[tuple[int, int]] = set()
        self._reset_summary()
        self.extend(pixels)

    def _reset_summary(self) -> None:
        self._xmin: int | None = None
        self._xmax: int | None = None
        self._ymin: int | None = None
        self._ymax: int | None = None
        self._value_min: float | None = None
        self._value_max: float | None = None
        self._value_sum = 0.0

    def _absorb(self, pixel: Pixel) -> None:
        if self._xmin is None:
            self._xmin = self._xmax = pixel.x
            self._ymin = self._ymax = pixel.y
            self._value_min = self._value_max = pixel.value
        else:
            self._xmin = min(self._xmin, pixel.x)
            self._xmax = max(self._xmax, pixel.x)
            self._ymin = min(self._ymin, pixel.y)
            self._ymax = max(self._ymax, pixel.y)
            self._value_min = min(self._value_min, pixel.value)
            self._value_max = max(self._value_max, pixel.value)
        self._value_sum += pixel.value

    # -- container protocol ------------------------------------------------

    def __len__(self) -> int:
        return len(self._pixels)

    def __iter__(self) -> Iterator[Pixel]:
        return iter(self._pixels)

    def __getitem__(self, index: int) -> Pixel:
        return self._pixels[index]

    def __repr__(self) -> str:
        if not self._pixels:
            return "Blob(empty)"
        return f"Blob(pixels={len(self)}, bbox={self.bounding_box()}, sum={self._value_sum:g})"

    # -- mutation ----------------------------------------------------------

    def append(self, pixel: Pixel) -> bool:
        """Add a pixel; returns False if its position was already taken."""
        if pixel.position in self._positions:
            return False
        self._pixels.append(pixel)
        self._positions.add(pixel.position)
        self._absorb(pixel)
        return True

    def extend(self, pixels: Iterable[Pixel]) -> None:
        for pixel in pixels:
            self.append(pixel)

    def remove(self, index: int) -> Pixel:
        """Drop the pixel at list position ``index`` and rebuild the summary."""
        pixel = self._pixels.pop(index)
        self._positions.discard(pixel.position)
        self._reset_summary()
        for p in self._pixels:
            self._absorb(p)
        return pixel

    def clear(self) -> None:
        self._pixels.clear()
        self._positions.clear()
        self._reset_summary()

    def copy(self) -> "Blob":
        return Blob(self._pixels)

    def set_scale(self, index: int, scale: float) -> Pixel:
        """Change the centroid weight scale of the pixel at ``index``."""
        pixel = replace(self._pixels[index], scale=scale)
        self._pixels[index] = pixel
        return pixel

    def swap(self, i: int, j: int, value_only: bool = False) -> None:
        """Exchange two pixels.

        With ``value_only`` the positions stay put and only value and scale
        trade places; otherwise the two pixels swap list positions.
        Neither form changes the summary fields.
        """
        a, b = self._pixels[i], self._pixels[j]
        if value_only:
            self._pixels[i] = replace(a, value=b.value, scale=b.scale)
            self._pixels[j] = replace(b, value=a.value, scale=a.scale)
        else:
            self._pixels[i], self._pixels[j] = b, a

    def sort_by_value(self) -> None:
        """Reorder pixels from lowest to highest value (stable)."""
        self._pixels.sort(key=lambda p: p.value)

    # -- queries -----------------------------------------------------------

    def pixel_count(self) -> int:
        return len(self._pixels)

    def bounding_box(self) -> tuple[int, int, int, int]:
        """(xmin, xmax, ymin, ymax) over the stored pixel positions."""
        if self._xmin is None:
            raise ValueError("Empty blob has no bounding box")
        return self._xmin, self._xmax, self._ymin, self._ymax

    def value_range(self) -> tuple[float, float]:
        if self._value_min is None:
            raise ValueError("Empty blob has no value range")
        return self._value_min, self._value_max

    def sum(self) -> float:
        return self._value_sum

    def contains(self, position: Pixel | tuple[int, int]) -> bool:
        if isinstance(position, Pixel):
            position = position.position
        return tuple(position) in self._positions

    def overlaps(self, other: "Blob") -> bool:
        """True if the two blobs share at least one pixel position."""
        return not self._positions.isdisjoint(other._positions)

    def positions(self) -> frozenset[tuple[int, int]]:
        return frozenset(self._positions)

    def centroid(self, weighted: bool = True) -> tuple[float, float]:
        """Weighted or unweighted center of the blob.

        Each pixel contributes ``scale`` (unweighted) or ``scale * value``
        (weighted). If the weights do not sum to a positive number the
        weighted form falls back to unweighted, and the unweighted form to
        the plain mean of positions.
        """
        if not self._pixels:
            return (0.0, 0.0)

        xs = np.array([p.x for p in self._pixels], dtype=np.float64)
        ys = np.array([p.y for p in self._pixels], dtype=np.float64)
        weights = np.array([p.scale for p in self._pixels], dtype=np.float64)
        if weighted:
            weights = weights * np.array([p.value for p in self._pixels], dtype=np.float64)

        total = float(np.sum(weights))
        if total > 0.0:
            return (float(np.dot(weights, xs) / total), float(np.dot(weights, ys) / total))
        if weighted:
            return self.centroid(weighted=False)
        return (float(np.mean(xs)), float(np.mean(ys)))
