"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest


# Hand-built grids: 1 = foreground, 0 = background (threshold 0.5)

U_SHAPE = [
    [1, 0, 0, 1],
    [1, 0, 0, 1],
    [1, 0, 0, 1],
    [1, 1, 1, 1],
]

INVERTED_U = [
    [1, 1, 1, 1],
    [1, 0, 0, 1],
    [1, 0, 0, 1],
    [0, 0, 0, 0],
]

V_SHAPE = [
    [1, 0, 1],
    [0, 1, 0],
]

TWO_BLOBS = [
    [1, 1, 0, 0, 0],
    [1, 1, 0, 0, 0],
    [0, 0, 0, 0, 0],
    [0, 0, 0, 1, 1],
    [0, 0, 0, 1, 1],
]

# Comb: a bar with three teeth hanging off it, then an isolated dot
COMB = [
    [1, 1, 1, 1, 1, 1, 1],
    [1, 0, 1, 0, 1, 0, 1],
    [1, 0, 1, 0, 1, 0, 1],
    [0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 1, 0, 0, 0],
]

# Two legs of one object with a separate object between them, all joined
# underneath by a single pixel touching both diagonally.
NESTED_JOIN = [
    [1, 1, 1, 1, 1, 1],
    [1, 0, 0, 0, 1, 0],
    [1, 0, 1, 0, 1, 0],
    [0, 0, 0, 1, 0, 0],
]

# A segment that starts before the column where it meets a second leg of
# an object it already belongs to.
LATE_JOIN = [
    [1, 1, 1, 1, 1, 1],
    [1, 1, 0, 0, 1, 1],
    [0, 0, 0, 1, 1, 0],
]

SPIRAL = [
    [1, 1, 1, 1, 1, 1, 1],
    [0, 0, 0, 0, 0, 0, 1],
    [1, 1, 1, 1, 1, 0, 1],
    [1, 0, 0, 0, 1, 0, 1],
    [1, 0, 1, 0, 0, 0, 1],
    [1, 0, 1, 1, 1, 1, 1],
]


def reference_components(grid, threshold: float = 0.5) -> set[frozenset[tuple[int, int]]]:
    """8-connected components by plain flood fill, as sets of (x, y)."""
    arr = np.asarray(grid, dtype=float)
    height, width = arr.shape
    seen = np.zeros(arr.shape, dtype=bool)
    components: set[frozenset[tuple[int, int]]] = set()

    for y in range(height):
        for x in range(width):
            if seen[y, x] or not arr[y, x] > threshold:
                continue
            stack = [(x, y)]
            seen[y, x] = True
            members = []
            while stack:
                cx, cy = stack.pop()
                members.append((cx, cy))
                for dy in (-1, 0, 1):
                    for dx in (-1, 0, 1):
                        nx, ny = cx + dx, cy + dy
                        if 0 <= nx < width and 0 <= ny < height and not seen[ny, nx] and arr[ny, nx] > threshold:
                            seen[ny, nx] = True
                            stack.append((nx, ny))
            components.add(frozenset(members))
    return components


def blob_position_sets(blobs) -> set[frozenset[tuple[int, int]]]:
    return {blob.positions() for blob in blobs}


@pytest.fixture
def u_shape() -> list[list[int]]:
    return U_SHAPE


@pytest.fixture
def two_blobs() -> list[list[int]]:
    return TWO_BLOBS


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20181)
