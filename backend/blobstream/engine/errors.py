"""Engine exceptions.

ConfigurationError is raised before any scanning work starts.
InvariantViolation means the row-scan state machine itself is broken.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid scan configuration (dimensions, accessor, threshold, min size)."""


class InvariantViolation(RuntimeError):
    """Stack or slot bookkeeping went out of bounds during a scan."""

    def __init__(self, message: str, row: int = -1, column: int = -1, depth: int = -1) -> None:
        self.row = row
        self.column = column
        self.depth = depth
        super().__init__(f"{message} (row={row}, column={column}, depth={depth})")
