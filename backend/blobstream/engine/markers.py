"""Per-column markers and segment status flags used by the row scan."""

from __future__ import annotations

import enum


class Marker(enum.Enum):
    """Tag left at a column by one row for the scan of the next row.

    START_MAJOR  first segment of an object on that row
    START_MINOR  later segment of an object already seen on that row
    END_MINOR    segment ended, the object may still continue further down
    END_MAJOR    last segment of the object on that row ended here
    """

    NONE = 0
    START_MAJOR = 1
    START_MINOR = 2
    END_MINOR = 3
    END_MAJOR = 4

    def __bool__(self) -> bool:
        return self is not Marker.NONE


class Status(enum.Enum):
    """PS / CS flags carried from column to column within one row."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    OBJECT = "object"
    NONOBJECT = "nonobject"
