"""Single-pass row-streaming blob labeler.

Scans the grid one row at a time and never holds a full label map. Between
rows the only carried state is:

- a marker row (one Marker per column, plus one trailing column) describing
  where the previous row's segments started and ended,
- the pending-merge buffer: pixels of objects that are still alive, parked
  under the column where their segment on the previous row started,
- the saved-status stack (PS values of enclosing objects).

Within a row, objects being grown live in numbered slots. Slot 0 is the
root and never holds an object; ``_co`` is the slot currently receiving
pixels. Slots are recycled as objects close, so every (re)assignment of a
slot installs a fresh pixel list.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import fields, replace
from typing import Any

from blobstream.engine.blob import Blob, Pixel
from blobstream.engine.classifier import GridSource, PixelClassifier, as_classifier
from blobstream.engine.config import ScanConfig
from blobstream.engine.errors import ConfigurationError, InvariantViolation
from blobstream.engine.markers import Marker, Status

logger = logging.getLogger(__name__)

_UNSET = -1
_CONFIG_FIELDS = frozenset(f.name for f in fields(ScanConfig))


class RowScanLabeler:
    """Finds 8-connected groups of above-threshold pixels in one pass.

    Usage:
        labeler = RowScanLabeler(grid, ScanConfig(width=w, height=h, threshold=0.5))
        labeler.run()
        for blob in labeler.all_objects():
            print(blob.pixel_count(), blob.centroid())

    One instance runs one scan at a time; independent instances share no
    state and may run concurrently on different grids.
    """

    def __init__(self, grid: GridSource | None = None, config: ScanConfig | None = None) -> None:
        self.classifier: PixelClassifier | None = None
        self.config = config or ScanConfig()
        if grid is not None:
            self.classifier = as_classifier(grid, self.config.threshold)
            if config is None and self.classifier.shape is not None:
                height, width = self.classifier.shape
                self.config = replace(self.config, width=width, height=height)

        self._transitions: dict[Marker, Callable[[int], None]] = {
            Marker.START_MAJOR: self._on_start_major,
            Marker.START_MINOR: self._on_start_minor,
            Marker.END_MINOR: self._on_end_minor,
            Marker.END_MAJOR: self._on_end_major,
        }
        self._reset_state(0)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, grid: GridSource | None = None, **changes: Any) -> "RowScanLabeler":
        """Swap the grid and/or update ScanConfig fields, all or nothing.

        A new array grid resizes width/height unless they are given
        explicitly. Nothing is applied if validation fails.
        """
        unknown = set(changes) - _CONFIG_FIELDS
        if unknown:
            raise ConfigurationError(f"Unknown configuration field(s): {sorted(unknown)}")

        config = replace(self.config, **changes)
        classifier = self.classifier
        if grid is not None:
            classifier = as_classifier(grid, config.threshold)
            if classifier.shape is not None and "width" not in changes and "height" not in changes:
                height, width = classifier.shape
                config = replace(config, width=width, height=height)
        config.validate()

        self.classifier = classifier
        self.config = config
        return self

    def _check_ready(self) -> None:
        if self.classifier is None:
            raise ConfigurationError("No grid accessor configured")
        self.config.validate()
        shape = self.classifier.shape
        if shape is not None and shape != (self.config.height, self.config.width):
            raise ConfigurationError(
                f"Grid is {shape[1]}x{shape[0]} but configuration says "
                f"{self.config.width}x{self.config.height}"
            )

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def object_count(self) -> int:
        return len(self._blobs)

    def get_object(self, index: int) -> Blob:
        if not 0 <= index < len(self._blobs):
            raise IndexError(f"Object index {index} out of range (0..{len(self._blobs) - 1})")
        return self._blobs[index]

    def all_objects(self) -> list[Blob]:
        return list(self._blobs)

    @property
    def discarded_count(self) -> int:
        """Blobs dropped by the min_pixels filter during the last run."""
        return self._discarded

    def __len__(self) -> int:
        return len(self._blobs)

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def _reset_state(self, width: int) -> None:
        self._blobs: list[Blob] = []
        self._discarded = 0

        # One extra marker column so a segment touching the right edge
        # still leaves its end marker behind.
        self._markers: list[Marker] = [Marker.NONE] * (width + 1)
        self._pending: list[list[Pixel]] = [[] for _ in range(width)]

        # Slot 0 is the root; at most `width` objects can be open at once.
        self._slot_capacity = width + 1
        self._start: list[int] = [_UNSET] * self._slot_capacity
        self._end: list[int] = [_UNSET] * self._slot_capacity
        self._fragments: list[list[Pixel]] = [[] for _ in range(self._slot_capacity)]
        self._co = 0

        # Each column pushes at most two saved statuses.
        self._status_capacity = 2 * (width + 1)
        self._status_stack: list[Status] = []
        self._ps = Status.COMPLETE
        self._cs = Status.NONOBJECT

        self._row = _UNSET
        self._col = _UNSET

    def run(self) -> list[Blob]:
        """Scan the whole grid, replacing any results of a previous run."""
        self._check_ready()
        classifier = self.classifier
        width, height = int(self.config.width), int(self.config.height)
        threshold = self.config.threshold
        self._reset_state(width)

        logger.debug(
            "Row scan started: %dx%d, threshold=%g, min_pixels=%d",
            width, height, self.config.threshold, self.config.min_pixels,
        )
        start = time.perf_counter()

        for y in range(height):
            self._row = y
            self._ps = Status.COMPLETE
            self._cs = Status.NONOBJECT

            # x == width is the synthetic trailing column: always background
            for x in range(width + 1):
                self._col = x
                previous = self._markers[x]
                self._markers[x] = Marker.NONE

                foreground = False
                if x < width:
                    sample = classifier.value(x, y)
                    foreground = classifier.accepts(sample, threshold)

                if foreground:
                    if self._cs is Status.NONOBJECT:
                        self._start_segment(x)
                    if previous:
                        self._transitions[previous](x)
                    self._fragments[self._co].append(Pixel(x, y, sample))
                else:
                    if previous:
                        self._transitions[previous](x)
                    if self._cs is Status.OBJECT:
                        self._end_segment(x)

            if self._co != 0 or self._status_stack:
                raise self._violation("Open objects left at end of row")

        self._flush_pending()

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Row scan complete: %d blob(s), %d discarded, %dx%d in %.1fms",
            len(self._blobs), self._discarded, width, height, elapsed,
        )
        return self.all_objects()

    # ------------------------------------------------------------------
    # Segment boundaries on the current row
    # ------------------------------------------------------------------

    def _start_segment(self, x: int) -> None:
        self._cs = Status.OBJECT
        if self._ps is Status.OBJECT:
            # Touches an object from the row above that is already in a slot
            if self._start[self._co] == _UNSET:
                self._markers[x] = Marker.START_MAJOR
                self._start[self._co] = x
            else:
                self._markers[x] = Marker.START_MINOR
        else:
            self._open_slot(x)
            self._markers[x] = Marker.START_MAJOR

    def _end_segment(self, x: int) -> None:
        self._cs = Status.NONOBJECT
        if self._ps is not Status.COMPLETE:
            # The object may pick up more segments further along this row
            self._markers[x] = Marker.END_MINOR
            self._end[self._co] = x
        else:
            self._close_slot()
            self._markers[x] = Marker.END_MAJOR

    # ------------------------------------------------------------------
    # Markers left by the row above
    # ------------------------------------------------------------------

    def _on_start_major(self, x: int) -> None:
        self._push_status()
        parked = self._pending[x]
        self._pending[x] = []
        if self._cs is Status.NONOBJECT:
            # First contact with this object on the current row
            self._push_status(Status.COMPLETE)
            self._claim_slot()
            self._fragments[self._co] = parked
            self._start[self._co] = _UNSET
            self._end[self._co] = _UNSET
        else:
            self._fragments[self._co].extend(parked)
        self._ps = Status.OBJECT

    def _on_start_minor(self, x: int) -> None:
        if self._cs is Status.OBJECT and self._ps is Status.COMPLETE:
            # The current segment joins two slots that hold the same object:
            # fold the newer slot into the one below it.
            self._pop_status()
            k = self._start[self._co]
            if k == _UNSET:
                raise self._violation("Joining an object slot with no start column")
            newer = self._fragments[self._co]
            self._release_slot()
            self._fragments[self._co].extend(newer)
            if self._start[self._co] == _UNSET:
                self._start[self._co] = k
            else:
                self._markers[k] = Marker.START_MINOR
        if self._pending[x]:
            self._fragments[self._co].extend(self._pending[x])
            self._pending[x] = []
        self._ps = Status.OBJECT

    def _on_end_minor(self, x: int) -> None:
        self._ps = Status.INCOMPLETE

    def _on_end_major(self, x: int) -> None:
        self._ps = self._pop_status()
        if self._cs is Status.NONOBJECT and self._ps is Status.COMPLETE:
            co = self._co
            if self._start[co] == _UNSET:
                # Nothing of it on this row: it can never grow again
                self._emit(self._fragments[co])
            else:
                if self._end[co] == _UNSET:
                    raise self._violation("Object continues on this row but has no end column")
                self._markers[self._end[co]] = Marker.END_MAJOR
                self._pending[self._start[co]].extend(self._fragments[co])
            self._release_slot()
            self._ps = self._pop_status()

    # ------------------------------------------------------------------
    # Slot and stack bookkeeping
    # ------------------------------------------------------------------

    def _open_slot(self, x: int) -> None:
        """New object starting at column x on this row."""
        self._push_status()
        self._claim_slot()
        self._start[self._co] = x
        self._end[self._co] = _UNSET
        self._fragments[self._co] = []

    def _close_slot(self) -> None:
        """Park the current slot's pixels under its start column."""
        self._ps = self._pop_status()
        co = self._co
        if self._start[co] == _UNSET:
            raise self._violation("Closing an object with no start column")
        self._pending[self._start[co]].extend(self._fragments[co])
        self._release_slot()

    def _claim_slot(self) -> None:
        if self._co + 1 >= self._slot_capacity:
            raise self._violation("Object slot overflow")
        self._co += 1

    def _release_slot(self) -> None:
        if self._co <= 0:
            raise self._violation("Object slot underflow")
        self._fragments[self._co] = []
        self._start[self._co] = _UNSET
        self._end[self._co] = _UNSET
        self._co -= 1

    def _push_status(self, status: Status | None = None) -> None:
        """Save PS (or an explicit status) and reset PS to COMPLETE."""
        if len(self._status_stack) >= self._status_capacity:
            raise self._violation("Status stack overflow")
        self._status_stack.append(self._ps if status is None else status)
        self._ps = Status.COMPLETE

    def _pop_status(self) -> Status:
        if not self._status_stack:
            raise self._violation("Status stack underflow")
        return self._status_stack.pop()

    def _violation(self, message: str) -> InvariantViolation:
        return InvariantViolation(message, row=self._row, column=self._col, depth=len(self._status_stack))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _emit(self, pixels: list[Pixel]) -> None:
        if not pixels:
            return
        if len(pixels) < self.config.min_pixels:
            self._discarded += 1
            logger.debug(
                "Discarded blob of %d pixel(s) at (%d, %d) (min_pixels=%d)",
                len(pixels), pixels[0].x, pixels[0].y, self.config.min_pixels,
            )
            return
        self._blobs.append(Blob(pixels))

    def _flush_pending(self) -> None:
        """Objects still parked after the last row are finished."""
        for x, pixels in enumerate(self._pending):
            self._emit(pixels)
            self._pending[x] = []


def label_grid(grid: GridSource, threshold: float = 0.0, min_pixels: int = 0) -> list[Blob]:
    """One-call helper: label a 2-D array (rows of values)."""
    config = ScanConfig.for_array(grid, threshold=threshold, min_pixels=min_pixels)
    return RowScanLabeler(grid, config).run()
