"""
Cooperative cancellation for long-running aggregations.

The host owns the decision to stop; aggregators only poll at a fixed row cadence.
A host can pass either a `CancellationToken` or any zero-argument callable that
returns True once it wants the computation to stop (e.g. an interrupt flag).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Union

from geoweight.core.errors import InterpolationCancelled

logger = logging.getLogger(__name__)


@dataclass
class CancellationToken:
    """Thread-safe cancel flag (set from a signal handler or another thread)."""

    _event: threading.Event = field(default_factory=threading.Event, repr=False)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        return self.cancelled


CancelHook = Union[CancellationToken, Callable[[], bool]]


@dataclass
class RowCheckpoint:
    """Poll a cancel hook every `every` rows while `operation` iterates `total` rows."""

    operation: str
    hook: CancelHook | None
    every: int
    total: int

    def __post_init__(self) -> None:
        if int(self.every) <= 0:
            raise ValueError("every must be > 0")

    def check(self, row: int) -> None:
        if self.hook is None or row % self.every != 0:
            return
        if self.hook():
            logger.info("%s cancelled by host after %d/%d rows", self.operation, row, self.total)
            raise InterpolationCancelled(rows_done=row, rows_total=self.total)
