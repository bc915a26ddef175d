"""Reconcile reported stream completion with the outcome of a run.

A tracker lives for exactly one run::

    tracker = CompletionTracker(clock=clock)
    tracker.start_tracking(catalog, refreshes_supported=True)
    for status in reported_statuses:
        tracker.track(status)
    messages = tracker.finalize(exit_code, mapper)

Once a run exits successfully every expected stream is given a ``COMPLETE``
status, whether or not the connector reported one itself. A failed run, or a
destination that cannot apply refreshes, gets no synthesized statuses.
"""

from __future__ import annotations

import logging
import threading
from enum import StrEnum
from typing import TYPE_CHECKING

from syncledger.domain.model import StreamStatus, StreamStatusMessage
from syncledger.domain.ports import epoch_millis

if TYPE_CHECKING:
    from syncledger.domain.model import ConfiguredCatalog, StreamKey
    from syncledger.domain.ports import MillisClock, StatusMessageMapper

log = logging.getLogger(__name__)

SUCCESS_EXIT_CODE = 0


class TrackerState(StrEnum):
    NOT_STARTED = "not_started"
    TRACKING = "tracking"
    FINALIZED = "finalized"


class TrackerSequenceError(RuntimeError):
    """Raised when a tracker is driven outside start -> track -> finalize order."""


class CompletionTracker:
    """Per-run record of which streams reported completion."""

    def __init__(self, *, clock: MillisClock = epoch_millis) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._state = TrackerState.NOT_STARTED
        self._expected: tuple[StreamKey, ...] = ()
        self._reported: set[StreamKey] = set()
        self._refreshes_supported = False
        self._started_at: int | None = None

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def expected(self) -> tuple[StreamKey, ...]:
        return self._expected

    @property
    def reported(self) -> frozenset[StreamKey]:
        with self._lock:
            return frozenset(self._reported)

    @property
    def refreshes_supported(self) -> bool:
        return self._refreshes_supported

    @property
    def started_at(self) -> int | None:
        return self._started_at

    def start_tracking(self, catalog: ConfiguredCatalog, *, refreshes_supported: bool) -> None:
        """Capture the expected streams of ``catalog`` and the run start time."""

        with self._lock:
            self._require(TrackerState.NOT_STARTED, "start_tracking")
            self._expected = tuple(dict.fromkeys(catalog.keys()))
            self._reported = set()
            self._refreshes_supported = refreshes_supported
            self._started_at = self._clock()
            self._state = TrackerState.TRACKING
        log.debug(
            "Tracking completion of %d streams (refreshes_supported=%s)",
            len(self._expected),
            refreshes_supported,
        )

    def track(self, status: StreamStatusMessage) -> None:
        """Record ``status``; only ``COMPLETE`` statuses count."""

        with self._lock:
            self._require(TrackerState.TRACKING, "track")
            if status.is_complete:
                self._reported.add(status.stream)

    def missing(self) -> tuple[StreamKey, ...]:
        """Expected streams that have not reported completion, in catalog order."""

        reported = self.reported
        return tuple(key for key in self._expected if key not in reported)

    def finalize(self, exit_code: int, mapper: StatusMessageMapper) -> list[StreamStatusMessage]:
        """Close the run and return the completion statuses it is owed."""

        with self._lock:
            self._require(TrackerState.TRACKING, "finalize")
            self._state = TrackerState.FINALIZED

        if not self._refreshes_supported:
            log.debug("Destination does not support refreshes; no statuses synthesized")
            return []
        if exit_code != SUCCESS_EXIT_CODE:
            log.info(
                "Run exited with code %s; dropping %d reported completions",
                exit_code,
                len(self._reported),
            )
            return []

        started_at = self._started_at or 0
        messages = [
            mapper(
                StreamStatusMessage(
                    stream=key,
                    status=StreamStatus.COMPLETE,
                    emitted_at=started_at,
                )
            )
            for key in self._expected
        ]
        log.info(
            "Synthesized %d completion statuses (%d reported by the connector)",
            len(messages),
            len(self._reported & set(self._expected)),
        )
        return messages

    def _require(self, state: TrackerState, operation: str) -> None:
        if self._state is not state:
            raise TrackerSequenceError(
                f"Cannot {operation} while tracker is {self._state}; expected {state}"
            )


__all__ = ["SUCCESS_EXIT_CODE", "CompletionTracker", "TrackerSequenceError", "TrackerState"]
