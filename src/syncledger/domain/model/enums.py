"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SyncMode(StrEnum):
    FULL_REFRESH = "full_refresh"
    INCREMENTAL = "incremental"


class DestinationSyncMode(StrEnum):
    APPEND = "append"
    OVERWRITE = "overwrite"
    OVERWRITE_DEDUP = "overwrite_dedup"


class RefreshType(StrEnum):
    """Targeted refresh requested for a single stream."""

    TRUNCATE = "truncate"
    MERGE = "merge"


class StreamStatus(StrEnum):
    """Per-stream status reported by a connector while a run is in flight."""

    STARTED = "STARTED"
    RUNNING = "RUNNING"
    COMPLETE = "COMPLETE"
    INCOMPLETE = "INCOMPLETE"
