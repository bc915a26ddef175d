"""Public domain model surface."""

from __future__ import annotations

from syncledger.domain.model.enums import (
    DestinationSyncMode,
    RefreshType,
    StreamStatus,
    SyncMode,
)
from syncledger.domain.model.generations import Generation, RefreshStream
from syncledger.domain.model.status import StreamStatusMessage
from syncledger.domain.model.streams import (
    MAX_GENERATION_ID,
    ConfiguredCatalog,
    ConfiguredStream,
    StreamKey,
)

__all__ = [
    "MAX_GENERATION_ID",
    "ConfiguredCatalog",
    "ConfiguredStream",
    "DestinationSyncMode",
    "Generation",
    "RefreshStream",
    "RefreshType",
    "StreamKey",
    "StreamStatus",
    "StreamStatusMessage",
    "SyncMode",
]
