from __future__ import annotations

from dataclasses import dataclass

from syncledger.domain.model.enums import StreamStatus
from syncledger.domain.model.streams import StreamKey  # noqa: TC001


@dataclass(frozen=True, slots=True)
class StreamStatusMessage:
    """Status trace for one stream; ``emitted_at`` is epoch milliseconds."""

    stream: StreamKey
    status: StreamStatus
    emitted_at: int = 0

    @property
    def is_complete(self) -> bool:
        return self.status is StreamStatus.COMPLETE
