"""Generation history records and refresh requests."""

from __future__ import annotations

from dataclasses import dataclass

from syncledger.domain.model.enums import RefreshType
from syncledger.domain.model.streams import StreamKey, check_generation_id  # noqa: TC001


@dataclass(frozen=True, slots=True)
class Generation:
    """Highest completed generation previously recorded for a stream."""

    stream: StreamKey
    generation_id: int

    def __post_init__(self) -> None:
        check_generation_id(self.generation_id, stream=self.stream)


@dataclass(frozen=True, slots=True)
class RefreshStream:
    stream: StreamKey
    refresh_type: RefreshType = RefreshType.TRUNCATE
