"""Stream identity and configured catalog value objects."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final

from syncledger.domain.model.enums import DestinationSyncMode, SyncMode

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

MAX_GENERATION_ID: Final[int] = 2**64 - 1


def check_generation_id(value: int, *, stream: StreamKey, field: str = "Generation id") -> None:
    if not 0 <= value <= MAX_GENERATION_ID:
        raise ValueError(f"{field} for {stream} must be an unsigned 64-bit value, got {value}")


@dataclass(frozen=True, slots=True)
class StreamKey:
    """Identify a stream by name and optional namespace.

    ``namespace=None`` is a value of its own: ``StreamKey("users")`` and
    ``StreamKey("users", "public")`` are different streams.
    """

    name: str
    namespace: str | None = None

    def __str__(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfiguredStream:
    key: StreamKey
    sync_mode: SyncMode = SyncMode.FULL_REFRESH
    destination_sync_mode: DestinationSyncMode = DestinationSyncMode.APPEND
    generation_id: int | None = None
    minimum_generation_id: int | None = None
    sync_id: int | None = None

    @property
    def is_overwrite_full_refresh(self) -> bool:
        return self.sync_mode is SyncMode.FULL_REFRESH and self.destination_sync_mode in (
            DestinationSyncMode.OVERWRITE,
            DestinationSyncMode.OVERWRITE_DEDUP,
        )

    def with_generation(
        self, *, generation_id: int, minimum_generation_id: int, sync_id: int
    ) -> ConfiguredStream:
        check_generation_id(generation_id, stream=self.key)
        check_generation_id(minimum_generation_id, stream=self.key, field="Minimum generation id")
        return replace(
            self,
            generation_id=generation_id,
            minimum_generation_id=minimum_generation_id,
            sync_id=sync_id,
        )


@dataclass(frozen=True, slots=True)
class ConfiguredCatalog:
    """Ordered collection of streams configured for one run."""

    streams: tuple[ConfiguredStream, ...] = ()

    @classmethod
    def of(cls, streams: Iterable[ConfiguredStream]) -> ConfiguredCatalog:
        return cls(streams=tuple(streams))

    def __iter__(self) -> Iterator[ConfiguredStream]:
        return iter(self.streams)

    def __len__(self) -> int:
        return len(self.streams)

    def keys(self) -> tuple[StreamKey, ...]:
        return tuple(stream.key for stream in self.streams)

    def get(self, key: StreamKey) -> ConfiguredStream | None:
        for stream in self.streams:
            if stream.key == key:
                return stream
        return None
