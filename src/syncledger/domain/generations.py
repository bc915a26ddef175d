"""Generation and sync-id assignment for configured catalogs.

Every run stamps each stream with three values a destination relies on:

- ``generation_id``: the generation the run writes. It advances by one when the
  destination is about to replace data (overwrite full refresh, truncate or
  merge refresh, clear) and otherwise stays at the stream's recorded value.
- ``minimum_generation_id``: the oldest generation that remains valid. ``0``
  keeps all history; equal to ``generation_id`` truncates everything older.
- ``sync_id``: the job id of the run.

The assigner never mutates its inputs and returns a fresh catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from syncledger.domain.model import ConfiguredCatalog, RefreshType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from syncledger.domain.model import ConfiguredStream, Generation, RefreshStream, StreamKey

log = logging.getLogger(__name__)

_INITIAL_GENERATION = 0
_KEEP_ALL_HISTORY = 0


def latest_generations(generations: Iterable[Generation]) -> dict[StreamKey, int]:
    """Index generation records by stream, keeping the highest id per stream."""

    latest: dict[StreamKey, int] = {}
    for generation in generations:
        current = latest.get(generation.stream)
        if current is None or generation.generation_id > current:
            latest[generation.stream] = generation.generation_id
    return latest


def refreshes_by_stream(refreshes: Iterable[RefreshStream]) -> dict[StreamKey, RefreshType]:
    """Index refresh requests by stream; a later request replaces an earlier one."""

    return {refresh.stream: refresh.refresh_type for refresh in refreshes}


@dataclass(frozen=True, slots=True)
class GenerationAssigner:
    """Compute per-stream generation ids for the catalog of a run."""

    def assign(
        self,
        catalog: ConfiguredCatalog,
        *,
        job_id: int,
        refreshes: Iterable[RefreshStream] = (),
        generations: Iterable[Generation] = (),
    ) -> ConfiguredCatalog:
        """Stamp ``catalog`` for a sync or refresh run."""

        prior_by_stream = latest_generations(generations)
        refresh_by_stream = refreshes_by_stream(refreshes)

        catalog_keys = set(catalog.keys())
        for stale in refresh_by_stream.keys() - catalog_keys:
            log.debug(
                "Ignoring %s refresh for stream %s absent from catalog",
                refresh_by_stream[stale],
                stale,
            )

        return ConfiguredCatalog.of(
            _stamp(
                stream,
                prior=prior_by_stream.get(stream.key, _INITIAL_GENERATION),
                refresh=refresh_by_stream.get(stream.key),
                job_id=job_id,
            )
            for stream in catalog
        )

    def assign_for_clear(
        self,
        catalog: ConfiguredCatalog,
        *,
        job_id: int,
        cleared_streams: Iterable[StreamKey],
        generations: Iterable[Generation] = (),
    ) -> ConfiguredCatalog:
        """Stamp ``catalog`` for a clear run, truncating ``cleared_streams``."""

        prior_by_stream = latest_generations(generations)
        cleared = frozenset(cleared_streams)

        updated: list[ConfiguredStream] = []
        for stream in catalog:
            prior = prior_by_stream.get(stream.key, _INITIAL_GENERATION)
            if stream.key in cleared:
                generation_id = prior + 1
                minimum_generation_id = generation_id
            else:
                generation_id = prior
                minimum_generation_id = _KEEP_ALL_HISTORY
            updated.append(
                stream.with_generation(
                    generation_id=generation_id,
                    minimum_generation_id=minimum_generation_id,
                    sync_id=job_id,
                )
            )
        return ConfiguredCatalog.of(updated)


def _stamp(
    stream: ConfiguredStream,
    *,
    prior: int,
    refresh: RefreshType | None,
    job_id: int,
) -> ConfiguredStream:
    match refresh:
        case RefreshType.TRUNCATE:
            generation_id = prior + 1
            minimum_generation_id = generation_id
        case RefreshType.MERGE:
            generation_id = prior + 1
            minimum_generation_id = _KEEP_ALL_HISTORY
        case None if stream.is_overwrite_full_refresh:
            generation_id = prior + 1
            minimum_generation_id = generation_id
        case _:
            generation_id = prior
            minimum_generation_id = _KEEP_ALL_HISTORY

    log.debug(
        "Stream %s: generation=%s minimum_generation=%s (prior=%s, refresh=%s)",
        stream.key,
        generation_id,
        minimum_generation_id,
        prior,
        refresh,
    )
    return stream.with_generation(
        generation_id=generation_id,
        minimum_generation_id=minimum_generation_id,
        sync_id=job_id,
    )


__all__ = ["GenerationAssigner", "latest_generations", "refreshes_by_stream"]
