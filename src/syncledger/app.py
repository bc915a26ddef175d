"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from syncledger.adapters.sqlalchemy import generation_history, is_started, startup
from syncledger.domain.completion import CompletionTracker
from syncledger.domain.generations import GenerationAssigner
from syncledger.domain.namespacing import identity_mapper
from syncledger.domain.ports import epoch_millis

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from syncledger.domain.model import (
        ConfiguredCatalog,
        RefreshStream,
        StreamKey,
        StreamStatusMessage,
    )
    from syncledger.domain.ports import GenerationHistory, MillisClock, StatusMessageMapper


log = getLogger(__name__)


def _default_history() -> GenerationHistory:
    if not is_started():
        startup()
    return generation_history()


def plan_sync_run(
    catalog: ConfiguredCatalog,
    *,
    job_id: int,
    connection_id: UUID,
    refreshes: Iterable[RefreshStream] = (),
    history: GenerationHistory | None = None,
) -> ConfiguredCatalog:
    """Stamp ``catalog`` with generation and sync ids for a sync or refresh job."""

    effective_history = history if history is not None else _default_history()
    refresh_list = list(refreshes)
    log.info(
        "Planning job %s for connection %s: streams=%s, refreshes=%s",
        job_id,
        connection_id,
        len(catalog),
        len(refresh_list),
    )
    return GenerationAssigner().assign(
        catalog,
        job_id=job_id,
        refreshes=refresh_list,
        generations=effective_history.max_generations(connection_id),
    )


def plan_clear_run(
    catalog: ConfiguredCatalog,
    *,
    job_id: int,
    connection_id: UUID,
    cleared_streams: Iterable[StreamKey],
    history: GenerationHistory | None = None,
) -> ConfiguredCatalog:
    """Stamp ``catalog`` for a clear job that wipes ``cleared_streams``."""

    effective_history = history if history is not None else _default_history()
    cleared = list(cleared_streams)
    log.info(
        "Planning clear job %s for connection %s: cleared=%s",
        job_id,
        connection_id,
        ", ".join(str(key) for key in cleared) or "<none>",
    )
    return GenerationAssigner().assign_for_clear(
        catalog,
        job_id=job_id,
        cleared_streams=cleared,
        generations=effective_history.max_generations(connection_id),
    )


def reconcile_run(
    catalog: ConfiguredCatalog,
    statuses: Iterable[StreamStatusMessage],
    *,
    exit_code: int,
    refreshes_supported: bool,
    mapper: StatusMessageMapper = identity_mapper,
    clock: MillisClock = epoch_millis,
) -> list[StreamStatusMessage]:
    """Replay the statuses of a finished run and return the synthesized completions."""

    tracker = CompletionTracker(clock=clock)
    tracker.start_tracking(catalog, refreshes_supported=refreshes_supported)
    for status in statuses:
        tracker.track(status)
    missing = tracker.missing()
    if missing:
        log.info(
            "Streams without a reported completion: %s",
            ", ".join(str(key) for key in missing),
        )
    messages = tracker.finalize(exit_code, mapper)
    log.info(
        "Finished reconciliation: exit_code=%s, reported=%s, synthesized=%s",
        exit_code,
        len(tracker.reported),
        len(messages),
    )
    return messages
