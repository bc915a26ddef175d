from __future__ import annotations

import threading

import pytest

from syncledger.domain.completion import CompletionTracker, TrackerSequenceError, TrackerState
from syncledger.domain.model import (
    ConfiguredCatalog,
    StreamKey,
    StreamStatus,
    StreamStatusMessage,
)
from syncledger.domain.namespacing import identity_mapper
from tests.helpers.catalogs import completed, make_catalog, make_stream


def _clock() -> int:
    return 1


@pytest.fixture
def catalog() -> ConfiguredCatalog:
    return make_catalog(make_stream("name1"), make_stream("name2", "namespace2"))


@pytest.fixture
def tracker() -> CompletionTracker:
    return CompletionTracker(clock=_clock)


def test_all_streams_complete_on_success_without_reports(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)

    result = tracker.finalize(0, identity_mapper)

    assert result == [completed("name1"), completed("name2", "namespace2")]


def test_all_streams_complete_on_success_with_some_reports(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.track(completed("name1"))

    result = tracker.finalize(0, identity_mapper)

    assert result == [completed("name1"), completed("name2", "namespace2")]


def test_duplicate_completion_reports_are_idempotent(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.track(completed("name1"))
    tracker.track(completed("name1"))

    assert tracker.reported == frozenset({StreamKey("name1")})
    assert tracker.finalize(0, identity_mapper) == [
        completed("name1"),
        completed("name2", "namespace2"),
    ]


def test_failed_run_returns_nothing_without_reports(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)

    assert tracker.finalize(1, identity_mapper) == []


def test_failed_run_returns_nothing_even_when_streams_reported(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.track(completed("name1"))
    tracker.track(completed("name2", "namespace2"))

    assert tracker.finalize(1, identity_mapper) == []
    assert tracker.state is TrackerState.FINALIZED


def test_no_messages_when_destination_does_not_support_refreshes(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=False)
    tracker.track(completed("name1"))
    tracker.track(completed("name2", "namespace2"))

    assert tracker.finalize(0, identity_mapper) == []
    assert tracker.state is TrackerState.FINALIZED


def test_messages_carry_start_time_not_finalize_time(catalog: ConfiguredCatalog) -> None:
    ticks = iter([100, 900])
    tracker = CompletionTracker(clock=lambda: next(ticks))
    tracker.start_tracking(catalog, refreshes_supported=True)

    result = tracker.finalize(0, identity_mapper)

    assert tracker.started_at == 100
    assert {message.emitted_at for message in result} == {100}


def test_non_complete_statuses_are_ignored(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.track(StreamStatusMessage(stream=StreamKey("name1"), status=StreamStatus.RUNNING))
    tracker.track(
        StreamStatusMessage(stream=StreamKey("name2", "namespace2"), status=StreamStatus.INCOMPLETE)
    )

    assert tracker.reported == frozenset()
    assert tracker.missing() == (StreamKey("name1"), StreamKey("name2", "namespace2"))


def test_later_non_complete_status_does_not_unreport_stream(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.track(completed("name1"))
    tracker.track(StreamStatusMessage(stream=StreamKey("name1"), status=StreamStatus.INCOMPLETE))

    assert tracker.reported == frozenset({StreamKey("name1")})
    assert tracker.missing() == (StreamKey("name2", "namespace2"),)


def test_reports_for_unknown_streams_do_not_surface(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.track(completed("unknown", "elsewhere"))

    result = tracker.finalize(0, identity_mapper)

    assert [message.stream for message in result] == [
        StreamKey("name1"),
        StreamKey("name2", "namespace2"),
    ]


def test_mapper_is_applied_to_every_message(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    seen: list[StreamKey] = []

    def _mapper(message: StreamStatusMessage) -> StreamStatusMessage:
        seen.append(message.stream)
        return StreamStatusMessage(
            stream=StreamKey(f"mapped_{message.stream.name}", message.stream.namespace),
            status=message.status,
            emitted_at=message.emitted_at,
        )

    tracker.start_tracking(catalog, refreshes_supported=True)
    result = tracker.finalize(0, _mapper)

    assert seen == [StreamKey("name1"), StreamKey("name2", "namespace2")]
    assert [message.stream.name for message in result] == ["mapped_name1", "mapped_name2"]


def test_duplicate_catalog_entries_yield_one_message(tracker: CompletionTracker) -> None:
    catalog = make_catalog(make_stream("name1"), make_stream("name1"))
    tracker.start_tracking(catalog, refreshes_supported=True)

    assert tracker.finalize(0, identity_mapper) == [completed("name1")]


def test_track_before_start_is_rejected(tracker: CompletionTracker) -> None:
    with pytest.raises(TrackerSequenceError, match="track"):
        tracker.track(completed("name1"))


def test_finalize_before_start_is_rejected(tracker: CompletionTracker) -> None:
    with pytest.raises(TrackerSequenceError, match="finalize"):
        tracker.finalize(0, identity_mapper)


def test_tracker_cannot_be_finalized_twice(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)
    tracker.finalize(0, identity_mapper)

    with pytest.raises(TrackerSequenceError):
        tracker.finalize(0, identity_mapper)
    with pytest.raises(TrackerSequenceError):
        tracker.track(completed("name1"))


def test_tracker_cannot_be_restarted(
    tracker: CompletionTracker, catalog: ConfiguredCatalog
) -> None:
    tracker.start_tracking(catalog, refreshes_supported=True)

    with pytest.raises(TrackerSequenceError, match="start_tracking"):
        tracker.start_tracking(catalog, refreshes_supported=True)


def test_concurrent_reporters_share_one_tracker(tracker: CompletionTracker) -> None:
    catalog = make_catalog(*(make_stream(f"stream_{index}") for index in range(50)))
    tracker.start_tracking(catalog, refreshes_supported=True)

    def _report(offset: int) -> None:
        for index in range(offset, 50, 2):
            tracker.track(completed(f"stream_{index}"))

    workers = [threading.Thread(target=_report, args=(offset,)) for offset in (0, 1)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert tracker.missing() == ()
    assert len(tracker.finalize(0, identity_mapper)) == 50
