from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from syncledger.adapters.protocol import (
    ProtocolMessage,
    dump_catalog,
    dump_status_message,
    parse_catalog,
    parse_catalog_payload,
    parse_refreshes,
    parse_status_messages,
    translate_catalog,
    translate_status_message,
)
from syncledger.domain.generations import GenerationAssigner
from syncledger.domain.model import (
    DestinationSyncMode,
    Generation,
    RefreshStream,
    RefreshType,
    StreamKey,
    StreamStatus,
    SyncMode,
)
from tests.helpers.catalogs import completed

CATALOG_DOCUMENT = json.dumps(
    {
        "streams": [
            {
                "stream": {"name": "users", "namespace": "public", "json_schema": {}},
                "sync_mode": "incremental",
                "destination_sync_mode": "overwrite_dedup",
            },
            {"stream": {"name": "events"}},
        ]
    }
)


def _status_line(name: str, namespace: str | None, status: str, emitted_at: float = 7.0) -> str:
    return json.dumps(
        {
            "type": "TRACE",
            "trace": {
                "type": "STREAM_STATUS",
                "emitted_at": emitted_at,
                "stream_status": {
                    "stream_descriptor": {"name": name, "namespace": namespace},
                    "status": status,
                },
            },
        }
    )


def test_parse_catalog_reads_modes_and_defaults() -> None:
    catalog = parse_catalog(CATALOG_DOCUMENT)

    users, events = catalog.streams
    assert users.key == StreamKey("users", "public")
    assert users.sync_mode is SyncMode.INCREMENTAL
    assert users.destination_sync_mode is DestinationSyncMode.OVERWRITE_DEDUP
    assert events.key == StreamKey("events")
    assert events.sync_mode is SyncMode.FULL_REFRESH
    assert events.destination_sync_mode is DestinationSyncMode.APPEND


def test_parse_catalog_rejects_negative_generation() -> None:
    document = json.dumps({"streams": [{"stream": {"name": "users"}, "generation_id": -1}]})

    with pytest.raises(ValidationError):
        parse_catalog(document)


def test_dump_catalog_writes_generation_fields() -> None:
    catalog = parse_catalog(CATALOG_DOCUMENT)
    stamped = type(catalog).of(
        stream.with_generation(generation_id=2, minimum_generation_id=0, sync_id=9)
        for stream in catalog
    )

    payload = json.loads(dump_catalog(stamped).model_dump_json(exclude_none=True))

    assert payload["streams"][0]["stream"] == {
        "name": "users",
        "namespace": "public",
        "supported_sync_modes": [],
    }
    assert payload["streams"][0]["generation_id"] == 2
    assert payload["streams"][0]["minimum_generation_id"] == 0
    assert payload["streams"][1]["sync_id"] == 9
    assert parse_catalog(dump_catalog(stamped).model_dump_json()) == stamped


def test_parse_refreshes() -> None:
    document = json.dumps(
        [
            {"refresh_type": "truncate", "stream_descriptor": {"name": "users", "namespace": "a"}},
            {"refresh_type": "merge", "stream_descriptor": {"name": "events"}},
        ]
    )

    refreshes = parse_refreshes(document)

    assert [(r.stream, r.refresh_type) for r in refreshes] == [
        (StreamKey("users", "a"), RefreshType.TRUNCATE),
        (StreamKey("events"), RefreshType.MERGE),
    ]


def test_parse_status_messages_skips_other_messages() -> None:
    lines = [
        _status_line("users", "public", "COMPLETE"),
        "",
        json.dumps({"type": "RECORD", "record": {"stream": "users", "data": {}}}),
        json.dumps({"type": "TRACE", "trace": {"type": "ERROR", "emitted_at": 1.0}}),
        "not json at all",
        _status_line("events", None, "RUNNING", emitted_at=12.9),
    ]

    statuses = list(parse_status_messages(lines))

    assert [(s.stream, s.status, s.emitted_at) for s in statuses] == [
        (StreamKey("users", "public"), StreamStatus.COMPLETE, 7),
        (StreamKey("events"), StreamStatus.RUNNING, 12),
    ]


def test_translate_status_message_ignores_non_trace() -> None:
    message = ProtocolMessage.model_validate({"type": "LOG"})

    assert translate_status_message(message) is None


def test_dump_status_message_produces_trace() -> None:
    payload = json.loads(
        dump_status_message(completed("users", "public", emitted_at=3)).model_dump_json(
            exclude_none=True
        )
    )

    assert payload == {
        "type": "TRACE",
        "trace": {
            "type": "STREAM_STATUS",
            "emitted_at": 3.0,
            "stream_status": {
                "stream_descriptor": {"name": "users", "namespace": "public"},
                "status": "COMPLETE",
            },
        },
    }


def test_dump_catalog_keeps_unmodelled_fields_of_source() -> None:
    document = json.dumps(
        {
            "streams": [
                {
                    "stream": {
                        "name": "users",
                        "namespace": "public",
                        "json_schema": {"type": "object"},
                        "supported_sync_modes": ["full_refresh", "incremental"],
                        "source_defined_cursor": True,
                    },
                    "sync_mode": "incremental",
                    "destination_sync_mode": "append",
                    "cursor_field": ["updated_at"],
                    "primary_key": [["id"]],
                },
            ]
        }
    )
    source = parse_catalog_payload(document)
    stamped = GenerationAssigner().assign(
        translate_catalog(source),
        job_id=5,
        refreshes=[RefreshStream(stream=StreamKey("users", "public"))],
        generations=[Generation(stream=StreamKey("users", "public"), generation_id=2)],
    )

    payload = json.loads(dump_catalog(stamped, source=source).model_dump_json(exclude_none=True))

    (stream,) = payload["streams"]
    assert stream["stream"] == {
        "name": "users",
        "namespace": "public",
        "json_schema": {"type": "object"},
        "supported_sync_modes": ["full_refresh", "incremental"],
        "source_defined_cursor": True,
    }
    assert stream["cursor_field"] == ["updated_at"]
    assert stream["primary_key"] == [["id"]]
    assert stream["generation_id"] == 3
    assert stream["minimum_generation_id"] == 3
    assert stream["sync_id"] == 5
