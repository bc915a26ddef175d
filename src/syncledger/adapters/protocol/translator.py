"""Translate protocol payloads to and from domain values."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from syncledger.domain.model import (
    ConfiguredCatalog,
    ConfiguredStream,
    RefreshStream,
    StreamKey,
    StreamStatusMessage,
)

from .schema import (
    AirbyteStream,
    ConfiguredCatalogPayload,
    ConfiguredStreamPayload,
    MessageType,
    ProtocolMessage,
    RefreshStreamPayload,
    StreamDescriptor,
    StreamStatusPayload,
    TracePayload,
    TraceType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

log = logging.getLogger(__name__)

_REFRESH_LIST = TypeAdapter(list[RefreshStreamPayload])


def translate_stream_descriptor(descriptor: StreamDescriptor) -> StreamKey:
    return StreamKey(descriptor.name, descriptor.namespace)


def translate_catalog(payload: ConfiguredCatalogPayload) -> ConfiguredCatalog:
    return ConfiguredCatalog.of(
        ConfiguredStream(
            key=StreamKey(item.stream.name, item.stream.namespace),
            sync_mode=item.sync_mode,
            destination_sync_mode=item.destination_sync_mode,
            generation_id=item.generation_id,
            minimum_generation_id=item.minimum_generation_id,
            sync_id=item.sync_id,
        )
        for item in payload.streams
    )


def translate_refresh(payload: RefreshStreamPayload) -> RefreshStream:
    return RefreshStream(
        stream=translate_stream_descriptor(payload.stream_descriptor),
        refresh_type=payload.refresh_type,
    )


def translate_status_message(message: ProtocolMessage) -> StreamStatusMessage | None:
    """Return the stream status carried by ``message``, or ``None`` for other messages."""

    if message.type is not MessageType.TRACE or message.trace is None:
        return None
    trace = message.trace
    if trace.type is not TraceType.STREAM_STATUS or trace.stream_status is None:
        return None
    return StreamStatusMessage(
        stream=translate_stream_descriptor(trace.stream_status.stream_descriptor),
        status=trace.stream_status.status,
        emitted_at=int(trace.emitted_at),
    )


def parse_catalog_payload(document: str | bytes) -> ConfiguredCatalogPayload:
    return ConfiguredCatalogPayload.model_validate_json(document)


def parse_catalog(document: str | bytes) -> ConfiguredCatalog:
    return translate_catalog(parse_catalog_payload(document))


def parse_refreshes(document: str | bytes) -> list[RefreshStream]:
    return [translate_refresh(item) for item in _REFRESH_LIST.validate_json(document)]


def parse_status_messages(lines: Iterable[str]) -> Iterator[StreamStatusMessage]:
    """Yield stream statuses from newline-delimited protocol messages.

    Blank lines, non status-trace messages and lines that are not valid protocol
    messages are skipped.
    """

    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            message = ProtocolMessage.model_validate_json(line)
        except ValidationError:
            log.warning("Skipping malformed protocol message on line %d", number)
            continue
        status = translate_status_message(message)
        if status is not None:
            yield status


def dump_catalog(
    catalog: ConfiguredCatalog, *, source: ConfiguredCatalogPayload | None = None
) -> ConfiguredCatalogPayload:
    """Render ``catalog`` as a payload.

    With ``source``, the streams of that payload are stamped in place so fields
    the domain does not model, such as ``json_schema`` or ``cursor_field``,
    are written back untouched.
    """

    if source is not None:
        return source.model_copy(
            update={"streams": [_stamp_payload(item, catalog) for item in source.streams]}
        )
    return ConfiguredCatalogPayload(
        streams=[
            ConfiguredStreamPayload(
                stream=AirbyteStream(name=stream.key.name, namespace=stream.key.namespace),
                sync_mode=stream.sync_mode,
                destination_sync_mode=stream.destination_sync_mode,
                generation_id=stream.generation_id,
                minimum_generation_id=stream.minimum_generation_id,
                sync_id=stream.sync_id,
            )
            for stream in catalog
        ]
    )


def _stamp_payload(
    item: ConfiguredStreamPayload, catalog: ConfiguredCatalog
) -> ConfiguredStreamPayload:
    stamped = catalog.get(StreamKey(item.stream.name, item.stream.namespace))
    if stamped is None:
        log.warning("Stream %s missing from stamped catalog; written unchanged", item.stream.name)
        return item
    return item.model_copy(
        update={
            "generation_id": stamped.generation_id,
            "minimum_generation_id": stamped.minimum_generation_id,
            "sync_id": stamped.sync_id,
        }
    )


def dump_status_message(message: StreamStatusMessage) -> ProtocolMessage:
    return ProtocolMessage(
        type=MessageType.TRACE,
        trace=TracePayload(
            type=TraceType.STREAM_STATUS,
            emitted_at=float(message.emitted_at),
            stream_status=StreamStatusPayload(
                stream_descriptor=StreamDescriptor(
                    name=message.stream.name,
                    namespace=message.stream.namespace,
                ),
                status=message.status,
            ),
        ),
    )
