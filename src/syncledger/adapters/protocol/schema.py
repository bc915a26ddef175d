"""Minimal Pydantic models for the replication wire protocol."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from syncledger.domain.model import (
    DestinationSyncMode,
    RefreshType,
    StreamStatus,
    SyncMode,
)


class ProtocolBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class StreamDescriptor(ProtocolBaseModel):
    name: str
    namespace: str | None = None


class AirbyteStream(ProtocolBaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    namespace: str | None = None
    supported_sync_modes: list[SyncMode] = Field(default_factory=list["SyncMode"])


class ConfiguredStreamPayload(ProtocolBaseModel):
    model_config = ConfigDict(extra="allow")

    stream: AirbyteStream
    sync_mode: SyncMode = SyncMode.FULL_REFRESH
    destination_sync_mode: DestinationSyncMode = DestinationSyncMode.APPEND
    generation_id: int | None = Field(default=None, ge=0)
    minimum_generation_id: int | None = Field(default=None, ge=0)
    sync_id: int | None = None


class ConfiguredCatalogPayload(ProtocolBaseModel):
    streams: list[ConfiguredStreamPayload] = Field(
        default_factory=list["ConfiguredStreamPayload"]
    )


class RefreshStreamPayload(ProtocolBaseModel):
    refresh_type: RefreshType = RefreshType.TRUNCATE
    stream_descriptor: StreamDescriptor


class StreamStatusPayload(ProtocolBaseModel):
    stream_descriptor: StreamDescriptor
    status: StreamStatus


class TraceType(StrEnum):
    ERROR = "ERROR"
    ESTIMATE = "ESTIMATE"
    STREAM_STATUS = "STREAM_STATUS"
    ANALYTICS = "ANALYTICS"


class TracePayload(ProtocolBaseModel):
    type: TraceType
    emitted_at: float
    stream_status: StreamStatusPayload | None = None


class MessageType(StrEnum):
    RECORD = "RECORD"
    STATE = "STATE"
    LOG = "LOG"
    TRACE = "TRACE"
    CONTROL = "CONTROL"


class ProtocolMessage(ProtocolBaseModel):
    type: MessageType
    trace: TracePayload | None = None
