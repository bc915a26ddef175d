"""Replication wire-protocol adapter package."""

from __future__ import annotations

from .schema import (
    ConfiguredCatalogPayload,
    ProtocolMessage,
    RefreshStreamPayload,
    StreamDescriptor,
)
from .translator import (
    dump_catalog,
    dump_status_message,
    parse_catalog,
    parse_catalog_payload,
    parse_refreshes,
    parse_status_messages,
    translate_catalog,
    translate_refresh,
    translate_status_message,
)

__all__ = [
    "ConfiguredCatalogPayload",
    "ProtocolMessage",
    "RefreshStreamPayload",
    "StreamDescriptor",
    "dump_catalog",
    "dump_status_message",
    "parse_catalog",
    "parse_catalog_payload",
    "parse_refreshes",
    "parse_status_messages",
    "translate_catalog",
    "translate_refresh",
    "translate_status_message",
]
