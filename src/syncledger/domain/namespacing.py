"""Rewrite source stream keys into the keys a destination writes to."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from syncledger.domain.model import ConfiguredCatalog, StreamKey

if TYPE_CHECKING:
    from syncledger.domain.model import StreamStatusMessage

SOURCE_NAMESPACE_PLACEHOLDER: Final[str] = "${SOURCE_NAMESPACE}"


class NamespaceDefinition(StrEnum):
    SOURCE = "source"
    DESTINATION = "destination"
    CUSTOM_FORMAT = "custom_format"


def identity_mapper(message: StreamStatusMessage) -> StreamStatusMessage:
    return message


@dataclass(frozen=True, slots=True)
class NamespacingMapper:
    """Status-message mapper applying a namespace definition and a stream prefix."""

    definition: NamespaceDefinition = NamespaceDefinition.SOURCE
    namespace_format: str | None = None
    prefix: str = ""

    def __post_init__(self) -> None:
        if self.definition is NamespaceDefinition.CUSTOM_FORMAT and self.namespace_format is None:
            raise ValueError("A custom-format namespace definition requires a namespace_format")

    def __call__(self, message: StreamStatusMessage) -> StreamStatusMessage:
        return replace(message, stream=self.map_key(message.stream))

    def map_key(self, key: StreamKey) -> StreamKey:
        return StreamKey(f"{self.prefix}{key.name}", self._map_namespace(key.namespace))

    def map_catalog(self, catalog: ConfiguredCatalog) -> ConfiguredCatalog:
        return ConfiguredCatalog.of(
            replace(stream, key=self.map_key(stream.key)) for stream in catalog
        )

    def _map_namespace(self, namespace: str | None) -> str | None:
        match self.definition:
            case NamespaceDefinition.SOURCE:
                return namespace
            case NamespaceDefinition.DESTINATION:
                return None
            case NamespaceDefinition.CUSTOM_FORMAT:
                template = self.namespace_format or ""
                rendered = template.replace(SOURCE_NAMESPACE_PLACEHOLDER, namespace or "").strip()
                return rendered or None


__all__ = ["NamespaceDefinition", "NamespacingMapper", "identity_mapper"]
