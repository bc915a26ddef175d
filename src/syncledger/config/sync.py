"""Run-level defaults for completion tracking and namespacing."""

from __future__ import annotations

from dataclasses import dataclass

from syncledger.domain.namespacing import NamespaceDefinition, NamespacingMapper

from .env import env_flag, optional_env_var
from .errors import InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class SyncConfig:
    refreshes_supported: bool = True
    namespace_definition: NamespaceDefinition = NamespaceDefinition.SOURCE
    namespace_format: str | None = None
    stream_prefix: str = ""

    def build_mapper(self) -> NamespacingMapper:
        return NamespacingMapper(
            definition=self.namespace_definition,
            namespace_format=self.namespace_format,
            prefix=self.stream_prefix,
        )


def get_sync_config() -> SyncConfig:
    definition_name = "SYNCLEDGER_NAMESPACE_DEFINITION"
    raw_definition = optional_env_var(definition_name)
    try:
        definition = (
            NamespaceDefinition(raw_definition.lower())
            if raw_definition is not None
            else NamespaceDefinition.SOURCE
        )
    except ValueError as exc:
        choices = ", ".join(member.value for member in NamespaceDefinition)
        raise InvalidConfigurationError(definition_name, raw_definition or "", choices) from exc

    namespace_format = optional_env_var("SYNCLEDGER_NAMESPACE_FORMAT")
    if definition is NamespaceDefinition.CUSTOM_FORMAT and namespace_format is None:
        raise InvalidConfigurationError(
            "SYNCLEDGER_NAMESPACE_FORMAT", "", "a format when the namespace definition is custom"
        )

    return SyncConfig(
        refreshes_supported=env_flag("SYNCLEDGER_REFRESHES_SUPPORTED", default=True),
        namespace_definition=definition,
        namespace_format=namespace_format,
        stream_prefix=optional_env_var("SYNCLEDGER_STREAM_PREFIX") or "",
    )
