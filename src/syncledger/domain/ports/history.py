"""Port for reading previously recorded stream generations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from syncledger.domain.model import Generation


@runtime_checkable
class GenerationHistory(Protocol):
    """Read-only access to the generation history of a connection."""

    def max_generations(self, connection_id: UUID) -> Sequence[Generation]:
        """Return the highest recorded generation per stream of ``connection_id``."""
        ...


__all__ = ["GenerationHistory"]
