from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from syncledger.domain.model import StreamStatusMessage


class StatusMessageMapper(Protocol):
    """Transform applied to each synthesized status message before emission.

    Implementations must be repeatable: equal inputs give equal outputs.
    """

    def __call__(self, message: StreamStatusMessage) -> StreamStatusMessage: ...


__all__ = ["StatusMessageMapper"]
