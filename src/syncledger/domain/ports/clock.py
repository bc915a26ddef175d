"""Time source used to stamp synthesized status messages."""

from __future__ import annotations

import time
from typing import Protocol


class MillisClock(Protocol):
    def __call__(self) -> int: ...


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


__all__ = ["MillisClock", "epoch_millis"]
