"""Domain port definitions for adapters."""

from __future__ import annotations

from .clock import MillisClock, epoch_millis
from .history import GenerationHistory
from .mapping import StatusMessageMapper

__all__ = [
    "GenerationHistory",
    "MillisClock",
    "StatusMessageMapper",
    "epoch_millis",
]
