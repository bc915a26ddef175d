"""SQLAlchemy adapter package for syncledger."""

from __future__ import annotations

from .engine import StartupError, generation_history, is_started, shutdown, startup
from .mappings import create_all_tables, metadata, stream_generation_table
from .repositories import SqlAlchemyGenerationHistory, SqlAlchemyGenerationRepository

__all__ = [
    "SqlAlchemyGenerationHistory",
    "SqlAlchemyGenerationRepository",
    "StartupError",
    "create_all_tables",
    "generation_history",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
    "stream_generation_table",
]
