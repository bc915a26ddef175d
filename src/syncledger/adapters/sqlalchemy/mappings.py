"""SQLAlchemy table metadata for recorded stream generations."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Column, DateTime, Index, MetaData, String, Table, Uuid, func

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

metadata = MetaData()

stream_generation_table = Table(
    "stream_generation",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("connection_id", UUIDColumnType, nullable=False),
    Column("stream_name", String, nullable=False),
    Column("stream_namespace", String, nullable=True),
    Column("generation_id", BigInteger, nullable=False),
    Column("start_job_id", BigInteger, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("ix_stream_generation_connection_stream", "connection_id", "stream_name"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the generation metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
