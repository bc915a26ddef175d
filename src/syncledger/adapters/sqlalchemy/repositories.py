"""Generation-history readers backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from syncledger.adapters.sqlalchemy.mappings import stream_generation_table
from syncledger.domain.model import Generation, StreamKey

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session, sessionmaker


class SqlAlchemyGenerationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def max_generations(self, connection_id: uuid.UUID) -> list[Generation]:
        table = stream_generation_table
        stmt = (
            select(
                table.c.stream_name,
                table.c.stream_namespace,
                func.max(table.c.generation_id),
            )
            .where(table.c.connection_id == connection_id)
            .group_by(table.c.stream_name, table.c.stream_namespace)
            .order_by(table.c.stream_namespace, table.c.stream_name)
        )
        return [
            Generation(stream=StreamKey(name, namespace), generation_id=int(generation_id))
            for name, namespace, generation_id in self.session.execute(stmt)
        ]


class SqlAlchemyGenerationHistory:
    """``GenerationHistory`` port that opens a short-lived session per query."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def max_generations(self, connection_id: uuid.UUID) -> list[Generation]:
        with self._session_factory() as session:
            return SqlAlchemyGenerationRepository(session).max_generations(connection_id)


if TYPE_CHECKING:
    from syncledger.domain.ports import GenerationHistory

    def _history_check(factory: sessionmaker[Session]) -> GenerationHistory:
        return SqlAlchemyGenerationHistory(factory)
