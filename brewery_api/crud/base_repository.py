import abc
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from brewery_api.exceptions import DatabaseError
from brewery_api.logging_config import get_child_logger, tracer
from brewery_api.mappers.common import changed_fields
from brewery_api.models.entities import Base, utcnow

logger = get_child_logger("crud.repository")

E = TypeVar("E", bound=Base)
U = TypeVar("U", bound=BaseModel)
F = TypeVar("F")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 1000


class TransactionMode(str, Enum):
    """
    Transaction characteristics, fixed per kind of operation.
    """

    READ_ONLY = "READ ONLY"
    READ_COMMITTED = "READ COMMITTED"
    SERIALIZABLE = "SERIALIZABLE"

    def execution_options(self, dialect_name: str) -> Dict[str, Any]:
        # SQLite transactions are always serializable and cannot be made read-only
        if dialect_name == "sqlite":
            return {}
        if self is TransactionMode.READ_ONLY:
            return {"postgresql_readonly": True} if dialect_name == "postgresql" else {}
        return {"isolation_level": self.value}


def contains_all_words(column, text: str) -> List[ColumnElement[bool]]:
    """One substring condition per whitespace-separated word of ``text``."""
    return [column.contains(word, autoescape=True) for word in text.split()]


class BaseRepository(abc.ABC, Generic[E, U, F]):
    """
    Batch insert/patch/delete and filtered paging for one entity type.

    E is the mapped entity, U the partial-update DTO (must carry ``id``)
    and F the filter object understood by :meth:`build_conditions`.
    """

    entity_class: Type[E]

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{self.entity_class.__name__}]"

    @property
    def table_name(self) -> str:
        return self.entity_class.__tablename__

    @abc.abstractmethod
    def build_conditions(self, filters: F) -> List[ColumnElement[bool]]:
        """WHERE conditions for ``filters``; all of them are ANDed together."""
        raise NotImplementedError

    @asynccontextmanager
    async def _transaction(
        self, mode: Optional[TransactionMode] = None
    ) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            async with session.begin():
                if mode is not None:
                    # must be the first use of the connection in this transaction
                    await session.connection(
                        execution_options=mode.execution_options(session.bind.dialect.name)
                    )
                yield session

    def _database_error(self, operation: str, e: SQLAlchemyError) -> DatabaseError:
        logger.error(
            f"Database error during {self.table_name} {operation}",
            extra={"table": self.table_name, "operation": operation},
            exc_info=True,
        )
        return DatabaseError(
            f"Database error during {self.table_name} {operation}: {type(e).__name__}",
            original_exception=e,
        )

    async def insert(self, entities: List[E]) -> List[E]:
        """
        Insert all entities in one transaction.

        Returns:
            The same entities with id, version and timestamps populated

        Raises:
            DatabaseError: If the store rejects any row; nothing is inserted
        """
        if not entities:
            return []

        with tracer.start_as_current_span(f"{self.table_name}.insert") as span:
            span.set_attribute("batch.size", len(entities))
            try:
                async with self._transaction() as session:
                    session.add_all(entities)
                    await session.flush()
            except SQLAlchemyError as e:
                span.set_attribute("error", True)
                raise self._database_error("insert", e) from e

            logger.info(
                f"Inserted {len(entities)} {self.table_name} rows",
                extra={"table": self.table_name, "batch_size": len(entities)},
            )
            return entities

    async def patch(self, updates: List[U]) -> None:
        """
        Apply partial updates, one UPDATE per DTO, in a single
        READ COMMITTED transaction. Unknown ids match no rows.
        """
        if not updates:
            return

        entity = self.entity_class
        with tracer.start_as_current_span(f"{self.table_name}.patch") as span:
            span.set_attribute("batch.size", len(updates))
            try:
                async with self._transaction(TransactionMode.READ_COMMITTED) as session:
                    for dto in updates:
                        values = changed_fields(dto, entity)
                        if not values:
                            logger.warning(
                                f"No fields to patch for {self.table_name} ID '{dto.id}'. Skipping."
                            )
                            continue

                        stmt = (
                            update(entity)
                            .where(entity.id == dto.id)
                            .values(**values, version=entity.version + 1, updated_at=utcnow())
                            .execution_options(synchronize_session=False)
                        )
                        await session.execute(stmt)
            except SQLAlchemyError as e:
                span.set_attribute("error", True)
                raise self._database_error("patch", e) from e

    async def delete(self, ids: List[int]) -> None:
        """Delete every row whose id is in ``ids`` in one SERIALIZABLE transaction."""
        entity = self.entity_class
        with tracer.start_as_current_span(f"{self.table_name}.delete") as span:
            span.set_attribute("batch.size", len(ids))
            try:
                async with self._transaction(TransactionMode.SERIALIZABLE) as session:
                    result = await session.execute(
                        delete(entity)
                        .where(entity.id.in_(ids))
                        .execution_options(synchronize_session=False)
                    )
            except SQLAlchemyError as e:
                span.set_attribute("error", True)
                raise self._database_error("delete", e) from e

            logger.info(
                f"Deleted {result.rowcount} {self.table_name} rows",
                extra={"table": self.table_name, "requested": len(ids)},
            )

    async def query(
        self,
        filters: F,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> AsyncIterator[E]:
        """
        Stream one page of matching entities, ordered by id.

        The rows are read lazily inside a read-only transaction that stays
        open until the iterator is exhausted or closed. The iterator is
        single-pass: consume it once, within one request.
        """
        entity = self.entity_class
        stmt = (
            select(entity)
            .where(*self.build_conditions(filters))
            .order_by(entity.id)
            .offset((page - 1) * size)
            .limit(size)
        )

        try:
            async with self._transaction(TransactionMode.READ_ONLY) as session:
                result = await session.stream_scalars(stmt)
                async for row in result:
                    yield row
        except SQLAlchemyError as e:
            raise self._database_error("query", e) from e

    async def count(self, filters: F) -> int:
        stmt = (
            select(func.count())
            .select_from(self.entity_class)
            .where(*self.build_conditions(filters))
        )
        try:
            async with self._transaction(TransactionMode.READ_ONLY) as session:
                result = await session.execute(stmt)
                return result.scalar_one()
        except SQLAlchemyError as e:
            raise self._database_error("count", e) from e
