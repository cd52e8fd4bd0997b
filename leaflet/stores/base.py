"""
Base Store.

Base class for durable stores built on SQLAlchemy async sessions.

A store outlives any single session: every operation opens its own
session from the factory, runs inside it and converts SQLAlchemy
failures into StoreError so callers never see driver exceptions.

Usage:
    class NoteStore(BaseStore[NoteRecord]):
        model = NoteRecord

        async def fetch_by_id(self, note_id: str) -> Note | None:
            async def _query(session: AsyncSession) -> Note | None:
                record = await self._get_record(session, note_id)
                return record.to_domain() if record else None

            return await self._read("fetch_by_id", _query, note_id=note_id)
"""

from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leaflet.core.exceptions import StoreError
from leaflet.core.logging import get_logger
from leaflet.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
T = TypeVar("T")

Work = Callable[[AsyncSession], Awaitable[T]]


class BaseStore(Generic[ModelType]):
    """
    Base store with per-operation sessions and error wrapping.

    Subclasses should set the model class and implement their queries
    as inner coroutines passed to _read or _write.
    """

    model: type[ModelType]

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._logger = get_logger(self.__class__.__module__)

    async def _get_record(self, session: AsyncSession, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await session.execute(
            select(self.model).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def _read(self, operation: str, work: Work[T], **context: Any) -> T:
        """Run a read-only operation in a fresh session."""
        return await self._execute_store_operation(operation, work, write=False, **context)

    async def _write(self, operation: str, work: Work[T], **context: Any) -> T:
        """Run a write operation in a fresh session and commit it."""
        return await self._execute_store_operation(operation, work, write=True, **context)

    async def _execute_store_operation(
        self,
        operation: str,
        work: Work[T],
        write: bool,
        **context: Any,
    ) -> T:
        """
        Execute a store operation with error handling.

        Writes run inside a transaction that commits when ``work`` returns
        and rolls back when it raises.

        Args:
            operation: Name of the operation for logging and StoreError
            work: Coroutine function receiving the session
            write: Whether to wrap the work in a transaction
            **context: Additional context to include in logs

        Returns:
            Result of ``work``

        Raises:
            StoreError: For any SQLAlchemy or driver failure
        """
        try:
            async with self._session_factory() as session:
                if write:
                    async with session.begin():
                        return await work(session)
                return await work(session)
        except SQLAlchemyError as e:
            self._logger.error(
                "Store operation failed",
                extra={
                    "store": self.__class__.__name__,
                    "operation": operation,
                    "error": str(e),
                    **context,
                },
            )
            raise StoreError(
                f"Store operation failed: {operation}",
                operation=operation,
            ) from e
