"""
Base Repository Pattern

Purpose
-------
Provides a type-safe, generic, read-only repository abstraction over the
external stores following SQLAlchemy 2.0 async patterns. Repositories
encapsulate query construction and provide a consistent interface for
lookups and aggregates.

Design Notes
------------
This base repository provides:
- Type-safe predicate lookups
- Counting and scalar aggregate helpers
- Full structured logging

What this class does NOT do:
- Write anything: the stores are owned by Plan, LuckPerms and CoreProtect
- Manage sessions or connections (DatabaseService handles that)
- Contain business logic

Both ``AsyncSession`` and ``AsyncConnection`` expose ``execute()``; helpers
that only need rows or scalars accept either, so repositories work on the
pooled primary session and on scoped secondary connections alike.

Usage
-----
    from src.database.models.plan import PlanUser
    from src.modules.shared import BaseRepository

    class PlanUserRepository(BaseRepository[PlanUser]):
        async def find_by_name(
            self, session: AsyncSession, name: str
        ) -> Optional[PlanUser]:
            return await self.find_one_where(session, PlanUser.name == name)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, List, Optional, Type, TypeVar, Union

from sqlalchemy import func, select

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

    Executor = Union[AsyncSession, AsyncConnection]

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic base repository for read-only database access.

    Type Parameters:
        T: The SQLAlchemy model class this repository reads
    """

    def __init__(self, model_class: Type[T], logger: Logger) -> None:
        """
        Initialize repository with model class and logger.

        Args:
            model_class: The SQLAlchemy model class
            logger: Structured logger instance
        """
        self.model_class = model_class
        self.log = logger

    @property
    def model_name(self) -> str:
        return self.model_class.__name__

    async def find_one_where(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
        order_by: Optional[List[Any]] = None,
    ) -> Optional[T]:
        """
        Find the first record matching conditions.

        Args:
            session: Database session
            *conditions: SQLAlchemy filter conditions
            order_by: Optional ordering; first row after ordering wins

        Returns:
            Model instance or None if not found
        """
        stmt = select(self.model_class).where(*conditions)

        if order_by:
            stmt = stmt.order_by(*order_by)

        result = await session.execute(stmt.limit(1))
        instance = result.scalars().first()

        self.log.debug(
            f"Repository.find_one_where: {self.model_name}",
            extra={
                "model": self.model_name,
                "found": instance is not None,
            },
        )

        return instance

    async def count_where(
        self, executor: Executor, *conditions: ColumnElement[bool]
    ) -> int:
        """
        Count records matching conditions.

        Args:
            executor: Database session or connection
            *conditions: SQLAlchemy filter conditions

        Returns:
            Number of matching records
        """
        stmt = select(func.count()).select_from(self.model_class).where(*conditions)
        result = await executor.execute(stmt)
        count = int(result.scalar_one() or 0)

        self.log.debug(
            f"Repository.count_where: {self.model_name}",
            extra={
                "model": self.model_name,
                "count": count,
            },
        )

        return count

    async def scalar(self, executor: Executor, stmt: Select[Any]) -> Any:
        """
        Execute a single-value statement (aggregate, lookup) and return it.

        Returns None when the statement yields no row.
        """
        result = await executor.execute(stmt)
        value = result.scalar_one_or_none()

        self.log.debug(
            f"Repository.scalar: {self.model_name}",
            extra={
                "model": self.model_name,
                "found": value is not None,
            },
        )

        return value
