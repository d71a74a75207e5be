"""
ORM declarative bases for the external stores KilluStats reads.

The service owns none of these schemas: Plan, LuckPerms and CoreProtect
create and migrate their own tables. The models only describe the columns
the stats engine queries, which is enough for SQLAlchemy to build statements
and for tests to create a compatible schema.

- ``PrimaryBase``: Plan + LuckPerms tables living in the primary database.
- ``CoreProtectBase``: block audit tables in the optional secondary database.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


class PrimaryBase(DeclarativeBase):
    """Declarative base for tables in the primary (Plan/LuckPerms) store."""

    metadata = MetaData()


class CoreProtectBase(DeclarativeBase):
    """Declarative base for tables in the CoreProtect block audit store."""

    metadata = MetaData()


__all__ = ["PrimaryBase", "CoreProtectBase"]
