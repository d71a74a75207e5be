"""
Plan user registry and session rows.

Schema-only view of the Plan analytics plugin tables the stats engine reads:
- plan_users: one row per account (uuid, last known name, registration time)
- plan_sessions: one row per play session, keyed by plan_users.id

Plan stores every timestamp as epoch milliseconds.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import PrimaryBase


class PlanUser(PrimaryBase):
    """Registered player account as recorded by Plan."""

    __tablename__ = "plan_users"
    __table_args__ = (
        Index("ix_plan_users_name", "name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    uuid: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)

    name: Mapped[str] = mapped_column(String(36), nullable=False)

    registered: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        doc="Registration time, epoch milliseconds",
    )

    times_kicked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<PlanUser id={self.id} name={self.name!r} uuid={self.uuid}>"


class PlanSession(PrimaryBase):
    """
    One play session.

    session_end is NULL while the session is still running.
    """

    __tablename__ = "plan_sessions"
    __table_args__ = (
        Index("ix_plan_sessions_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("plan_users.id"),
        nullable=False,
    )

    session_start: Mapped[int] = mapped_column(BigInteger, nullable=False)

    session_end: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    mob_kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    deaths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    afk_time: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
