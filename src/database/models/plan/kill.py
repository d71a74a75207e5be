"""
Plan player-versus-player kill events.

Keyed by uuid, not by plan_users.id: the killer is recorded as
``killer_uuid``.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import PrimaryBase


class PlanKill(PrimaryBase):
    """A single PvP kill."""

    __tablename__ = "plan_kills"
    __table_args__ = (
        Index("ix_plan_kills_killer_uuid", "killer_uuid"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    killer_uuid: Mapped[str] = mapped_column(String(36), nullable=False)

    victim_uuid: Mapped[str] = mapped_column(String(36), nullable=False)

    weapon: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
