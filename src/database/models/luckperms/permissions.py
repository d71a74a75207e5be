"""
LuckPerms permission tables (primary store).

Two independent signals can claim a rank for a player:
- luckperms_players.primary_group: the single primary group
- luckperms_user_permissions rows shaped ``group.<name>``: explicit
  parent-group grants, possibly several, possibly negated or expiring
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import PrimaryBase


class LuckPermsPlayer(PrimaryBase):
    __tablename__ = "luckperms_players"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True)

    username: Mapped[str] = mapped_column(String(16), nullable=False)

    primary_group: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)


class LuckPermsUserPermission(PrimaryBase):
    """
    One permission node assigned to a player.

    ``value`` false means the node is negated; ``expiry`` is epoch seconds,
    0 for permanent nodes.
    """

    __tablename__ = "luckperms_user_permissions"
    __table_args__ = (
        Index("ix_luckperms_user_permissions_uuid", "uuid"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    uuid: Mapped[str] = mapped_column(String(36), nullable=False)

    permission: Mapped[str] = mapped_column(String(200), nullable=False)

    value: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    server: Mapped[str] = mapped_column(String(36), nullable=False, default="global")

    world: Mapped[str] = mapped_column(String(64), nullable=False, default="global")

    expiry: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
