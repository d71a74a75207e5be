"""
CoreProtect block audit tables (secondary store).

CoreProtect has no shared identity key with Plan: players are looked up by
name in ``<prefix>user`` and referenced by its ``rowid`` from
``<prefix>block``. Table names honour Config.CP_TABLE_PREFIX (default
``co_``).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.config.config import Config
from src.core.database.base import CoreProtectBase

# co_block.action codes
ACTION_BREAK = 0
ACTION_PLACE = 1


class CoreProtectUser(CoreProtectBase):
    __tablename__ = f"{Config.CP_TABLE_PREFIX}user"

    rowid: Mapped[int] = mapped_column(Integer, primary_key=True)

    time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    uuid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class CoreProtectBlock(CoreProtectBase):
    """One block change; ``user`` is the rowid of the acting user."""

    __tablename__ = f"{Config.CP_TABLE_PREFIX}block"
    __table_args__ = (
        Index(f"ix_{Config.CP_TABLE_PREFIX}block_user_action", "user", "action"),
    )

    rowid: Mapped[int] = mapped_column(Integer, primary_key=True)

    time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped[int] = mapped_column(Integer, nullable=False)

    wid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    x: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    y: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    z: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    action: Mapped[int] = mapped_column(Integer, nullable=False)

    rolled_back: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
