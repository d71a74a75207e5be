"""
Block Audit Service
===================

Purpose
-------
Count blocks a player has mined and placed, from the CoreProtect audit log.

CoreProtect usually lives in its own database, reachable only from some
deployments. The store is therefore optional and never pooled:
- Without connection parameters the resolver returns zeros and touches
  nothing.
- Otherwise each request opens a dedicated connection right before the
  queries and disposes it on every exit path.

CoreProtect shares no key with Plan; players are matched by display name in
``<prefix>user`` and blocks reference that row's ``rowid``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Type

from sqlalchemy import select

from src.core.config.config import Config
from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
from src.database.models.coreprotect import (
    ACTION_BREAK,
    ACTION_PLACE,
    CoreProtectBlock,
    CoreProtectUser,
)
from src.domain.models.stats import BlockAuditCount, PlayerIdentity
from src.modules.shared.base_repository import BaseRepository
from src.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncConnection

    from src.core.config.manager import ConfigManager

COREPROTECT_STORE = "coreprotect"


class CoreProtectUserRepository(BaseRepository[CoreProtectUser]):
    async def find_rowid_by_name(self, conn: AsyncConnection, name: str) -> Optional[int]:
        return await self.scalar(
            conn,
            select(CoreProtectUser.rowid).where(CoreProtectUser.user == name).limit(1),
        )


class CoreProtectBlockRepository(BaseRepository[CoreProtectBlock]):
    async def count_actions(self, conn: AsyncConnection, user_rowid: int, action: int) -> int:
        return await self.count_where(
            conn,
            CoreProtectBlock.user == user_rowid,
            CoreProtectBlock.action == action,
        )


class BlockAuditService(BaseService):
    """
    Mined/placed block counts.

    Args:
        config_manager: YAML configuration manager
        logger: Structured logger instance
        url_provider: Returns the store URL or None when unconfigured;
            read on every call (defaults to Config.coreprotect_url)
    """

    def __init__(
        self,
        config_manager: Type[ConfigManager],
        logger: Logger,
        url_provider: Optional[Callable[[], Optional[str]]] = None,
    ) -> None:
        super().__init__(config_manager, logger)
        self._url_provider = url_provider or Config.coreprotect_url
        self._users = CoreProtectUserRepository(
            model_class=CoreProtectUser,
            logger=get_logger(f"{__name__}.CoreProtectUserRepository"),
        )
        self._blocks = CoreProtectBlockRepository(
            model_class=CoreProtectBlock,
            logger=get_logger(f"{__name__}.CoreProtectBlockRepository"),
        )

    def is_enabled(self) -> bool:
        return self._url_provider() is not None

    async def get_block_counts(self, identity: PlayerIdentity) -> BlockAuditCount:
        url = self._url_provider()
        if url is None:
            self.log.debug(
                "Block audit store not configured; skipping",
                extra={"uuid": identity.uuid},
            )
            return BlockAuditCount.zero()

        async with DatabaseService.open_scoped_connection(
            url,
            store=COREPROTECT_STORE,
            connect_timeout_seconds=Config.CP_CONNECT_TIMEOUT_SECONDS,
        ) as conn:
            user_rowid = await self._users.find_rowid_by_name(conn, identity.display_name)
            if user_rowid is None:
                self.log.debug(
                    "Player has no block audit history",
                    extra={"display_name": identity.display_name},
                )
                return BlockAuditCount.zero()

            mined = await self._blocks.count_actions(conn, user_rowid, ACTION_BREAK)
            placed = await self._blocks.count_actions(conn, user_rowid, ACTION_PLACE)

        return BlockAuditCount(mined=mined, placed=placed)
