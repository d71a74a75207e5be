"""
Rank Service
============

Purpose
-------
Determine the single effective rank of a player from LuckPerms.

A rank can be claimed by two independent signals that may disagree: the
player's primary group, and any number of explicit ``group.<name>``
permission nodes. Both are collected as raw tokens; the rank table
normalizes them and the highest-priority rank wins regardless of the order
rows come back in.

Only active grants count: negated nodes (``value`` false) and nodes whose
expiry has passed are ignored.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, List, Optional, Type

from sqlalchemy import or_, select, true

from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
from src.database.models.luckperms import LuckPermsPlayer, LuckPermsUserPermission
from src.domain.models.rank import RankTable
from src.domain.models.stats import PlayerIdentity, RankAssignment
from src.modules.shared.base_repository import BaseRepository
from src.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession

    from src.core.config.manager import ConfigManager

GROUP_PERMISSION_PREFIX = "group."


# ============================================================================
# Repositories
# ============================================================================


class LuckPermsPlayerRepository(BaseRepository[LuckPermsPlayer]):
    async def get_primary_group(self, session: AsyncSession, uuid: str) -> Optional[str]:
        return await self.scalar(
            session,
            select(LuckPermsPlayer.primary_group)
            .where(LuckPermsPlayer.uuid == uuid)
            .limit(1),
        )


class LuckPermsPermissionRepository(BaseRepository[LuckPermsUserPermission]):
    async def find_active_group_permissions(
        self, session: AsyncSession, uuid: str, now_seconds: int
    ) -> List[str]:
        """Permission strings of active ``group.*`` nodes of ``uuid``, in insertion order."""
        stmt = (
            select(LuckPermsUserPermission.permission)
            .where(
                LuckPermsUserPermission.uuid == uuid,
                LuckPermsUserPermission.permission.like(f"{GROUP_PERMISSION_PREFIX}%"),
                LuckPermsUserPermission.value == true(),
                or_(
                    LuckPermsUserPermission.expiry == 0,
                    LuckPermsUserPermission.expiry > now_seconds,
                ),
            )
            .order_by(LuckPermsUserPermission.id)
        )
        result = await session.execute(stmt)
        permissions = list(result.scalars().all())

        self.log.debug(
            f"Repository.find_active_group_permissions: {self.model_name}",
            extra={"model": self.model_name, "found_count": len(permissions)},
        )

        return permissions


# ============================================================================
# RankService
# ============================================================================


class RankService(BaseService):
    """
    Effective rank resolution.

    Args:
        config_manager: YAML configuration manager
        logger: Structured logger instance
        rank_table: Pre-validated table; built from ``ranks`` when omitted
    """

    def __init__(
        self,
        config_manager: Type[ConfigManager],
        logger: Logger,
        rank_table: Optional[RankTable] = None,
    ) -> None:
        super().__init__(config_manager, logger)
        self.rank_table = rank_table or RankTable.from_config(
            self.get_config("ranks", required=True)
        )
        self._players = LuckPermsPlayerRepository(
            model_class=LuckPermsPlayer,
            logger=get_logger(f"{__name__}.LuckPermsPlayerRepository"),
        )
        self._permissions = LuckPermsPermissionRepository(
            model_class=LuckPermsUserPermission,
            logger=get_logger(f"{__name__}.LuckPermsPermissionRepository"),
        )

    async def get_raw_tokens(self, identity: PlayerIdentity) -> List[str]:
        """Primary group first, then explicit group grants."""
        tokens: List[str] = []
        now_seconds = int(time.time())

        async with DatabaseService.get_session() as session:
            primary_group = await self._players.get_primary_group(session, identity.uuid)
            permissions = await self._permissions.find_active_group_permissions(
                session, identity.uuid, now_seconds
            )

        if primary_group:
            tokens.append(primary_group)
        for permission in permissions:
            token = permission[len(GROUP_PERMISSION_PREFIX):]
            if token:
                tokens.append(token)

        return tokens

    async def get_rank(self, identity: PlayerIdentity) -> RankAssignment:
        tokens = await self.get_raw_tokens(identity)
        assignment = self.rank_table.resolve(tokens)

        self.log_operation(
            "get_rank",
            uuid=identity.uuid,
            raw_tokens=tokens,
            rank_key=assignment.key,
            recognized=assignment.recognized,
        )
        return assignment

    def default_rank(self) -> RankAssignment:
        return self.rank_table.default_assignment()
