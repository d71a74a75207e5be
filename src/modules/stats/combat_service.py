"""
Combat Stats Service
====================

Counts player-versus-player kills from ``plan_kills``. Kill rows are keyed
by the killer's UUID rather than the Plan user id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Type

from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
from src.database.models.plan import PlanKill
from src.domain.models.stats import CombatCount, PlayerIdentity
from src.modules.shared.base_repository import BaseRepository
from src.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from src.core.config.manager import ConfigManager


class PlanKillRepository(BaseRepository[PlanKill]):
    """Repository for Plan PvP kills."""



class CombatStatsService(BaseService):
    def __init__(self, config_manager: Type[ConfigManager], logger: Logger) -> None:
        super().__init__(config_manager, logger)
        self._kills = PlanKillRepository(
            model_class=PlanKill,
            logger=get_logger(f"{__name__}.PlanKillRepository"),
        )

    async def get_combat(self, identity: PlayerIdentity) -> CombatCount:
        async with DatabaseService.get_session() as session:
            kills = await self._kills.count_where(
                session, PlanKill.killer_uuid == identity.uuid
            )
        return CombatCount(pvp_kills=kills)
