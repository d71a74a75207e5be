"""
Session Stats Service
=====================

Aggregates a player's Plan sessions into total playtime, mob kills and
deaths with a single SUM query. A session without an end is still running
and counts up to the moment of the query; the current time is computed here
and bound as a parameter so the statement stays portable across dialects.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Type

from sqlalchemy import BigInteger, case, func, literal, select

from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
from src.database.models.plan import PlanSession
from src.domain.models.stats import PlayerIdentity, SessionAggregate
from src.modules.shared.base_repository import BaseRepository
from src.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession

    from src.core.config.manager import ConfigManager


class PlanSessionRepository(BaseRepository[PlanSession]):
    """Repository for Plan sessions."""

    async def aggregate_for_user(
        self, session: AsyncSession, user_id: int, now_ms: int
    ) -> SessionAggregate:
        duration = case(
            (
                PlanSession.session_end.is_not(None),
                PlanSession.session_end - PlanSession.session_start,
            ),
            else_=literal(now_ms, BigInteger()) - PlanSession.session_start,
        )
        stmt = select(
            func.coalesce(func.sum(duration), 0),
            func.coalesce(func.sum(PlanSession.mob_kills), 0),
            func.coalesce(func.sum(PlanSession.deaths), 0),
        ).where(PlanSession.user_id == user_id)

        result = await session.execute(stmt)
        playtime_ms, mob_kills, deaths = result.one()

        self.log.debug(
            "Repository.aggregate_for_user: PlanSession",
            extra={"user_id": user_id, "playtime_ms": int(playtime_ms or 0)},
        )

        return SessionAggregate(
            total_playtime_ms=int(playtime_ms or 0),
            mob_kills=int(mob_kills or 0),
            deaths=int(deaths or 0),
        )


class SessionStatsService(BaseService):
    """Playtime, mob kills and deaths from Plan sessions."""

    def __init__(self, config_manager: Type[ConfigManager], logger: Logger) -> None:
        super().__init__(config_manager, logger)
        self._sessions = PlanSessionRepository(
            model_class=PlanSession,
            logger=get_logger(f"{__name__}.PlanSessionRepository"),
        )

    async def get_sessions(self, identity: PlayerIdentity) -> SessionAggregate:
        now_ms = int(time.time() * 1000)
        async with DatabaseService.get_session() as session:
            return await self._sessions.aggregate_for_user(
                session, identity.internal_id, now_ms
            )
