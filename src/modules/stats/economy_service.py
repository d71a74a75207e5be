"""
Economy Service
===============

Purpose
-------
Resolve a player's current balance from Plan's extension-value store.

Economy plugins report balances as extension values; which plugin and metric
carry the balance, and whether it is stored as a number or a formatted
string, depends on the server. The trusted sources are listed explicitly in
``economy.sources`` and validated at startup (see EconomyMapping).

Resolution
----------
1. Fetch every extension value of the player whose plugin is a configured
   source plugin, newest first.
2. Let the mapping pick the newest numeric-source row and read its number,
   then its string; if that is still zero, the newest non-empty
   string-source value is parsed instead.
3. Truncate to whole base units.

Zero is returned both for a broke player and for one no source answered for.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

from sqlalchemy import func, select

from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
from src.database.models.plan import (
    PlanExtensionPlugin,
    PlanExtensionProvider,
    PlanExtensionUserValue,
)
from src.domain.models.economy import EconomyMapping
from src.domain.models.stats import EconomyBalance, PlayerIdentity
from src.modules.shared.base_repository import BaseRepository
from src.modules.shared.base_service import BaseService

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession

    from src.core.config.manager import ConfigManager


# ============================================================================
# Repository
# ============================================================================


class PlanExtensionValueRepository(BaseRepository[PlanExtensionUserValue]):
    """Repository for Plan extension values joined to provider and plugin."""

    async def find_candidate_values(
        self, session: AsyncSession, uuid: str, plugin_names: List[str]
    ) -> List[Dict[str, Any]]:
        """
        Extension values of ``uuid`` published by any of ``plugin_names``.

        Plugin names are compared lower-cased. Rows are newest first.
        """
        if not plugin_names:
            return []

        stmt = (
            select(
                PlanExtensionUserValue.id.label("id"),
                PlanExtensionUserValue.double_value.label("double_value"),
                PlanExtensionUserValue.string_value.label("string_value"),
                PlanExtensionPlugin.name.label("plugin_name"),
                PlanExtensionProvider.name.label("provider_name"),
                PlanExtensionProvider.text.label("provider_text"),
            )
            .join(
                PlanExtensionProvider,
                PlanExtensionUserValue.provider_id == PlanExtensionProvider.id,
            )
            .join(
                PlanExtensionPlugin,
                PlanExtensionProvider.plugin_id == PlanExtensionPlugin.id,
            )
            .where(
                PlanExtensionUserValue.uuid == uuid,
                func.lower(PlanExtensionPlugin.name).in_(plugin_names),
            )
            .order_by(PlanExtensionUserValue.id.desc())
        )

        result = await session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]

        self.log.debug(
            "Repository.find_candidate_values: PlanExtensionUserValue",
            extra={"found_count": len(rows), "plugin_names": plugin_names},
        )

        return rows


# ============================================================================
# EconomyService
# ============================================================================


class EconomyService(BaseService):
    """
    Balance resolution over the configured economy sources.

    Args:
        config_manager: YAML configuration manager
        logger: Structured logger instance
        mapping: Pre-validated mapping; built from ``economy.sources`` when
            omitted
    """

    def __init__(
        self,
        config_manager: Type[ConfigManager],
        logger: Logger,
        mapping: Optional[EconomyMapping] = None,
    ) -> None:
        super().__init__(config_manager, logger)
        self.mapping = mapping or EconomyMapping.from_config(
            self.get_config("economy.sources", required=True)
        )
        self._values = PlanExtensionValueRepository(
            model_class=PlanExtensionUserValue,
            logger=get_logger(f"{__name__}.PlanExtensionValueRepository"),
        )

    async def get_balance(self, identity: PlayerIdentity) -> EconomyBalance:
        async with DatabaseService.get_session() as session:
            rows = await self._values.find_candidate_values(
                session, identity.uuid, self.mapping.plugin_names
            )

        balance = self.mapping.resolve(rows)

        self.log_operation(
            "get_balance",
            uuid=identity.uuid,
            candidate_rows=len(rows),
            amount=balance.amount,
        )
        return balance
