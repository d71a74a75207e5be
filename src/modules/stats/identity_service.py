"""
Identity Service
================

Purpose
-------
Resolve the raw identifier of a stats request (account name or UUID in
either dash convention) to the canonical PlayerIdentity recorded by Plan.
Every other statistic joins on the values produced here, so this is the one
hard dependency of a stats request.

Resolution Rules
----------------
- Input is trimmed; empty input matches nobody.
- UUID-shaped input: exact ``plan_users.uuid`` match.
- Name-shaped input: exact ``plan_users.name`` match; names can be reused
  across accounts, so the most recently registered account wins.
- A UUID-shaped miss is retried exactly once with the alternate dash
  convention.

Errors
------
- PlayerNotFoundError: nothing matched (HTTP 404)
- IdentityStoreError: the store could not answer (HTTP 503)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Type

from src.core.database.service import DatabaseService
from src.core.exceptions import IdentityStoreError
from src.core.logging.logger import get_logger
from src.database.models.plan import PlanUser
from src.domain.models.stats import PlayerIdentity
from src.modules.shared.base_repository import BaseRepository
from src.modules.shared.base_service import BaseService
from src.modules.shared.exceptions import PlayerNotFoundError
from src.modules.shared.validators import (
    IDENTIFIER_UUID,
    alternate_uuid_form,
    classify_identifier,
)

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession

    from src.core.config.manager import ConfigManager


# ============================================================================
# Repository
# ============================================================================


class PlanUserRepository(BaseRepository[PlanUser]):
    """Repository for the Plan user registry."""

    async def find_by_uuid(self, session: AsyncSession, uuid: str) -> Optional[PlanUser]:
        return await self.find_one_where(session, PlanUser.uuid == uuid)

    async def find_newest_by_name(
        self, session: AsyncSession, name: str
    ) -> Optional[PlanUser]:
        return await self.find_one_where(
            session,
            PlanUser.name == name,
            order_by=[PlanUser.registered.desc(), PlanUser.id.desc()],
        )


# ============================================================================
# IdentityService
# ============================================================================


class IdentityService(BaseService):
    """
    Resolves raw identifiers to PlayerIdentity values.

    Public Methods
    --------------
    - resolve() -> Canonical identity or a terminal error
    """

    def __init__(self, config_manager: Type[ConfigManager], logger: Logger) -> None:
        super().__init__(config_manager, logger)
        self._users = PlanUserRepository(
            model_class=PlanUser,
            logger=get_logger(f"{__name__}.PlanUserRepository"),
        )

    async def resolve(self, raw_identifier: Optional[str]) -> PlayerIdentity:
        """
        Resolve a raw identifier.

        Args:
            raw_identifier: Name or UUID as received, untrimmed

        Returns:
            PlayerIdentity of the matched account

        Raises:
            PlayerNotFoundError: Empty input or no matching account
            IdentityStoreError: Query failure
        """
        kind, value = classify_identifier(raw_identifier)
        if not value:
            raise PlayerNotFoundError(raw_identifier or "")

        self.log_operation("resolve_identity", identifier=value, identifier_kind=kind)

        try:
            async with DatabaseService.get_session() as session:
                row = await self._lookup(session, kind, value)
                identity = PlayerIdentity.from_db(row) if row is not None else None
        except Exception as exc:
            self.log_error("resolve_identity", exc, identifier=value)
            raise IdentityStoreError(value, exc) from exc

        if identity is None:
            self.log.info(
                "No account matches identifier",
                extra={"identifier": value, "identifier_kind": kind},
            )
            raise PlayerNotFoundError(value)

        return identity

    async def _lookup(
        self, session: AsyncSession, kind: str, value: str
    ) -> Optional[PlanUser]:
        if kind != IDENTIFIER_UUID:
            return await self._users.find_newest_by_name(session, value)

        row = await self._users.find_by_uuid(session, value)
        if row is not None:
            return row

        alternate = alternate_uuid_form(value)
        if alternate is None:
            return None

        self.log.debug(
            "Retrying UUID lookup with alternate dash convention",
            extra={"identifier": value, "alternate": alternate},
        )
        return await self._users.find_by_uuid(session, alternate)
