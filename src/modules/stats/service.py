"""
Player Stats Service
====================

Purpose
-------
Assemble the statistics snapshot of one player from several independent
stores, any of which but the identity store may be slow or unavailable.

Flow
----
1. Resolve the identity (hard dependency, bounded by the resolver timeout).
   Not found -> PlayerNotFoundError; store failure or timeout ->
   IdentityStoreError. Nothing else runs in either case.
2. Run the five statistic resolvers concurrently. Each is isolated: its own
   session, its own timeout, and any exception it raises is logged and
   replaced with that statistic's default.
3. Format the snapshot.

Cancellation is never swallowed: cancelling the caller cancels every
in-flight resolver. There are no retries and no cache; every request reads
the stores afresh.

Resolver Outcomes
-----------------
Each resolver records one metric per request via DatabaseMetrics:
``ok``, ``degraded`` (raised), ``timeout``, or ``skipped`` (block audit
store not configured).
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Type, TypeVar

from src.core.config.config import Config
from src.core.config.manager import ConfigManager
from src.core.database.metrics import DatabaseMetrics
from src.core.exceptions import IdentityStoreError, ResolverTimeoutError
from src.core.logging.logger import LogContext, get_logger
from src.domain.models.stats import (
    BlockAuditCount,
    CombatCount,
    EconomyBalance,
    PlayerIdentity,
    SessionAggregate,
    StatsSnapshot,
)
from src.modules.shared.base_service import BaseService
from src.modules.stats.block_audit_service import BlockAuditService
from src.modules.stats.combat_service import CombatStatsService
from src.modules.stats.economy_service import EconomyService
from src.modules.stats.formatter import build_snapshot
from src.modules.stats.identity_service import IdentityService
from src.modules.stats.rank_service import RankService
from src.modules.stats.session_service import SessionStatsService

if TYPE_CHECKING:
    from logging import Logger

T = TypeVar("T")

OUTCOME_OK = "ok"
OUTCOME_DEGRADED = "degraded"
OUTCOME_TIMEOUT = "timeout"
OUTCOME_SKIPPED = "skipped"


class PlayerStatsService(BaseService):
    """
    Orchestrates identity resolution and the statistic resolvers.

    Dependencies
    ------------
    - IdentityService: terminal on failure
    - SessionStatsService, CombatStatsService, EconomyService, RankService,
      BlockAuditService: isolated, default on failure
    - DatabaseMetrics: resolver outcome metrics (static)

    Public Methods
    --------------
    - get_player_stats() -> StatsSnapshot for a raw identifier
    """

    def __init__(
        self,
        config_manager: Type[ConfigManager],
        logger: Logger,
        *,
        identity_service: IdentityService,
        session_service: SessionStatsService,
        combat_service: CombatStatsService,
        economy_service: EconomyService,
        rank_service: RankService,
        block_audit_service: BlockAuditService,
        resolver_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(config_manager, logger)
        self._identity = identity_service
        self._sessions = session_service
        self._combat = combat_service
        self._economy = economy_service
        self._ranks = rank_service
        self._blocks = block_audit_service
        self.resolver_timeout = resolver_timeout or Config.STATS_RESOLVER_TIMEOUT_SECONDS

    @classmethod
    def from_config(
        cls,
        config_manager: Type[ConfigManager] = ConfigManager,
        *,
        resolver_timeout: Optional[float] = None,
    ) -> PlayerStatsService:
        """
        Build the service graph from loaded configuration.

        The rank table and economy sources are validated here, so a bad
        ``stats.yaml`` fails startup instead of a request.

        Raises:
            ConfigValidationError: Invalid rank table or economy sources
            ConfigurationError: ``ranks`` or ``economy.sources`` missing
        """
        return cls(
            config_manager,
            get_logger(__name__),
            identity_service=IdentityService(
                config_manager, get_logger(f"{__name__}.identity")
            ),
            session_service=SessionStatsService(
                config_manager, get_logger(f"{__name__}.session")
            ),
            combat_service=CombatStatsService(
                config_manager, get_logger(f"{__name__}.combat")
            ),
            economy_service=EconomyService(
                config_manager, get_logger(f"{__name__}.economy")
            ),
            rank_service=RankService(config_manager, get_logger(f"{__name__}.rank")),
            block_audit_service=BlockAuditService(
                config_manager, get_logger(f"{__name__}.block_audit")
            ),
            resolver_timeout=resolver_timeout,
        )

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    async def get_player_stats(self, identifier: str) -> StatsSnapshot:
        """
        Build the statistics snapshot for a raw identifier.

        Raises:
            PlayerNotFoundError: No account matches the identifier
            IdentityStoreError: The identity store failed or timed out
        """
        async with LogContext(player=identifier, operation="get_player_stats"):
            identity = await self._resolve_identity(identifier)

            sessions, combat, balance, rank, blocks = await asyncio.gather(
                self._isolated(
                    "session",
                    lambda: self._sessions.get_sessions(identity),
                    SessionAggregate.zero(),
                ),
                self._isolated(
                    "combat",
                    lambda: self._combat.get_combat(identity),
                    CombatCount.zero(),
                ),
                self._isolated(
                    "economy",
                    lambda: self._economy.get_balance(identity),
                    EconomyBalance.zero(),
                ),
                self._isolated(
                    "rank",
                    lambda: self._ranks.get_rank(identity),
                    self._ranks.default_rank(),
                ),
                self._block_audit(identity),
            )

            snapshot = build_snapshot(identity, sessions, combat, balance, rank, blocks)

            self.log.info(
                "Player stats assembled",
                extra={
                    "uuid": identity.uuid,
                    "display_name": identity.display_name,
                    "rank_key": rank.key,
                },
            )
            return snapshot

    # ========================================================================
    # INTERNALS
    # ========================================================================

    async def _resolve_identity(self, identifier: str) -> PlayerIdentity:
        try:
            return await asyncio.wait_for(
                self._identity.resolve(identifier), timeout=self.resolver_timeout
            )
        except asyncio.TimeoutError as exc:
            timeout_error = ResolverTimeoutError("identity", self.resolver_timeout)
            self.log.error(
                "Identity resolution timed out",
                extra={
                    "identifier": identifier,
                    "timeout_seconds": self.resolver_timeout,
                },
            )
            raise IdentityStoreError(identifier, timeout_error) from exc

    async def _block_audit(self, identity: PlayerIdentity) -> BlockAuditCount:
        if not self._blocks.is_enabled():
            DatabaseMetrics.record_resolver_outcome(
                resolver="block_audit", outcome=OUTCOME_SKIPPED, duration_ms=0.0
            )
            return BlockAuditCount.zero()

        return await self._isolated(
            "block_audit",
            lambda: self._blocks.get_block_counts(identity),
            BlockAuditCount.zero(),
        )

    async def _isolated(
        self,
        name: str,
        factory: Callable[[], Awaitable[T]],
        default: T,
    ) -> T:
        """
        Run one resolver behind its own timeout and failure boundary.

        Any ``Exception`` (timeouts included) is logged as a warning, counted,
        and replaced by ``default``. ``CancelledError`` propagates.
        """
        start = time.perf_counter()

        try:
            result = await asyncio.wait_for(factory(), timeout=self.resolver_timeout)
        except asyncio.TimeoutError:
            duration_ms = (time.perf_counter() - start) * 1000.0
            error = ResolverTimeoutError(name, self.resolver_timeout)
            self.log.warning(
                f"Resolver '{name}' timed out; using default",
                extra={
                    "resolver": name,
                    "error_code": error.error_code,
                    "timeout_seconds": self.resolver_timeout,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            DatabaseMetrics.record_resolver_outcome(
                resolver=name,
                outcome=OUTCOME_TIMEOUT,
                duration_ms=duration_ms,
                error_type=type(error).__name__,
            )
            return default
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000.0
            self.log.warning(
                f"Resolver '{name}' failed; using default",
                extra={
                    "resolver": name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            DatabaseMetrics.record_resolver_outcome(
                resolver=name,
                outcome=OUTCOME_DEGRADED,
                duration_ms=duration_ms,
                error_type=type(exc).__name__,
            )
            return default

        duration_ms = (time.perf_counter() - start) * 1000.0
        DatabaseMetrics.record_resolver_outcome(
            resolver=name, outcome=OUTCOME_OK, duration_ms=duration_ms
        )
        return result
