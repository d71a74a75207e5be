"""
Unit tests for PlayerStatsService orchestration.

Every collaborator is mocked; these tests cover isolation, timeouts,
cancellation and outcome metrics, not SQL.
"""

import asyncio
from types import SimpleNamespace

import pytest

from src.core.config.manager import ConfigManager
from src.core.exceptions import IdentityStoreError, ResolverTimeoutError
from src.core.logging.logger import get_logger
from src.domain.models.stats import (
    BlockAuditCount,
    CombatCount,
    EconomyBalance,
    PlayerIdentity,
    RankAssignment,
    SessionAggregate,
)
from src.modules.shared.exceptions import PlayerNotFoundError
from src.modules.stats.service import PlayerStatsService

STEVE = PlayerIdentity(
    uuid="8667ba71-b85a-4004-af54-457a9734eed7",
    display_name="Steve",
    internal_id=1,
    registered_at=1_704_067_200_000,
)
DEFAULT_RANK = RankAssignment(key="default", label="Default", badge="user.png")
NEROFERNO = RankAssignment(key="neroferno", label="Neroferno", badge="rank-neroferno.png")


async def hang_forever(*args, **kwargs):
    await asyncio.Event().wait()


@pytest.fixture
def collaborators(mocker):
    """Mocked services that all succeed."""
    identity = mocker.Mock()
    identity.resolve = mocker.AsyncMock(return_value=STEVE)

    sessions = mocker.Mock()
    sessions.get_sessions = mocker.AsyncMock(
        return_value=SessionAggregate(total_playtime_ms=3_600_000, mob_kills=12, deaths=4)
    )

    combat = mocker.Mock()
    combat.get_combat = mocker.AsyncMock(return_value=CombatCount(pvp_kills=3))

    economy = mocker.Mock()
    economy.get_balance = mocker.AsyncMock(return_value=EconomyBalance(amount=2_500_000))

    ranks = mocker.Mock()
    ranks.get_rank = mocker.AsyncMock(return_value=NEROFERNO)
    ranks.default_rank = mocker.Mock(return_value=DEFAULT_RANK)

    blocks = mocker.Mock()
    blocks.is_enabled = mocker.Mock(return_value=True)
    blocks.get_block_counts = mocker.AsyncMock(return_value=BlockAuditCount(mined=30, placed=20))

    return SimpleNamespace(
        identity=identity,
        sessions=sessions,
        combat=combat,
        economy=economy,
        ranks=ranks,
        blocks=blocks,
    )


def build_service(c, resolver_timeout=1.0):
    return PlayerStatsService(
        ConfigManager,
        get_logger("tests.player_stats_service"),
        identity_service=c.identity,
        session_service=c.sessions,
        combat_service=c.combat,
        economy_service=c.economy,
        rank_service=c.ranks,
        block_audit_service=c.blocks,
        resolver_timeout=resolver_timeout,
    )


@pytest.mark.asyncio
class TestGetPlayerStats:
    async def test_all_resolvers_succeed(self, collaborators, recording_metrics):
        """Happy path: every statistic from its resolver, every outcome ok."""
        service = build_service(collaborators)

        snapshot = await service.get_player_stats("Steve")

        assert snapshot.username == "Steve"
        assert snapshot.playtime == "1h 0m"
        assert snapshot.kills == 3
        assert snapshot.mob_kills == 12
        assert snapshot.deaths == 4
        assert snapshot.money == "2.5M"
        assert snapshot.rank == "Neroferno"
        assert snapshot.blocks_mined == 30
        assert snapshot.blocks_placed == 20
        assert snapshot.member_since == "1/1/2024"
        assert recording_metrics.resolver_outcomes() == {
            "session": "ok",
            "combat": "ok",
            "economy": "ok",
            "rank": "ok",
            "block_audit": "ok",
        }
        collaborators.identity.resolve.assert_awaited_once_with("Steve")

    async def test_failing_resolvers_degrade_to_defaults(self, collaborators, recording_metrics):
        """Every secondary store down still yields a complete snapshot."""
        for mock in (
            collaborators.sessions.get_sessions,
            collaborators.combat.get_combat,
            collaborators.economy.get_balance,
            collaborators.ranks.get_rank,
            collaborators.blocks.get_block_counts,
        ):
            mock.side_effect = RuntimeError("store down")
        service = build_service(collaborators)

        snapshot = await service.get_player_stats("Steve")

        assert snapshot.to_dict() == {
            "username": "Steve",
            "rank": "Default",
            "rank_image": "user.png",
            "playtime": "0m",
            "kills": 0,
            "mob_kills": 0,
            "deaths": 0,
            "money": "0",
            "blocks_mined": 0,
            "blocks_placed": 0,
            "member_since": "1/1/2024",
        }
        assert set(recording_metrics.resolver_outcomes().values()) == {"degraded"}

    async def test_one_failure_does_not_affect_others(self, collaborators, recording_metrics):
        collaborators.economy.get_balance.side_effect = ConnectionError("refused")
        service = build_service(collaborators)

        snapshot = await service.get_player_stats("Steve")

        assert snapshot.money == "0"
        assert snapshot.kills == 3
        assert snapshot.rank == "Neroferno"
        outcomes = recording_metrics.resolver_outcomes()
        assert outcomes["economy"] == "degraded"
        assert outcomes["combat"] == "ok"

    async def test_slow_resolver_times_out_to_default(self, collaborators, recording_metrics):
        collaborators.sessions.get_sessions.side_effect = hang_forever
        service = build_service(collaborators, resolver_timeout=0.05)

        snapshot = await service.get_player_stats("Steve")

        assert snapshot.playtime == "0m"
        assert snapshot.mob_kills == 0
        assert snapshot.kills == 3
        assert recording_metrics.resolver_outcomes()["session"] == "timeout"

    async def test_block_audit_skipped_when_not_configured(self, collaborators, recording_metrics):
        collaborators.blocks.is_enabled.return_value = False
        service = build_service(collaborators)

        snapshot = await service.get_player_stats("Steve")

        assert snapshot.blocks_mined == 0
        assert snapshot.blocks_placed == 0
        collaborators.blocks.get_block_counts.assert_not_awaited()
        assert recording_metrics.resolver_outcomes()["block_audit"] == "skipped"
        assert recording_metrics.scoped_connection_attempts() == 0


@pytest.mark.asyncio
class TestIdentityFailures:
    async def test_not_found_is_terminal(self, collaborators, recording_metrics):
        """No resolver runs for a player that does not exist."""
        collaborators.identity.resolve.side_effect = PlayerNotFoundError("not-a-real-player")
        service = build_service(collaborators)

        with pytest.raises(PlayerNotFoundError):
            await service.get_player_stats("not-a-real-player")

        collaborators.sessions.get_sessions.assert_not_awaited()
        collaborators.blocks.get_block_counts.assert_not_awaited()
        assert recording_metrics.resolver_outcomes() == {}

    async def test_store_error_is_terminal(self, collaborators):
        collaborators.identity.resolve.side_effect = IdentityStoreError(
            "Steve", ConnectionError("refused")
        )
        service = build_service(collaborators)

        with pytest.raises(IdentityStoreError):
            await service.get_player_stats("Steve")

        collaborators.combat.get_combat.assert_not_awaited()

    async def test_identity_timeout_becomes_store_error(self, collaborators):
        collaborators.identity.resolve.side_effect = hang_forever
        service = build_service(collaborators, resolver_timeout=0.05)

        with pytest.raises(IdentityStoreError) as exc_info:
            await service.get_player_stats("Steve")

        assert isinstance(exc_info.value.original_error, ResolverTimeoutError)
        assert exc_info.value.error_code == "IDENTITY_STORE_UNAVAILABLE"
        collaborators.sessions.get_sessions.assert_not_awaited()


@pytest.mark.asyncio
class TestCancellation:
    async def test_cancel_propagates_to_in_flight_resolvers(self, collaborators):
        """Cancelling the request cancels the resolvers instead of defaulting them."""
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def slow_combat(identity):
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        collaborators.combat.get_combat.side_effect = slow_combat
        service = build_service(collaborators, resolver_timeout=30.0)

        task = asyncio.create_task(service.get_player_stats("Steve"))
        await asyncio.wait_for(started.wait(), timeout=1.0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert cancelled.is_set()

    async def test_cancel_during_identity(self, collaborators):
        started = asyncio.Event()

        async def slow_identity(identifier):
            started.set()
            await asyncio.Event().wait()

        collaborators.identity.resolve.side_effect = slow_identity
        service = build_service(collaborators, resolver_timeout=30.0)

        task = asyncio.create_task(service.get_player_stats("Steve"))
        await asyncio.wait_for(started.wait(), timeout=1.0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        collaborators.sessions.get_sessions.assert_not_awaited()
