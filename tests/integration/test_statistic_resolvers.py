"""
Integration tests for the session, combat, economy and rank resolvers
against Plan/LuckPerms-shaped SQLite tables.
"""

import time

import pytest

from src.core.config.manager import ConfigManager
from src.core.logging.logger import get_logger
from src.domain.models.economy import EconomyMapping
from src.domain.models.stats import PlayerIdentity
from src.modules.stats.combat_service import CombatStatsService
from src.modules.stats.economy_service import EconomyService
from src.modules.stats.rank_service import RankService
from src.modules.stats.session_service import SessionStatsService
from tests.factories import (
    ALEX_UUID,
    REGISTERED_2024,
    STEVE_UUID,
    extension_plugin,
    extension_provider,
    extension_value,
    group_grant,
    luckperms_player,
    now_ms,
    plan_kill,
    plan_session,
    plan_user,
)

STEVE = PlayerIdentity(
    uuid=STEVE_UUID, display_name="Steve", internal_id=1, registered_at=REGISTERED_2024
)


@pytest.mark.integration
@pytest.mark.asyncio
class TestSessionStats:
    async def test_sums_closed_sessions(self, seed_primary):
        # Arrange
        await seed_primary(
            plan_user(id=1),
            plan_user(id=2, name="Alex", uuid=ALEX_UUID),
            plan_session(1, user_id=1, start=0, end=1_800_000, mob_kills=5, deaths=1),
            plan_session(2, user_id=1, start=2_000_000, end=3_800_000, mob_kills=7, deaths=2),
            plan_session(3, user_id=2, start=0, end=9_000_000, mob_kills=99, deaths=99),
        )
        service = SessionStatsService(ConfigManager, get_logger("tests.session"))

        # Act
        aggregate = await service.get_sessions(STEVE)

        # Assert
        assert aggregate.total_playtime_ms == 3_600_000
        assert aggregate.mob_kills == 12
        assert aggregate.deaths == 3

    async def test_open_session_counts_up_to_now(self, seed_primary):
        started = now_ms() - 120_000
        await seed_primary(
            plan_user(id=1),
            plan_session(1, user_id=1, start=started, end=None),
        )
        service = SessionStatsService(ConfigManager, get_logger("tests.session"))

        aggregate = await service.get_sessions(STEVE)

        assert 120_000 <= aggregate.total_playtime_ms < 180_000

    async def test_no_sessions_is_zero(self, seed_primary):
        await seed_primary(plan_user(id=1))
        service = SessionStatsService(ConfigManager, get_logger("tests.session"))

        aggregate = await service.get_sessions(STEVE)

        assert aggregate.total_playtime_ms == 0
        assert aggregate.mob_kills == 0
        assert aggregate.deaths == 0


@pytest.mark.integration
@pytest.mark.asyncio
class TestCombatStats:
    async def test_counts_kills_as_killer_only(self, seed_primary):
        await seed_primary(
            plan_kill(1, killer_uuid=STEVE_UUID, victim_uuid=ALEX_UUID),
            plan_kill(2, killer_uuid=STEVE_UUID, victim_uuid=ALEX_UUID),
            plan_kill(3, killer_uuid=ALEX_UUID, victim_uuid=STEVE_UUID),
        )
        service = CombatStatsService(ConfigManager, get_logger("tests.combat"))

        combat = await service.get_combat(STEVE)

        assert combat.pvp_kills == 2


@pytest.mark.integration
@pytest.mark.asyncio
class TestEconomyStats:
    async def _seed_balance_rows(self, seed_primary):
        await seed_primary(
            extension_plugin(1, "Vault"),
            extension_plugin(2, "PlaceholderAPI"),
            extension_plugin(3, "Jobs"),
            extension_provider(1, plugin_id=1, name="Balance"),
            extension_provider(2, plugin_id=2, name="vault_eco_balance"),
            extension_provider(3, plugin_id=3, name="Balance"),
            extension_value(1, provider_id=1, double_value=0.0),
            extension_value(2, provider_id=2, string_value="1.500,00"),
            extension_value(3, provider_id=3, double_value=8000.0),
            extension_value(4, provider_id=1, uuid=ALEX_UUID, double_value=123.0),
        )

    async def test_zero_numeric_falls_back_to_string(self, stats_config, seed_primary):
        """Numeric 0 next to a readable string source never reports 0."""
        await self._seed_balance_rows(seed_primary)
        service = EconomyService(stats_config, get_logger("tests.economy"))

        balance = await service.get_balance(STEVE)

        assert balance.amount == 1

    async def test_localized_parser(self, seed_primary):
        await self._seed_balance_rows(seed_primary)
        mapping = EconomyMapping.from_config(
            [
                {"plugin": "Vault", "metric": "Balance", "parser": "numeric"},
                {"plugin": "PlaceholderAPI", "metric": "vault_eco_balance", "parser": "localized_string"},
            ]
        )
        service = EconomyService(ConfigManager, get_logger("tests.economy"), mapping=mapping)

        balance = await service.get_balance(STEVE)

        assert balance.amount == 1500

    async def test_numeric_balance(self, stats_config, seed_primary):
        await seed_primary(
            extension_plugin(1, "Economy"),
            extension_provider(1, plugin_id=1, name="Balance"),
            extension_value(1, provider_id=1, double_value=1_000.0),
            extension_value(2, provider_id=1, double_value=2_500_000.0),
        )
        service = EconomyService(stats_config, get_logger("tests.economy"))

        balance = await service.get_balance(STEVE)

        assert balance.amount == 2_500_000

    async def test_numeric_source_stored_as_string(self, stats_config, seed_primary):
        await seed_primary(
            extension_plugin(1, "Vault"),
            extension_provider(1, plugin_id=1, name="Balance"),
            extension_value(1, provider_id=1, double_value=0.0, string_value="$12,340.00"),
        )
        service = EconomyService(stats_config, get_logger("tests.economy"))

        balance = await service.get_balance(STEVE)

        assert balance.amount == 12_340

    async def test_no_rows(self, stats_config, primary_database):
        service = EconomyService(stats_config, get_logger("tests.economy"))

        balance = await service.get_balance(STEVE)

        assert balance.amount == 0


@pytest.mark.integration
@pytest.mark.asyncio
class TestRankStats:
    async def test_highest_priority_grant_wins(self, stats_config, seed_primary):
        # Arrange: insertion order puts the lower rank first
        await seed_primary(
            luckperms_player(primary_group="default"),
            group_grant(1, "donador"),
            group_grant(2, "\u00a7f\ue02b\u00a7r"),
        )
        service = RankService(stats_config, get_logger("tests.rank"))

        # Act
        rank = await service.get_rank(STEVE)

        # Assert
        assert rank.key == "neroferno"
        assert rank.label == "Neroferno"
        assert rank.badge == "rank-neroferno.png"

    async def test_primary_group_token_read_first(self, stats_config, seed_primary):
        await seed_primary(
            luckperms_player(primary_group="fundador"),
            group_grant(1, "default"),
        )
        service = RankService(stats_config, get_logger("tests.rank"))

        tokens = await service.get_raw_tokens(STEVE)

        assert tokens[0] == "fundador"
        assert "default" in tokens

    async def test_inactive_grants_ignored(self, stats_config, seed_primary):
        now_seconds = int(time.time())
        await seed_primary(
            luckperms_player(primary_group="default"),
            group_grant(1, "neroferno", value=False),
            group_grant(2, "developer", expiry=now_seconds - 3600),
            group_grant(3, "donador", expiry=now_seconds + 3600),
        )
        service = RankService(stats_config, get_logger("tests.rank"))

        rank = await service.get_rank(STEVE)

        assert rank.key == "donador"

    async def test_other_players_grants_ignored(self, stats_config, seed_primary):
        await seed_primary(
            luckperms_player(primary_group="default"),
            group_grant(1, "neroferno", uuid=ALEX_UUID),
        )
        service = RankService(stats_config, get_logger("tests.rank"))

        rank = await service.get_rank(STEVE)

        assert rank.key == "default"
        assert rank.label == "Default"

    async def test_unknown_group_shown_verbatim(self, stats_config, seed_primary):
        await seed_primary(luckperms_player(primary_group="builder"))
        service = RankService(stats_config, get_logger("tests.rank"))

        rank = await service.get_rank(STEVE)

        assert rank.label == "builder"
        assert rank.badge == "user.png"
        assert rank.recognized is False

    async def test_player_unknown_to_luckperms(self, stats_config, primary_database):
        service = RankService(stats_config, get_logger("tests.rank"))

        rank = await service.get_rank(STEVE)

        assert rank.label == "Default"
