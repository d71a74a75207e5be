"""
Unit tests for the response formatters.

Pure functions, no fixtures needed.
"""

import pytest

from src.domain.models.stats import (
    BlockAuditCount,
    CombatCount,
    EconomyBalance,
    PlayerIdentity,
    RankAssignment,
    SessionAggregate,
)
from src.modules.stats.formatter import (
    build_snapshot,
    format_member_since,
    format_money_compact,
    format_playtime,
)


class TestFormatPlaytime:
    @pytest.mark.parametrize(
        "total_ms, expected",
        [
            (0, "0m"),
            (59_999, "0m"),
            (60_000, "1m"),
            (3_599_999, "59m"),
            (3_600_000, "1h 0m"),
            (5_400_000, "1h 30m"),
            (90_061_000, "25h 1m"),
        ],
    )
    def test_hours_and_minutes(self, total_ms, expected):
        assert format_playtime(total_ms) == expected

    def test_negative_total_clamps_to_zero(self):
        """A clock skew that makes a session negative never prints a minus sign."""
        assert format_playtime(-120_000) == "0m"


class TestFormatMoneyCompact:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (0, "0"),
            (999, "999"),
            (1_000, "1k"),
            (1_500, "1.5k"),
            (12_340, "12.34k"),
            (2_500_000, "2.5M"),
            (1_000_000_000, "1B"),
            (1_230_000_000, "1.23B"),
        ],
    )
    def test_compact_suffixes(self, amount, expected):
        assert format_money_compact(amount) == expected

    def test_trailing_zeros_dropped(self):
        assert format_money_compact(2_000_000) == "2M"
        assert format_money_compact(2_100_000) == "2.1M"


class TestFormatMemberSince:
    def test_epoch(self):
        assert format_member_since(0) == "1/1/1970"

    def test_no_zero_padding(self):
        # 2024-06-15T00:00:00Z
        assert format_member_since(1_718_409_600_000) == "15/6/2024"

    def test_uses_utc(self):
        # 2023-12-31T23:59:59Z is still 2023 in UTC
        assert format_member_since(1_704_067_199_000) == "31/12/2023"


class TestBuildSnapshot:
    def test_defaults_produce_complete_snapshot(self):
        """Every statistic defaulted still yields all eleven fields."""
        identity = PlayerIdentity(
            uuid="8667ba71-b85a-4004-af54-457a9734eed7",
            display_name="Steve",
            internal_id=1,
            registered_at=1_704_067_200_000,
        )

        snapshot = build_snapshot(
            identity,
            SessionAggregate.zero(),
            CombatCount.zero(),
            EconomyBalance.zero(),
            RankAssignment(key="default", label="Default", badge="user.png"),
            BlockAuditCount.zero(),
        )

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

    def test_values_routed_to_their_fields(self):
        identity = PlayerIdentity("u", "Alex", 2, 0)

        snapshot = build_snapshot(
            identity,
            SessionAggregate(total_playtime_ms=5_400_000, mob_kills=7, deaths=3),
            CombatCount(pvp_kills=4),
            EconomyBalance(amount=2_500_000),
            RankAssignment(key="neroferno", label="Neroferno", badge="rank-neroferno.png"),
            BlockAuditCount(mined=10, placed=5),
        )

        assert snapshot.playtime == "1h 30m"
        assert snapshot.kills == 4
        assert snapshot.mob_kills == 7
        assert snapshot.deaths == 3
        assert snapshot.money == "2.5M"
        assert snapshot.rank == "Neroferno"
        assert snapshot.rank_image == "rank-neroferno.png"
        assert snapshot.blocks_mined == 10
        assert snapshot.blocks_placed == 5
