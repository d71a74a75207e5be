"""
Response formatting for player statistics.

Pure functions: no I/O, no logging, and no failure modes. Every input is a
resolved (possibly defaulted) value, so assembling the snapshot always
succeeds.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Tuple

from src.domain.models.stats import (
    BlockAuditCount,
    CombatCount,
    EconomyBalance,
    PlayerIdentity,
    RankAssignment,
    SessionAggregate,
    StatsSnapshot,
)

MS_PER_MINUTE = 60_000

_COMPACT_UNITS: Tuple[Tuple[int, str], ...] = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "k"),
)


def format_playtime(total_ms: int) -> str:
    """``"{h}h {m}m"``, or just ``"{m}m"`` under an hour."""
    minutes = max(0, int(total_ms)) // MS_PER_MINUTE
    hours, minutes = divmod(minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def format_money_compact(amount: int) -> str:
    """
    Compact balance with a B/M/k suffix.

    Two decimals with trailing zeros dropped: 2_500_000 -> "2.5M",
    1_000 -> "1k". Below a thousand, grouped digits: 999 -> "999".
    """
    for threshold, suffix in _COMPACT_UNITS:
        if amount >= threshold:
            value = f"{amount / threshold:.2f}".rstrip("0").rstrip(".")
            return f"{value}{suffix}"
    return f"{amount:,}"


def format_member_since(registered_ms: int) -> str:
    """Registration date as ``d/m/yyyy`` in UTC, without zero padding."""
    registered = datetime.fromtimestamp(max(0, int(registered_ms)) / 1000, tz=timezone.utc)
    return f"{registered.day}/{registered.month}/{registered.year}"


def build_snapshot(
    identity: PlayerIdentity,
    sessions: SessionAggregate,
    combat: CombatCount,
    balance: EconomyBalance,
    rank: RankAssignment,
    blocks: BlockAuditCount,
) -> StatsSnapshot:
    return StatsSnapshot(
        username=identity.display_name,
        rank=rank.label,
        rank_image=rank.badge,
        playtime=format_playtime(sessions.total_playtime_ms),
        kills=combat.pvp_kills,
        mob_kills=sessions.mob_kills,
        deaths=sessions.deaths,
        money=format_money_compact(balance.amount),
        blocks_mined=blocks.mined,
        blocks_placed=blocks.placed,
        member_since=format_member_since(identity.registered_at),
    )


__all__ = [
    "format_playtime",
    "format_money_compact",
    "format_member_since",
    "build_snapshot",
]
