"""
Player statistics value objects for KilluStats.

Purpose
-------
Immutable per-request values produced by the resolvers and combined into the
public snapshot. Nothing here is persisted or shared between requests.

Responsibilities
----------------
- Carry one resolved statistic each, with a zero/default constructor used
  when its resolver degrades
- Convert from the ORM rows that back them (identity only)
- Serialize the final snapshot to the public response shape

Non-Responsibilities
--------------------
- Querying stores (handled by the stats services)
- Display formatting (handled by ``src.modules.stats.formatter``)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Tuple

if TYPE_CHECKING:
    from src.database.models.plan import PlanUser


# ============================================================================
# IDENTITY
# ============================================================================


@dataclass(frozen=True)
class PlayerIdentity:
    """
    Canonical identity of one account.

    Attributes
    ----------
    uuid : str
        UUID exactly as stored by Plan (dashed)
    display_name : str
        Last known account name
    internal_id : int
        plan_users.id, the join key for session rows
    registered_at : int
        Registration time, epoch milliseconds
    """

    uuid: str
    display_name: str
    internal_id: int
    registered_at: int

    @classmethod
    def from_db(cls, row: PlanUser) -> PlayerIdentity:
        return cls(
            uuid=row.uuid,
            display_name=row.name,
            internal_id=row.id,
            registered_at=int(row.registered or 0),
        )


# ============================================================================
# STATISTICS
# ============================================================================


@dataclass(frozen=True)
class SessionAggregate:
    total_playtime_ms: int = 0
    mob_kills: int = 0
    deaths: int = 0

    @classmethod
    def zero(cls) -> SessionAggregate:
        return cls()


@dataclass(frozen=True)
class CombatCount:
    pvp_kills: int = 0

    @classmethod
    def zero(cls) -> CombatCount:
        return cls()


@dataclass(frozen=True)
class EconomyBalance:
    """
    Balance in whole base units.

    Zero is ambiguous: the player may be broke or no source may have
    answered. Callers cannot tell the two apart.
    """

    amount: int = 0

    @classmethod
    def zero(cls) -> EconomyBalance:
        return cls()


@dataclass(frozen=True)
class RankAssignment:
    """
    The single effective rank of a player.

    Attributes
    ----------
    key : str
        Canonical rank key; ``"default"`` when the raw label was not
        recognized
    label : str
        Display label
    badge : str
        Badge image file name
    raw_tokens : Tuple[str, ...]
        Group tokens read from the permission store, in read order
    recognized : bool
        False when ``label`` is a raw unrecognized token
    """

    key: str
    label: str
    badge: str
    raw_tokens: Tuple[str, ...] = field(default_factory=tuple)
    recognized: bool = True


@dataclass(frozen=True)
class BlockAuditCount:
    mined: int = 0
    placed: int = 0

    @classmethod
    def zero(cls) -> BlockAuditCount:
        return cls()


# ============================================================================
# SNAPSHOT
# ============================================================================


@dataclass(frozen=True)
class StatsSnapshot:
    """Flat, display-ready statistics for one player."""

    username: str
    rank: str
    rank_image: str
    playtime: str
    kills: int
    mob_kills: int
    deaths: int
    money: str
    blocks_mined: int
    blocks_placed: int
    member_since: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "PlayerIdentity",
    "SessionAggregate",
    "CombatCount",
    "EconomyBalance",
    "RankAssignment",
    "BlockAuditCount",
    "StatsSnapshot",
]
