"""
Stats Module
============

Services behind the player statistics endpoint.

Services
--------
- IdentityService: raw identifier -> canonical PlayerIdentity
- SessionStatsService: playtime, mob kills, deaths (Plan sessions)
- CombatStatsService: PvP kills (Plan kills)
- EconomyService: balance from configured Plan extension sources
- RankService: effective rank from LuckPerms via the rank table
- BlockAuditService: mined/placed blocks (optional CoreProtect store)
- PlayerStatsService: orchestrator with per-resolver isolation

Formatting helpers live in ``formatter``.
"""

from .block_audit_service import BlockAuditService
from .combat_service import CombatStatsService
from .economy_service import EconomyService
from .identity_service import IdentityService
from .rank_service import RankService
from .service import PlayerStatsService
from .session_service import SessionStatsService

__all__ = [
    "IdentityService",
    "SessionStatsService",
    "CombatStatsService",
    "EconomyService",
    "RankService",
    "BlockAuditService",
    "PlayerStatsService",
]
