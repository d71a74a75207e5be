"""
Domain models package for KilluStats.

Purpose
-------
Immutable value objects and the two startup-validated lookup tables (rank
table, economy sources) that carry the business rules of the stats engine.

Design Notes
------------
Domain models are separate from database models:
- Database models (src/database/models/): read-only views of plugin tables
- Domain models (src/domain/models/): values and rules the services apply

Services convert between database rows and domain values.
"""

from .economy import (
    PARSER_DECIMAL_STRING,
    PARSER_LOCALIZED_STRING,
    PARSER_NUMERIC,
    EconomyMapping,
    EconomySource,
)
from .rank import DEFAULT_RANK_KEY, RankDefinition, RankTable
from .stats import (
    BlockAuditCount,
    CombatCount,
    EconomyBalance,
    PlayerIdentity,
    RankAssignment,
    SessionAggregate,
    StatsSnapshot,
)

__all__ = [
    # Values
    "PlayerIdentity",
    "SessionAggregate",
    "CombatCount",
    "EconomyBalance",
    "RankAssignment",
    "BlockAuditCount",
    "StatsSnapshot",
    # Rank table
    "DEFAULT_RANK_KEY",
    "RankDefinition",
    "RankTable",
    # Economy
    "PARSER_NUMERIC",
    "PARSER_DECIMAL_STRING",
    "PARSER_LOCALIZED_STRING",
    "EconomySource",
    "EconomyMapping",
]
