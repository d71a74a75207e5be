"""
Database Models Package
========================

Read-only SQLAlchemy ORM views over the external stores the stats engine
aggregates. None of these schemas are owned by this service; each model
declares only the columns the engine queries.

All models:
- Schema-only, no business logic
- Use Mapped[] syntax with mapped_column()
- Integer surrogate keys exactly as the owning plugin defines them

Store Organization:
-------------------
- plan: Plan analytics plugin (users, sessions, kills, extension values)
- luckperms: LuckPerms primary groups and permission nodes
- coreprotect: CoreProtect block audit log (secondary store)
"""

from src.core.database.base import CoreProtectBase, PrimaryBase

from .coreprotect import ACTION_BREAK, ACTION_PLACE, CoreProtectBlock, CoreProtectUser
from .luckperms import LuckPermsPlayer, LuckPermsUserPermission
from .plan import (
    PlanExtensionPlugin,
    PlanExtensionProvider,
    PlanExtensionUserValue,
    PlanKill,
    PlanSession,
    PlanUser,
)

__all__ = [
    "PrimaryBase",
    "CoreProtectBase",
    # Plan
    "PlanUser",
    "PlanSession",
    "PlanKill",
    "PlanExtensionPlugin",
    "PlanExtensionProvider",
    "PlanExtensionUserValue",
    # LuckPerms
    "LuckPermsPlayer",
    "LuckPermsUserPermission",
    # CoreProtect
    "CoreProtectUser",
    "CoreProtectBlock",
    "ACTION_BREAK",
    "ACTION_PLACE",
]
