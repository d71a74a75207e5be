"""
Plan analytics plugin models (primary store).

Exports:
- PlanUser
- PlanSession
- PlanKill
- PlanExtensionPlugin
- PlanExtensionProvider
- PlanExtensionUserValue
"""

from .extension import PlanExtensionPlugin, PlanExtensionProvider, PlanExtensionUserValue
from .kill import PlanKill
from .user import PlanSession, PlanUser

__all__ = [
    "PlanUser",
    "PlanSession",
    "PlanKill",
    "PlanExtensionPlugin",
    "PlanExtensionProvider",
    "PlanExtensionUserValue",
]
