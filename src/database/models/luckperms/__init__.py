"""LuckPerms models (primary store)."""

from .permissions import LuckPermsPlayer, LuckPermsUserPermission

__all__ = ["LuckPermsPlayer", "LuckPermsUserPermission"]
