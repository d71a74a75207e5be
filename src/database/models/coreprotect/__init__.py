"""CoreProtect models (secondary block audit store)."""

from .block_log import ACTION_BREAK, ACTION_PLACE, CoreProtectBlock, CoreProtectUser

__all__ = ["CoreProtectUser", "CoreProtectBlock", "ACTION_BREAK", "ACTION_PLACE"]
