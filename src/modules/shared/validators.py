"""
KilluStats Identifier Validators

Purpose
-------
Classify and normalize the raw identifiers the stats endpoint receives. A
player may be looked up by account name or by UUID, and UUIDs arrive in two
conventions: dashed (``8-4-4-4-12``) as Plan stores them, or compact
(32 hex characters) as Mojang's API and many plugins print them.

Design Notes
------------
- Pure functions, no database access
- Classification is case-insensitive; the stored casing is never altered,
  only the dash convention is toggled

Usage
-----
    from src.modules.shared.validators import classify_identifier

    kind, value = classify_identifier("  069a79f444e94726a5befca90e38aaf5 ")
    # ("uuid", "069a79f444e94726a5befca90e38aaf5")
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

IDENTIFIER_UUID = "uuid"
IDENTIFIER_NAME = "name"

_DASHED_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_COMPACT_UUID = re.compile(r"^[0-9a-f]{32}$", re.IGNORECASE)


def normalize_identifier(raw: Optional[str]) -> str:
    """Strip surrounding whitespace; ``None`` becomes the empty string."""
    return (raw or "").strip()


def is_uuid_shaped(value: str) -> bool:
    """True for 36-char dashed or 32-char compact hex UUIDs."""
    return bool(_DASHED_UUID.match(value) or _COMPACT_UUID.match(value))


def classify_identifier(raw: Optional[str]) -> Tuple[str, str]:
    """
    Trim and classify a raw identifier.

    Returns:
        ``(kind, value)`` where kind is ``"uuid"`` or ``"name"`` and value
        is the trimmed input. Empty input classifies as a name and is
        rejected by the caller.
    """
    value = normalize_identifier(raw)
    if is_uuid_shaped(value):
        return IDENTIFIER_UUID, value
    return IDENTIFIER_NAME, value


def alternate_uuid_form(value: str) -> Optional[str]:
    """
    Toggle the dash convention of a UUID-shaped value.

    Dashed input loses its dashes; compact input gains them at 8-4-4-4-12.
    Returns None for anything that is not UUID-shaped.
    """
    if _DASHED_UUID.match(value):
        return value.replace("-", "")
    if _COMPACT_UUID.match(value):
        return (
            f"{value[0:8]}-{value[8:12]}-{value[12:16]}-"
            f"{value[16:20]}-{value[20:32]}"
        )
    return None


__all__ = [
    "IDENTIFIER_UUID",
    "IDENTIFIER_NAME",
    "normalize_identifier",
    "is_uuid_shaped",
    "classify_identifier",
    "alternate_uuid_form",
]
