"""
Rank table domain model for KilluStats.

Purpose
-------
Turn the overlapping, inconsistently-encoded group tokens stored by
LuckPerms into one effective rank. The server decorates some group names
with formatting codes and private-use glyphs (``§f\\ue02b§r``), others are
plain (``Donador``); the table maps both onto canonical keys.

Responsibilities
----------------
- Validate the rank table once at startup (unique keys and priorities, a
  ``default`` entry, unambiguous aliases)
- Normalize one raw token to a canonical key
- Pick the highest-priority recognized key from a token list

Non-Responsibilities
--------------------
- Reading tokens from the permission store (RankService)
- Loading YAML (ConfigManager)

Usage Example
-------------
>>> table = RankTable.from_config(ConfigManager.get("ranks"))
>>> table.resolve(["donador", "§f\\ue02b§r"]).label
'Neroferno'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from src.core.config.errors import ConfigValidationError
from src.domain.models.stats import RankAssignment

DEFAULT_RANK_KEY = "default"


@dataclass(frozen=True)
class RankDefinition:
    """
    One canonical rank.

    Attributes
    ----------
    key : str
        Canonical lowercase key
    priority : int
        Higher wins when a player holds several ranks
    label : str
        Display label
    badge : str
        Badge image file name
    aliases : Tuple[str, ...]
        Raw tokens that map to this key by exact match
    """

    key: str
    priority: int
    label: str
    badge: str
    aliases: Tuple[str, ...] = field(default_factory=tuple)


class RankTable:
    """
    Validated, immutable rank table.

    Construct through ``from_config`` so that validation always runs.
    """

    def __init__(self, definitions: Sequence[RankDefinition]) -> None:
        self._validate(definitions)

        self._by_key: Dict[str, RankDefinition] = {d.key: d for d in definitions}
        self._by_folded_key: Dict[str, str] = {d.key.casefold(): d.key for d in definitions}
        self._aliases: Dict[str, str] = {}
        for definition in definitions:
            for alias in definition.aliases:
                self._aliases[alias] = definition.key

        self.default: RankDefinition = self._by_key[DEFAULT_RANK_KEY]

    # ------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------

    @classmethod
    def from_config(cls, entries: Any) -> RankTable:
        """
        Build a table from the ``ranks`` YAML section.

        Raises
        ------
        ConfigValidationError
            If the section is not a non-empty list of well-formed entries or
            violates a table invariant.
        """
        if not isinstance(entries, list) or not entries:
            raise ConfigValidationError("'ranks' must be a non-empty list of rank entries")

        definitions: List[RankDefinition] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                raise ConfigValidationError(f"ranks[{index}] must be a mapping")
            definitions.append(cls._parse_entry(index, entry))

        return cls(definitions)

    @staticmethod
    def _parse_entry(index: int, entry: Mapping[str, Any]) -> RankDefinition:
        for required in ("key", "label", "badge"):
            value = entry.get(required)
            if not isinstance(value, str) or not value.strip():
                raise ConfigValidationError(
                    f"ranks[{index}].{required} must be a non-empty string"
                )

        priority = entry.get("priority")
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise ConfigValidationError(f"ranks[{index}].priority must be an integer")

        aliases = entry.get("aliases") or []
        if not isinstance(aliases, list) or not all(
            isinstance(alias, str) and alias for alias in aliases
        ):
            raise ConfigValidationError(
                f"ranks[{index}].aliases must be a list of non-empty strings"
            )

        return RankDefinition(
            key=entry["key"].strip().lower(),
            priority=priority,
            label=entry["label"],
            badge=entry["badge"],
            aliases=tuple(aliases),
        )

    @staticmethod
    def _validate(definitions: Sequence[RankDefinition]) -> None:
        keys: Dict[str, int] = {}
        priorities: Dict[int, str] = {}
        alias_owner: Dict[str, str] = {}

        for definition in definitions:
            if definition.key in keys:
                raise ConfigValidationError(f"Duplicate rank key: {definition.key!r}")
            keys[definition.key] = definition.priority

            if definition.priority in priorities:
                raise ConfigValidationError(
                    f"Duplicate rank priority {definition.priority} "
                    f"({priorities[definition.priority]!r} and {definition.key!r})"
                )
            priorities[definition.priority] = definition.key

            for alias in definition.aliases:
                owner = alias_owner.get(alias)
                if owner is not None and owner != definition.key:
                    raise ConfigValidationError(
                        f"Alias {alias!r} maps to both {owner!r} and {definition.key!r}"
                    )
                alias_owner[alias] = definition.key

        if DEFAULT_RANK_KEY not in keys:
            raise ConfigValidationError(f"Rank table has no {DEFAULT_RANK_KEY!r} entry")

        for alias, owner in alias_owner.items():
            folded = alias.casefold()
            for key in keys:
                if key.casefold() == folded and key != owner:
                    raise ConfigValidationError(
                        f"Alias {alias!r} of {owner!r} collides with rank key {key!r}"
                    )

    # ------------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------------

    @property
    def keys(self) -> List[str]:
        """Canonical keys in ascending priority."""
        return [d.key for d in sorted(self._by_key.values(), key=lambda d: d.priority)]

    def get(self, key: str) -> Optional[RankDefinition]:
        return self._by_key.get(key)

    def normalize(self, token: str) -> Optional[str]:
        """
        Map a raw token to a canonical key.

        Exact alias match first, then case-insensitive key match. Returns
        None for unrecognized tokens.
        """
        if token in self._aliases:
            return self._aliases[token]
        return self._by_folded_key.get(token.strip().casefold())

    def resolve(self, tokens: Iterable[str]) -> RankAssignment:
        """
        Pick the effective rank from raw tokens.

        The highest-priority recognized key wins regardless of token order.
        With no recognized token, the first non-default raw token becomes the
        label verbatim with the default badge. No tokens yields ``default``.
        """
        raw_tokens = tuple(token for token in tokens if token)

        best: Optional[RankDefinition] = None
        for token in raw_tokens:
            key = self.normalize(token)
            if key is None:
                continue
            definition = self._by_key[key]
            if best is None or definition.priority > best.priority:
                best = definition

        if best is not None:
            return RankAssignment(
                key=best.key,
                label=best.label,
                badge=best.badge,
                raw_tokens=raw_tokens,
                recognized=True,
            )

        fallback = next(
            (t for t in raw_tokens if t.strip().casefold() != DEFAULT_RANK_KEY),
            None,
        )
        if fallback is not None:
            return RankAssignment(
                key=DEFAULT_RANK_KEY,
                label=fallback,
                badge=self.default.badge,
                raw_tokens=raw_tokens,
                recognized=False,
            )

        return self.default_assignment(raw_tokens)

    def default_assignment(self, raw_tokens: Tuple[str, ...] = ()) -> RankAssignment:
        return RankAssignment(
            key=self.default.key,
            label=self.default.label,
            badge=self.default.badge,
            raw_tokens=raw_tokens,
            recognized=True,
        )

    def __len__(self) -> int:
        return len(self._by_key)

    def __repr__(self) -> str:
        return f"<RankTable keys={self.keys}>"


__all__ = ["DEFAULT_RANK_KEY", "RankDefinition", "RankTable"]
