"""
Economy source mapping for KilluStats.

Purpose
-------
Balances are not stored in a dedicated table: economy plugins publish them
through Plan's generic extension-value store, under plugin and metric names
that differ between servers and plugin versions. This module holds the
explicit list of ``(plugin, metric, parser)`` sources that are trusted to
carry a balance, and the parsers that turn a stored value into base units.

Responsibilities
----------------
- Validate ``economy.sources`` once at startup
- Decide which source (if any) serves a given extension row
- Parse numeric and string encodings into an integer amount
- Apply the numeric-first, string-fallback resolution rule

Parsers
-------
- ``numeric``: the row's ``double_value``; when that is NULL or zero the
  same row's ``string_value`` is read with ``decimal_string``
- ``decimal_string``: ``string_value`` with every character other than a
  digit or ``.`` removed, e.g. ``"$1,234.50"`` -> 1234
- ``localized_string``: ``string_value`` with ``.`` as grouping mark and
  ``,`` as decimal separator, e.g. ``"1.500,00"`` -> 1500
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from src.core.config.errors import ConfigValidationError
from src.domain.models.stats import EconomyBalance

PARSER_NUMERIC = "numeric"
PARSER_DECIMAL_STRING = "decimal_string"
PARSER_LOCALIZED_STRING = "localized_string"

_NON_DECIMAL = re.compile(r"[^0-9.]")
_NON_LOCALIZED = re.compile(r"[^0-9.,]")


# ============================================================================
# PARSERS
# ============================================================================


def _decimal_to_units(value: Optional[Decimal]) -> Optional[int]:
    if value is None or not value.is_finite():
        return None
    return int(value)


def parse_numeric(value: Any) -> Optional[int]:
    """Truncate a stored double to whole units; None for NULL/NaN/inf."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def parse_decimal_string(value: Optional[str]) -> Optional[int]:
    """Keep digits and ``.`` only, then parse; None when nothing parses."""
    if not value:
        return None
    cleaned = _NON_DECIMAL.sub("", value)
    if not cleaned:
        return None
    try:
        return _decimal_to_units(Decimal(cleaned))
    except InvalidOperation:
        return None


def parse_localized_string(value: Optional[str]) -> Optional[int]:
    """Parse ``1.234.567,89``-style amounts; None when nothing parses."""
    if not value:
        return None
    cleaned = _NON_LOCALIZED.sub("", value).replace(".", "").replace(",", ".")
    if not cleaned:
        return None
    try:
        return _decimal_to_units(Decimal(cleaned))
    except InvalidOperation:
        return None


PARSERS: Dict[str, Callable[[Any], Optional[int]]] = {
    PARSER_NUMERIC: parse_numeric,
    PARSER_DECIMAL_STRING: parse_decimal_string,
    PARSER_LOCALIZED_STRING: parse_localized_string,
}


# ============================================================================
# SOURCES
# ============================================================================


@dataclass(frozen=True)
class EconomySource:
    """
    One trusted balance source.

    ``plugin`` and ``metric`` are compared case-insensitively and exactly;
    ``metric`` matches either the provider name or its display text.
    """

    plugin: str
    metric: str
    parser: str

    @property
    def is_numeric(self) -> bool:
        return self.parser == PARSER_NUMERIC

    def matches(
        self, plugin_name: Optional[str], provider_name: Optional[str], provider_text: Optional[str]
    ) -> bool:
        if (plugin_name or "").casefold() != self.plugin.casefold():
            return False
        metric = self.metric.casefold()
        return (provider_name or "").casefold() == metric or (
            provider_text or ""
        ).casefold() == metric

    def has_value(self, row: Mapping[str, Any]) -> bool:
        has_string = bool((row.get("string_value") or "").strip())
        if self.is_numeric:
            return row.get("double_value") is not None or has_string
        return has_string

    def parse(self, row: Mapping[str, Any]) -> Optional[int]:
        if self.is_numeric:
            # Some economy plugins only publish the formatted string.
            return parse_numeric(row.get("double_value")) or parse_decimal_string(
                row.get("string_value")
            )
        return PARSERS[self.parser](row.get("string_value"))


class EconomyMapping:
    """Validated list of economy sources."""

    def __init__(self, sources: Iterable[EconomySource]) -> None:
        self.sources: Tuple[EconomySource, ...] = tuple(sources)

    @classmethod
    def from_config(cls, entries: Any) -> EconomyMapping:
        """
        Build the mapping from the ``economy.sources`` YAML section.

        Raises
        ------
        ConfigValidationError
            On a non-list section, blank names, an unknown parser, or the same
            plugin/metric pair listed twice.
        """
        if not isinstance(entries, list) or not entries:
            raise ConfigValidationError(
                "'economy.sources' must be a non-empty list of sources"
            )

        sources: List[EconomySource] = []
        seen: Dict[Tuple[str, str], int] = {}
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                raise ConfigValidationError(f"economy.sources[{index}] must be a mapping")

            for required in ("plugin", "metric", "parser"):
                value = entry.get(required)
                if not isinstance(value, str) or not value.strip():
                    raise ConfigValidationError(
                        f"economy.sources[{index}].{required} must be a non-empty string"
                    )

            parser = entry["parser"].strip()
            if parser not in PARSERS:
                raise ConfigValidationError(
                    f"economy.sources[{index}].parser {parser!r} is not one of "
                    f"{sorted(PARSERS)}"
                )

            source = EconomySource(
                plugin=entry["plugin"].strip(),
                metric=entry["metric"].strip(),
                parser=parser,
            )
            pair = (source.plugin.casefold(), source.metric.casefold())
            if pair in seen:
                raise ConfigValidationError(
                    f"economy.sources[{index}] repeats {source.plugin}/{source.metric} "
                    f"from economy.sources[{seen[pair]}]"
                )
            seen[pair] = index
            sources.append(source)

        return cls(sources)

    @property
    def plugin_names(self) -> List[str]:
        """Distinct plugin names, case-folded, for query pre-filtering."""
        return sorted({source.plugin.casefold() for source in self.sources})

    def source_for(
        self, plugin_name: Optional[str], provider_name: Optional[str], provider_text: Optional[str]
    ) -> Optional[EconomySource]:
        for source in self.sources:
            if source.matches(plugin_name, provider_name, provider_text):
                return source
        return None

    def resolve(self, rows: Iterable[Mapping[str, Any]]) -> EconomyBalance:
        """
        Apply the resolution rule to candidate rows.

        Each row needs ``id``, ``plugin_name``, ``provider_name``,
        ``provider_text``, ``double_value`` and ``string_value``. The newest
        numeric-source row (highest id) wins, its number first and its own
        string second; if that still gives zero, the newest non-empty
        string-source row is parsed. Anything unparseable is 0.
        """
        latest_numeric: Optional[Tuple[Mapping[str, Any], EconomySource]] = None
        latest_string: Optional[Tuple[Mapping[str, Any], EconomySource]] = None

        for row in sorted(rows, key=lambda r: r["id"], reverse=True):
            source = self.source_for(
                row.get("plugin_name"), row.get("provider_name"), row.get("provider_text")
            )
            if source is None or not source.has_value(row):
                continue
            if source.is_numeric:
                if latest_numeric is None:
                    latest_numeric = (row, source)
            elif latest_string is None:
                latest_string = (row, source)

        amount = 0
        if latest_numeric is not None:
            row, source = latest_numeric
            amount = source.parse(row) or 0

        if amount == 0 and latest_string is not None:
            row, source = latest_string
            amount = source.parse(row) or 0

        return EconomyBalance(amount=amount)

    def __len__(self) -> int:
        return len(self.sources)


__all__ = [
    "PARSER_NUMERIC",
    "PARSER_DECIMAL_STRING",
    "PARSER_LOCALIZED_STRING",
    "PARSERS",
    "parse_numeric",
    "parse_decimal_string",
    "parse_localized_string",
    "EconomySource",
    "EconomyMapping",
]
