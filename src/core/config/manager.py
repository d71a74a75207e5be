"""
ConfigManager: structured YAML configuration access for KilluStats.

Purpose
-------
- Load and deep-merge every YAML file in the stats config directory once at
  startup.
- Serve dot-notation reads (``ConfigManager.get("ranks")``) from memory.

Key Design Decisions
--------------------
- YAML is the single source for structured tunables (rank table, economy
  sources); environment variables stay in ``Config``.
- Loading is strict: a missing directory or a malformed file aborts startup
  with ConfigInitializationError rather than serving partial data.
- Files are merged in sorted path order so overrides are deterministic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import yaml

from src.core.config.config import Config
from src.core.config.errors import ConfigInitializationError
from src.core.logging.logger import get_logger

logger = get_logger(__name__)

_MISSING = object()


class ConfigManager:
    """
    In-memory, read-only view over the merged YAML configuration.

    Public API
    ----------
    - load() -> Read YAML files from the config directory
    - get() -> Dot-notation lookup with default
    - require() -> Dot-notation lookup that raises when missing
    - clear() -> Reset state (tests)
    """

    _values: Dict[str, Any] = {}
    _loaded: bool = False
    _config_dir: Optional[Path] = None

    @classmethod
    def _deep_merge_dict(
        cls, target: MutableMapping[str, Any], source: Mapping[str, Any]
    ) -> None:
        """Recursively merge ``source`` into ``target`` in place."""
        for key, value in source.items():
            if (
                key in target
                and isinstance(target[key], MutableMapping)
                and isinstance(value, Mapping)
            ):
                cls._deep_merge_dict(target[key], value)  # type: ignore[arg-type]
            else:
                target[key] = value

    @classmethod
    def load(cls, config_dir: Optional[Path] = None, *, force: bool = False) -> None:
        """
        Load all YAML files under ``config_dir`` (default Config.STATS_CONFIG_DIR).

        Raises
        ------
        ConfigInitializationError
            If the directory is missing, holds no YAML files, or a file fails
            to parse.
        """
        if cls._loaded and not force:
            logger.debug("ConfigManager already loaded; skipping")
            return

        directory = Path(config_dir or Config.STATS_CONFIG_DIR)
        if not directory.is_dir():
            raise ConfigInitializationError(
                f"Config directory not found: {directory}"
            )

        yaml_files: List[Path] = sorted(
            list(directory.rglob("*.yaml")) + list(directory.rglob("*.yml"))
        )
        if not yaml_files:
            raise ConfigInitializationError(
                f"No YAML config files found in {directory}"
            )

        merged: Dict[str, Any] = {}
        for yaml_file in yaml_files:
            try:
                with yaml_file.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle)
            except (OSError, yaml.YAMLError) as exc:
                logger.error(
                    "Failed to load YAML config",
                    extra={
                        "file": str(yaml_file),
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )
                raise ConfigInitializationError(
                    f"Failed to load {yaml_file}: {exc}"
                ) from exc

            if isinstance(data, dict):
                cls._deep_merge_dict(merged, data)
                logger.debug(
                    "Loaded YAML config",
                    extra={"file": str(yaml_file.relative_to(directory))},
                )
            elif data is not None:
                logger.warning(
                    "Ignoring non-dict YAML root object",
                    extra={
                        "file": str(yaml_file.relative_to(directory)),
                        "root_type": type(data).__name__,
                    },
                )

        cls._values = merged
        cls._config_dir = directory
        cls._loaded = True

        logger.info(
            "YAML configs loaded",
            extra={
                "yaml_file_count": len(yaml_files),
                "top_level_keys": sorted(merged.keys()),
            },
        )

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Dot-notation lookup, e.g. ``get("economy.sources")``.

        Returns ``default`` when any path segment is missing.
        """
        node: Any = cls._values
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    @classmethod
    def require(cls, key: str) -> Any:
        """Like get() but raises ConfigInitializationError for missing keys."""
        value = cls.get(key, _MISSING)
        if value is _MISSING:
            raise ConfigInitializationError(
                f"Required configuration key '{key}' is missing"
            )
        return value

    @classmethod
    def is_loaded(cls) -> bool:
        return cls._loaded

    @classmethod
    def clear(cls) -> None:
        cls._values = {}
        cls._loaded = False
        cls._config_dir = None


__all__ = ["ConfigManager"]
