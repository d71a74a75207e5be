"""
Pytest Configuration and Fixtures for KilluStats Tests
======================================================

Purpose
-------
Centralized test fixtures and configuration for the KilluStats test suite.

Responsibilities
----------------
- Force a testing environment before any application module is imported
- File-backed SQLite databases (aiosqlite) shaped like the Plan/LuckPerms
  and CoreProtect schemas
- DatabaseService lifecycle per test
- YAML configuration loading from the repository ``config/`` directory
- A recording metrics backend for asserting resolver outcomes and scoped
  connection attempts

Architecture Notes
------------------
- Unit tests use mocks (fast, isolated)
- Integration tests use real engines against throwaway databases under
  ``tmp_path``; every test gets a clean slate
"""

from __future__ import annotations

import os

# Must run before src.* is imported: Config loads and validates on import
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
for _key in (
    "CP_DATABASE_URL",
    "CP_DB_HOST",
    "CP_DB_PORT",
    "CP_DB_USER",
    "CP_DB_PASSWORD",
    "CP_DB_NAME",
):
    os.environ.pop(_key, None)

from pathlib import Path
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Generator, List, Optional, Tuple

import pytest
import pytest_asyncio
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.core.config.config import Config
from src.core.config.manager import ConfigManager
from src.core.database.base import CoreProtectBase, PrimaryBase
from src.core.database.metrics import AbstractDatabaseMetricsBackend, DatabaseMetrics
from src.core.database.service import DatabaseService
from src.core.logging.logger import get_logger
import src.database.models  # noqa: F401  registers tables on both bases

logger = get_logger(__name__)

STATS_CONFIG_DIR = Config.PROJECT_ROOT / "config"


# ============================================================================
# HELPERS
# ============================================================================


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


async def create_schema(url: str, metadata: MetaData) -> None:
    engine = create_async_engine(url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    finally:
        await engine.dispose()


async def insert_rows(url: str, rows: List[Any]) -> None:
    """Insert ORM instances through a throwaway engine and commit."""
    engine = create_async_engine(url)
    try:
        async with async_sessionmaker(engine, expire_on_commit=False)() as session:
            session.add_all(rows)
            await session.commit()
    finally:
        await engine.dispose()


# ============================================================================
# METRICS
# ============================================================================


class RecordingMetricsBackend(AbstractDatabaseMetricsBackend):
    """Keeps every metrics event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def _record(self, name: str, **fields: Any) -> None:
        self.events.append((name, fields))

    def record_engine_initialized(self, **fields: Any) -> None:
        self._record("engine_initialized", **fields)

    def record_engine_initialization_failed(self, **fields: Any) -> None:
        self._record("engine_initialization_failed", **fields)

    def record_engine_shutdown(self) -> None:
        self._record("engine_shutdown")

    def record_health_check(self, **fields: Any) -> None:
        self._record("health_check", **fields)

    def record_scoped_connection_opened(self, **fields: Any) -> None:
        self._record("scoped_connection_opened", **fields)

    def record_scoped_connection_closed(self, **fields: Any) -> None:
        self._record("scoped_connection_closed", **fields)

    def record_scoped_connection_failed(self, **fields: Any) -> None:
        self._record("scoped_connection_failed", **fields)

    def record_resolver_outcome(self, **fields: Any) -> None:
        self._record("resolver_outcome", **fields)

    def count(self, name: str) -> int:
        return sum(1 for event, _ in self.events if event == name)

    def scoped_connection_attempts(self) -> int:
        return self.count("scoped_connection_opened") + self.count(
            "scoped_connection_failed"
        )

    def resolver_outcomes(self) -> Dict[str, str]:
        return {
            fields["resolver"]: fields["outcome"]
            for event, fields in self.events
            if event == "resolver_outcome"
        }


@pytest.fixture
def recording_metrics() -> Generator[RecordingMetricsBackend, None, None]:
    backend = RecordingMetricsBackend()
    DatabaseMetrics.configure_backend(backend)
    yield backend
    DatabaseMetrics.configure_backend(None)


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def no_coreprotect(monkeypatch: pytest.MonkeyPatch) -> None:
    """The block audit store is unconfigured unless a test opts in."""
    monkeypatch.setattr(Config, "CP_DATABASE_URL", "")
    monkeypatch.setattr(Config, "CP_DB_HOST", "")


@pytest.fixture
def stats_config() -> Generator[type, None, None]:
    """ConfigManager loaded from the repository ``config/stats.yaml``."""
    ConfigManager.load(STATS_CONFIG_DIR, force=True)
    yield ConfigManager
    ConfigManager.clear()


# ============================================================================
# DATABASE FIXTURES (Integration Tests)
# ============================================================================


@pytest_asyncio.fixture
async def primary_database(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[str, None]:
    """
    Empty Plan/LuckPerms schema in a SQLite file, with DatabaseService bound
    to it.

    Scope: function (clean slate per test)
    """
    url = sqlite_url(tmp_path / "primary.db")
    await create_schema(url, PrimaryBase.metadata)

    monkeypatch.setattr(Config, "DATABASE_URL", url)
    DatabaseService._init_lock = None
    await DatabaseService.initialize()

    yield url

    await DatabaseService.shutdown()
    DatabaseService._init_lock = None


@pytest_asyncio.fixture
async def seed_primary(
    primary_database: str,
) -> Callable[..., Awaitable[None]]:
    async def _seed(*rows: Any) -> None:
        await insert_rows(primary_database, list(rows))

    return _seed


@pytest_asyncio.fixture
async def coreprotect_database(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[str, None]:
    """Empty CoreProtect schema in its own SQLite file, configured as the block audit store."""
    url = sqlite_url(tmp_path / "coreprotect.db")
    await create_schema(url, CoreProtectBase.metadata)
    monkeypatch.setattr(Config, "CP_DATABASE_URL", url)
    yield url


@pytest_asyncio.fixture
async def seed_coreprotect(
    coreprotect_database: str,
) -> Callable[..., Awaitable[None]]:
    async def _seed(*rows: Any) -> None:
        await insert_rows(coreprotect_database, list(rows))

    return _seed


@pytest.fixture
def unreachable_coreprotect(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """A configured block audit store that cannot be opened."""
    url = sqlite_url(tmp_path / "missing-dir" / "coreprotect.db")
    monkeypatch.setattr(Config, "CP_DATABASE_URL", url)
    return url


@pytest.fixture
def stats_service_factory(stats_config) -> Callable[..., Any]:
    from src.modules.stats.service import PlayerStatsService

    def _build(resolver_timeout: Optional[float] = 2.0) -> PlayerStatsService:
        return PlayerStatsService.from_config(stats_config, resolver_timeout=resolver_timeout)

    return _build
