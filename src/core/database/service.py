"""
Database Service - Core Infrastructure Layer

Purpose
-------
Centralized async database engine and session management for the primary
(Plan/LuckPerms) store, plus scoped per-request connections for secondary
stores such as CoreProtect.

Responsibilities
----------------
- Initialize and manage a single AsyncEngine instance with connection pooling
- Provide a read-only session context manager (the engine never writes)
- Provide ``open_scoped_connection()`` for a dedicated secondary connection
  that is disposed on every exit path
- Expose health checks for infrastructure monitoring
- Record metrics for engine lifecycle, health checks and scoped connections
- Configure per-session statement timeouts for MySQL connections
- Provide idempotent initialization with async lock protection

Non-Responsibilities
--------------------
- Schema management (the plugins own their tables)
- Retries (every store call is attempted exactly once per request)
- Domain logic

Configuration
-------------
All values are sourced from Config:
- DATABASE_URL (required)
- DATABASE_POOL_SIZE, DATABASE_MAX_OVERFLOW, DATABASE_POOL_RECYCLE,
  DATABASE_POOL_TIMEOUT
- DATABASE_STATEMENT_TIMEOUT_MS
- DATABASE_ECHO
- ENVIRONMENT=testing switches to NullPool

Usage Example
-------------
>>> async with DatabaseService.get_session() as session:
>>>     result = await session.execute(select(PlanUser).where(PlanUser.name == name))
>>>
>>> async with DatabaseService.open_scoped_connection(url, store="coreprotect") as conn:
>>>     rows = await conn.execute(stmt)

Error Handling
--------------
**DatabaseInitializationError** - DATABASE_URL missing/invalid or engine
creation failed.
**DatabaseNotInitializedError** - session requested before initialize() or
after shutdown().
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, Optional, Type

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, Pool

from src.core.config.config import Config
from src.core.database.metrics import DatabaseMetrics
from src.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# Exceptions
# ============================================================================


class DatabaseInitializationError(RuntimeError):
    """Raised when database engine initialization fails."""


class DatabaseNotInitializedError(RuntimeError):
    """Raised when database operations are attempted before initialization."""


def _url_scheme(url: str) -> str:
    return url.split(":", 1)[0] if ":" in url else "unknown"


def _is_mysql(url: str) -> bool:
    return url.startswith("mysql")


# ============================================================================
# Configuration Snapshot
# ============================================================================


@dataclass(frozen=True)
class _DatabaseConfigSnapshot:
    """
    Immutable snapshot of database configuration.

    Provides a stable configuration view for the lifetime of the engine.
    """

    url: str
    echo: bool
    pool_class: Type[Pool]
    pool_size: int
    max_overflow: int
    pool_recycle: int
    pool_timeout: int
    statement_timeout_ms: int

    @property
    def is_mysql(self) -> bool:
        return _is_mysql(self.url)

    @property
    def url_scheme(self) -> str:
        return _url_scheme(self.url)


# ============================================================================
# DatabaseService - Core Infrastructure
# ============================================================================


class DatabaseService:
    """
    Centralized async database engine and session management.

    Public API
    ----------
    **Lifecycle**:
    - initialize() -> Initialize engine and session factory
    - shutdown() -> Dispose engine and cleanup resources

    **Access**:
    - get_session() -> Read-only session on the primary store
    - open_scoped_connection() -> Dedicated connection to a secondary store

    **Utilities**:
    - health_check() -> Fast database reachability check

    Thread Safety
    -------------
    Initialization is protected by an async lock. Sessions are not shared:
    every caller (and every concurrently running resolver) opens its own.
    """

    _engine: Optional[AsyncEngine] = None
    _session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    _config_snapshot: Optional[_DatabaseConfigSnapshot] = None
    _init_lock: Optional[asyncio.Lock] = None

    # ========================================================================
    # Initialization & Shutdown
    # ========================================================================

    @classmethod
    def _lock(cls) -> asyncio.Lock:
        # Created lazily so the lock binds to the running loop
        if cls._init_lock is None:
            cls._init_lock = asyncio.Lock()
        return cls._init_lock

    @classmethod
    def _build_config_snapshot(cls) -> _DatabaseConfigSnapshot:
        """
        Build an immutable configuration snapshot from Config.

        Raises
        ------
        DatabaseInitializationError
            If DATABASE_URL is missing or invalid.
        """
        database_url = getattr(Config, "DATABASE_URL", None)
        if not database_url or not isinstance(database_url, str):
            logger.error("DATABASE_URL is not configured or invalid")
            raise DatabaseInitializationError(
                "DATABASE_URL must be configured as a non-empty string"
            )

        pool_class: Type[Pool] = NullPool if Config.is_testing() else AsyncAdaptedQueuePool

        snapshot = _DatabaseConfigSnapshot(
            url=database_url,
            echo=bool(Config.DATABASE_ECHO),
            pool_class=pool_class,
            pool_size=int(Config.DATABASE_POOL_SIZE),
            max_overflow=int(Config.DATABASE_MAX_OVERFLOW),
            pool_recycle=int(Config.DATABASE_POOL_RECYCLE),
            pool_timeout=int(Config.DATABASE_POOL_TIMEOUT),
            statement_timeout_ms=int(Config.DATABASE_STATEMENT_TIMEOUT_MS),
        )

        logger.debug(
            "Database configuration snapshot created",
            extra={
                "url_scheme": snapshot.url_scheme,
                "pool_class": pool_class.__name__,
                "pool_size": snapshot.pool_size,
                "max_overflow": snapshot.max_overflow,
                "statement_timeout_ms": snapshot.statement_timeout_ms,
            },
        )

        return snapshot

    @classmethod
    async def initialize(cls) -> None:
        """
        Initialize the database engine and session factory.

        Idempotent: returns immediately if already initialized.

        Raises
        ------
        DatabaseInitializationError
            If configuration is invalid or engine creation fails.
        """
        async with cls._lock():
            if cls._engine is not None:
                logger.debug("DatabaseService already initialized; skipping")
                return

            logger.info("Initializing DatabaseService")

            try:
                config = cls._build_config_snapshot()
                cls._config_snapshot = config

                engine_kwargs: Dict[str, Any] = {
                    "echo": config.echo,
                    "poolclass": config.pool_class,
                }
                if config.pool_class is AsyncAdaptedQueuePool:
                    engine_kwargs.update(
                        {
                            "pool_size": config.pool_size,
                            "max_overflow": config.max_overflow,
                            "pool_recycle": config.pool_recycle,
                            "pool_timeout": config.pool_timeout,
                            "pool_pre_ping": True,
                        }
                    )

                cls._engine = create_async_engine(config.url, **engine_kwargs)
                cls._session_factory = async_sessionmaker(
                    bind=cls._engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autoflush=False,
                )

                DatabaseMetrics.record_engine_initialized(
                    url_scheme=config.url_scheme,
                    pool_class=config.pool_class.__name__,
                    pool_size=config.pool_size,
                    max_overflow=config.max_overflow,
                )

                logger.info(
                    "DatabaseService initialized successfully",
                    extra={
                        "url_scheme": config.url_scheme,
                        "pool_class": config.pool_class.__name__,
                    },
                )

            except Exception as exc:
                config_error = isinstance(exc, DatabaseInitializationError)
                DatabaseMetrics.record_engine_initialization_failed(
                    config_error=config_error
                )
                cls._engine = None
                cls._session_factory = None
                cls._config_snapshot = None
                logger.error(
                    "DatabaseService initialization failed",
                    extra={
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                        "config_error": config_error,
                    },
                    exc_info=True,
                )
                if config_error:
                    raise
                raise DatabaseInitializationError(
                    f"Database initialization failed: {exc}"
                ) from exc

    @classmethod
    async def shutdown(cls) -> None:
        """
        Dispose the engine and reset internal state.

        Safe to call multiple times; no-op if already shut down.
        """
        async with cls._lock():
            if cls._engine is None:
                logger.debug("DatabaseService not initialized; nothing to shutdown")
                return

            logger.info("Shutting down DatabaseService")

            try:
                await cls._engine.dispose()
                DatabaseMetrics.record_engine_shutdown()
                logger.info("DatabaseService shutdown complete")
            finally:
                cls._engine = None
                cls._session_factory = None
                cls._config_snapshot = None

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._engine is not None

    # ========================================================================
    # Health Check
    # ========================================================================

    @classmethod
    async def health_check(cls) -> bool:
        """
        Lightweight health check executing ``SELECT 1``.

        Returns False instead of raising on failure.
        """
        if not cls.is_initialized():
            logger.warning("Health check called on uninitialized DatabaseService")
            DatabaseMetrics.record_health_check(success=False, duration_ms=0.0)
            return False

        start = time.perf_counter()
        success = False

        try:
            async with cls._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            success = True
            return True
        except (OperationalError, DBAPIError, OSError) as exc:
            logger.warning(
                "Database health check failed",
                extra={
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            return False
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            DatabaseMetrics.record_health_check(success=success, duration_ms=duration_ms)

    # ========================================================================
    # Session & Scoped Connection Context Managers
    # ========================================================================

    @classmethod
    def _ensure_initialized(cls) -> None:
        if cls._session_factory is None or cls._engine is None:
            logger.error("DatabaseService operation attempted before initialization")
            raise DatabaseNotInitializedError(
                "DatabaseService must be initialized before use. "
                "Call DatabaseService.initialize() during startup."
            )

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncGenerator[AsyncSession, None]:
        """
        Read-only session on the primary store.

        - Session is closed on exit; nothing is ever committed
        - Loaded instances stay readable after exit (close expunges, it
          does not expire)
        - MySQL sessions get a MAX_EXECUTION_TIME bound for SELECTs

        Raises
        ------
        DatabaseNotInitializedError
            If DatabaseService has not been initialized.
        """
        cls._ensure_initialized()
        assert cls._session_factory is not None
        assert cls._config_snapshot is not None

        config = cls._config_snapshot
        start = time.perf_counter()

        async with cls._session_factory() as session:
            try:
                if config.is_mysql:
                    await session.execute(
                        text(
                            f"SET SESSION MAX_EXECUTION_TIME = "
                            f"{config.statement_timeout_ms}"
                        )
                    )
                yield session
            finally:
                logger.debug(
                    "Database session closed",
                    extra={"duration_ms": (time.perf_counter() - start) * 1000.0},
                )

    @classmethod
    @asynccontextmanager
    async def open_scoped_connection(
        cls,
        url: str,
        *,
        store: str,
        connect_timeout_seconds: Optional[int] = None,
    ) -> AsyncGenerator[AsyncConnection, None]:
        """
        Open a dedicated connection to a secondary store for one operation.

        The connection is acquired on entry and the engine behind it is
        disposed on every exit path, success or failure, so nothing outlives
        the block. No pooling: each call pays for its own connect.

        Parameters
        ----------
        url : str
            SQLAlchemy async URL of the secondary store.
        store : str
            Logical store name for logs and metrics.
        connect_timeout_seconds : Optional[int]
            Connect timeout passed to MySQL drivers.
        """
        connect_args: Dict[str, Any] = {}
        if connect_timeout_seconds is not None and _is_mysql(url):
            connect_args["connect_timeout"] = connect_timeout_seconds

        engine = create_async_engine(url, poolclass=NullPool, connect_args=connect_args)
        start = time.perf_counter()
        opened = False

        try:
            try:
                conn = await engine.connect()
            except Exception as exc:
                DatabaseMetrics.record_scoped_connection_failed(
                    store=store, error_type=type(exc).__name__
                )
                raise

            opened = True
            DatabaseMetrics.record_scoped_connection_opened(store=store)
            logger.debug(
                "Scoped connection opened",
                extra={"store": store, "url_scheme": _url_scheme(url)},
            )
            try:
                yield conn
            finally:
                await conn.close()
        finally:
            await engine.dispose()
            if opened:
                duration_ms = (time.perf_counter() - start) * 1000.0
                DatabaseMetrics.record_scoped_connection_closed(
                    store=store, duration_ms=duration_ms
                )
                logger.debug(
                    "Scoped connection closed",
                    extra={"store": store, "duration_ms": duration_ms},
                )


__all__ = [
    "DatabaseService",
    "DatabaseInitializationError",
    "DatabaseNotInitializedError",
]
