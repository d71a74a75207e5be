"""
Database Subsystem Bootstrap

Purpose
-------
Single entry point for initializing and shutting down the database subsystem
with optional readiness verification.

Bootstrap Sequence
------------------
1. `initialize_database_subsystem()` called from the API lifespan
2. DatabaseService initializes engine and session factory
3. Optional health check verifies connectivity within a timeout
4. Returns on success or raises DatabaseInitializationError

The service starts even when the optional CoreProtect store is down: that
store is only contacted per request and its failures degrade to zeros.
"""

from __future__ import annotations

import asyncio

from src.core.config.config import Config
from src.core.database.service import (
    DatabaseInitializationError,
    DatabaseService,
)
from src.core.logging.logger import get_logger

logger = get_logger(__name__)

BOOTSTRAP_HEALTH_TIMEOUT_SECONDS = 5.0


async def initialize_database_subsystem(*, verify_health: bool = True) -> None:
    """
    Initialize the database subsystem.

    Parameters
    ----------
    verify_health : bool, default=True
        If True, runs a health check after initialization. Skipped in tests
        and for fast development restarts.

    Raises
    ------
    DatabaseInitializationError
        If initialization fails or the health check fails/times out.
    """
    logger.info("Initializing database subsystem")

    await DatabaseService.initialize()

    if not verify_health:
        logger.info("Database subsystem initialized (health check skipped)")
        return

    timeout = min(BOOTSTRAP_HEALTH_TIMEOUT_SECONDS, Config.DATABASE_POOL_TIMEOUT)

    try:
        healthy = await asyncio.wait_for(DatabaseService.health_check(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.error(
            "Database health check timed out during bootstrap",
            extra={"timeout_seconds": timeout},
        )
        raise DatabaseInitializationError(
            f"Database health check timed out after {timeout}s"
        ) from exc

    if not healthy:
        logger.error("Database health check failed during bootstrap")
        raise DatabaseInitializationError(
            "Database is unreachable or unhealthy after initialization"
        )

    logger.info("Database subsystem initialized and healthy")


async def shutdown_database_subsystem() -> None:
    """
    Shutdown the database subsystem.

    Errors are logged, not raised, so shutdown of the rest of the
    application can proceed.
    """
    logger.info("Shutting down database subsystem")

    try:
        await DatabaseService.shutdown()
    except Exception as exc:
        logger.error(
            "Error during database subsystem shutdown",
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
            exc_info=True,
        )
        return

    logger.info("Database subsystem shutdown complete")


__all__ = ["initialize_database_subsystem", "shutdown_database_subsystem"]
