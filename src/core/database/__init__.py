"""
Database subsystem for KilluStats.

Provides the async SQLAlchemy engine for the primary store, scoped
connections for secondary stores, health checks and metrics.

Also exports the ORM declarative bases for the external store models.
"""

from src.core.database.base import CoreProtectBase, PrimaryBase
from src.core.database.bootstrap import (
    initialize_database_subsystem,
    shutdown_database_subsystem,
)
from src.core.database.metrics import AbstractDatabaseMetricsBackend, DatabaseMetrics
from src.core.database.service import (
    DatabaseInitializationError,
    DatabaseNotInitializedError,
    DatabaseService,
)

__all__ = [
    # ORM Bases
    "PrimaryBase",
    "CoreProtectBase",
    # Main service
    "DatabaseService",
    # Bootstrap
    "initialize_database_subsystem",
    "shutdown_database_subsystem",
    # Exceptions
    "DatabaseInitializationError",
    "DatabaseNotInitializedError",
    # Metrics
    "DatabaseMetrics",
    "AbstractDatabaseMetricsBackend",
]
