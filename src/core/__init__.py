"""
Core infrastructure layer for KilluStats.

Purpose
-------
Provide a single, well-structured import surface for the core infrastructure
subsystems:

- Configuration (Config, ConfigManager)
- Database subsystem (DatabaseService, initialization helpers, metrics)
- Logging (structured logging, logger factory, log context)
- Infrastructure exceptions (KilluInfrastructureException hierarchy)

Design Decisions
----------------
- This module is intentionally thin: no logic, no configuration, no I/O.
- Public API is explicit via __all__ to avoid leaking internal symbols.
- Feature modules still import from their own submodules, not from src.core
  directly.
"""

from __future__ import annotations

from src.core.config import Config
from src.core.config.manager import ConfigManager
from src.core.database import (
    DatabaseMetrics,
    DatabaseService,
    initialize_database_subsystem,
    shutdown_database_subsystem,
)
from src.core.exceptions import (
    ConfigurationError,
    ErrorSeverity,
    IdentityStoreError,
    KilluInfrastructureException,
    ResolverTimeoutError,
)
from src.core.logging import LogContext, get_logger

__all__ = [
    # Configuration
    "Config",
    "ConfigManager",
    # Database
    "DatabaseService",
    "DatabaseMetrics",
    "initialize_database_subsystem",
    "shutdown_database_subsystem",
    # Logging
    "get_logger",
    "LogContext",
    # Exceptions
    "ErrorSeverity",
    "KilluInfrastructureException",
    "ConfigurationError",
    "IdentityStoreError",
    "ResolverTimeoutError",
]
