"""
Base Service Foundation

Purpose
-------
Provides the foundational class for the stats domain services. Services own
one statistic each: they pick the right store, delegate queries to their
repository and turn raw rows into domain values.

Design Notes
------------
This base class provides:
- Structured logging with operation context
- Safe access to the YAML stats configuration

What this class does NOT do:
- Manage database sessions (DatabaseService's job)
- Catch resolver failures (the orchestrator isolates them)
- Format values for display

Usage
-----
    class CombatService(BaseService):
        def __init__(self, config_manager, logger):
            super().__init__(config_manager, logger)
            self._kills = PlanKillRepository(PlanKill, logger)

        async def get_combat(self, identity):
            # Service logic here, using self.log and self.get_config
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Type

if TYPE_CHECKING:
    from logging import Logger

    from src.core.config.manager import ConfigManager


class BaseService:
    """
    Base class for all stats domain services.

    Args:
        config_manager: YAML configuration manager (class or instance)
        logger: Structured logger instance
    """

    def __init__(
        self,
        config_manager: Type[ConfigManager],
        logger: Logger,
    ) -> None:
        self._config = config_manager
        self.log = logger

    def get_config(
        self, key: str, default: Optional[Any] = None, required: bool = False
    ) -> Any:
        """
        Safely retrieve configuration value.

        Args:
            key: Dotted configuration key to retrieve
            default: Default value if key not found
            required: If True, raise exception if key missing

        Returns:
            Configuration value

        Raises:
            ConfigurationError: If required=True and key is missing
        """
        from src.core.exceptions import ConfigurationError

        value = self._config.get(key, default)
        if required and value is None:
            raise ConfigurationError(
                key, f"Required configuration key '{key}' is missing"
            )
        return value

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Log a service operation with structured context.

        Args:
            operation: Name of the operation being performed
            **context: Additional context data
        """
        self.log.debug(
            f"Service operation: {operation}",
            extra={"operation": operation, **context},
        )

    def log_error(
        self,
        operation: str,
        error: Exception,
        **context: Any,
    ) -> None:
        """
        Log a service error with full context.

        Args:
            operation: Name of the operation that failed
            error: The exception that occurred
            **context: Additional context data
        """
        self.log.error(
            f"Service error during {operation}: {str(error)}",
            extra={
                "operation": operation,
                "error_type": type(error).__name__,
                "error_message": str(error),
                **context,
            },
        )
