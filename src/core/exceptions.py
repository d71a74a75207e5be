"""
Infrastructure exceptions for KilluStats.

Purpose
-------
Define the structured exception hierarchy for infrastructure-level concerns:
store failures, configuration errors, and timeouts that require technical
attention rather than a player-facing message.

Design Notes
------------
- All infrastructure exceptions inherit from `KilluInfrastructureException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `error_code`: short, stable identifier for programmatic use
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"  # Expected, not concerning
    INFO = "info"  # Normal operation (e.g., unknown player)
    WARNING = "warning"  # Concerning but handled (e.g., degraded resolver)
    ERROR = "error"  # Unexpected errors requiring attention
    CRITICAL = "critical"  # System-level failures requiring immediate action


class KilluInfrastructureException(Exception):
    """
    Base exception for all KilluStats infrastructure-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        error_code: Optional code for programmatic handling

    Example:
        >>> raise KilluInfrastructureException(
        ...     "Database connection failed",
        ...     {"host": "localhost", "port": 3306}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}"
            ")"
        )


class ConfigurationError(KilluInfrastructureException):
    """
    Raised when a configuration key is invalid or missing at runtime.

    Args:
        config_key: The configuration key that has issues
        message: Description of the configuration problem
    """

    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL

    def __init__(self, config_key: str, message: str) -> None:
        self.config_key = config_key
        super().__init__(
            f"Configuration error for {config_key}: {message}",
            details={
                "config_key": config_key,
                "message": message,
            },
            error_code="CONFIG_ERROR",
        )


class IdentityStoreError(KilluInfrastructureException):
    """
    Raised when the identity store cannot answer (query error or timeout).

    Terminal for a stats request: without an identity there is no join key,
    so no partial snapshot is produced.

    Args:
        identifier: The raw identifier being resolved
        original_error: The underlying exception
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR

    def __init__(self, identifier: str, original_error: BaseException) -> None:
        self.identifier = identifier
        self.original_error = original_error
        super().__init__(
            "Player identity store is unavailable",
            details={
                "identifier": identifier,
                "error": str(original_error),
                "error_type": type(original_error).__name__,
            },
            error_code="IDENTITY_STORE_UNAVAILABLE",
        )


class ResolverTimeoutError(KilluInfrastructureException):
    """
    Raised when a resolver exceeds its time budget.

    Args:
        resolver: Name of the resolver that timed out
        timeout_seconds: The budget that was exceeded
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING

    def __init__(self, resolver: str, timeout_seconds: float) -> None:
        self.resolver = resolver
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Resolver '{resolver}' timed out after {timeout_seconds:.2f}s",
            details={"resolver": resolver, "timeout_seconds": timeout_seconds},
            error_code="RESOLVER_TIMEOUT",
        )


__all__ = [
    "ErrorSeverity",
    "KilluInfrastructureException",
    "ConfigurationError",
    "IdentityStoreError",
    "ResolverTimeoutError",
]
