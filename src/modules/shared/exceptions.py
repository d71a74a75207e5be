"""
Domain exceptions for KilluStats.

Purpose
-------
Define the structured, domain-specific exception hierarchy for the stats
engine. These exceptions are raised by services for player-facing outcomes
(an identifier that matches nobody). The API layer translates them into JSON
error bodies with the right status code.

Design Notes
------------
- All domain exceptions inherit from `KilluDomainException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict-like)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `error_code`: short, stable identifier for programmatic use
- `ErrorSeverity` is shared with the infrastructure hierarchy in
  `src.core.exceptions` so log handlers treat both families alike.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from src.core.exceptions import ErrorSeverity


class KilluDomainException(Exception):
    """
    Base exception for all KilluStats domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error (dict-like)
        severity: Error severity level for logging handlers
        error_code: Optional code for programmatic handling

    Example:
        >>> raise KilluDomainException(
        ...     "Lookup failed",
        ...     {"identifier": "Steve"}
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
        """String representation for logging."""
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}"
            ")"
        )


class NotFoundError(KilluDomainException):
    """
    Raised when a requested resource cannot be found.

    Args:
        resource_type: Type of resource (e.g., "Player")
        identifier: Optional identifier for the missing resource
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO

    def __init__(self, resource_type: str, identifier: Optional[Any] = None) -> None:
        self.resource_type = resource_type
        self.identifier = identifier

        if identifier is not None:
            message = f"{resource_type} not found: {identifier}"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message,
            details={
                "resource_type": resource_type,
                "identifier": identifier,
            },
            error_code=f"{resource_type.upper()}_NOT_FOUND",
        )


class PlayerNotFoundError(NotFoundError):
    """
    Raised when an identifier matches no registered account.

    Covers empty input as well as names and UUIDs (in either dash
    convention) absent from the identity store. Terminal for a stats
    request.

    Args:
        identifier: The raw identifier as received
    """

    def __init__(self, identifier: str) -> None:
        super().__init__("Player", identifier)


__all__ = [
    "ErrorSeverity",
    "KilluDomainException",
    "NotFoundError",
    "PlayerNotFoundError",
]
