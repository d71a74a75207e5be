"""
Database & Resolver Metrics - Pluggable Observability Facade

Purpose
-------
Static facade that infrastructure and the stats engine call to emit metrics.
A concrete backend (Prometheus, StatsD, or a recording backend in tests) can
be configured once at startup. Without a backend, events fall back to
debug-level logging.

Recorded Events
---------------
- Engine lifecycle: initialized, initialization failed, shutdown
- Health checks: success flag and duration
- Scoped secondary connections: opened, closed, failed to open
- Resolver outcomes: one event per resolver per request
  (``ok`` | ``degraded`` | ``timeout`` | ``skipped``) with duration

Usage
-----
>>> DatabaseMetrics.configure_backend(PrometheusMetricsBackend())
>>> DatabaseMetrics.record_resolver_outcome(
>>>     resolver="economy", outcome="ok", duration_ms=12.3,
>>> )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# Abstract Backend Interface
# ============================================================================


class AbstractDatabaseMetricsBackend(ABC):
    """
    Interface for pluggable metrics backends.

    Implementing classes should send metrics to their chosen monitoring
    system.
    """

    @abstractmethod
    def record_engine_initialized(
        self,
        *,
        url_scheme: str,
        pool_class: str,
        pool_size: int,
        max_overflow: int,
    ) -> None:
        ...

    @abstractmethod
    def record_engine_initialization_failed(self, *, config_error: bool) -> None:
        ...

    @abstractmethod
    def record_engine_shutdown(self) -> None:
        ...

    @abstractmethod
    def record_health_check(self, *, success: bool, duration_ms: float) -> None:
        ...

    @abstractmethod
    def record_scoped_connection_opened(self, *, store: str) -> None:
        """
        Record a per-request connection being opened.

        Parameters
        ----------
        store : str
            Logical store name (e.g., "coreprotect").
        """
        ...

    @abstractmethod
    def record_scoped_connection_closed(
        self, *, store: str, duration_ms: float
    ) -> None:
        ...

    @abstractmethod
    def record_scoped_connection_failed(self, *, store: str, error_type: str) -> None:
        ...

    @abstractmethod
    def record_resolver_outcome(
        self,
        *,
        resolver: str,
        outcome: str,
        duration_ms: float,
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record the outcome of one statistic resolver for one request.

        Parameters
        ----------
        resolver : str
            Resolver name (session, combat, economy, rank, block_audit).
        outcome : str
            One of ``ok``, ``degraded``, ``timeout``, ``skipped``.
        duration_ms : float
            Wall time spent in the resolver.
        error_type : Optional[str]
            Exception class name for degraded outcomes.
        """
        ...


# ============================================================================
# Static Facade
# ============================================================================


class DatabaseMetrics:
    """
    Static facade for database and resolver metrics.

    When no backend is configured, falls back to debug-level logging.
    """

    _backend: Optional[AbstractDatabaseMetricsBackend] = None

    @classmethod
    def configure_backend(
        cls, backend: Optional[AbstractDatabaseMetricsBackend]
    ) -> None:
        """
        Configure (or clear, with ``None``) the metrics backend.

        Subsequent calls replace the existing backend.
        """
        cls._backend = backend
        logger.info(
            "Database metrics backend configured",
            extra={"backend_class": type(backend).__name__},
        )

    @classmethod
    def _log_fallback(cls, message: str, **extra: Any) -> None:
        logger.debug(
            f"[DatabaseMetrics fallback] {message}",
            extra=extra or None,
        )

    # ------------------------------------------------------------------------
    # Engine Lifecycle
    # ------------------------------------------------------------------------

    @classmethod
    def record_engine_initialized(
        cls,
        *,
        url_scheme: str,
        pool_class: str,
        pool_size: int,
        max_overflow: int,
    ) -> None:
        if cls._backend is None:
            cls._log_fallback(
                "engine_initialized",
                url_scheme=url_scheme,
                pool_class=pool_class,
                pool_size=pool_size,
                max_overflow=max_overflow,
            )
            return
        cls._backend.record_engine_initialized(
            url_scheme=url_scheme,
            pool_class=pool_class,
            pool_size=pool_size,
            max_overflow=max_overflow,
        )

    @classmethod
    def record_engine_initialization_failed(cls, *, config_error: bool) -> None:
        if cls._backend is None:
            cls._log_fallback("engine_initialization_failed", config_error=config_error)
            return
        cls._backend.record_engine_initialization_failed(config_error=config_error)

    @classmethod
    def record_engine_shutdown(cls) -> None:
        if cls._backend is None:
            cls._log_fallback("engine_shutdown")
            return
        cls._backend.record_engine_shutdown()

    # ------------------------------------------------------------------------
    # Health Checks
    # ------------------------------------------------------------------------

    @classmethod
    def record_health_check(cls, *, success: bool, duration_ms: float) -> None:
        if cls._backend is None:
            cls._log_fallback(
                "health_check", success=success, duration_ms=round(duration_ms, 2)
            )
            return
        cls._backend.record_health_check(success=success, duration_ms=duration_ms)

    # ------------------------------------------------------------------------
    # Scoped Connections
    # ------------------------------------------------------------------------

    @classmethod
    def record_scoped_connection_opened(cls, *, store: str) -> None:
        if cls._backend is None:
            cls._log_fallback("scoped_connection_opened", store=store)
            return
        cls._backend.record_scoped_connection_opened(store=store)

    @classmethod
    def record_scoped_connection_closed(cls, *, store: str, duration_ms: float) -> None:
        if cls._backend is None:
            cls._log_fallback(
                "scoped_connection_closed",
                store=store,
                duration_ms=round(duration_ms, 2),
            )
            return
        cls._backend.record_scoped_connection_closed(
            store=store, duration_ms=duration_ms
        )

    @classmethod
    def record_scoped_connection_failed(cls, *, store: str, error_type: str) -> None:
        if cls._backend is None:
            cls._log_fallback(
                "scoped_connection_failed", store=store, error_type=error_type
            )
            return
        cls._backend.record_scoped_connection_failed(store=store, error_type=error_type)

    # ------------------------------------------------------------------------
    # Resolver Outcomes
    # ------------------------------------------------------------------------

    @classmethod
    def record_resolver_outcome(
        cls,
        *,
        resolver: str,
        outcome: str,
        duration_ms: float,
        error_type: Optional[str] = None,
    ) -> None:
        if cls._backend is None:
            cls._log_fallback(
                "resolver_outcome",
                resolver=resolver,
                outcome=outcome,
                duration_ms=round(duration_ms, 2),
                error_type=error_type,
            )
            return
        cls._backend.record_resolver_outcome(
            resolver=resolver,
            outcome=outcome,
            duration_ms=duration_ms,
            error_type=error_type,
        )


__all__ = ["AbstractDatabaseMetricsBackend", "DatabaseMetrics"]
