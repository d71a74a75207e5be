"""
KilluStats HTTP application.

Purpose
-------
Application factory for the public statistics API.

Startup Sequence
----------------
1. Environment configuration is validated on import (Config)
2. YAML configuration is loaded (ConfigManager)
3. Primary database engine is initialized and health-checked
4. The stats service graph is built; the rank table and economy sources are
   validated here, so bad configuration refuses to start

Error Translation
-----------------
- PlayerNotFoundError -> 404 ``{"error": "Player not found"}``
- IdentityStoreError / other infrastructure errors -> 503
- Other domain errors -> 400
- Anything else -> 500, logged with traceback
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.router import api_router
from src.core.config.config import Config
from src.core.config.manager import ConfigManager
from src.core.database.bootstrap import (
    initialize_database_subsystem,
    shutdown_database_subsystem,
)
from src.core.exceptions import IdentityStoreError, KilluInfrastructureException
from src.core.logging.logger import LogContext, get_logger
from src.modules.shared.exceptions import KilluDomainException, PlayerNotFoundError
from src.modules.stats.service import PlayerStatsService

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(stats_service: Optional[PlayerStatsService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        stats_service: Pre-built orchestrator. When given, startup skips
            configuration loading and database initialization and the caller
            owns both.

    Returns:
        FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if stats_service is not None:
            app.state.stats_service = stats_service
            yield
            return

        ConfigManager.load()
        await initialize_database_subsystem(verify_health=not Config.is_testing())
        try:
            app.state.stats_service = PlayerStatsService.from_config()
            logger.info(
                "KilluStats API started",
                extra={"config": Config.get_config_summary()},
            )
            yield
        finally:
            await shutdown_database_subsystem()
            logger.info("KilluStats API stopped")

    app = FastAPI(
        title=Config.SERVICE_NAME,
        description="Player statistics aggregated from Plan, LuckPerms and CoreProtect",
        version=Config.SERVICE_VERSION,
        lifespan=lifespan,
    )

    if stats_service is not None:
        app.state.stats_service = stats_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.API_CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _request_context_middleware(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        async with LogContext(
            request_id=request_id,
            path=request.url.path,
            component="api",
        ):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    _register_exception_handlers(app)
    app.include_router(api_router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PlayerNotFoundError)
    async def _player_not_found(request: Request, exc: PlayerNotFoundError):
        return JSONResponse(status_code=404, content={"error": "Player not found"})

    @app.exception_handler(IdentityStoreError)
    async def _identity_store_unavailable(request: Request, exc: IdentityStoreError):
        logger.error(
            "Identity store unavailable",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return JSONResponse(
            status_code=503,
            content={"error": "Player statistics are temporarily unavailable"},
        )

    @app.exception_handler(KilluDomainException)
    async def _domain_error(request: Request, exc: KilluDomainException):
        logger.info(
            "Domain error",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(KilluInfrastructureException)
    async def _infrastructure_error(request: Request, exc: KilluInfrastructureException):
        logger.error(
            "Infrastructure error",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return JSONResponse(status_code=503, content={"error": "Service unavailable"})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            extra={"error_type": type(exc).__name__, "error": str(exc)},
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


__all__ = ["create_app"]
