"""
KilluStats - Application Entry Point
====================================

Bootstrap
---------
- Config validation
- HTTP server (uvicorn) hosting the FastAPI application; the application
  lifespan loads YAML configuration and initializes the database
- Graceful shutdown and logging teardown
"""

import asyncio
import sys

import uvicorn

from src.api.app import create_app
from src.core.config.config import Config
from src.core.logging.logger import get_logger, shutdown_logging

logger = get_logger(__name__)


# ============================================================================
# Application Entrypoint
# ============================================================================

async def main() -> None:
    """
    KilluStats Entry Point.

    Lifecycle:
        1. Validate configuration
        2. Serve HTTP until SIGINT/SIGTERM (uvicorn handles both)
        3. Lifespan shutdown releases the database engine
    """
    logger.info("========== KILLUSTATS INITIALIZATION START ==========")

    try:
        Config.validate()
        logger.info("✓ Configuration validated")
    except Exception as exc:
        logger.critical(f"Configuration validation failed: {exc}")
        raise

    server = uvicorn.Server(
        uvicorn.Config(
            create_app(),
            host=Config.API_HOST,
            port=Config.API_PORT,
            log_config=None,  # keep the application's logging setup
            proxy_headers=True,
        )
    )

    logger.info(
        "Starting KilluStats API",
        extra={"host": Config.API_HOST, "port": Config.API_PORT},
    )
    await server.serve()

    logger.info("========== SHUTDOWN COMPLETE ==========")


# ============================================================================
# Process Startup
# ============================================================================

def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server manually stopped via keyboard interrupt.")
    except Exception as exc:
        logger.critical(f"Startup failure: {exc}", exc_info=True)
        sys.exit(1)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    run()
