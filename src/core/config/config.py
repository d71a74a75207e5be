"""
Static configuration management for KilluStats.

Purpose
-------
Provides centralized static configuration loaded from environment variables
with sensible defaults, type validation, and bounds checking. This module
handles configuration that is set once at application startup.

Responsibilities
----------------
- Load configuration from environment variables with .env support
- Provide type-safe access to all static configuration values
- Build the primary store URL and the optional CoreProtect store URL
- Validate critical settings on startup
- Detect and warn about security issues in production
- Track configuration loading metrics

Non-Responsibilities
--------------------
- Structured YAML configuration (rank table, economy sources) - ConfigManager
- Secrets management (use environment variables)

Architecture Notes
------------------
- Singleton pattern via class methods (no instantiation)
- Auto-loads on module import via Config.validate()
- Metrics track which values came from environment vs defaults
- Directory paths relative to project root for portability

Configuration Categories
------------------------
1. Primary store: Plan/LuckPerms database (URL or DB_* parts) and pool
2. Block audit store: optional CoreProtect database (CP_* parts)
3. Stats engine: resolver timeout, YAML config directory
4. Environment: environment type, debug mode, logging
5. HTTP: bind host/port and CORS origins

Environment Variables
---------------------
Required:
- DATABASE_URL, or DB_HOST + DB_USER + DB_NAME

Optional (with defaults):
- DB_PORT (3306), DB_PASSWORD
- CP_DATABASE_URL, or CP_DB_HOST/CP_DB_PORT/CP_DB_USER/CP_DB_PASSWORD/CP_DB_NAME
- CP_CONNECT_TIMEOUT_SECONDS (5)
- STATS_RESOLVER_TIMEOUT_SECONDS (5.0)
- ENVIRONMENT (development), LOG_LEVEL (INFO)

See individual attributes for complete list.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ============================================================================
# Enums and Constants
# ============================================================================


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("production") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            # Structured logger is not initialized yet during bootstrap
            logging.warning(f"Unknown environment '{value}', defaulting to development")
            return cls.DEVELOPMENT


# ============================================================================
# Configuration Metrics Tracker
# ============================================================================


class _ConfigLoadMetrics:
    """
    Internal metrics tracker for configuration loading.

    Tracks which configuration values came from environment variables
    versus defaults, and any validation errors encountered.
    """

    def __init__(self):
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}
        self.last_reload: Optional[str] = None

    def record_env_load(self, key: str, from_env: bool, value: Any, default: Any):
        """Record whether a config value came from environment."""
        self.env_vars_loaded[key] = from_env
        if not from_env:
            self.defaults_used[key] = default

    def record_validation_error(self, key: str, error: str):
        """Record a validation error."""
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration loading summary."""
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
            "last_reload": self.last_reload,
        }


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Centralized static configuration for the KilluStats service.

    All configuration values loaded from environment variables with sensible
    defaults. Validates critical settings on startup to prevent runtime failures.

    Usage
    -----
    >>> db_url = Config.DATABASE_URL
    >>> if Config.coreprotect_url() is None:
    ...     logger.info("Block audit store disabled")
    >>> summary = Config.get_config_summary()
    """

    # =========================================================================
    # Internal State
    # =========================================================================

    _metrics: Optional[_ConfigLoadMetrics] = None
    _enable_metrics: bool = True
    _validated: bool = False

    # =========================================================================
    # Primary Store (Plan + LuckPerms)
    # =========================================================================

    DATABASE_URL: str = ""
    DB_HOST: str = ""
    DB_PORT: int = 3306
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_NAME: str = ""
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_RECYCLE: int = 1800  # MySQL drops idle connections after wait_timeout
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_STATEMENT_TIMEOUT_MS: int = 10_000
    DATABASE_ECHO: bool = False

    # =========================================================================
    # Block Audit Store (CoreProtect, optional)
    # =========================================================================

    CP_DATABASE_URL: str = ""
    CP_DB_HOST: str = ""
    CP_DB_PORT: int = 3306
    CP_DB_USER: str = ""
    CP_DB_PASSWORD: str = ""
    CP_DB_NAME: str = ""
    CP_CONNECT_TIMEOUT_SECONDS: int = 5
    CP_TABLE_PREFIX: str = "co_"

    # =========================================================================
    # Stats Engine
    # =========================================================================

    STATS_RESOLVER_TIMEOUT_SECONDS: float = 5.0

    # =========================================================================
    # Environment Configuration
    # =========================================================================

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_TO_FILE: bool = True

    # =========================================================================
    # Directory Configuration
    # =========================================================================

    PROJECT_ROOT = Path(__file__).resolve().parents[3]
    LOGS_DIR = PROJECT_ROOT / "logs"
    STATS_CONFIG_DIR = PROJECT_ROOT / "config"

    # =========================================================================
    # HTTP
    # =========================================================================

    SERVICE_NAME: str = "KilluStats"
    SERVICE_VERSION: str = "1.0.0"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3001
    API_CORS_ORIGINS: List[str] = ["*"]

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _init_metrics(cls):
        """Initialize metrics tracking if enabled."""
        if cls._enable_metrics and cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _record_invalid(cls, key: str, error: str) -> None:
        logging.warning(error)
        if cls._metrics:
            cls._metrics.record_validation_error(key, error)

    @classmethod
    def _safe_int(
        cls,
        key: str,
        default: int,
        min_val: Optional[int] = None,
        max_val: Optional[int] = None,
    ) -> int:
        """
        Safely parse integer from environment with validation.

        Parameters
        ----------
        key:
            Environment variable name.
        default:
            Default value if not set or invalid.
        min_val:
            Minimum allowed value (inclusive).
        max_val:
            Maximum allowed value (inclusive).

        Example
        -------
        >>> Config._safe_int("DATABASE_POOL_SIZE", 10, min_val=1, max_val=200)
        10
        """
        cls._init_metrics()
        raw_value = os.getenv(key)

        if raw_value is None or raw_value == "":
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        try:
            value = int(raw_value)
        except ValueError:
            cls._record_invalid(
                key, f"{key}='{raw_value}' is not a valid integer, using default {default}"
            )
            return default

        if min_val is not None and value < min_val:
            cls._record_invalid(
                key, f"{key}={value} is below minimum {min_val}, using default {default}"
            )
            return default

        if max_val is not None and value > max_val:
            cls._record_invalid(
                key, f"{key}={value} exceeds maximum {max_val}, using default {default}"
            )
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_float(
        cls,
        key: str,
        default: float,
        min_val: Optional[float] = None,
        max_val: Optional[float] = None,
    ) -> float:
        """Safely parse a float from environment with bounds checking."""
        cls._init_metrics()
        raw_value = os.getenv(key)

        if raw_value is None or raw_value == "":
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        try:
            value = float(raw_value)
        except ValueError:
            cls._record_invalid(
                key, f"{key}='{raw_value}' is not a valid number, using default {default}"
            )
            return default

        if (min_val is not None and value < min_val) or (
            max_val is not None and value > max_val
        ):
            cls._record_invalid(
                key,
                f"{key}={value} is outside [{min_val}, {max_val}], using default {default}",
            )
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).

        Example
        -------
        >>> Config._safe_bool("DEBUG", False)
        False
        """
        cls._init_metrics()
        raw_value = os.getenv(key)

        if raw_value is None or raw_value == "":
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        normalized = raw_value.lower().strip()
        if normalized in {"true", "yes", "1", "on"}:
            value = True
        elif normalized in {"false", "no", "0", "off"}:
            value = False
        else:
            cls._record_invalid(
                key, f"{key}='{raw_value}' is not a valid boolean, using default {default}"
            )
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_str(
        cls,
        key: str,
        default: str,
        required: bool = False,
    ) -> str:
        """
        Safely get string from environment.

        Parameters
        ----------
        key:
            Environment variable name.
        default:
            Default value if not set.
        required:
            Whether this config is required (logged as an error if missing).
        """
        cls._init_metrics()
        value = os.getenv(key, default)
        from_env = key in os.environ

        if cls._metrics:
            cls._metrics.record_env_load(key, from_env, value, default)

        if required and not value:
            error = f"Required environment variable {key} is not set"
            logging.error(error)
            if cls._metrics:
                cls._metrics.record_validation_error(key, error)

        return value

    @staticmethod
    def _build_mysql_url(
        host: str, port: int, user: str, password: str, database: str
    ) -> str:
        """Compose an aiomysql SQLAlchemy URL from its parts."""
        credentials = quote_plus(user)
        if password:
            credentials = f"{credentials}:{quote_plus(password)}"
        return f"mysql+aiomysql://{credentials}@{host}:{port}/{database}"

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables with validation.

        Called automatically on module import; may be called again in tests
        after changing the environment.
        """
        cls._init_metrics()

        # Primary store
        cls.DB_HOST = cls._safe_str("DB_HOST", "")
        cls.DB_PORT = cls._safe_int("DB_PORT", 3306, min_val=1, max_val=65535)
        cls.DB_USER = cls._safe_str("DB_USER", "")
        cls.DB_PASSWORD = cls._safe_str("DB_PASSWORD", "")
        cls.DB_NAME = cls._safe_str("DB_NAME", "")
        cls.DATABASE_URL = cls._safe_str("DATABASE_URL", "")
        if not cls.DATABASE_URL and cls.DB_HOST:
            cls.DATABASE_URL = cls._build_mysql_url(
                cls.DB_HOST, cls.DB_PORT, cls.DB_USER, cls.DB_PASSWORD, cls.DB_NAME
            )

        cls.DATABASE_POOL_SIZE = cls._safe_int(
            "DATABASE_POOL_SIZE", 10, min_val=1, max_val=200
        )
        cls.DATABASE_MAX_OVERFLOW = cls._safe_int(
            "DATABASE_MAX_OVERFLOW", 10, min_val=0, max_val=200
        )
        cls.DATABASE_POOL_RECYCLE = cls._safe_int(
            "DATABASE_POOL_RECYCLE", 1800, min_val=60
        )
        cls.DATABASE_POOL_TIMEOUT = cls._safe_int(
            "DATABASE_POOL_TIMEOUT", 30, min_val=1, max_val=300
        )
        cls.DATABASE_STATEMENT_TIMEOUT_MS = cls._safe_int(
            "DATABASE_STATEMENT_TIMEOUT_MS", 10_000, min_val=100
        )
        cls.DATABASE_ECHO = cls._safe_bool("DATABASE_ECHO", False)

        # Block audit store
        cls.CP_DB_HOST = cls._safe_str("CP_DB_HOST", "")
        cls.CP_DB_PORT = cls._safe_int("CP_DB_PORT", 3306, min_val=1, max_val=65535)
        cls.CP_DB_USER = cls._safe_str("CP_DB_USER", "")
        cls.CP_DB_PASSWORD = cls._safe_str("CP_DB_PASSWORD", "")
        cls.CP_DB_NAME = cls._safe_str("CP_DB_NAME", "")
        cls.CP_DATABASE_URL = cls._safe_str("CP_DATABASE_URL", "")
        cls.CP_CONNECT_TIMEOUT_SECONDS = cls._safe_int(
            "CP_CONNECT_TIMEOUT_SECONDS", 5, min_val=1, max_val=60
        )
        cls.CP_TABLE_PREFIX = cls._safe_str("CP_TABLE_PREFIX", "co_")

        # Stats engine
        cls.STATS_RESOLVER_TIMEOUT_SECONDS = cls._safe_float(
            "STATS_RESOLVER_TIMEOUT_SECONDS", 5.0, min_val=0.1, max_val=120.0
        )
        config_dir = cls._safe_str("STATS_CONFIG_DIR", "")
        if config_dir:
            cls.STATS_CONFIG_DIR = Path(config_dir).resolve()

        # Environment
        cls.ENVIRONMENT = cls._safe_str("ENVIRONMENT", "development")
        cls.DEBUG = cls._safe_bool("DEBUG", False)
        cls.LOG_LEVEL = cls._safe_str("LOG_LEVEL", "INFO")
        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)
        cls.LOG_TO_FILE = cls._safe_bool("LOG_TO_FILE", True)
        logs_dir = cls._safe_str("LOGS_DIR", "")
        if logs_dir:
            cls.LOGS_DIR = Path(logs_dir).resolve()

        # HTTP
        cls.API_HOST = cls._safe_str("API_HOST", "0.0.0.0")
        cls.API_PORT = cls._safe_int("API_PORT", 3001, min_val=1, max_val=65535)
        origins = cls._safe_str("API_CORS_ORIGINS", "*")
        cls.API_CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]

        if cls._metrics:
            from datetime import datetime, timezone

            cls._metrics.last_reload = datetime.now(timezone.utc).isoformat()

    @classmethod
    def coreprotect_url(cls) -> Optional[str]:
        """
        Connection URL for the CoreProtect store, or None when unconfigured.

        An explicit CP_DATABASE_URL wins; otherwise the URL is built from the
        CP_DB_* parts and requires at least CP_DB_HOST.
        """
        if cls.CP_DATABASE_URL:
            return cls.CP_DATABASE_URL
        if not cls.CP_DB_HOST:
            return None
        return cls._build_mysql_url(
            cls.CP_DB_HOST,
            cls.CP_DB_PORT,
            cls.CP_DB_USER,
            cls.CP_DB_PASSWORD,
            cls.CP_DB_NAME,
        )

    @classmethod
    def validate(cls) -> None:
        """
        Validate critical configuration values on startup.

        Raises
        ------
        ValueError:
            If required config values are missing or invalid in production.
        """
        if cls._validated:
            return

        logger = logging.getLogger(__name__)
        cls._init_metrics()

        try:
            cls.load()

            if not cls.DATABASE_URL:
                raise ValueError(
                    "DATABASE_URL (or DB_HOST/DB_USER/DB_NAME) environment variable is required"
                )

            if cls.is_production() and "localhost" in cls.DATABASE_URL:
                logger.warning(
                    "Production environment using localhost database - "
                    "this may be incorrect"
                )

            valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            if cls.LOG_LEVEL.upper() not in valid_log_levels:
                logger.warning(f"Invalid LOG_LEVEL '{cls.LOG_LEVEL}', using INFO")
                cls.LOG_LEVEL = "INFO"

            if cls.is_production():
                if "user:password" in cls.DATABASE_URL:
                    logger.error("SECURITY: Using default database credentials in production!")
                if cls.DEBUG:
                    logger.warning("DEBUG mode enabled in production!")

            cls._validated = True

            if cls._metrics:
                logger.info(f"Configuration loaded: {cls._metrics.get_summary()}")
                if cls._metrics.validation_errors:
                    logger.warning(
                        f"Configuration warnings: {cls._metrics.validation_errors}"
                    )

        except Exception as e:
            logger.warning(f"Config validation warning (safe for tests): {e}")
            if cls.ENVIRONMENT.lower() == "production":
                logger.error("Configuration validation failed in production!")
                raise

    @classmethod
    def reset(cls) -> None:
        """Forget the validated flag so the next validate() reloads the environment."""
        cls._validated = False
        cls._metrics = None

    # =========================================================================
    # Environment Checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return Environment.from_string(cls.ENVIRONMENT) is Environment.PRODUCTION

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return Environment.from_string(cls.ENVIRONMENT) is Environment.DEVELOPMENT

    @classmethod
    def is_testing(cls) -> bool:
        """Check if running in testing environment."""
        return Environment.from_string(cls.ENVIRONMENT) is Environment.TESTING

    # =========================================================================
    # Metrics & Summary
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Optional[_ConfigLoadMetrics]:
        """Get configuration loading metrics."""
        return cls._metrics

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """
        Get non-sensitive configuration summary for debugging.

        Example
        -------
        >>> Config.get_config_summary()["coreprotect_enabled"]
        False
        """
        return {
            "environment": cls.ENVIRONMENT,
            "debug": cls.DEBUG,
            "log_level": cls.LOG_LEVEL,
            "database_url_set": bool(cls.DATABASE_URL),
            "database_pool_size": cls.DATABASE_POOL_SIZE,
            "database_max_overflow": cls.DATABASE_MAX_OVERFLOW,
            "coreprotect_enabled": cls.coreprotect_url() is not None,
            "resolver_timeout_seconds": cls.STATS_RESOLVER_TIMEOUT_SECONDS,
            "stats_config_dir": str(cls.STATS_CONFIG_DIR),
            "service_version": cls.SERVICE_VERSION,
        }


# Auto-validate on import
Config.validate()
