"""
Configuration error hierarchy for KilluStats.

Purpose
-------
Provides domain-specific exceptions for configuration management with clear
error classification and helpful error messages.

Exception Hierarchy
-------------------
ConfigError (base)
├── ConfigValidationError (schema/type validation failures)
└── ConfigInitializationError (startup/init failures)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    Example
    -------
    >>> try:
    ...     ConfigManager.load()
    ... except ConfigError as e:
    ...     logger.error(f"Config operation failed: {e}")
    """

    pass


class ConfigValidationError(ConfigError):
    """
    Raised when configuration validation fails.

    This exception is raised when:
    - A rank table entry is missing a field or repeats a key or priority
    - An alias is claimed by two different rank keys
    - An economy source names an unknown parser
    - Type coercion of a structured value fails
    """

    pass


class ConfigInitializationError(ConfigError):
    """
    Raised when ConfigManager initialization fails.

    This exception is raised when:
    - The config directory does not exist
    - A YAML file cannot be parsed
    - A required top-level section is missing

    This is a critical error; the service refuses to start.
    """

    pass


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigInitializationError",
]
