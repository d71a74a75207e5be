"""
Configuration management subsystem for KilluStats.

- **config.py**: Static configuration from environment variables
- **manager.py**: Structured YAML configuration (rank table, economy sources)
- **errors.py**: Configuration exception hierarchy

Usage
-----
```python
from src.core.config import Config
from src.core.config.manager import ConfigManager

timeout = Config.STATS_RESOLVER_TIMEOUT_SECONDS
ranks = ConfigManager.get("ranks", [])
```
"""

from src.core.config.config import Config, Environment
from src.core.config.errors import (
    ConfigError,
    ConfigInitializationError,
    ConfigValidationError,
)

__all__ = [
    "Config",
    "Environment",
    "ConfigError",
    "ConfigValidationError",
    "ConfigInitializationError",
]
