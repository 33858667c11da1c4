"""
Centralized configuration management.

Values are read from, in increasing priority:
1) `env.example` (committed, safe defaults)
2) `env.local` (optional, developer-local, not committed)
3) System environment variables
"""

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger


class EnvironConfig:
    """
    Singleton configuration class that loads environment variables from env files
    and the system environment, providing dictionary-like access with default values.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(EnvironConfig, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config = {}
            self._load_config()
            EnvironConfig._initialized = True

    def _load_config(self):
        """
        Load configuration from env files and system environment.

        Priority order (later overrides earlier):
        1. env.example
        2. env.local
        3. System environment variables (highest priority)
        """
        root = Path(__file__).parent.parent.parent

        example_path = root / "env.example"
        if example_path.exists():
            self._config.update(dotenv_values(example_path))
            logger.info("Loaded environment variables from {}", example_path)

        local_path = root / "env.local"
        if local_path.exists():
            self._config.update(dotenv_values(local_path))
            logger.info("Loaded and overrode environment variables from {}", local_path)

        self._config.update(os.environ)

    def get(self, key, default=None):
        """Get configuration value by key with optional default."""
        return self._config.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        """
        Get an integer configuration value.

        Blank or unparsable values fall back to `default` with a warning.
        """
        raw = (self.get(key) or "").strip()
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid {} value '{}', defaulting to {}", key, raw, default)
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = (self.get(key) or "").strip().lower()
        if not raw:
            return default
        return raw in {"true", "1", "yes", "on"}


# Global configuration instance
config = EnvironConfig()
