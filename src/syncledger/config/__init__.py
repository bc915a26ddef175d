"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var
from .errors import ConfigurationError, InvalidConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, get_database_config, history_data_dir
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationError",
    "SyncConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_sync_config",
    "history_data_dir",
    "optional_env_var",
]
