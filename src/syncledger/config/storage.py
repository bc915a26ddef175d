"""Location of the generation-history database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    @classmethod
    def for_sqlite_file(cls, path: Path) -> DatabaseConfig:
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(uri=f"sqlite+pysqlite:///{path}")


def history_data_dir() -> Path:
    """``SYNCLEDGER_DATA_DIR``, else ``syncledger`` under the XDG data home."""

    override = os.getenv("SYNCLEDGER_DATA_DIR")
    if override:
        return Path(override).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / "syncledger").expanduser().resolve()


def get_database_config() -> DatabaseConfig:
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig.for_sqlite_file(history_data_dir() / "generations.db")
