"""
Configuration management for LabMusic.

This module loads the database location and logging level from a TOML file.
The bundled `labmusic.toml` holds the defaults.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Path to the config directory
CONFIG_DIR = Path(__file__).parent

DEFAULT_DB_NAME = "music_database"
MEMORY_DB = ":memory:"


@dataclass
class AppConfig:
    """Loaded application configuration."""

    db_name: str = DEFAULT_DB_NAME
    data_dir: Path = field(default_factory=lambda: Path("."))
    log_level: str = "INFO"

    @property
    def database_path(self) -> str:
        """Location handed to SQLite. `:memory:` is passed through untouched."""
        if self.db_name == MEMORY_DB:
            return MEMORY_DB
        return str(self.data_dir / self.db_name)


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load application configuration from a TOML file.

    Args:
        config_path: Path to the TOML file. If None, uses the bundled default.

    Returns:
        Loaded AppConfig instance. Missing keys keep their defaults.
    """
    if config_path is None:
        config_path = CONFIG_DIR / "labmusic.toml"

    logger.debug("Loading config from %s", config_path)

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    database = data.get("database", {})
    logging_section = data.get("logging", {})

    return AppConfig(
        db_name=str(database.get("name", DEFAULT_DB_NAME)),
        data_dir=Path(database.get("data_dir", ".")).expanduser(),
        log_level=str(logging_section.get("level", "INFO")).upper(),
    )


# Global singleton instance (lazy loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration (lazy loaded singleton)."""
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config(config_path: Path | None = None) -> AppConfig:
    """Force reload of the global configuration."""
    global _config
    _config = load_config(config_path)
    return _config
