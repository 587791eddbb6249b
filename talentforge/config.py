# talentforge/config.py
"""
Handles loading server settings from a JSON file.

Missing files and missing keys fall back to defaults, so a fresh checkout
runs without any configuration.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger("talentforge.config")

CONFIG_ENV_VAR = "TALENTFORGE_CONFIG"
DEFAULT_CONFIG_FILE = "talentforge_config.json"


class ServerConfig(BaseModel):
    data_directory: Optional[str] = Field(
        None, description="Directory holding the ability JSON files. Defaults to the bundled data."
    )
    database_url: str = "sqlite:///talentforge.db"
    log_level: str = "INFO"
    team_size_limit: int = Field(4, ge=1)
    bulk_write_interval_seconds: float = Field(5.0, gt=0)


_config: Optional[ServerConfig] = None


def get_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))


def load_config(path: Optional[Path] = None) -> ServerConfig:
    """
    Loads settings from the config file.
    If the file doesn't exist or is corrupt, default settings are returned.
    """
    path = Path(path) if path is not None else get_config_path()
    if not path.exists():
        logger.warning(f"Config file not found at {path}. Using defaults.")
        return ServerConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        config = ServerConfig.model_validate(raw)
        logger.info(f"Config loaded from {path}")
        return config
    except json.JSONDecodeError as e:
        logger.error(f"Failed to read {path} (corrupt?): {e}. Using defaults.")
        return ServerConfig()
    except ValidationError as e:
        logger.error(f"Invalid settings in {path}: {e}. Using defaults.")
        return ServerConfig()


def get_config() -> ServerConfig:
    """Returns the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[ServerConfig]) -> None:
    """Replaces the process-wide config (None forces a reload on next access)."""
    global _config
    _config = config
