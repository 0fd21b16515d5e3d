"""Configuration management for Sleeper Analyzer."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sleeper.app/v1"


class Settings(BaseModel):
    """Connection settings for the Sleeper API client."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=30.0, gt=0)
    max_connections: int = Field(default=10, ge=1)
    max_keepalive_connections: int = Field(default=5, ge=0)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Build settings from SLEEPER_* environment variables.

        A ``.env`` file is loaded first when present; variables already set
        in the environment win.
        """
        load_dotenv(env_file or Path.cwd() / ".env")

        values = {
            "base_url": os.getenv("SLEEPER_BASE_URL"),
            "timeout": os.getenv("SLEEPER_TIMEOUT"),
            "max_connections": os.getenv("SLEEPER_MAX_CONNECTIONS"),
            "max_keepalive_connections": os.getenv("SLEEPER_MAX_KEEPALIVE"),
            "log_level": os.getenv("SLEEPER_LOG_LEVEL"),
        }
        return cls(**{key: value for key, value in values.items() if value})


class Config(BaseModel):
    """Persisted CLI defaults."""

    league_id: Optional[str] = None
    user_id: Optional[str] = None
    sport: str = "nfl"
    season: Optional[str] = None


class ConfigManager:
    """Manages application configuration persistence."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / ".sleeper_analyzer"
        self.config_file = self.config_dir / "config.json"
        self._ensure_config_dir()

    def _ensure_config_dir(self) -> None:
        """Ensure config directory exists."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_config(self) -> Config:
        """Load configuration from file."""
        if not self.config_file.exists():
            return Config()

        try:
            with open(self.config_file, "r") as f:
                data = json.load(f)
                return Config(**data)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("Invalid config file %s, using defaults: %s", self.config_file, e)
            return Config()

    def save_config(self, config: Config) -> None:
        """Save configuration to file."""
        with open(self.config_file, "w") as f:
            json.dump(config.model_dump(), f, indent=2)

    def get_output_dir(self) -> Path:
        """Get output directory path."""
        output_dir = Path("out")
        output_dir.mkdir(exist_ok=True)
        return output_dir
