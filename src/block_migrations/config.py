"""Configuration management for block-migrations."""

import logging
import os
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .utils import ensure_dir, expand_path

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """Configuration for block-migrations.

    Pydantic model that automatically validates configuration values,
    including path expansion and height range checking.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    migrations_file: Path | None = None
    state_file: Path | None = None
    start_height: int = Field(default=0, ge=0, description="First simulated height")
    end_height: int = Field(default=10, ge=0, description="Height to stop before")
    step_delay: float = Field(default=0.0, ge=0, description="Seconds to sleep between heights")
    enable_all: bool = False
    include_hotfixes: bool = False

    @field_validator("migrations_file", "state_file", mode="before")
    @classmethod
    def expand_paths(cls, v: str | Path | None) -> Path | None:
        """Expand path strings with ~ and environment variables; empty means unset."""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            return expand_path(v)
        return v

    @model_validator(mode="after")
    def check_height_range(self) -> "Config":
        if self.end_height < self.start_height:
            raise ValueError(
                f"end_height ({self.end_height}) must not be below start_height ({self.start_height})"
            )
        return self

    def save(self, path: Path) -> None:
        """
        Save configuration to TOML file.

        Args:
            path: Path to save config file
        """
        ensure_dir(path.parent)

        # TOML has no null, so unset paths are written as empty strings
        data = {
            "paths": {
                "migrations_file": str(self.migrations_file) if self.migrations_file else "",
                "state_file": str(self.state_file) if self.state_file else "",
            },
            "simulation": {
                "start_height": self.start_height,
                "end_height": self.end_height,
                "step_delay": self.step_delay,
            },
            "migrations": {
                "enable_all": self.enable_all,
                "include_hotfixes": self.include_hotfixes,
            },
        }

        with open(path, "wb") as f:
            tomli_w.dump(data, f)


def get_config_path() -> Path:
    """
    Get configuration file path.

    Priority:
    1. BLOCK_MIGRATIONS_CONFIG environment variable
    2. Default: ~/.config/block-migrations/config.toml

    Returns:
        Path to config file
    """
    env_config = os.environ.get("BLOCK_MIGRATIONS_CONFIG")
    if env_config:
        return expand_path(env_config)

    return expand_path("~/.config/block-migrations/config.toml")


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file using Pydantic validation.

    Args:
        config_path: Optional custom config path

    Returns:
        Config instance with validated values

    Raises:
        ValueError: If the file is not valid TOML or config validation fails
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        # Flatten TOML structure to match Config model fields
        paths = data.get("paths", {})
        simulation = data.get("simulation", {})
        migrations = data.get("migrations", {})
        flat_data = {
            "migrations_file": paths.get("migrations_file"),
            "state_file": paths.get("state_file"),
            "start_height": simulation.get("start_height", 0),
            "end_height": simulation.get("end_height", 10),
            "step_delay": simulation.get("step_delay", 0.0),
            "enable_all": migrations.get("enable_all", False),
            "include_hotfixes": migrations.get("include_hotfixes", False),
        }

        return Config.model_validate(flat_data)

    config = Config()

    # Save default config for future use
    try:
        config.save(config_path)
    except (OSError, PermissionError) as e:
        # Read-only filesystems still get an in-memory config
        logger.warning(f"Could not save default config to {config_path}: {e}")

    return config
