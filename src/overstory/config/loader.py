"""Configuration loading and management."""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..tmux.service import DEFAULT_BENIGN_EMPTY_MARKERS
from ..utils.logging import ConfigurationError, LogLevel


class OverstoryConfig(BaseModel):
    """Configuration model for Overstory."""

    # tmux driver
    tmux_binary: str = Field(default="tmux", description="tmux executable")
    benign_empty_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BENIGN_EMPTY_MARKERS),
        description="stderr fragments that mean an empty session listing",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(default=None, description="Log file path")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Console log format"
    )

    @field_validator("tmux_binary")
    @classmethod
    def _check_binary(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tmux_binary must not be empty")
        return value.strip()

    @field_validator("benign_empty_markers")
    @classmethod
    def _normalize_markers(cls, value: list[str]) -> list[str]:
        markers = [marker.strip().lower() for marker in value]
        if any(not marker for marker in markers):
            raise ValueError("benign_empty_markers must not contain empty entries")
        return markers

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LogLevel.__members__:
            raise ValueError(f"Unknown log level: {value}")
        return level


def find_config_file(custom_path: str | None = None) -> Path | None:
    """Find configuration file in standard locations."""
    if custom_path:
        path = Path(custom_path).expanduser()
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {custom_path}")

    search_paths = [
        Path.cwd() / "overstory.yaml",
        Path.cwd() / "overstory.yml",
        Path.home() / ".config" / "overstory" / "config.yaml",
        Path.home() / ".overstory.yaml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return data


def load_env_vars() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}
    prefix = "OVERSTORY_"

    env_mappings = {
        f"{prefix}TMUX_BINARY": "tmux_binary",
        f"{prefix}LOG_LEVEL": "log_level",
        f"{prefix}LOG_FILE": "log_file",
        f"{prefix}LOG_FORMAT": "log_format",
        f"{prefix}BENIGN_EMPTY_MARKERS": "benign_empty_markers",
    }

    for env_var, config_key in env_mappings.items():
        if env_var in os.environ:
            env_value = os.environ[env_var]
            if config_key == "benign_empty_markers":
                config[config_key] = [
                    marker for marker in env_value.split(",") if marker.strip()
                ]
            else:
                config[config_key] = env_value

    return config


def load_config(
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> OverstoryConfig:
    """Load configuration from file and environment variables.

    Precedence order (highest to lowest):
    1. CLI flag overrides
    2. Environment variables
    3. Configuration file
    4. Default values
    """
    config_data: dict[str, Any] = {}

    config_file = find_config_file(config_path)
    if config_file:
        config_data.update(load_config_file(config_file))

    config_data.update(load_env_vars())

    if cli_overrides:
        config_data.update({k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return OverstoryConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
