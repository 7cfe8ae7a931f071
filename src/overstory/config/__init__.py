"""Configuration management module."""

from .loader import OverstoryConfig, find_config_file, load_config

__all__ = ["OverstoryConfig", "load_config", "find_config_file"]
