"""Configuration management for conman."""

from conman.config.paths import Paths
from conman.config.settings import ConfigError, ConfigManager

__all__ = ["ConfigError", "ConfigManager", "Paths"]
