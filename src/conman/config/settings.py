"""Global configuration manager for INI settings."""

import configparser
from pathlib import Path

from conman.config.paths import Paths
from conman.constants import (
    CONFIG_VERSION,
    CONMAN_IMAGE,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CONCURRENT_CONVERSIONS,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    SECTION_DEFAULT,
    SECTION_INSTALL,
    SECTION_NETWORK,
    SECTION_TRUST,
    TRUST_DIR_REL_HOME,
    TRUST_SERVER,
)
from conman.domain.types import (
    GlobalConfig,
    InstallConfig,
    NetworkConfig,
    TrustConfig,
)
from conman.exceptions import ConmanError

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]


class ConfigError(ConmanError):
    """Raised when the settings file cannot be read or is invalid."""

    error_prefix = "Invalid configuration"


class ConfigManager:
    """Manages the global INI configuration."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = self.config_dir / "settings.conf"

    def get_default_global_config(self) -> RawConfigDict:
        """Get default global configuration values."""
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_NETWORK: {
                "timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS),
                "max_concurrent_conversions": str(
                    DEFAULT_MAX_CONCURRENT_CONVERSIONS
                ),
            },
            SECTION_TRUST: {
                "server": TRUST_SERVER,
                "directory": f"~/{TRUST_DIR_REL_HOME}",
                "image": CONMAN_IMAGE,
            },
            SECTION_INSTALL: {
                "enforce_icon_size": "true",
                "pull_image": "true",
            },
        }

    def _create_parser(self) -> configparser.ConfigParser:
        return configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser populated with default values."""
        config = self._create_parser()

        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from the INI file.

        Values missing from the file fall back to defaults; the file is
        never required to exist.

        Returns:
            Loaded global configuration

        Raises:
            ConfigError: If the file cannot be parsed or holds bad values

        """
        config = self._create_config_from_defaults(
            self.get_default_global_config()
        )

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                msg = f"{self.settings_file}: {e}"
                raise ConfigError(msg) from e

        try:
            return self._convert_to_global_config(config)
        except ValueError as e:
            msg = f"{self.settings_file}: {e}"
            raise ConfigError(msg) from e

    def _convert_to_global_config(
        self, config: configparser.ConfigParser
    ) -> GlobalConfig:
        """Convert ConfigParser values to typed GlobalConfig."""
        network = config[SECTION_NETWORK]
        trust = config[SECTION_TRUST]
        install = config[SECTION_INSTALL]

        network_config: NetworkConfig = {
            "timeout_seconds": network.getint("timeout_seconds"),
            "max_concurrent_conversions": max(
                1, network.getint("max_concurrent_conversions")
            ),
        }
        trust_config: TrustConfig = {
            "server": trust.get("server").rstrip("/"),
            "directory": str(Paths.expand_path(trust.get("directory"))),
            "image": trust.get("image"),
        }
        install_config: InstallConfig = {
            "enforce_icon_size": install.getboolean("enforce_icon_size"),
            "pull_image": install.getboolean("pull_image"),
        }

        return {
            "config_version": config.get(SECTION_DEFAULT, KEY_CONFIG_VERSION),
            "log_level": config.get(SECTION_DEFAULT, KEY_LOG_LEVEL).upper(),
            "console_log_level": config.get(
                SECTION_DEFAULT, KEY_CONSOLE_LOG_LEVEL
            ).upper(),
            "network": network_config,
            "trust": trust_config,
            "install": install_config,
        }
