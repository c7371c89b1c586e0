"""Path constants and utilities for conman.

Centralizes path management so every component resolves user
directories the same way. All lookups take the home directory as an
argument so tests can point them at a temporary directory.
"""

import os
from pathlib import Path

from conman.constants import (
    BUNDLE_APPLICATIONS_DIR,
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DESKTOP_APPLICATIONS_SUBPATH,
    DESKTOP_ICONS_SUBPATH,
    ENV_CONFIG_DIR,
    TRUST_DIR_REL_HOME,
)


class Paths:
    """Application paths and directory structure."""

    @classmethod
    def config_dir(cls) -> Path:
        """Get the configuration directory.

        ``CONMAN_CONFIG_DIR`` overrides ``~/.config/conman``.
        """
        env_dir = os.getenv(ENV_CONFIG_DIR)
        if env_dir:
            return cls.expand_path(env_dir)
        return Path.home() / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME

    @classmethod
    def settings_file(cls) -> Path:
        """Get path to the global settings file."""
        return cls.config_dir() / CONFIG_FILE_NAME

    @classmethod
    def logs_dir(cls) -> Path:
        """Get path to the log directory."""
        return cls.config_dir() / "logs"

    @classmethod
    def trust_dir(cls, home: Path) -> Path:
        """Get the default trust metadata directory under ``home``."""
        return home / TRUST_DIR_REL_HOME

    @classmethod
    def applications_dir(cls, home: Path) -> Path:
        """Get the per-user desktop entry directory."""
        return home.joinpath(*DESKTOP_APPLICATIONS_SUBPATH)

    @classmethod
    def icons_dir(cls, home: Path) -> Path:
        """Get the per-user icon directory."""
        return home.joinpath(*DESKTOP_ICONS_SUBPATH)

    @classmethod
    def bundles_dir(cls, home: Path) -> Path:
        """Get the per-user application bundle directory."""
        return home / BUNDLE_APPLICATIONS_DIR

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand and resolve path with ~ and relative path support.

        Example:
            >>> Paths.expand_path("~/Documents")
            Path('/home/user/Documents')

        """
        return Path(path_str).expanduser().resolve(strict=False)
