"""Configuration loading and updating for logging system.

Bootstrap defaults are used while modules import; the settings file is
applied afterwards through ``update_logger_from_config`` to avoid a
circular import between the logger and config packages.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from conman.config.paths import Paths
from conman.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from conman.config import ConfigManager
    from conman.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Load default console level, file level, and file path.

    Environment Variable Override:
        CONMAN_LOG_DIR: Overrides the log directory path. The test suite
        sets it so test runs never write to the user's log file.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = Paths.logs_dir() / LOG_FILE_NAME

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def apply_levels(
    state: "_LoggerState", console_level_str: str, file_level_str: str
) -> None:
    """Set handler levels on the running QueueListener.

    Args:
        state: Logger state object
        console_level_str: Level name for the console handler
        file_level_str: Level name for the file handler

    """
    console_level = getattr(
        logging, console_level_str.upper(), logging.WARNING
    )
    file_level = getattr(logging, file_level_str.upper(), logging.INFO)

    if state.queue_listener is None:
        return

    for handler in state.queue_listener.handlers:
        if isinstance(handler, RotatingFileHandler):
            handler.setLevel(file_level)
        elif isinstance(handler, logging.StreamHandler):
            handler.setLevel(console_level)


def update_logger_from_config(
    state: "_LoggerState", config_manager: "ConfigManager | None" = None
) -> None:
    """Update logger handler levels from the settings file.

    Only updates handler levels, never adds or removes handlers.

    Args:
        state: Logger state object (from logger.state module)
        config_manager: Manager to read settings from, default if None

    """
    if config_manager is None:
        # Import here to avoid circular dependency
        from conman.config import ConfigManager  # noqa: PLC0415

        config_manager = ConfigManager()

    config = config_manager.load_global_config()
    apply_levels(state, config["console_log_level"], config["log_level"])
    state.config_applied = True
