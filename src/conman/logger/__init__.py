"""Logging utilities for conman.

Architecture:
    Application -> QueueHandler -> Queue -> QueueListener Thread
                                                 |
                                       Console + File Handlers

Usage:
    >>> from conman.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing %s", app_name)  # Use %-style formatting

Environment Variables:
    CONMAN_LOG_DIR: Override the log directory (used by the test suite).

Rules for contributors:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Never use f-strings in log calls
"""

from typing import TYPE_CHECKING

from conman.logger.config import update_logger_from_config as _update_config
from conman.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from conman.logger.handlers import ConfigurationError
from conman.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    set_console_level,
    setup_logging,
)
from conman.logger.state import _state, get_state

if TYPE_CHECKING:
    from conman.config import ConfigManager

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "_state",  # For testing only
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "set_console_level",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(
    config_manager: "ConfigManager | None" = None,
) -> None:
    """Update logger handler levels from the settings file."""
    _update_config(get_state(), config_manager)
