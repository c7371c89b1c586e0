"""Main logger module providing public API functions.

- setup_logging(): Configure logging with async-safe QueueHandler architecture
- get_logger(): Get or create logger instance
- flush_all_handlers(): Ensure all pending log records are written
- clear_logger_state(): Clear global logger state for testing
- set_console_level(): Adjust console verbosity at runtime
"""

import atexit
import contextlib
import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

from conman.logger.config import load_log_settings
from conman.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from conman.logger.state import get_state

FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    Waits for the queue to drain, then flushes each handler. Safe to call
    from any thread.
    """
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    start_time = time.time()
    while not state.log_queue.empty():
        if time.time() - start_time > FLUSH_TIMEOUT_SECONDS:
            break
        time.sleep(0.01)

    # Records may be dequeued but not yet handled
    time.sleep(0.1)

    for handler in state.queue_listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on application exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging with async-safe QueueHandler architecture.

    The root ``conman`` logger is initialized exactly once; later calls
    only return the requested child logger.

    Args:
        name: Logger name, typically __name__ for module-level loggers
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to log file
            (default: ~/.config/conman/logs/conman.log)
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            cfg_console, cfg_file, cfg_path = load_log_settings()
            setup_root_logger(
                state,
                console_level or cfg_console,
                file_level or cfg_file,
                log_file or cfg_path,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get or create logger instance.

    Use __name__ as the logger name for proper hierarchical logging:

        >>> logger = get_logger(__name__)
        >>> logger.info("Installing %s", app_name)

    Args:
        name: Logger name, typically __name__ for module loggers
        enable_file_logging: Whether to enable file logging (default: True)

    Returns:
        Configured logger instance

    """
    return setup_logging(name=name, enable_file_logging=enable_file_logging)


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the QueueListener, closes handlers and resets all flags.
    Do not call in production code.
    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)


def set_console_level(level: str) -> None:
    """Change the console handler level (e.g. for ``--verbose``)."""
    state = get_state()
    if state.queue_listener is None:
        return
    for handler in state.queue_listener.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, RotatingFileHandler
        ):
            handler.setLevel(getattr(logging, level.upper(), logging.WARNING))
