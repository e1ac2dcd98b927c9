"""Centralized logging configuration for secroute.

All package loggers hang off the ``secroute`` root logger. The root logger is
configured once, on import, with a single stdout handler. The initial level
can be overridden through the ``SECROUTE_LOG_LEVEL`` environment variable
(e.g. ``DEBUG``, ``WARNING``).
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "secroute"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LEVEL_ENV_VAR = "SECROUTE_LOG_LEVEL"

_ROOT_LOGGER_CONFIGURED = False


def _level_from_env(default: int) -> int:
    """Return the level named by ``SECROUTE_LOG_LEVEL`` or ``default``."""
    raw = os.environ.get(LEVEL_ENV_VAR)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the package handler to the ``secroute`` root logger.

    Repeated calls are no-ops until ``reset_logging()`` is called.

    Args:
        level: Logging level. Defaults to ``SECROUTE_LOG_LEVEL`` or INFO.
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stdout StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(_level_from_env(logging.INFO) if level is None else level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees package records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a package logger that inherits the root ``secroute`` settings.

    Args:
        name: Logger name, normally ``__name__`` of the calling module.

    Returns:
        Logger instance with level NOTSET (inherits from the root logger).
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the root logger and of its handlers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Switch every secroute logger to DEBUG (full step-by-step engine output)."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Return every secroute logger to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler and forget the configuration (used by tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
