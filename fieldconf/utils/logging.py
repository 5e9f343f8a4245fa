"""Logging configuration for fieldconf.

Logging is off unless explicitly enabled, so that embedding applications
decide where configuration traces go. Operation summaries are logged at
INFO; per-field discovery and resolution traces at DEBUG. Values are never
logged, only names and sources.

Environment Variables:
    FIELDCONF_LOG: Set to "true" to enable logging (default: "false")
    FIELDCONF_LOG_FILE: Path to log file (default: ~/.fieldconf.log)
    FIELDCONF_LOG_LEVEL: Threshold when enabled (default: "INFO")
"""

import logging
import os
from pathlib import Path

LOGGER_NAME = "fieldconf"

LOG_ENABLED = os.environ.get("FIELDCONF_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("FIELDCONF_LOG_FILE", str(Path.home() / ".fieldconf.log")))
LOG_LEVEL = os.environ.get("FIELDCONF_LOG_LEVEL", "INFO").upper()

_logger: logging.Logger | None = None


def _level() -> int:
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def setup_logging() -> logging.Logger:
    """Attach handlers to the package logger once.

    Module loggers (``fieldconf.field``, ``fieldconf.resolver``...) propagate
    here. Without FIELDCONF_LOG=true a NullHandler keeps the library silent.

    Returns:
        The ``fieldconf`` logger
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    if LOG_ENABLED:
        logger.addHandler(_file_handler(LOG_FILE))
        logger.setLevel(_level())
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log an operation-level summary at INFO."""
    get_logger().info(message)


__all__ = [
    "LOGGER_NAME",
    "LOG_ENABLED",
    "LOG_FILE",
    "LOG_LEVEL",
    "setup_logging",
    "get_logger",
    "log_message",
]
