"""Logging infrastructure for permgate.

All library loggers live under the ``permgate`` namespace. Nothing here
attaches handlers at import time; applications opt in through
``setup_logger`` or ``configure_logging``.
"""

import logging
import logging.handlers
import os
from typing import Optional

ROOT_LOGGER_NAME = "permgate"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_dir: Optional[str] = None,
    level: str = "WARNING",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    file_logging: bool = False,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Set up a logger with optional file and console handlers.

    Args:
        name: Logger name (``permgate`` configures the whole library)
        log_dir: Directory for log files, required when file_logging is on
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string
        date_format: Custom date format string (ISO 8601 by default)
        file_logging: Enable rotating file logging
        console_logging: Enable console logging
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep

    Returns:
        Configured logger instance

    Raises:
        ValueError: If the level is unknown or file logging lacks a log_dir
    """
    logger = logging.getLogger(name)

    level_upper = level.upper()
    if level_upper not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    logger.setLevel(getattr(logging, level_upper))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    if log_format is None:
        log_format = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
    if date_format is None:
        date_format = "%Y-%m-%dT%H:%M:%S"

    formatter = logging.Formatter(log_format, datefmt=date_format)

    if file_logging:
        if not log_dir:
            raise ValueError("log_dir is required when file logging is enabled")
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{name}.log")
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console_logging:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def configure_logging(settings=None) -> logging.Logger:
    """Configure the ``permgate`` logger from runtime settings.

    Args:
        settings: Settings instance; defaults to ``get_settings()``

    Returns:
        The configured ``permgate`` logger
    """
    if settings is None:
        from ..core.config import get_settings

        settings = get_settings()

    return setup_logger(
        ROOT_LOGGER_NAME,
        log_dir=settings.log_dir,
        level=settings.log_level,
        file_logging=settings.log_to_file,
        console_logging=settings.log_to_console,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the ``permgate`` namespace.

    Args:
        name: Component name, e.g. ``"rbac"``

    Returns:
        Logger named ``permgate.<name>``
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
