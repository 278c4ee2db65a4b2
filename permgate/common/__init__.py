"""Common utilities for permgate."""

from .logger import setup_logger, get_logger, configure_logging

__all__ = ["configure_logging", "get_logger", "setup_logger"]
