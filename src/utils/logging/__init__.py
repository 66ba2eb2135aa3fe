"""
Structured logging configuration for the property replacer

Usage:
    from utils.logging import setup_logging, get_logger

    setup_logging(level="INFO", json_format=True)
    logger = get_logger(__name__)
"""

from .config import configure_from_env, get_logger, setup_logging
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
]
