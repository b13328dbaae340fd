"""
Centralized logging configuration.

bootstrap_logging() configures logging consistently for every entry point
using Python's native INI format, with a LOG_LEVEL environment override.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _find_logging_config() -> Optional[Path]:
    """
    Find the logging configuration file.

    Looks for logging.ini in the current working directory, then in config/.

    Returns:
        Path to logging configuration file, or None if not found.
    """
    for candidate in (Path('logging.ini'), Path('config') / 'logging.ini'):
        if candidate.exists():
            return candidate
    return None


def _resolve_log_level() -> str:
    """Read LOG_LEVEL, falling back to INFO when unset or invalid."""
    log_level = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()
    if log_level not in LOG_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{log_level}', using INFO", file=sys.stderr)
        log_level = 'INFO'
    return log_level


def bootstrap_logging(name: Optional[str] = None) -> None:
    """
    Bootstrap logging configuration for the application.

    This function:
    1. Resolves LOG_LEVEL (default INFO)
    2. Loads logging.ini with logging.config.fileConfig() when one is found
    3. Otherwise falls back to basicConfig on stderr
    4. Applies LOG_LEVEL to the root logger and its stream handlers

    Args:
        name: Optional name for the logger that reports the configuration
    """
    log_level = _resolve_log_level()
    config_path = _find_logging_config()

    if config_path is None:
        logging.basicConfig(
            level=getattr(logging, log_level),
            format='%(levelname)s: %(name)s: %(message)s',
            stream=sys.stderr
        )
    else:
        try:
            logging.config.fileConfig(
                str(config_path),
                disable_existing_loggers=False
            )
        except Exception as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            print("Using basic logging configuration", file=sys.stderr)
            logging.basicConfig(
                level=getattr(logging, log_level),
                format='%(levelname)s: %(name)s: %(message)s',
                stream=sys.stderr
            )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(getattr(logging, log_level))

    logger = logging.getLogger(name) if name else root_logger
    logger.debug(f"Logging configured at {log_level} from {config_path or 'defaults'}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name, ensuring logging is bootstrapped.

    Args:
        name: Name for the logger

    Returns:
        Configured logger instance
    """
    bootstrap_logging()
    return logging.getLogger(name)
