"""
Centralized logging configuration for the Doorknob bot.

Thin facade over :mod:`doorknob.infrastructure.logging_manager` so callers
do not depend on the manager object.
"""

import logging
from typing import Optional

from .logging_manager import setup_logging as _setup_logging, get_logger as _get_logger


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for a bot component using YAML configuration.

    Args:
        component_name: Name of the component (e.g., 'doorknob.bot')
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). If None,
                  uses LOG_LEVEL or the environment-appropriate level:
                  Development=DEBUG, Staging=INFO, Production=WARNING

    Returns:
        logging.Logger: Configured logger instance

    Raises:
        ConfigurationError: If the log level cannot be parsed
    """
    return _setup_logging(component_name, log_level)


def get_logger(component_name: str) -> logging.Logger:
    """
    Get a logger for a specific component.

    Args:
        component_name: Name of the component

    Returns:
        logging.Logger: Logger instance
    """
    return _get_logger(component_name)
