"""
Logger module for docmap.

This module provides a centralized logger that can be imported throughout the package
without causing circular import issues.
"""

import logging
import time
from typing import Any

# Module-level logger
logger: logging.Logger = logging.getLogger('docmap')
logger.setLevel(logging.WARNING)  # Default to WARNING level to avoid spam

def set_logger(custom_logger: logging.Logger) -> None:
    """Allow users to provide their own logger."""
    global logger
    logger = custom_logger

def set_log_level(level: int) -> None:
    """Set the logging level for the module. 
    
    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, or logging.CRITICAL
    """
    logger.setLevel(level)

def log_database_usage(message: str, start_time: float, **details: Any) -> None:
    """ Logs a database call at DEBUG level with how long it took since start_time (from time.time()).

    Example:
        log_database_usage("Retrieved 3 records from 'people'", start_time, query={"title": "Sir"})
        -> Database Usage Logging: Retrieved 3 records from 'people' (query={'title': 'Sir'}) in 0.002 seconds
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    suffix = f" ({', '.join(f'{key}={value!r}' for key, value in details.items())})" if details else ""
    logger.debug(f"Database Usage Logging: {message}{suffix} in {(time.time() - start_time):.3f} seconds")
