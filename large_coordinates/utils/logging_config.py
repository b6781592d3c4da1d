"""
Logging Configuration

The package logs through the 'large_coordinates' namespace and ships only a
NullHandler. Applications that want to see cell reassignments and rejected
inputs call setup_logging().
"""
import logging
from typing import Optional

LOGGER_NAME = "large_coordinates"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a handler to the package logger, replacing any handlers set before.

    Args:
        level: Logging level (logging.DEBUG shows cell reassignments)
        log_file: Write to this file instead of stderr

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_file, encoding='utf-8') if log_file else logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
