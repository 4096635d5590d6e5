"""Centralized logging configuration for PyHazard."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = 'pyhazard'

# Create logger
logger = logging.getLogger(ROOT_LOGGER_NAME)
logger.setLevel(logging.DEBUG)

# Create console handler with formatting
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.INFO)

# Create formatter
formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
console_handler.setFormatter(formatter)

# Add handler to logger
logger.addHandler(console_handler)


def get_logger(name: str = None):
    """Get a logger instance.

    Parameters
    ----------
    name : str, optional
        Logger name (typically __name__). If None, returns the package logger.

    Returns
    -------
    logging.Logger
        Configured logger instance
    """
    if not name:
        return logger
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Set the console level and optionally mirror output to a file.

    Parameters
    ----------
    level : int or str
        Console log level (e.g. ``logging.DEBUG`` or ``"DEBUG"``)
    log_file : str or Path, optional
        File that receives DEBUG-level output

    Returns
    -------
    logging.Logger
        The package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    console_handler.setLevel(level)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
