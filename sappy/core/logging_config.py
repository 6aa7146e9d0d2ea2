"""
Logging for the toolkit.

All loggers live under the "sappy" package logger, which carries a
NullHandler so nothing is printed unless the host asks for it. The
helpers below only ever touch that package logger; the root logger and
its handlers belong to the host application.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

PACKAGE_LOGGER = 'sappy'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marks handlers installed by setup_logging() so they can be replaced.
_OWNED = '_sappy_owned'

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__, below the package logger)
    """
    return logging.getLogger(name)


def _parse_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def set_level(level: Union[str, int]) -> logging.Logger:
    """Set the level of the package logger; unknown names fall back to INFO."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_parse_level(level))
    return logger


def setup_logging(
    level: Union[str, int] = 'INFO',
    format_string: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Send toolkit log records to stdout (and optionally a file).

    Handlers from a previous call are replaced. Records stop propagating
    to the root logger so they are not printed twice.

    Args:
        level: Level name or number for the package logger
        format_string: Record format (DEFAULT_FORMAT if None)
        log_file: Optional log file path; parent directories are created

    Returns:
        The package logger
    """
    logger = set_level(level)
    _remove_owned_handlers(logger)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def reset_logging() -> logging.Logger:
    """Undo setup_logging(): drop its handlers, propagate again, inherit the level."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_owned_handlers(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_from_settings(settings, attach_handlers: bool = False) -> logging.Logger:
    """
    Apply logging settings to the package logger.

    Args:
        settings: Settings object with log_level and log_format
        attach_handlers: Also install output handlers via setup_logging()
    """
    if attach_handlers:
        return setup_logging(level=settings.log_level, format_string=settings.log_format)
    return set_level(settings.log_level)


def _remove_owned_handlers(logger: logging.Logger):
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED, False):
            logger.removeHandler(handler)
            handler.close()
