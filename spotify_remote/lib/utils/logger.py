"""
Logging Utilities
Provides structured logging for the redirect server, the OAuth client and API calls
"""
import os
import sys
import logging
from pathlib import Path
from typing import Iterable, Optional

from ...config import LOG_LEVEL, LOG_FORMAT


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output"""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Color a copy so other handlers (e.g. file) see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        return super().format(record)


def _format_string(log_format: str) -> str:
    if log_format == 'simple':
        return '%(levelname)s - %(message)s'
    return '%(asctime)s | %(name)-12s | %(levelname)-8s | %(message)s'


def setup_logger(name: str, level: str = 'INFO', log_format: str = 'detailed') -> logging.Logger:
    """
    Set up a logger with console output

    Args:
        name: Logger name (e.g., 'server', 'auth', 'api')
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_format: 'simple' or 'detailed'

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(ColoredFormatter(fmt=_format_string(log_format), datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(console_handler)

    return logger


def setup_file_logger(name: str, log_file: Path, level: str = 'INFO') -> logging.Logger:
    """
    Add file output to a logger

    Args:
        name: Logger name
        log_file: Path to log file
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Format for file (no colors)
    file_handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s | %(name)-12s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(file_handler)

    return logger


def configure_logging(level: str, log_format: str = 'detailed', log_file: Optional[str] = None,
                      names: Iterable[str] = ('server', 'auth', 'api')) -> None:
    """Apply runtime log settings to the pre-configured loggers"""
    formatter = ColoredFormatter(fmt=_format_string(log_format), datefmt='%Y-%m-%d %H:%M:%S')
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setFormatter(formatter)
        if log_file:
            path = os.path.abspath(log_file)
            if any(isinstance(h, logging.FileHandler) and h.baseFilename == path for h in logger.handlers):
                continue
            setup_file_logger(name, Path(path), level=level)


# =============================================================================
# PRE-CONFIGURED LOGGERS
# =============================================================================

# Redirect server logger
server_logger = setup_logger('server', level=LOG_LEVEL, log_format=LOG_FORMAT)

# Auth logger (token endpoint exchanges)
auth_logger = setup_logger('auth', level=LOG_LEVEL, log_format=LOG_FORMAT)

# API logger (Spotify Web API calls)
api_logger = setup_logger('api', level=LOG_LEVEL, log_format=LOG_FORMAT)
