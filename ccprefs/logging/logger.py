"""
Centralized logging configuration for the preferences package.

The library itself never configures handlers on import; the host application
calls setup_logging() once at startup. Logs go to a rotating file in the
resolved log directory, with optional colored console output for debug runs.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


_VERBOSE: bool = False
# Effective log directory. Updated by setup_logging() so get_log_dir() always
# points at the location used by the active RotatingFileHandler.
_LOG_DIR: Optional[Path] = None

LOG_FILE_NAME = "preferences.log"
LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original_levelname = record.levelname
        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = original_levelname
        return f"{color}{message}{self.RESET}"


def get_log_dir() -> Path:
    """Return the directory used for log files.

    Resolution order: the directory passed to setup_logging(), the
    CCPREFS_LOG_DIR environment variable, then ``logs/`` under the current
    working directory.
    """

    if _LOG_DIR is not None:
        return _LOG_DIR
    env_dir = os.getenv("CCPREFS_LOG_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.cwd() / "logs"


def setup_logging(
    debug: bool = False,
    verbose: bool = False,
    log_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Configure application logging with file rotation.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: When True, preference values are included in debug logs
            (they may contain usernames and paths). Implies debug.
        log_dir: Optional directory override for the log file.

    Returns:
        Path of the log file in use.
    """
    global _VERBOSE, _LOG_DIR

    debug_enabled = debug or verbose
    if log_dir is not None:
        _LOG_DIR = Path(log_dir)

    resolved_dir = get_log_dir()
    resolved_dir.mkdir(parents=True, exist_ok=True)
    _LOG_DIR = resolved_dir
    log_file = resolved_dir / LOG_FILE_NAME

    level = logging.DEBUG if debug_enabled else logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Re-running setup replaces our own handlers instead of stacking them.
    for handler in list(root_logger.handlers):
        if getattr(handler, "_ccprefs_handler", False):
            root_logger.removeHandler(handler)
            handler.close()
    file_handler._ccprefs_handler = True
    root_logger.addHandler(file_handler)

    if debug_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        console_handler._ccprefs_handler = True
        root_logger.addHandler(console_handler)

    _VERBOSE = bool(verbose)

    root_logger.info(
        "Preferences logging initialized (debug=%s, verbose=%s, file=%s)",
        debug_enabled,
        _VERBOSE,
        log_file,
    )
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a component."""
    return logging.getLogger(name)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""

    return _VERBOSE
