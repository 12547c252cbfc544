"""
Centralized logging configuration for zset_ts.
All component loggers live under the "zset_ts" package logger.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "zset_ts"

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL
}

DEFAULT_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s'


class ZsetTSLogger:
    """Centralized logger for zset_ts components."""

    _loggers = {}
    _initialized = False
    _configured = False
    _log_file: Optional[Path] = None
    _log_level = logging.WARNING

    @classmethod
    def setup(cls, log_dir: Optional[str] = None, log_level: str = "WARNING",
              console_output: bool = False, fmt: str = DEFAULT_FORMAT):
        """
        Setup logging for all zset_ts components. Only the first explicit call
        has an effect; the defaults applied implicitly by get_logger() are replaced.

        Args:
            log_dir: Directory for a timestamped log file. No file is written if None.
            log_level: Level name for the package logger.
            console_output: Also send WARNING+ messages to stdout.
            fmt: Format string for the file handler.
        """
        if cls._configured:
            return
        cls._apply(log_dir, log_level, console_output, fmt)
        cls._configured = True

    @classmethod
    def _apply(cls, log_dir: Optional[str], log_level: str, console_output: bool, fmt: str):
        cls._log_file = None
        cls._log_level = LEVEL_MAP.get(log_level.upper(), logging.WARNING)

        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.setLevel(cls._log_level)
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers.clear()

        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            cls._log_file = log_path / f"zset_ts_{stamp}.log"
            file_handler = logging.FileHandler(cls._log_file)
            file_handler.setLevel(cls._log_level)
            file_handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
            package_logger.addHandler(file_handler)

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.WARNING)  # Only warnings/errors to console
            console_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)s | %(message)s', datefmt='%H:%M:%S'))
            package_logger.addHandler(console_handler)

        if not package_logger.handlers:
            # Library default: stay silent unless the application configures logging
            package_logger.addHandler(logging.NullHandler())

        cls._initialized = True

        init_logger = cls.get_logger("ZsetTSLogger")
        init_logger.info(f"Logging initialized - Level: {log_level}, File: {cls._log_file}")

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger for a specific component."""
        if not cls._initialized:
            cls._apply(None, "WARNING", False, DEFAULT_FORMAT)

        if name not in cls._loggers:
            cls._loggers[name] = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

        return cls._loggers[name]

    @classmethod
    def set_level(cls, level: str):
        """Change the level of the package logger."""
        cls._log_level = LEVEL_MAP.get(level.upper(), logging.WARNING)
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(cls._log_level)

    @classmethod
    def get_log_file(cls) -> Optional[Path]:
        """The current log file path, if file logging is enabled."""
        return cls._log_file

    @classmethod
    def reset(cls):
        """Forget the current setup so the next call reconfigures (mainly for testing)."""
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers.clear()
        cls._loggers.clear()
        cls._initialized = False
        cls._configured = False
        cls._log_file = None


def get_logger(name: str) -> logging.Logger:
    """Convenience function to get a logger."""
    return ZsetTSLogger.get_logger(name)
