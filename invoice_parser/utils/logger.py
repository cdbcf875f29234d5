"""
Logging Configuration Module.

Every module logs through a child of the "invoice_parser" logger, so
one call to setup_logger() (or setup_logger_from_config() in the CLI)
configures the whole pipeline. Console output goes to stderr; stdout
is left for the JSON results.

Usage:
    from invoice_parser.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.debug("vendor_name: legal_suffix at line 0")
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Union

import colorama
from colorama import Fore, Style

colorama.init()

# Application namespace; every module logger is a child of this one
ROOT_LOGGER_NAME = "invoice_parser"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name on console output.

    The record itself is left untouched so file handlers sharing it
    still write plain text.
    """

    COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }
    RESET = Style.RESET_ALL

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno)
        if not color:
            return super().format(record)

        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper())


def _console_handler(level: int, log_format: str, date_format: str, colorize: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter_class = ColoredFormatter if colorize else logging.Formatter
    handler.setFormatter(formatter_class(log_format, datefmt=date_format))
    return handler


def _file_handler(
    log_file: Union[str, Path],
    level: int,
    log_format: str,
    date_format: str,
    max_bytes: int,
    backup_count: int
) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    return handler


def setup_logger(
    level: Union[str, int] = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,  # 10 MB
    backup_count: int = 5,
    colorize: bool = True
) -> logging.Logger:
    """
    Configure the application logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Logging level name or number.
        log_format: Record format; defaults to DEFAULT_FORMAT.
        date_format: Timestamp format; defaults to DEFAULT_DATE_FORMAT.
        log_file: Path of a rotating log file. None disables file logging.
        max_bytes: Maximum log file size before rotation.
        backup_count: Number of rotated files to keep.
        colorize: Color level names on the console.

    Returns:
        The "invoice_parser" logger.

    Example:
        >>> setup_logger(level="DEBUG", log_file="logs/parser.log")
    """
    numeric_level = _level(level)
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(numeric_level)
    app_logger.handlers.clear()
    app_logger.propagate = False

    app_logger.addHandler(_console_handler(numeric_level, log_format, date_format, colorize))
    if log_file:
        app_logger.addHandler(_file_handler(
            log_file, numeric_level, log_format, date_format, max_bytes, backup_count
        ))

    app_logger.debug("Logging initialized")
    return app_logger


def set_level(level: Union[str, int]) -> None:
    """Change the level of the application logger and all its handlers."""
    numeric_level = _level(level)
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(numeric_level)
    for handler in app_logger.handlers:
        handler.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger inside the application namespace.

    Example:
        >>> get_logger("main").name
        'invoice_parser.main'
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """Configure logging from the "logging" section of the settings file."""
    from config import get_config

    log_file = None
    if get_config("logging.file.enabled", False):
        log_file = get_config("logging.file.path")

    return setup_logger(
        level=get_config("logging.level", "INFO"),
        log_format=get_config("logging.format"),
        date_format=get_config("logging.date_format"),
        log_file=log_file,
        max_bytes=get_config("logging.file.max_bytes", 10485760),
        backup_count=get_config("logging.file.backup_count", 5),
        colorize=get_config("logging.console.colorize", True)
    )
