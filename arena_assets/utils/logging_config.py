"""
Logging configuration for arena_assets.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..settings import AppSettings

CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(name)s : %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Third-party loggers that flood DEBUG output
NOISY_LOGGERS = ("PIL", "PIL.PngImagePlugin", "PIL.Image")


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name with ANSI codes."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color is None:
            return formatted
        # Only the first occurrence is the level column
        return formatted.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


class CSVFormatter(logging.Formatter):
    """Semicolon separated rows for the log file.

    Columns: timestamp, level, ms since start, logger, line, message.
    Double quotes inside the message are doubled.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.datefmt)
        level = record.levelname.ljust(8)
        elapsed = f"{int(record.relativeCreated)} ms"
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        message = message.replace('"', '""')
        return f'"{timestamp}";{level};"{elapsed}";"{record.name}";"{record.lineno}";"{message}"'


def _console_handler(level_name: str, use_colors: bool) -> logging.Handler:
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    handler.setFormatter(formatter_class(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(CSVFormatter(datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(settings: "AppSettings") -> None:
    """
    Configure the root logger from settings.

    Replaces any handlers already attached to the root logger, so calling it
    again after changing settings takes effect immediately.

    Args:
        settings: AppSettings instance providing all logging options
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    logging.getLogger("arena_assets").setLevel(logging.DEBUG)

    if settings.console_logging:
        root_logger.addHandler(
            _console_handler(settings.console_log_level, settings.console_use_colors)
        )

    log_path: Optional[Path] = None
    if settings.file_logging:
        log_path = Path(settings.log_file_path)
        try:
            root_logger.addHandler(_file_handler(log_path))
        except OSError as e:
            log_path = None
            root_logger.warning(f"Could not setup file logging: {e}")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if settings.console_logging:
        logger.debug(
            f"Console logging: {settings.console_log_level} (colors: {settings.console_use_colors})"
        )
    if log_path is not None:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
