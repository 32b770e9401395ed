import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

from procman.config import effective_settings as config

LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'


class MainFormatter(logging.Formatter):
    """Console formatter. Records from reaper and dispatcher threads carry the thread name."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT)

    def format(self, record):
        formatted_message = super().format(record)
        if record.threadName and record.threadName != "MainThread":
            return f"{formatted_message} ({record.threadName})"
        return formatted_message


def resolve_level(level_name: str, default: int = logging.INFO) -> int:
    """Maps a level name such as 'DEBUG' to its numeric value, falling back to default."""
    level = logging.getLevelName(str(level_name).upper())
    return level if isinstance(level, int) else default


def setup_logging(console_level: int = logging.INFO) -> None:
    """
    Configures the root logger for the application.
    This sets up the console handler and, when LOG_FILE_PATH is set, a rotating
    file handler, clearing any previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)

    # --- File Handler (conditional) ---
    if config.LOG_FILE_PATH:
        log_path = Path(config.LOG_FILE_PATH)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=config.LOG_FILE_MAX_BYTES,
                backupCount=config.LOG_FILE_BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize file logging handler at '{log_path}': {e}. Logging to file will be disabled.")
