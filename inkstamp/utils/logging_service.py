"""
Logging configuration for the editor.

Console output is always on. A dated log file is written to the
application data directory unless disabled.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .resource_loader import get_app_data_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_initialized = False


def setup_logging(
    log_level: int = logging.INFO,
    log_to_file: bool = True,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the root logger. Later calls are ignored.

    Args:
        log_level: The logging level (e.g. logging.DEBUG)
        log_to_file: Whether to also log to a file
        log_dir: Directory for log files, defaults to <app data>/logs
    """
    global _logging_initialized

    if _logging_initialized:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_to_file:
        try:
            if log_dir is None:
                log_dir = get_app_data_dir() / "logs"
            log_dir.mkdir(parents=True, exist_ok=True)

            log_path = log_dir / f"inkstamp_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not create log file: {e}. Logging to console only.")

    _logging_initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
