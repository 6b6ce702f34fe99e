"""Logging configuration for waypoint."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .runtime import get_log_dir

# Global flag to track if logging has been initialized
_logging_initialized = False


def setup_logger(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    log_to_console: bool = False,
) -> None:
    """Configure the logging system globally.

    Called once at startup when --verbose is given. Logs are written to
    ~/.waypoint/logs/ by default.

    Args:
        log_dir: Directory to store log files (default: ~/.waypoint/logs/)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_console: Whether to also log warnings to the console
    """
    global _logging_initialized

    if _logging_initialized:
        return

    if log_dir is None:
        log_dir = get_log_dir()

    if log_level is None:
        from config import Config

        log_level = Config.LOG_LEVEL

    level = getattr(logging, log_level.upper(), logging.DEBUG)
    logging.root.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True, parents=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"waypoint_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logging.root.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        logging.root.addHandler(console_handler)

    _logging_initialized = True

    logging.info(f"Logging initialized. Level: {log_level}, File: {log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Without setup_logger() (i.e. without --verbose) records go nowhere.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
