"""Logging configuration for the application."""
import logging
import sys
from pathlib import Path
from typing import Optional

from animedash.config.settings import PROJECT_ROOT

DEFAULT_LOG_DIR = PROJECT_ROOT / 'logs'
LOG_FILE = 'animedash.log'

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(name: str, log_dir: Optional[Path] = None, level: str = 'DEBUG') -> logging.Logger:
    """Attach console and file handlers to the named logger.

    The console only shows warnings and above; the file under ``log_dir``
    gets everything the logger lets through. Calling this again for the same
    name only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers across Streamlit reruns
    if logger.handlers:
        return logger

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)
    logger.addHandler(_file_handler(Path(log_dir) if log_dir else DEFAULT_LOG_DIR))

    return logger
