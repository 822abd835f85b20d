"""
TradeSim - Logging Utilities

Provides centralized logging configuration for the entire application.
Outputs logs to stderr and, unless disabled, to a file in the 'logs' directory.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from tradesim.core.config import LOG_LEVEL, LOG_TO_FILE

# Global flag to ensure we only configure the root logger once
_LOGGER_INITIALIZED = False


def _ensure_log_dir() -> Path:
    """
    Ensures the 'logs' directory exists at the project root.
    Returns the path to the logs directory.
    """
    # src/tradesim/core/logging_utils.py -> parents[3] = project root
    project_root = Path(__file__).resolve().parents[3]
    log_dir = project_root / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def init_logging(
    level: Optional[int] = None,
    log_to_file: bool = LOG_TO_FILE,
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    Configures the 'tradesim' logger with a StreamHandler and optional FileHandler.
    Console output goes to stderr unless `stream` is given; stdout carries
    command output only. `force` reconfigures an initialized logger.
    This should be called once at the start of the application or script.
    """
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED and not force:
        return

    if level is None:
        level = logging.getLevelName(LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Library logger only; the host application owns the root logger
    root = logging.getLogger("tradesim")
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    ch = logging.StreamHandler(stream if stream is not None else sys.stderr)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    log_file = None
    if log_to_file:
        try:
            log_file = _ensure_log_dir() / "tradesim.log"
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)
        except OSError as e:
            root.warning(f"File logging disabled: {e}")
            log_file = None

    _LOGGER_INITIALIZED = True

    logging.getLogger("tradesim.core.logging_utils").debug(
        f"Logging initialized. Log file: {log_file}"
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Returns a configured logger instance.
    Ensures logging is initialized before returning.
    """
    if not _LOGGER_INITIALIZED:
        init_logging()

    return logging.getLogger(name if name else "tradesim")
