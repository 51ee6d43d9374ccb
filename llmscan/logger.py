"""
Logging configuration for llmscan.

Log modes mirror what an operator can ask for in the config file:
  none    → nothing is emitted (NullHandler)
  console → stdout only
  file    → append-only log file only
  both    → stdout and log file
"""

import logging
import sys
from typing import Optional

LOG_MODES = ("none", "console", "file", "both")

# One line per message: "[2025-01-31 12:00:00] Saved: getting-started.html.md"
LOG_FORMAT = "[%(asctime)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = "llmscan",
    mode: str = "both",
    log_file: Optional[str] = None,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Set up and return the package logger.

    Args:
        name: Logger name
        mode: One of none, console, file, both
        log_file: Log file path, used by the file and both modes
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    if mode not in LOG_MODES:
        raise ValueError(f"Unknown log mode: {mode!r} (expected one of {', '.join(LOG_MODES)})")

    logger = logging.getLogger(name)

    # A second call (e.g. CLI overriding the config's log mode) replaces
    # the handlers instead of stacking duplicates.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(level)

    if mode == "none":
        logger.addHandler(logging.NullHandler())
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    if mode in ("console", "both"):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if mode in ("file", "both") and log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            # Logging is best-effort: carry on without the file
            print(f"Warning: cannot open log file {log_file}: {e}", file=sys.stderr)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "llmscan.fetcher") propagate to the "llmscan"
    logger, so whatever setup_logger() attached there receives their lines.

    Args:
        module_name: Name of the module (e.g., 'fetcher', 'classifier')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"llmscan.{module_name}")
