# gatekeeper/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and to a rotating file (logs/trace.log by default).
configure_logging() is called once by the process bootstrap; until then
loggers fall back to Python's defaults.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

_configured = False


def configure_logging(debug: bool = False, log_dir: str = "logs", log_file: str = "trace.log"):
    """Attach console + rotating file handlers to the root logger. Idempotent."""
    global _configured
    if _configured:
        return
    _configured = True

    level = logging.DEBUG if debug else logging.INFO
    os.makedirs(log_dir, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    # Rotating file handler — keeps last 10 × 5MB log files
    file_handler = RotatingFileHandler(
        filename=os.path.join(log_dir, log_file),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)
    root.addHandler(file_handler)

    if debug:
        logging.getLogger(__name__).debug("Debug mode is enabled")


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    return logging.getLogger(name)
