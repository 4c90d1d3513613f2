"""Logging setup for the billing API server.

Everything goes to stdout and to a log file. The level comes from the
``log_level`` setting, falling back to LOG_LEVEL, then INFO.
"""

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers held at WARNING unless the server runs at DEBUG
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name such as ``"debug"`` to its logging constant.

    Unknown names resolve to INFO.
    """
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_server_logging(log_file: str = "logs/server.log", level: str | None = None) -> None:
    """
    Configure the root logger for the API server.

    Args:
        log_file: Log file path; missing parent directories are created
        level: Level name overriding LOG_LEVEL

    Calling it again replaces the previous handlers.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_level = resolve_log_level(level)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(log_level)
    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), log_level))
    root_logger.addHandler(_handler(logging.FileHandler(log_path), log_level))

    noisy_level = log_level if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    logging.getLogger(__name__).debug(
        f"Logging to stdout and {log_path} at {logging.getLevelName(log_level)}"
    )


__all__ = ["resolve_log_level", "setup_server_logging"]
