"""
Logging setup for the Playlist Share API.

``setup_logging`` configures the root logger once per process: a console
handler, and a size-rotated file handler when ``settings.log_file`` is
set.  Records carry the timestamp, logger name, level and message.
Later calls are no-ops, so tests and ``create_app`` may call it freely.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: Optional[str] = None,
    logfile: Optional[str] = None,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : Optional[str]
        Level name, case insensitive; unknown names fall back to
        ``INFO``.  Defaults to ``settings.log_level``.
    logfile : Optional[str]
        File to log to.  Defaults to ``settings.log_file``; an empty
        value disables file logging.  Missing parent directories are
        created.
    max_bytes, backup_count : Optional[int]
        Rotation policy of the file handler, defaulting to
        ``settings.log_max_bytes`` and ``settings.log_backup_count``.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level = level or settings.log_level
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    logfile = settings.log_file if logfile is None else logfile
    if logfile:
        root.addHandler(rotating_file_handler(logfile, formatter, max_bytes, backup_count))


def rotating_file_handler(
    logfile: str,
    formatter: logging.Formatter,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
) -> RotatingFileHandler:
    """Return a size-rotated handler for ``logfile``, creating its directory."""
    log_path = Path(logfile).resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=settings.log_max_bytes if max_bytes is None else max_bytes,
        backupCount=settings.log_backup_count if backup_count is None else backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler
