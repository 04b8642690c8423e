"""Terminal and log file configuration.

The terminal and the log file are leveled independently:

- ``-v`` / ``--verbose`` sets the stderr handler to DEBUG (default WARNING).
- ``STICKYBOARD_LOG_LEVEL`` sets the file handler level (default INFO).
  The file is ``<log_dir>/stickyboard.log`` and exists only when a log
  directory is configured (``--log-dir`` or ``STICKYBOARD_LOG_DIR``).

Tokens are never logged by this package; keep it that way when adding
debug output to the networking layer.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "stickyboard.log"

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Rotate at 5 MB, keep two old files
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

# httpx logs every request line at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def _parse_log_level(level_str: str) -> int:
    """Map a level name such as ``"debug"`` to its constant; unknown names give INFO."""
    numeric = getattr(logging, level_str.upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO


def _terminal_handler(verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    return handler


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILENAME,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(_parse_log_level(os.environ.get("STICKYBOARD_LOG_LEVEL", "INFO")))
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    *,
    log_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Install the terminal handler and, if ``log_dir`` is given, the log file.

    Replaces whatever handlers the root logger had, so repeated calls
    leave exactly one of each.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    # Handlers do the filtering
    root.setLevel(logging.DEBUG)

    root.addHandler(_terminal_handler(verbose))
    if log_dir is not None:
        root.addHandler(_file_handler(log_dir))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
