"""Logging utilities for repobrowse.

Standard Logger Initialization Pattern
--------------------------------------
For most modules, use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

Configuration is handled once by the application via ``setup_tui_logging``.
Everything goes to a rotating file because stderr belongs to the TUI.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config.constants import REPOBROWSE_CONFIG_DIR

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _log_dir() -> Path:
    REPOBROWSE_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return REPOBROWSE_CONFIG_DIR


def _file_handler(log_file: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    return handler


def setup_tui_logging(
    verbose: bool = False, log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Set up logging for the TUI.

    The root logger is set to WARNING to avoid noise from third-party libs.
    repobrowse's own loggers are set to INFO, or DEBUG when verbose.

    Returns:
        The ``repobrowse`` package logger
    """
    log_file = log_file or _log_dir() / "tui.log"

    root = logging.getLogger()
    if not any(getattr(h, "_repobrowse", False) for h in root.handlers):
        handler = _file_handler(log_file, logging.DEBUG)
        handler._repobrowse = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(logging.WARNING)

    package_logger = logging.getLogger("repobrowse")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return package_logger
