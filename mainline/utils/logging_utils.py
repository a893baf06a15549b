"""Simple logging utilities for mainline.

Standard Logger Initialization Pattern
--------------------------------------
Modules use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

The host app calls `setup_tui_logging()` once at startup. Handlers write to
rotating files under the config directory, so nothing is written to the
terminal while Textual owns it.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config.constants import LOG_BACKUP_COUNT, LOG_MAX_BYTES, MAINLINE_CONFIG_DIR

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(name: Optional[str] = None) -> int:
    """Map a level name (or MAINLINE_LOG_LEVEL) to a logging level."""
    name = name or os.environ.get("MAINLINE_LOG_LEVEL") or "info"
    return _LEVELS.get(name.lower(), logging.INFO)


def _log_dir() -> Path:
    MAINLINE_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return MAINLINE_CONFIG_DIR


def setup_tui_logging(
    module_name: str, level: Optional[str] = None
) -> tuple[logging.Logger, logging.Logger]:
    """
    Set up logging for the Textual host.

    The root logger is set to WARNING to avoid noise from third-party libs.
    mainline.* loggers follow MAINLINE_LOG_LEVEL (or ``level``). Key
    translation gets its own logger writing to a separate file.

    Returns:
        tuple: (main_logger, key_events_logger)
    """
    try:
        log_dir = _log_dir()

        if not logging.getLogger().handlers:
            handler = RotatingFileHandler(
                log_dir / "tui_debug.log", maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_FORMAT))
            logging.basicConfig(level=logging.WARNING, handlers=[handler])

        logging.getLogger("mainline").setLevel(resolve_level(level))

        key_logger = logging.getLogger("key_events")
        if not key_logger.handlers:
            key_handler = RotatingFileHandler(
                log_dir / "key_events.log", maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
            )
            key_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            key_logger.addHandler(key_handler)
            key_logger.setLevel(logging.WARNING)  # Only errors, not every keystroke

        return logging.getLogger(module_name), key_logger

    except OSError as e:
        # Can't log this failure since logging is what's failing
        import sys

        print(f"Warning: TUI logging setup failed: {e}", file=sys.stderr)
        return logging.getLogger(module_name), logging.getLogger("key_events")
