"""
Centralized constants for mainline.

Default labels, fallback messages and environment variable definitions live
here so the engine, the host UI and the CLI agree on them.
"""

import os
from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

MAINLINE_CONFIG_DIR = Path(
    os.environ.get("MAINLINE_CONFIG_DIR") or Path.home() / ".config" / "mainline"
)

# =============================================================================
# PAGE DEFAULTS (used when a page leaves the field unset)
# =============================================================================

DEFAULT_PAGE_TITLE = "Command palette"
DEFAULT_PLACEHOLDER = "Search"
DEFAULT_EMPTY_STATE_TEXT = "No commands found."
DEFAULT_SUBMIT_LABEL = "Submit"
DEFAULT_TRIGGER_LABEL = "COMMAND"

# =============================================================================
# KEYS
# =============================================================================

DEFAULT_TOGGLE_KEY = "ctrl+k"
FOOTER_HINT = "↑↓ navigate · Enter select · Esc back/close · Ctrl+K toggle"

# =============================================================================
# LOGGING
# =============================================================================

LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per log file
LOG_BACKUP_COUNT = 2

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "MAINLINE_CONFIG_DIR": {
        "description": "Directory for logs and ui_config.json",
        "default": str(Path.home() / ".config" / "mainline"),
        "valid_values": None,
    },
    "MAINLINE_LOG_LEVEL": {
        "description": "Log level for mainline.* loggers",
        "default": "info",
        "valid_values": ["debug", "info", "warning", "error"],
    },
    "MAINLINE_HOTKEYS": {
        "description": "Enable the global palette toggle hotkey in the host app",
        "default": "on",
        "valid_values": ["on", "off", "true", "false", "1", "0"],
    },
}
