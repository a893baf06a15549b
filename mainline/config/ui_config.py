"""
Palette host UI configuration.

Handles persistence of host preferences (hotkeys, toggle key, theme).
Config is stored in ~/.config/mainline/ui_config.json. The engine itself
never reads this; only the Textual host does.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypedDict

from .constants import DEFAULT_TOGGLE_KEY, DEFAULT_TRIGGER_LABEL
from .settings import env_flag, get_config_dir

logger = logging.getLogger(__name__)


class PaletteOptions(TypedDict):
    """Options the host app applies when mounting the palette."""

    hotkeys: bool
    toggle_key: str
    trigger_label: str
    theme: str


DEFAULT_CONFIG: dict[str, Any] = {
    "hotkeys": True,
    "toggle_key": DEFAULT_TOGGLE_KEY,
    "trigger_label": DEFAULT_TRIGGER_LABEL,
    "theme": "textual-dark",
}


def get_ui_config_path() -> Path:
    """
    Get path to UI config file.

    Returns:
        Path to <config dir>/ui_config.json
    """
    return get_config_dir() / "ui_config.json"


def load_ui_config() -> dict[str, Any]:
    """
    Load UI configuration from file.

    Returns:
        Config dict, or defaults if file doesn't exist or is invalid
    """
    path = get_ui_config_path()
    if path.exists():
        try:
            config = json.loads(path.read_text())
            if isinstance(config, dict):
                # Merge with defaults to handle missing keys
                return {**DEFAULT_CONFIG, **config}
            logger.warning(f"Ignoring non-object UI config in {path}")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not read UI config {path}: {e}")
    return DEFAULT_CONFIG.copy()


def save_ui_config(config: dict[str, Any]) -> None:
    """
    Save UI configuration to file.

    Args:
        config: Configuration dict to save
    """
    path = get_ui_config_path()
    try:
        path.write_text(json.dumps(config, indent=2) + "\n")
    except OSError as e:
        # Config is non-critical
        logger.warning(f"Could not save UI config {path}: {e}")


def get_palette_options() -> PaletteOptions:
    """Options merged from the config file and MAINLINE_HOTKEYS."""
    config = load_ui_config()
    hotkeys = bool(config.get("hotkeys", True)) and env_flag("MAINLINE_HOTKEYS")
    return {
        "hotkeys": hotkeys,
        "toggle_key": str(config.get("toggle_key") or DEFAULT_TOGGLE_KEY),
        "trigger_label": str(config.get("trigger_label") or DEFAULT_TRIGGER_LABEL),
        "theme": str(config.get("theme") or DEFAULT_CONFIG["theme"]),
    }


def set_theme(theme_name: str) -> None:
    """Set and persist theme preference."""
    config = load_ui_config()
    config["theme"] = theme_name
    save_ui_config(config)
