"""Configuration for mainline."""

from .constants import ENV_VAR_DEFINITIONS, MAINLINE_CONFIG_DIR
from .settings import (
    env_flag,
    get_config_dir,
    get_env_info,
    get_env_var,
    validate_all_env_vars,
    validate_env_var,
)
from .ui_config import PaletteOptions, get_palette_options, load_ui_config, save_ui_config

__all__ = [
    "ENV_VAR_DEFINITIONS",
    "MAINLINE_CONFIG_DIR",
    "PaletteOptions",
    "env_flag",
    "get_config_dir",
    "get_env_info",
    "get_env_var",
    "get_palette_options",
    "load_ui_config",
    "save_ui_config",
    "validate_all_env_vars",
    "validate_env_var",
]
