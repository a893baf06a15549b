"""Configuration utilities for mainline."""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..exceptions import ConfigurationError
from .constants import ENV_VAR_DEFINITIONS, MAINLINE_CONFIG_DIR

_TRUTHY = {"on", "true", "1"}


def get_config_dir() -> Path:
    """Get the config directory, creating it when missing."""
    MAINLINE_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return MAINLINE_CONFIG_DIR


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")

    if value is None or valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all MAINLINE environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Raises:
        ConfigurationError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ConfigurationError(error, setting=name)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value


def env_flag(name: str) -> bool:
    """Read an on/off style variable."""
    value = get_env_var(name)
    return value is not None and value.lower() in _TRUTHY


def get_env_info() -> Dict[str, Dict]:
    """Get information about all MAINLINE environment variables."""
    info = {}
    for name, definition in ENV_VAR_DEFINITIONS.items():
        value = os.environ.get(name)
        is_valid, _ = validate_env_var(name, value)
        info[name] = {
            "description": definition.get("description", ""),
            "value": value,
            "is_set": value is not None,
            "valid": is_valid,
            "default": definition.get("default"),
        }
    return info
