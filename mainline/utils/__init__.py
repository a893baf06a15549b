"""Utility modules for mainline."""

from .logging_utils import setup_tui_logging
from .output import console

__all__ = ["console", "setup_tui_logging"]
