"""
mainline - adapter-driven command palette engine
"""

__version__ = "0.3.0"

from .adapter import PaletteAdapter
from .engine import EngineSnapshot, EngineState, EventType, PaletteEngine, PaletteEvent
from .exceptions import (
    AdapterError,
    ConfigurationError,
    EngineStateError,
    InvalidCommandError,
    InvalidPageError,
    MainlineError,
)
from .models import Command, CommandIntent, Page, PageMode, Result, ResultKind, Shortcut

__all__ = [
    "__version__",
    "AdapterError",
    "Command",
    "CommandIntent",
    "ConfigurationError",
    "EngineSnapshot",
    "EngineState",
    "EngineStateError",
    "EventType",
    "InvalidCommandError",
    "InvalidPageError",
    "MainlineError",
    "Page",
    "PageMode",
    "PaletteAdapter",
    "PaletteEngine",
    "PaletteEvent",
    "Result",
    "ResultKind",
    "Shortcut",
]
