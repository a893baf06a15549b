"""
Command Palette - Textual host for the palette engine.

Provides:
- PalettePresenter: engine owner, view model and key translation
- CommandPaletteScreen: Modal overlay rendering the current page
- MainlineApp: Host app that opens and closes the overlay
"""

from .palette_app import MainlineApp, run_palette_app
from .palette_presenter import (
    PalettePresenter,
    PaletteRow,
    PaletteViewModel,
    build_view_model,
    translate_key,
)
from .palette_screen import CommandPaletteScreen, PaletteInput

__all__ = [
    "CommandPaletteScreen",
    "MainlineApp",
    "PaletteInput",
    "PalettePresenter",
    "PaletteRow",
    "PaletteViewModel",
    "build_view_model",
    "run_palette_app",
    "translate_key",
]
