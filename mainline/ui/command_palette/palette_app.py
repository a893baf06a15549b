"""
Host app for the command palette.

Shows a trigger button and a status line; the palette itself is a modal
screen pushed while the engine is open and dismissed when it closes.
"""

import logging
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Button, Footer, Static

from mainline.adapter import PaletteAdapter
from mainline.config.ui_config import PaletteOptions, get_palette_options
from mainline.engine import PaletteEvent

from .palette_presenter import PalettePresenter, PaletteViewModel
from .palette_screen import CommandPaletteScreen

logger = logging.getLogger(__name__)


class MainlineApp(App[None]):
    """Textual host that mounts the palette over an adapter."""

    # Textual ships its own palette on ctrl+p; this app provides one instead
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    CSS = """
    #host {
        align: center middle;
        height: 100%;
    }

    #palette-trigger {
        width: auto;
        min-width: 20;
    }

    #palette-status {
        width: auto;
        color: $text-muted;
        padding: 1 0;
    }
    """

    def __init__(
        self,
        adapter: PaletteAdapter,
        options: Optional[PaletteOptions] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.options: PaletteOptions = options or get_palette_options()
        toggle_key = self.options["toggle_key"] if self.options["hotkeys"] else None
        self.presenter = PalettePresenter(
            adapter,
            on_state_update=self._on_palette_update,
            toggle_key=toggle_key,
        )
        self._palette_screen: Optional[CommandPaletteScreen] = None

    def compose(self) -> ComposeResult:
        with Vertical(id="host"):
            yield Button(self.options["trigger_label"], id="palette-trigger")
            yield Static(self._status_text(), id="palette-status")
        yield Footer()

    def on_mount(self) -> None:
        theme = self.options.get("theme")
        if theme and theme in self.available_themes:
            self.theme = theme
        elif theme:
            logger.warning(f"Unknown theme {theme!r}, keeping {self.theme!r}")

    def _status_text(self) -> str:
        if self.options["hotkeys"]:
            return f"Press {self.options['toggle_key']} or the button to open the palette"
        return "Press the button to open the palette"

    def on_key(self, event: events.Key) -> None:
        # While open the palette screen owns the keyboard
        if self._palette_screen is not None:
            return
        if self.presenter.handle_key(event.key):
            event.stop()
            event.prevent_default()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "palette-trigger":
            self.presenter.dispatch(PaletteEvent.toggle())

    def _on_palette_update(self, vm: PaletteViewModel) -> None:
        if vm.is_open and self._palette_screen is None:
            logger.debug("Palette opened, pushing screen")
            self._palette_screen = CommandPaletteScreen(self.presenter)
            self.push_screen(self._palette_screen, self._on_palette_dismissed)

    def _on_palette_dismissed(self, _result: object = None) -> None:
        self._palette_screen = None
        trigger = self.query_one("#palette-trigger", Button)
        trigger.focus()


def run_palette_app(adapter: PaletteAdapter, options: Optional[PaletteOptions] = None) -> None:
    """Run the host app until the user quits."""
    app = MainlineApp(adapter, options=options)
    app.run()
