"""
Command Palette Screen - modal overlay rendering the palette engine.

Keys typed into the search field are offered to the presenter first so
navigation, shortcuts, Enter and Escape reach the engine before the Input
widget inserts text.
"""

import logging
from collections.abc import Callable
from typing import Optional

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, ListItem, ListView, Static

from mainline.engine import PaletteEvent

from .palette_presenter import PalettePresenter, PaletteRow, PaletteViewModel

logger = logging.getLogger(__name__)


class PaletteInput(Input):
    """Search field that lets the palette claim keys before typing."""

    def __init__(self, key_handler: Callable[[str], bool], **kwargs):
        super().__init__(**kwargs)
        self._key_handler = key_handler

    def on_key(self, event: events.Key) -> None:
        # Unclaimed keys (typing) fall through to Input's own handler
        if self._key_handler(event.key):
            event.stop()
            event.prevent_default()


class PaletteResultWidget(ListItem):
    """Widget for a single palette row."""

    DEFAULT_CSS = """
    PaletteResultWidget {
        height: auto;
        padding: 0 1;
    }

    PaletteResultWidget.-disabled {
        color: $text-muted;
    }
    """

    def __init__(self, row: PaletteRow, **kwargs):
        super().__init__(**kwargs)
        self.row = row
        if row.disabled:
            self.add_class("-disabled")

    def compose(self) -> ComposeResult:
        label = self.row.label
        if len(label) > 50:
            label = label[:47] + "..."
        subtitle = self.row.subtitle
        if len(subtitle) > 35:
            subtitle = subtitle[:32] + "..."
        marker = "▶" if self.row.active else " "
        yield Static(f"{marker} {label}  [dim]{subtitle}[/dim]")


class CommandPaletteScreen(ModalScreen):
    """Command palette modal overlay driven by a PalettePresenter."""

    DEFAULT_CSS = """
    CommandPaletteScreen {
        align: center top;
        padding-top: 5;
    }

    #palette-container {
        width: 80;
        height: auto;
        max-height: 30;
        background: $surface;
        border: solid $primary;
    }

    #palette-title {
        padding: 0 1;
        text-style: bold;
    }

    #palette-subtitle {
        padding: 0 1;
        color: $text-muted;
    }

    #palette-input {
        width: 100%;
        border: none;
        border-bottom: solid $primary-darken-1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    #palette-results {
        height: auto;
        max-height: 20;
        min-height: 3;
        padding: 0;
    }

    #palette-error {
        padding: 0 1;
        color: $error;
    }

    #palette-hints {
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        padding: 0 1;
    }

    ListItem.--highlight {
        background: $accent;
    }
    """

    def __init__(self, presenter: PalettePresenter, **kwargs):
        super().__init__(**kwargs)
        self.presenter = presenter
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._render_id = 0
        self._page_key: Optional[tuple[Optional[str], int]] = None

    def compose(self) -> ComposeResult:
        vm = self.presenter.view_model
        with Vertical(id="palette-container"):
            yield Static(vm.title, id="palette-title")
            yield Static(vm.subtitle, id="palette-subtitle")
            yield PaletteInput(
                self.presenter.handle_key,
                placeholder=vm.placeholder,
                id="palette-input",
            )
            yield ListView(id="palette-results")
            yield Static("", id="palette-error")
            yield Static(vm.footer_hint, id="palette-hints")

    async def on_mount(self) -> None:
        self._unsubscribe = self.presenter.subscribe(self._on_state_update)
        self.query_one("#palette-input", PaletteInput).focus()
        await self._render_view(self.presenter.view_model, self._render_id)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state_update(self, vm: PaletteViewModel) -> None:
        self._render_id += 1
        self.call_later(self._render_view, vm, self._render_id)

    async def _render_view(self, vm: PaletteViewModel, render_id: int) -> None:
        # Skip if a newer render was requested
        if render_id != self._render_id or not self.is_attached:
            return

        if not vm.is_open:
            if self.is_current:
                logger.debug("Palette closed, dismissing screen")
                self.dismiss()
            return

        self.query_one("#palette-title", Static).update(vm.title)
        subtitle = self.query_one("#palette-subtitle", Static)
        subtitle.update(vm.subtitle)
        subtitle.display = bool(vm.subtitle)

        input_widget = self.query_one("#palette-input", PaletteInput)
        input_widget.placeholder = vm.placeholder
        # Only reset typed text when a different page is shown
        page_key = (vm.page_id, vm.stack_depth)
        if page_key != self._page_key:
            self._page_key = page_key
            if input_widget.value != vm.query:
                input_widget.value = vm.query

        error = self.query_one("#palette-error", Static)
        error.update(vm.error or "")
        error.display = vm.error is not None

        hints = vm.footer_hint
        if vm.is_input:
            hints = f"Enter {vm.submit_label} · Esc back/close"
        elif vm.is_busy:
            hints = "Working..."
        self.query_one("#palette-hints", Static).update(hints)

        results = self.query_one("#palette-results", ListView)
        results.display = not vm.is_input
        await results.clear()
        if vm.is_input:
            return
        if not vm.rows:
            empty_text = "Loading..." if vm.is_busy else vm.empty_state_text
            await results.append(
                ListItem(Static(f"[dim]{empty_text}[/dim]", id="palette-empty"))
            )
            return
        for row in vm.rows:
            await results.append(PaletteResultWidget(row))
        if vm.active_index is not None:
            results.index = vm.active_index

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "palette-input":
            return
        self.presenter.set_query(event.value)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, PaletteResultWidget):
            self.presenter.dispatch(PaletteEvent.activate(item.row.id))
