"""
Presenter for the command palette.

Owns the engine, turns engine snapshots into a flat view model for the
screen, and translates raw key presses into engine events.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional

from mainline.adapter import PaletteAdapter
from mainline.config.constants import (
    DEFAULT_EMPTY_STATE_TEXT,
    DEFAULT_PAGE_TITLE,
    DEFAULT_PLACEHOLDER,
    DEFAULT_SUBMIT_LABEL,
    DEFAULT_TOGGLE_KEY,
    FOOTER_HINT,
)
from mainline.engine import EngineSnapshot, EngineState, EventLike, PaletteEngine, PaletteEvent
from mainline.shortcuts import resolve_shortcut
from mainline.stack import NavDirection

logger = logging.getLogger(__name__)
key_logger = logging.getLogger("key_events")

RETRY_KEY = "ctrl+r"

_NAV_KEYS = {
    "down": NavDirection.NEXT,
    "up": NavDirection.PREV,
    "home": NavDirection.HOME,
    "end": NavDirection.END,
}


@dataclass
class PaletteRow:
    """A single rendered command."""

    id: str
    label: str
    subtitle: str = ""
    disabled: bool = False
    active: bool = False


@dataclass
class PaletteViewModel:
    """Everything the palette screen renders."""

    state: EngineState = EngineState.CLOSED
    page_id: Optional[str] = None
    stack_depth: int = 0
    title: str = DEFAULT_PAGE_TITLE
    subtitle: str = ""
    placeholder: str = DEFAULT_PLACEHOLDER
    query: str = ""
    is_input: bool = False
    submit_label: str = DEFAULT_SUBMIT_LABEL
    empty_state_text: str = DEFAULT_EMPTY_STATE_TEXT
    rows: list[PaletteRow] = field(default_factory=list)
    error: Optional[str] = None
    footer_hint: str = FOOTER_HINT

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def is_busy(self) -> bool:
        return self.state.is_pending

    @property
    def active_index(self) -> Optional[int]:
        for index, row in enumerate(self.rows):
            if row.active:
                return index
        return None


def build_view_model(snapshot: EngineSnapshot) -> PaletteViewModel:
    """Flatten an engine snapshot for rendering."""
    page = snapshot.page
    vm = PaletteViewModel(
        state=snapshot.state,
        stack_depth=snapshot.stack_depth,
        query=snapshot.query,
        error=snapshot.last_error,
    )
    if snapshot.state is EngineState.ERROR:
        vm.footer_hint = "Ctrl+R retry · Esc back/close"
    if page is None:
        return vm

    vm.page_id = page.id
    vm.title = page.title or DEFAULT_PAGE_TITLE
    vm.subtitle = page.subtitle or ""
    vm.placeholder = page.placeholder or DEFAULT_PLACEHOLDER
    vm.is_input = page.is_input
    vm.submit_label = page.submit_label or DEFAULT_SUBMIT_LABEL
    vm.empty_state_text = page.empty_state_text or DEFAULT_EMPTY_STATE_TEXT
    if not vm.is_input:
        vm.rows = [
            PaletteRow(
                id=command.id,
                label=command.label,
                subtitle=command.subtitle or "",
                disabled=command.disabled,
                active=command.id == snapshot.active_item_id,
            )
            for command in snapshot.commands
        ]
    return vm


def translate_key(
    snapshot: EngineSnapshot,
    key: str,
    toggle_key: Optional[str] = DEFAULT_TOGGLE_KEY,
) -> Optional[PaletteEvent]:
    """
    Map a raw key press to an engine event.

    Order matters: toggle, back, retry, shortcuts, navigation, then Enter.
    Shortcuts, navigation and Enter only apply while browsing; shortcuts
    additionally need a list page with an empty query.

    Returns:
        The event to dispatch, or None to let the key through (e.g. typing).
    """
    if toggle_key and key == toggle_key:
        return PaletteEvent.toggle()
    if not snapshot.is_open:
        return None

    if key == "escape":
        return PaletteEvent.back()

    if snapshot.state is EngineState.ERROR and key == RETRY_KEY:
        return PaletteEvent.retry()

    # Outside browsing only typing reaches the engine (QUERY.CHANGED)
    if snapshot.state is not EngineState.BROWSING:
        return None

    page = snapshot.page
    if page is None:
        return None

    command_id = resolve_shortcut(page, key, snapshot.active_item_id, snapshot.query)
    if command_id is not None:
        return PaletteEvent.activate(command_id)

    if key in _NAV_KEYS:
        return PaletteEvent.nav(_NAV_KEYS[key])

    if key == "enter":
        if page.is_input:
            return PaletteEvent.submit(snapshot.query)
        return PaletteEvent.activate(snapshot.active_item_id)

    return None


ViewListener = Callable[[PaletteViewModel], Any]


class PalettePresenter:
    """
    Handles command palette business logic for the Textual host.

    The screen renders ``view_model`` and forwards keys and input changes;
    the app forwards the toggle hotkey. Both listen through ``subscribe``.
    """

    def __init__(
        self,
        adapter: PaletteAdapter,
        on_state_update: Optional[ViewListener] = None,
        toggle_key: Optional[str] = DEFAULT_TOGGLE_KEY,
    ):
        self.toggle_key = toggle_key
        self._listeners: list[ViewListener] = []
        if on_state_update is not None:
            self._listeners.append(on_state_update)
        self.engine = PaletteEngine(adapter, on_state_update=self._on_engine_update)
        self._view_model = build_view_model(self.engine.snapshot)

    @property
    def view_model(self) -> PaletteViewModel:
        return self._view_model

    @property
    def snapshot(self) -> EngineSnapshot:
        return self.engine.snapshot

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a view listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _on_engine_update(self, snapshot: EngineSnapshot) -> None:
        self._view_model = build_view_model(snapshot)
        for listener in list(self._listeners):
            listener(self._view_model)

    def dispatch(self, event: EventLike) -> bool:
        logger.debug(f"[palette:event] {event}")
        return self.engine.dispatch(event)

    async def send(self, event: EventLike) -> PaletteViewModel:
        await self.engine.send(event)
        return self._view_model

    def set_query(self, query: str) -> bool:
        if query == self.engine.snapshot.query:
            return False
        return self.dispatch(PaletteEvent.query_changed(query))

    def handle_key(self, key: str) -> bool:
        """Translate and dispatch a key. True when the key was consumed."""
        event = translate_key(self.engine.snapshot, key, self.toggle_key)
        if event is None:
            return False
        key_logger.debug(f"{key} -> {event.type.value}")
        self.dispatch(event)
        return True
