"""
Palette engine - the state machine behind the command palette.

The host dispatches events one at a time. Events that need the adapter
(loading a page, executing a command, submitting input) move the engine into
a pending state and schedule the adapter call as an asyncio task; when the
call settles its outcome is folded into the context through ``stack``.

Closing is accepted from any open state and abandons the in-flight call.
Every call is tagged with a generation number, and a resolution is applied
only while both the generation and the awaiting state still match. Anything
else is dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Union

from . import stack
from .adapter import PaletteAdapter, coerce_load_outcome, coerce_page, coerce_result
from .exceptions import EngineStateError, InvalidCommandError, error_message
from .models import Command, Page, Result, ResultKind
from .search import find_command
from .stack import EngineContext, LoadKind, LoadRequest, NavDirection

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    """Engine states; every open substate is prefixed with ``open.``."""

    CLOSED = "closed"
    LOADING_PAGE = "open.loadingPage"
    BROWSING = "open.browsing"
    EXECUTING = "open.executing"
    SUBMITTING_INPUT = "open.submittingInput"
    ERROR = "open.error"

    @property
    def is_open(self) -> bool:
        return self is not EngineState.CLOSED

    @property
    def is_pending(self) -> bool:
        return self in _PENDING_STATES


_PENDING_STATES = frozenset(
    {EngineState.LOADING_PAGE, EngineState.EXECUTING, EngineState.SUBMITTING_INPUT}
)


class EventType(str, Enum):
    """Events the host may dispatch."""

    PALETTE_OPEN = "PALETTE.OPEN"
    PALETTE_CLOSE = "PALETTE.CLOSE"
    PALETTE_TOGGLE = "PALETTE.TOGGLE"
    QUERY_CHANGED = "QUERY.CHANGED"
    NAV_NEXT = "NAV.NEXT"
    NAV_PREV = "NAV.PREV"
    NAV_HOME = "NAV.HOME"
    NAV_END = "NAV.END"
    ITEM_ACTIVATE = "ITEM.ACTIVATE"
    INPUT_SUBMIT = "INPUT.SUBMIT"
    PAGE_BACK = "PAGE.BACK"
    RETRY = "RETRY"


_NAV_DIRECTIONS = {
    EventType.NAV_NEXT: NavDirection.NEXT,
    EventType.NAV_PREV: NavDirection.PREV,
    EventType.NAV_HOME: NavDirection.HOME,
    EventType.NAV_END: NavDirection.END,
}


@dataclass(frozen=True)
class PaletteEvent:
    """An event plus its optional payload."""

    type: EventType
    query: Optional[str] = None  # QUERY.CHANGED
    id: Optional[str] = None  # ITEM.ACTIVATE
    value: Optional[str] = None  # INPUT.SUBMIT

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", EventType(self.type))

    @classmethod
    def open(cls) -> PaletteEvent:
        return cls(EventType.PALETTE_OPEN)

    @classmethod
    def close(cls) -> PaletteEvent:
        return cls(EventType.PALETTE_CLOSE)

    @classmethod
    def toggle(cls) -> PaletteEvent:
        return cls(EventType.PALETTE_TOGGLE)

    @classmethod
    def query_changed(cls, query: str) -> PaletteEvent:
        return cls(EventType.QUERY_CHANGED, query=query)

    @classmethod
    def nav(cls, direction: Union[NavDirection, str]) -> PaletteEvent:
        direction = NavDirection(direction)
        for event_type, nav_direction in _NAV_DIRECTIONS.items():
            if nav_direction is direction:
                return cls(event_type)
        raise ValueError(f"Unknown direction: {direction!r}")

    @classmethod
    def activate(cls, id: Optional[str] = None) -> PaletteEvent:
        return cls(EventType.ITEM_ACTIVATE, id=id)

    @classmethod
    def submit(cls, value: Optional[str] = None) -> PaletteEvent:
        return cls(EventType.INPUT_SUBMIT, value=value)

    @classmethod
    def back(cls) -> PaletteEvent:
        return cls(EventType.PAGE_BACK)

    @classmethod
    def retry(cls) -> PaletteEvent:
        return cls(EventType.RETRY)


EventLike = Union[PaletteEvent, EventType, str]


@dataclass(frozen=True)
class EngineSnapshot:
    """What the host reads on every render."""

    state: EngineState
    page: Optional[Page]
    commands: tuple[Command, ...]
    active_item_id: Optional[str]
    query: str
    last_error: Optional[str]
    stack_depth: int

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def is_pending(self) -> bool:
        return self.state.is_pending

    def matches(self, state: Union[EngineState, str]) -> bool:
        """State test in the ``"open"`` / ``"open.browsing"`` style."""
        name = state.value if isinstance(state, EngineState) else state
        value = self.state.value
        return value == name or value.startswith(name + ".")


StateListener = Callable[[EngineSnapshot], Any]


async def _resolve(value: Any) -> Any:
    """Await adapter return values that are awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


class PaletteEngine:
    """
    Drives the palette through its adapter.

    Usage:
        engine = PaletteEngine(adapter)
        await engine.send(PaletteEvent.open())
        engine.snapshot.page  # root page
    """

    def __init__(
        self,
        adapter: PaletteAdapter,
        on_state_update: Optional[StateListener] = None,
    ):
        self._adapter = adapter
        self._state = EngineState.CLOSED
        self._context = EngineContext()
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._abandoned: set[asyncio.Task] = set()
        self._listener_tasks: set[asyncio.Future] = set()
        self._listeners: list[StateListener] = []
        if on_state_update is not None:
            self._listeners.append(on_state_update)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def adapter(self) -> PaletteAdapter:
        return self._adapter

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def context(self) -> EngineContext:
        return self._context

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def snapshot(self) -> EngineSnapshot:
        context = self._context
        return EngineSnapshot(
            state=self._state,
            page=context.current_page,
            commands=tuple(context.filtered_commands),
            active_item_id=context.active_item_id,
            query=context.query,
            last_error=context.last_error,
            stack_depth=len(context.stack),
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a snapshot listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            outcome = listener(snapshot)
            if inspect.isawaitable(outcome):
                task = asyncio.ensure_future(outcome)
                self._listener_tasks.add(task)
                task.add_done_callback(self._listener_done)

    def _listener_done(self, task: asyncio.Future) -> None:
        self._listener_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"State listener failed: {error}", exc_info=error)

    # ------------------------------------------------------------------
    # Event intake
    # ------------------------------------------------------------------

    def dispatch(self, event: EventLike) -> bool:
        """
        Handle one host event.

        Returns:
            True if the event was accepted in the current state, False if it
            was ignored.
        """
        if not isinstance(event, PaletteEvent):
            event = PaletteEvent(EventType(event))

        logger.debug(f"event {event.type.value} in {self._state.value}")
        before = self._state
        accepted = self._handle(event)
        if accepted:
            self._log_transition(before)
            self._notify()
        else:
            logger.debug(f"ignored {event.type.value} in {self._state.value}")
        return accepted

    async def send(self, event: EventLike) -> EngineSnapshot:
        """Dispatch an event and wait for any adapter work it started."""
        self.dispatch(event)
        await self.wait_until_idle()
        return self.snapshot

    async def wait_until_idle(self) -> None:
        """Wait until no adapter call is in flight for the current generation."""
        while True:
            task = self._task
            if task is None:
                return
            if task.done():
                # Surface engine faults raised while applying a resolution
                task.result()
                return
            await asyncio.wait({task})

    def _handle(self, event: PaletteEvent) -> bool:
        kind = event.type
        state = self._state

        if state is EngineState.CLOSED:
            if kind in (EventType.PALETTE_OPEN, EventType.PALETTE_TOGGLE):
                self._open()
                return True
            return False

        if kind in (EventType.PALETTE_CLOSE, EventType.PALETTE_TOGGLE):
            self._close()
            return True

        if state is EngineState.BROWSING:
            return self._handle_browsing(event)
        if state is EngineState.ERROR:
            return self._handle_error(event)

        # Loading, executing and submitting only accept close/toggle
        return False

    def _handle_browsing(self, event: PaletteEvent) -> bool:
        kind = event.type
        context = self._context

        if kind is EventType.QUERY_CHANGED:
            self._context = stack.set_query(context, event.query or "")
            return True

        if kind in _NAV_DIRECTIONS:
            active = stack.move_active_id(context, _NAV_DIRECTIONS[kind])
            self._context = replace(context, active_item_id=active)
            return True

        if kind is EventType.ITEM_ACTIVATE:
            return self._activate(event.id)

        if kind is EventType.INPUT_SUBMIT:
            page = context.current_page
            if page is None or not page.is_input:
                return False
            self._context = replace(stack.begin_submit(context, event.value), pending_load=None)
            self._start_submit()
            return True

        if kind is EventType.PAGE_BACK:
            return self._back()

        return False

    def _handle_error(self, event: PaletteEvent) -> bool:
        kind = event.type
        context = self._context

        if kind is EventType.RETRY:
            self._context = stack.clear_error(context)
            if context.pending_load is not None:
                self._start_load()
            else:
                self._state = EngineState.BROWSING
            return True

        if kind is EventType.PAGE_BACK:
            self._context = replace(stack.clear_error(context), pending_load=None)
            return self._back()

        if kind is EventType.QUERY_CHANGED:
            if not context.stack:
                # Nothing to browse until the root loads; keep the load for RETRY
                self._context = replace(context, query=event.query or "")
                return True
            self._context = replace(
                stack.set_query(context, event.query or ""), pending_load=None
            )
            self._state = EngineState.BROWSING
            return True

        return False

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _open(self) -> None:
        self._context = stack.begin_root_load(EngineContext())
        self._start_load()
        self._notify_open_change(True)

    def _close(self) -> None:
        # Abandon whatever is in flight; its resolution will be dropped
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._abandoned.add(self._task)
            self._task.add_done_callback(self._abandoned.discard)
        self._task = None
        self._context = EngineContext()
        self._state = EngineState.CLOSED
        self._notify_open_change(False)

    def _back(self) -> bool:
        if self._context.has_parent_page:
            self._context = stack.pop_page(self._context)
            self._state = EngineState.BROWSING
        else:
            self._close()
        return True

    def _activate(self, command_id: Optional[str]) -> bool:
        context = self._context
        target_id = command_id if command_id is not None else context.active_item_id
        command = find_command(context.current_page, context.query, target_id)
        if command is None or command.disabled:
            return False

        self._context = stack.select_command(context, command)
        if command.is_page:
            self._context = stack.begin_child_load(self._context)
            self._start_load()
        else:
            self._context = replace(self._context, pending_load=None)
            self._start_execute()
        return True

    def _notify_open_change(self, is_open: bool) -> None:
        hook = getattr(self._adapter, "on_open_change", None)
        if hook is None:
            return
        try:
            hook(is_open)
        except Exception as e:
            logger.warning(f"on_open_change({is_open}) failed: {e}")

    def _log_transition(self, before: EngineState) -> None:
        context = self._context
        page = context.current_page
        logger.debug(
            f"transition {before.value} -> {self._state.value} "
            f"page={page.id if page else None} query={context.query!r} "
            f"active={context.active_item_id} error={context.last_error!r}"
        )

    # ------------------------------------------------------------------
    # Adapter calls
    # ------------------------------------------------------------------

    def _schedule(self, state: EngineState, coro_factory) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise EngineStateError(
                "PaletteEngine needs a running event loop to call its adapter"
            ) from e
        self._state = state
        self._generation += 1
        generation = self._generation
        self._task = loop.create_task(coro_factory(generation))

    def _is_current(self, generation: int, state: EngineState) -> bool:
        if generation == self._generation and self._state is state:
            return True
        logger.debug(f"dropping stale {state.value} resolution (generation {generation})")
        return False

    def _start_load(self) -> None:
        request = self._context.pending_load or LoadRequest(LoadKind.ROOT)
        self._schedule(EngineState.LOADING_PAGE, lambda gen: self._run_load(gen, request))

    def _start_execute(self) -> None:
        page = self._context.current_page
        command = self._context.pending_command
        query = self._context.query
        self._schedule(
            EngineState.EXECUTING,
            lambda gen: self._run_execute(gen, page, command, query),
        )

    def _start_submit(self) -> None:
        page = self._context.current_page
        value = self._context.input_value
        meta = self._context.invocation_meta
        self._schedule(
            EngineState.SUBMITTING_INPUT,
            lambda gen: self._run_submit(gen, page, value, meta),
        )

    async def _load(self, request: LoadRequest) -> Union[Page, Result]:
        if request.kind is LoadKind.CHILD or not request.targets_root:
            if not request.page_id or not request.item_id:
                raise InvalidCommandError(command_id=request.item_id)
            value = await _resolve(
                self._adapter.load_child(
                    request.page_id, request.item_id, request.query, request.meta
                )
            )
            return coerce_load_outcome(value)
        return coerce_page(await _resolve(self._adapter.load_root()))

    async def _run_load(self, generation: int, request: LoadRequest) -> None:
        try:
            outcome = await self._load(request)
        except Exception as e:
            if self._is_current(generation, EngineState.LOADING_PAGE):
                logger.warning(f"load {request.kind.value} failed: {e}")
                self._fail(error_message(e))
            return

        if not self._is_current(generation, EngineState.LOADING_PAGE):
            return

        before = self._state
        if isinstance(outcome, Page):
            self._context = stack.apply_loaded_page(self._context, outcome, request.kind)
            self._state = EngineState.BROWSING
            self._log_transition(before)
            self._notify()
        else:
            self._apply_outcome(outcome, from_load=True)

    async def _run_execute(
        self,
        generation: int,
        page: Optional[Page],
        command: Optional[Command],
        query: str,
    ) -> None:
        try:
            if page is None or command is None:
                raise EngineStateError("No command selected for execution.")
            value = await _resolve(
                self._adapter.execute(command.id, page.id, query, command.meta)
            )
            result = coerce_result(value)
        except Exception as e:
            if self._is_current(generation, EngineState.EXECUTING):
                logger.warning(f"execute failed: {e}")
                self._fail(error_message(e))
            return

        if self._is_current(generation, EngineState.EXECUTING):
            self._apply_outcome(result)

    async def _run_submit(
        self,
        generation: int,
        page: Optional[Page],
        value: str,
        meta: Any,
    ) -> None:
        try:
            if page is None:
                raise EngineStateError("No page available for input submission.")
            result = coerce_result(await _resolve(self._adapter.submit(page.id, value, meta)))
        except Exception as e:
            if self._is_current(generation, EngineState.SUBMITTING_INPUT):
                logger.warning(f"submit failed: {e}")
                self._fail(error_message(e))
            return

        if self._is_current(generation, EngineState.SUBMITTING_INPUT):
            self._apply_outcome(result)

    def _fail(self, message: str) -> None:
        before = self._state
        self._context = stack.record_error(self._context, message)
        self._state = EngineState.ERROR
        self._log_transition(before)
        self._notify()

    def _apply_outcome(self, result: Result, from_load: bool = False) -> None:
        """Route a settled Result to the next state."""
        before = self._state
        kind = result.kind

        if kind is ResultKind.CLOSE:
            self._close()
        elif kind is ResultKind.REFRESH_PAGE:
            self._context = stack.begin_refresh_load(stack.apply_result(self._context, result))
            self._start_load()
        elif kind is ResultKind.ERROR:
            # A failed load keeps its request so RETRY can re-issue it
            self._context = stack.apply_result(self._context, result)
            self._state = EngineState.ERROR
        elif kind in (
            ResultKind.PUSH_PAGE,
            ResultKind.REPLACE_PAGE,
            ResultKind.POP_PAGE,
            ResultKind.STAY,
        ):
            self._context = stack.apply_result(self._context, result)
            if from_load:
                self._context = replace(self._context, pending_load=None)
            self._state = EngineState.BROWSING
        else:
            raise ValueError(f"Unhandled result kind: {kind!r}")

        self._log_transition(before)
        self._notify()
