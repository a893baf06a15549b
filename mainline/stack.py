"""
Navigation stack manager.

Pure functions folding loaded pages and adapter results into a new
``EngineContext``. Nothing here performs I/O or talks to the adapter; the
engine decides *when* to call these, this module decides *what* the next
context looks like.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .models import Command, Meta, Page, Result, ResultKind
from .search import filter_commands, first_active_item_id

logger = logging.getLogger(__name__)


class LoadKind(str, Enum):
    """How a loaded page lands on the stack."""

    ROOT = "root"  # Stack becomes [page]
    CHILD = "child"  # Page is pushed
    REFRESH = "refresh"  # Page replaces the current top


class NavDirection(str, Enum):
    NEXT = "next"
    PREV = "prev"
    HOME = "home"
    END = "end"


@dataclass(frozen=True)
class LoadRequest:
    """Descriptor of a page load the engine has issued (or will re-issue)."""

    kind: LoadKind
    page_id: Optional[str] = None  # None means "load the root"
    item_id: Optional[str] = None
    query: str = ""
    meta: Meta = None

    @property
    def targets_root(self) -> bool:
        return self.page_id is None


@dataclass(frozen=True)
class EngineContext:
    """Everything the engine knows between events."""

    stack: tuple[Page, ...] = ()
    query: str = ""
    active_item_id: Optional[str] = None
    last_error: Optional[str] = None
    pending_load: Optional[LoadRequest] = None
    pending_command: Optional[Command] = None
    invocation_meta: Meta = None
    input_value: str = ""
    # Request that produced each stack entry; None for result-pushed pages.
    page_origins: tuple[Optional[LoadRequest], ...] = ()

    @property
    def current_page(self) -> Optional[Page]:
        return self.stack[-1] if self.stack else None

    @property
    def has_parent_page(self) -> bool:
        return len(self.stack) > 1

    @property
    def filtered_commands(self) -> list[Command]:
        return filter_commands(self.current_page, self.query)


def _enter_page(context: EngineContext, stack, origins) -> EngineContext:
    """Common reset after the displayed page changes."""
    page = stack[-1] if stack else None
    return replace(
        context,
        stack=tuple(stack),
        page_origins=tuple(origins),
        query="",
        active_item_id=first_active_item_id(page, ""),
        pending_command=None,
        invocation_meta=page.meta if page is not None else None,
        last_error=None,
    )


def apply_loaded_page(
    context: EngineContext,
    page: Page,
    load_kind: Optional[LoadKind] = None,
) -> EngineContext:
    """
    Fold a freshly loaded page into the context.

    ``load_kind`` defaults to the kind of the pending load (root when none).
    """
    request = context.pending_load
    kind = load_kind or (request.kind if request else LoadKind.ROOT)

    if kind is LoadKind.ROOT:
        stack = [page]
        origins = [request]
    elif kind is LoadKind.CHILD:
        stack = [*context.stack, page]
        origins = [*context.page_origins, request]
    elif kind is LoadKind.REFRESH:
        stack = [*context.stack[:-1], page]
        origins = [*context.page_origins[:-1], request]
    else:
        raise ValueError(f"Unknown load kind: {kind!r}")

    return replace(_enter_page(context, stack, origins), pending_load=None)


def _pop(context: EngineContext) -> EngineContext:
    if not context.has_parent_page:
        return _enter_page(context, context.stack, context.page_origins)
    return _enter_page(context, context.stack[:-1], context.page_origins[:-1])


def apply_result(context: EngineContext, result: Result) -> EngineContext:
    """
    Fold an adapter result into the context.

    CLOSE and REFRESH_PAGE only clear the pending command here; leaving the
    palette and re-loading are the engine's job.
    """
    kind = result.kind

    if kind is ResultKind.PUSH_PAGE:
        return _enter_page(
            context,
            [*context.stack, result.page],
            [*context.page_origins, None],
        )

    if kind is ResultKind.REPLACE_PAGE:
        if not context.stack:
            logger.debug("replacePage on an empty stack, treating as push")
        return _enter_page(
            context,
            [*context.stack[:-1], result.page],
            [*context.page_origins[:-1], None],
        )

    if kind is ResultKind.POP_PAGE:
        return _pop(context)

    if kind is ResultKind.ERROR:
        return replace(context, last_error=result.message, pending_command=None)

    if kind in (ResultKind.STAY, ResultKind.CLOSE, ResultKind.REFRESH_PAGE):
        return replace(context, pending_command=None, last_error=None)

    raise ValueError(f"Unhandled result kind: {kind!r}")


def pop_page(context: EngineContext) -> EngineContext:
    """Back-navigation: drop the top page when a parent exists."""
    return _pop(context)


def move_active_id(context: EngineContext, direction: NavDirection) -> Optional[str]:
    """
    Next active item id when moving through the filtered list.

    NEXT/PREV wrap around. An active id missing from the filtered list makes
    NEXT start from the first entry and PREV from the last.
    """
    commands = context.filtered_commands
    if not commands:
        return None

    direction = NavDirection(direction)
    if direction is NavDirection.HOME:
        return commands[0].id
    if direction is NavDirection.END:
        return commands[-1].id

    ids = [c.id for c in commands]
    count = len(ids)
    if context.active_item_id in ids:
        index = ids.index(context.active_item_id)
        step = 1 if direction is NavDirection.NEXT else -1
        return ids[(index + step) % count]
    return ids[0] if direction is NavDirection.NEXT else ids[-1]


# =============================================================================
# Context preparation for engine transitions
# =============================================================================


def begin_root_load(context: EngineContext) -> EngineContext:
    """Reset for a fresh open and queue the root load."""
    return replace(
        context,
        query="",
        input_value="",
        pending_load=LoadRequest(LoadKind.ROOT),
        pending_command=None,
        last_error=None,
        invocation_meta=None,
    )


def select_command(context: EngineContext, command: Command) -> EngineContext:
    """Make ``command`` the pending command and adopt its meta."""
    return replace(context, pending_command=command, invocation_meta=command.meta)


def begin_child_load(context: EngineContext) -> EngineContext:
    """Queue the child load for the pending page-intent command."""
    command = context.pending_command
    request = LoadRequest(
        LoadKind.CHILD,
        page_id=command.child_page_id if command else None,
        item_id=command.id if command else None,
        query=context.query,
        meta=command.meta if command else None,
    )
    return replace(context, pending_load=request, input_value="")


def begin_refresh_load(context: EngineContext) -> EngineContext:
    """Queue a re-load of whatever produced the current top page."""
    origin = context.page_origins[-1] if context.page_origins else None
    if origin is None or origin.targets_root:
        request = LoadRequest(LoadKind.REFRESH)
    else:
        request = replace(origin, kind=LoadKind.REFRESH)
    return replace(context, pending_load=request, pending_command=None)


def begin_submit(context: EngineContext, value: Optional[str] = None) -> EngineContext:
    """Capture the submitted value and the page meta."""
    page = context.current_page
    return replace(
        context,
        input_value=context.query if value is None else value,
        invocation_meta=page.meta if page is not None else None,
    )


def set_query(context: EngineContext, query: str) -> EngineContext:
    return replace(
        context,
        query=query,
        active_item_id=first_active_item_id(context.current_page, query),
    )


def record_error(context: EngineContext, message: str) -> EngineContext:
    return replace(context, last_error=message, pending_command=None)


def clear_error(context: EngineContext) -> EngineContext:
    return replace(context, last_error=None)
