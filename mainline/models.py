"""
Data model for the command palette.

Pages and commands are supplied by an adapter and never mutated by the
engine. Results are what the adapter hands back after executing a command or
submitting input; the engine's next move is decided by ``Result.kind`` alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# Opaque adapter payload, threaded through adapter calls and never inspected.
Meta = Optional[Mapping[str, Any]]


class CommandIntent(str, Enum):
    """What activating a command does."""

    PAGE = "page"  # Drill into a child page
    ACTION = "action"  # Fire an effect through the adapter


class PageMode(str, Enum):
    """How a page is presented."""

    LIST = "list"  # Searchable list of commands
    INPUT = "input"  # Single free-text field with a submit


class ResultKind(str, Enum):
    """Discriminant of a Result."""

    CLOSE = "close"
    STAY = "stay"
    PUSH_PAGE = "pushPage"
    REPLACE_PAGE = "replacePage"
    POP_PAGE = "popPage"
    REFRESH_PAGE = "refreshPage"
    ERROR = "error"


@dataclass(frozen=True)
class Shortcut:
    """A key bound to a command, optionally scoped to an active item."""

    key: str
    target_item_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Shortcut:
        return cls(
            key=str(data["key"]),
            target_item_id=data.get("target_item_id", data.get("targetItemId")),
        )


@dataclass(frozen=True)
class Command:
    """A selectable palette entry."""

    id: str  # Unique within its page
    label: str
    intent: CommandIntent = CommandIntent.ACTION
    subtitle: Optional[str] = None
    keywords: tuple[str, ...] = ()  # Extra search text
    hidden: bool = False  # Excluded from display and search
    disabled: bool = False  # Visible but not activatable
    child_page_id: Optional[str] = None  # Required when intent is PAGE
    shortcuts: tuple[Shortcut, ...] = ()
    meta: Meta = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "intent", CommandIntent(self.intent))
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "shortcuts", tuple(self.shortcuts))

    @property
    def is_page(self) -> bool:
        return self.intent is CommandIntent.PAGE

    @property
    def is_action(self) -> bool:
        return self.intent is CommandIntent.ACTION

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Command:
        """Build a command from a plain mapping (snake_case or camelCase keys)."""
        shortcuts = [
            s if isinstance(s, Shortcut) else Shortcut.from_dict(s)
            for s in data.get("shortcuts") or ()
        ]
        return cls(
            id=str(data["id"]),
            label=str(data["label"]),
            intent=CommandIntent(data.get("intent", CommandIntent.ACTION)),
            subtitle=data.get("subtitle"),
            keywords=tuple(data.get("keywords") or ()),
            hidden=bool(data.get("hidden", False)),
            disabled=bool(data.get("disabled", False)),
            child_page_id=data.get("child_page_id", data.get("childPageId")),
            shortcuts=tuple(shortcuts),
            meta=data.get("meta"),
        )


@dataclass(frozen=True)
class Page:
    """A titled, searchable container of commands."""

    id: str
    title: str
    items: tuple[Command, ...] = ()
    subtitle: Optional[str] = None
    mode: PageMode = PageMode.LIST
    placeholder: Optional[str] = None
    submit_label: Optional[str] = None
    empty_state_text: Optional[str] = None
    meta: Meta = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", PageMode(self.mode))
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_input(self) -> bool:
        return self.mode is PageMode.INPUT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Page:
        """Build a page from a plain mapping (snake_case or camelCase keys)."""
        items = [
            item if isinstance(item, Command) else Command.from_dict(item)
            for item in data.get("items") or ()
        ]
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            items=tuple(items),
            subtitle=data.get("subtitle"),
            mode=PageMode(data.get("mode") or PageMode.LIST),
            placeholder=data.get("placeholder"),
            submit_label=data.get("submit_label", data.get("submitLabel")),
            empty_state_text=data.get("empty_state_text", data.get("emptyStateText")),
            meta=data.get("meta"),
        )


@dataclass(frozen=True)
class Result:
    """
    Outcome of an adapter execute/submit call.

    Exactly one variant is active; build instances through the classmethods
    rather than the constructor.
    """

    kind: ResultKind
    page: Optional[Page] = None  # PUSH_PAGE / REPLACE_PAGE only
    message: Optional[str] = None  # ERROR only

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ResultKind(self.kind))
        if self.kind in (ResultKind.PUSH_PAGE, ResultKind.REPLACE_PAGE) and self.page is None:
            raise ValueError(f"{self.kind.value} result requires a page")
        if self.kind is ResultKind.ERROR and self.message is None:
            raise ValueError("error result requires a message")

    @classmethod
    def close(cls) -> Result:
        return cls(ResultKind.CLOSE)

    @classmethod
    def stay(cls) -> Result:
        return cls(ResultKind.STAY)

    @classmethod
    def push_page(cls, page: Page) -> Result:
        return cls(ResultKind.PUSH_PAGE, page=page)

    @classmethod
    def replace_page(cls, page: Page) -> Result:
        return cls(ResultKind.REPLACE_PAGE, page=page)

    @classmethod
    def pop_page(cls) -> Result:
        return cls(ResultKind.POP_PAGE)

    @classmethod
    def refresh_page(cls) -> Result:
        return cls(ResultKind.REFRESH_PAGE)

    @classmethod
    def error(cls, message: str) -> Result:
        return cls(ResultKind.ERROR, message=message)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Result:
        """Build a result from ``{"kind": ..., "page": ..., "message": ...}``."""
        kind = ResultKind(data["kind"])
        page = data.get("page")
        if page is not None and not isinstance(page, Page):
            page = Page.from_dict(page)
        return cls(kind, page=page, message=data.get("message"))
