"""
Adapter contract - the only boundary the engine depends on.

An adapter supplies pages and performs command effects. Methods may be
coroutines or plain functions; the engine awaits whatever comes back.
Return values are validated here so shape problems surface as ordinary
adapter failures.
"""

from collections.abc import Mapping
from typing import Any, Awaitable, Optional, Protocol, Union, runtime_checkable

from .exceptions import AdapterError, InvalidPageError
from .models import Meta, Page, Result

LoadOutcome = Union[Page, Result]


@runtime_checkable
class PaletteAdapter(Protocol):
    """Protocol for objects that feed the palette engine.

    ``on_open_change`` is optional; the engine looks it up with getattr.
    """

    def load_root(self) -> Awaitable[Page]:
        """Load the root page."""
        ...

    def load_child(
        self,
        page_id: str,
        item_id: str,
        query: Optional[str] = None,
        meta: Meta = None,
    ) -> Awaitable[LoadOutcome]:
        """Load the child page of a page-intent command, or short-circuit with a Result."""
        ...

    def execute(
        self,
        item_id: str,
        page_id: str,
        query: Optional[str] = None,
        meta: Meta = None,
    ) -> Awaitable[Result]:
        """Run an action-intent command."""
        ...

    def submit(self, page_id: str, query: str, meta: Meta = None) -> Awaitable[Result]:
        """Submit the value of an input-mode page."""
        ...


def _looks_like_page(value: Any) -> bool:
    return isinstance(value, Mapping) and "id" in value and "title" in value


def _looks_like_result(value: Any) -> bool:
    return isinstance(value, Mapping) and "kind" in value


def coerce_page(value: Any) -> Page:
    """Accept a Page (or its mapping form) from a load call."""
    if isinstance(value, Page):
        return value
    if _looks_like_page(value):
        try:
            return Page.from_dict(value)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidPageError(f"Invalid page from the adapter: {e}") from e
    raise InvalidPageError(received=type(value).__name__)


def coerce_result(value: Any) -> Result:
    """Accept a Result (or its mapping form) from execute/submit."""
    if isinstance(value, Result):
        return value
    if _looks_like_result(value):
        try:
            return Result.from_dict(value)
        except (KeyError, TypeError, ValueError) as e:
            raise AdapterError(f"Invalid command result from the adapter: {e}") from e
    raise AdapterError(
        "Expected a command result from the adapter.", received=type(value).__name__
    )


def coerce_load_outcome(value: Any) -> LoadOutcome:
    """Accept either a Page or a Result from load_child."""
    if isinstance(value, Result) or _looks_like_result(value):
        return coerce_result(value)
    return coerce_page(value)
