"""Page builders and fake adapters for palette tests."""

import asyncio
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

from mainline.models import Command, CommandIntent, Page, PageMode, Result

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_command(id: str, label: Optional[str] = None, **kwargs: Any) -> Command:
    return Command(id=id, label=label or id.replace("-", " ").title(), **kwargs)


def make_page_command(id: str, child_page_id: Optional[str], **kwargs: Any) -> Command:
    return make_command(id, intent=CommandIntent.PAGE, child_page_id=child_page_id, **kwargs)


def make_page(id: str, *items: Command, **kwargs: Any) -> Page:
    title = kwargs.pop("title", id.title())
    return Page(id=id, title=title, items=items, **kwargs)


def make_input_page(id: str, **kwargs: Any) -> Page:
    title = kwargs.pop("title", id.title())
    return Page(id=id, title=title, mode=PageMode.INPUT, **kwargs)


def root_page() -> Page:
    """Root page used by most engine tests."""
    return make_page(
        "root",
        make_page_command("open-settings", "settings", label="Settings", keywords=("prefs",)),
        make_command("say-hello", label="Say hello", subtitle="Greets you"),
        make_command("disabled-cmd", label="Disabled", disabled=True),
        make_command("secret", label="Secret", hidden=True),
        make_page_command("rename", "rename-input", label="Rename", meta={"target": "home"}),
    )


def settings_page() -> Page:
    return make_page(
        "settings",
        make_command("theme", label="Theme"),
        make_command("font", label="Font"),
    )


def rename_page() -> Page:
    return make_input_page("rename-input", title="Rename", meta={"target": "home"})


async def settle(rounds: int = 5) -> None:
    """Let pending tasks run a few loop iterations."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


class ScriptedAdapter:
    """Adapter whose calls are AsyncMocks returning scripted values."""

    def __init__(
        self,
        root: Optional[Page] = None,
        children: Optional[dict[str, Any]] = None,
    ):
        if children is None:
            children = {"settings": settings_page(), "rename-input": rename_page()}
        self.children = children
        self.load_root = AsyncMock(return_value=root or root_page())
        self.load_child = AsyncMock(side_effect=self._load_child)
        self.execute = AsyncMock(return_value=Result.stay())
        self.submit = AsyncMock(return_value=Result.stay())
        self.on_open_change = MagicMock()

    def _load_child(self, page_id, item_id, query=None, meta=None):
        return self.children[page_id]


class Deferred:
    """Adapter call whose outcome is supplied later by the test.

    Use the bound ``call`` coroutine as an AsyncMock side effect.
    """

    def __init__(self):
        self.future: Optional[asyncio.Future] = None
        self.calls: list[tuple] = []

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        self.calls.append(args)
        self.future = asyncio.get_running_loop().create_future()
        return await self.future
