"""Keyboard shortcut resolution for palette pages."""

from collections.abc import Iterable
from typing import Optional

from .models import Page, Shortcut


def normalize_key(key: str) -> str:
    return key.lower()


def shortcut_matches(
    shortcuts: Iterable[Shortcut],
    key: str,
    active_item_id: Optional[str],
) -> bool:
    """True when any shortcut fires for ``key`` given the active item.

    Scoped shortcuts (with a target item id) only fire while that item is
    active; unscoped ones always fire.
    """
    wanted = normalize_key(key)
    for shortcut in shortcuts:
        if normalize_key(shortcut.key) != wanted:
            continue
        if shortcut.target_item_id is None or shortcut.target_item_id == active_item_id:
            return True
    return False


def resolve_shortcut(
    page: Optional[Page],
    key: str,
    active_item_id: Optional[str],
    query: str = "",
) -> Optional[str]:
    """
    Map a raw key press to a command id.

    Shortcuts are ignored on input pages and while a query is typed, so
    ordinary typing in the search field is never intercepted.

    Returns:
        Id of the first visible, enabled command bound to the key, or None.
    """
    if page is None or page.is_input or query.strip():
        return None

    for command in page.items:
        if command.hidden or command.disabled:
            continue
        if shortcut_matches(command.shortcuts, key, active_item_id):
            return command.id
    return None
