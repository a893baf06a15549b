"""
Filtering for palette pages.

Matching is a plain case-insensitive substring test against a command's
label, subtitle and keywords. No fuzzy scoring and no diacritic folding:
results keep page order so the first match is predictable.
"""

from typing import Optional

from .models import Command, Page


def normalize(value: Optional[str]) -> str:
    """Trim and lowercase a query or candidate field."""
    if value is None:
        return ""
    return value.strip().lower()


def matches(command: Command, normalized_query: str) -> bool:
    """Check a command against an already normalized, non-empty query."""
    fields = [command.label, command.subtitle, *command.keywords]
    return any(normalized_query in normalize(f) for f in fields)


def filter_commands(page: Optional[Page], query: str) -> list[Command]:
    """
    Visible commands of a page matching the query, in page order.

    Args:
        page: Page to filter, or None when nothing is loaded
        query: Raw search text; blank means "everything visible"

    Returns:
        Non-hidden commands whose label, subtitle or a keyword contains the
        normalized query.
    """
    if page is None:
        return []

    visible = [item for item in page.items if not item.hidden]
    normalized = normalize(query)
    if not normalized:
        return visible

    return [item for item in visible if matches(item, normalized)]


def first_active_item_id(page: Optional[Page], query: str) -> Optional[str]:
    """Id of the first filtered command, or None."""
    commands = filter_commands(page, query)
    return commands[0].id if commands else None


def find_command(
    page: Optional[Page],
    query: str,
    command_id: Optional[str] = None,
) -> Optional[Command]:
    """
    Resolve the command an activation refers to.

    Looks up ``command_id`` in the filtered list when given, otherwise takes
    the first filtered command. Commands outside the filtered list never
    resolve.
    """
    commands = filter_commands(page, query)
    if command_id is not None:
        for command in commands:
            if command.id == command_id:
                return command
        return None
    return commands[0] if commands else None
