"""
In-memory demo adapter.

Manages a small set of named profiles and one boolean setting so every page
flow of the palette can be tried without any backing service: list pages,
input pages, pick-then-input chains, refresh after an action, pushed result
pages and declared errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..models import Command, CommandIntent, Meta, Page, PageMode, Result, Shortcut

logger = logging.getLogger(__name__)


class PageIds:
    ROOT = "root"
    PROFILE_SWITCH = "profile.switch"
    PROFILE_CREATE = "profile.create.input"
    PROFILE_FIND = "profile.find.input"
    PROFILE_FIND_RESULTS = "profile.find.results"
    PROFILE_RENAME_PICK = "profile.rename.pick"
    PROFILE_RENAME_INPUT = "profile.rename.input"
    PROFILE_DELETE_PICK = "profile.delete.pick"


SECOND_ORDER_ID = "root.setting.second-order"
REFRESH_ID = "root.refresh"


@dataclass
class Profile:
    id: str
    name: str
    item_count: int = 0


def _parse_id(prefixed_id: str, prefix: str) -> Optional[str]:
    if not prefixed_id.startswith(prefix):
        return None
    return prefixed_id[len(prefix):]


def _profile_from_meta(meta: Meta) -> Optional[dict]:
    if not meta:
        return None
    profile = meta.get("profile")
    return profile if isinstance(profile, dict) else None


@dataclass
class DemoAdapter:
    """Adapter backed by plain Python state."""

    profiles: list[Profile] = field(
        default_factory=lambda: [
            Profile("home", "Home", 3),
            Profile("work", "Work", 5),
        ]
    )
    active_profile_id: Optional[str] = "home"
    second_order_enabled: bool = False
    open_changes: list[bool] = field(default_factory=list)
    _next_id: int = 1

    # ------------------------------------------------------------------
    # Domain helpers
    # ------------------------------------------------------------------

    @property
    def active_profile(self) -> Optional[Profile]:
        return self.get_profile(self.active_profile_id)

    def get_profile(self, profile_id: Optional[str]) -> Optional[Profile]:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    def create_profile(self, name: str) -> Profile:
        profile = Profile(f"profile-{self._next_id}", name)
        self._next_id += 1
        self.profiles.append(profile)
        logger.info(f"Created profile {profile.id} ({name})")
        return profile

    def rename_profile(self, profile_id: str, name: str) -> bool:
        profile = self.get_profile(profile_id)
        if profile is None or not name.strip():
            return False
        profile.name = name.strip()
        return True

    def delete_profile(self, profile_id: str) -> bool:
        profile = self.get_profile(profile_id)
        if profile is None or len(self.profiles) <= 1:
            return False
        self.profiles.remove(profile)
        if self.active_profile_id == profile_id:
            self.active_profile_id = self.profiles[0].id
        return True

    # ------------------------------------------------------------------
    # Page builders
    # ------------------------------------------------------------------

    def _root_page(self) -> Page:
        active = self.active_profile
        can_delete = len(self.profiles) > 1
        return Page(
            id=PageIds.ROOT,
            title="mainline",
            subtitle=f"Profile: {active.name}" if active else "No active profile",
            items=[
                Command(
                    id="root.profile.switch",
                    label="Switch profile",
                    subtitle="Make another profile active",
                    intent=CommandIntent.PAGE,
                    child_page_id=PageIds.PROFILE_SWITCH,
                    keywords=("dataset", "change"),
                    shortcuts=(Shortcut("s"),),
                ),
                Command(
                    id="root.profile.create",
                    label="Create profile",
                    subtitle="Add a new empty profile",
                    intent=CommandIntent.PAGE,
                    child_page_id=PageIds.PROFILE_CREATE,
                    keywords=("new", "add"),
                    shortcuts=(Shortcut("n"),),
                ),
                Command(
                    id="root.profile.find",
                    label="Find profile",
                    subtitle="Search profiles by name",
                    intent=CommandIntent.PAGE,
                    child_page_id=PageIds.PROFILE_FIND,
                ),
                Command(
                    id="root.profile.rename",
                    label="Rename profile",
                    subtitle="Change a profile name",
                    intent=CommandIntent.PAGE,
                    child_page_id=PageIds.PROFILE_RENAME_PICK,
                    disabled=not self.profiles,
                ),
                Command(
                    id="root.profile.delete",
                    label="Delete profile",
                    subtitle="Remove a profile (at least one must remain)",
                    intent=CommandIntent.PAGE,
                    child_page_id=PageIds.PROFILE_DELETE_PICK,
                    disabled=not can_delete,
                ),
                Command(
                    id=REFRESH_ID,
                    label="Refresh",
                    subtitle="Reload this page",
                    keywords=("reload",),
                    shortcuts=(Shortcut("r"),),
                ),
                Command(
                    id=SECOND_ORDER_ID,
                    label=(
                        "Disable second-order factors"
                        if self.second_order_enabled
                        else "Enable second-order factors"
                    ),
                    subtitle=(
                        "Using the enhanced model"
                        if self.second_order_enabled
                        else "Using the first-order model"
                    ),
                    keywords=("setting", "model"),
                    shortcuts=(Shortcut("t", target_item_id=SECOND_ORDER_ID),),
                ),
            ],
        )

    def _profile_list(self, page_id: str, title: str, intent: CommandIntent,
                      child_page_id: Optional[str] = None,
                      profiles: Optional[list[Profile]] = None) -> Page:
        profiles = self.profiles if profiles is None else profiles
        items = [
            Command(
                id=f"{page_id}:{profile.id}",
                label=profile.name,
                subtitle=f"{profile.item_count} saved {'item' if profile.item_count == 1 else 'items'}",
                intent=intent,
                child_page_id=child_page_id,
                keywords=(profile.id,),
                disabled=page_id == PageIds.PROFILE_DELETE_PICK and len(self.profiles) <= 1,
                meta={"profile": {"id": profile.id, "name": profile.name}},
            )
            for profile in profiles
        ]
        return Page(
            id=page_id,
            title=title,
            items=items,
            empty_state_text="No profiles available.",
        )

    # ------------------------------------------------------------------
    # Adapter contract
    # ------------------------------------------------------------------

    async def load_root(self) -> Page:
        return self._root_page()

    async def load_child(self, page_id: str, item_id: str,
                         query: Optional[str] = None, meta: Meta = None):
        if page_id == PageIds.PROFILE_SWITCH:
            return self._profile_list(page_id, "Switch profile", CommandIntent.ACTION)

        if page_id == PageIds.PROFILE_CREATE:
            return Page(
                id=page_id,
                title="Create profile",
                subtitle="Type a name and press Enter",
                mode=PageMode.INPUT,
                placeholder="Profile name",
                submit_label="Create",
            )

        if page_id == PageIds.PROFILE_FIND:
            return Page(
                id=page_id,
                title="Find profile",
                mode=PageMode.INPUT,
                placeholder="Profile name",
                submit_label="Search",
            )

        if page_id == PageIds.PROFILE_RENAME_PICK:
            return self._profile_list(
                page_id, "Rename profile", CommandIntent.PAGE, PageIds.PROFILE_RENAME_INPUT
            )

        if page_id == PageIds.PROFILE_RENAME_INPUT:
            profile = _profile_from_meta(meta)
            if profile is None:
                return Result.error("Profile context missing for rename.")
            return Page(
                id=page_id,
                title=f"Rename {profile['name']}",
                mode=PageMode.INPUT,
                placeholder=profile["name"],
                submit_label="Rename",
                meta=meta,
            )

        if page_id == PageIds.PROFILE_DELETE_PICK:
            return self._profile_list(page_id, "Delete profile", CommandIntent.ACTION)

        return Result.error(f"Unsupported command page: {page_id}")

    async def execute(self, item_id: str, page_id: str,
                      query: Optional[str] = None, meta: Meta = None) -> Result:
        if item_id == SECOND_ORDER_ID:
            self.second_order_enabled = not self.second_order_enabled
            return Result.refresh_page()

        if item_id == REFRESH_ID:
            return Result.refresh_page()

        if page_id in (PageIds.PROFILE_SWITCH, PageIds.PROFILE_FIND_RESULTS):
            profile_id = _parse_id(item_id, f"{page_id}:")
            if not profile_id or self.get_profile(profile_id) is None:
                return Result.error("Invalid profile selection.")
            self.active_profile_id = profile_id
            return Result.close()

        if page_id == PageIds.PROFILE_DELETE_PICK:
            profile_id = _parse_id(item_id, f"{page_id}:")
            if not profile_id:
                return Result.error("Invalid profile deletion command.")
            if not self.delete_profile(profile_id):
                return Result.error("Unable to delete profile. At least one profile must remain.")
            return Result.close()

        return Result.stay()

    async def submit(self, page_id: str, query: str, meta: Meta = None) -> Result:
        trimmed = query.strip()

        if page_id == PageIds.PROFILE_CREATE:
            if not trimmed:
                return Result.error("Profile name cannot be empty.")
            self.create_profile(trimmed)
            return Result.close()

        if page_id == PageIds.PROFILE_FIND:
            needle = trimmed.lower()
            found = [p for p in self.profiles if needle in p.name.lower()]
            if not found:
                return Result.error("No matching profiles found.")
            return Result.push_page(
                self._profile_list(
                    PageIds.PROFILE_FIND_RESULTS, "Matching profiles", CommandIntent.ACTION,
                    profiles=found,
                )
            )

        if page_id == PageIds.PROFILE_RENAME_INPUT:
            profile = _profile_from_meta(meta)
            if profile is None:
                return Result.error("Missing profile context for rename.")
            if not self.rename_profile(profile["id"], trimmed):
                return Result.error("Profile name cannot be empty.")
            return Result.close()

        return Result.stay()

    def on_open_change(self, is_open: bool) -> None:
        self.open_changes.append(is_open)
