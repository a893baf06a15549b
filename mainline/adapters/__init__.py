"""Bundled adapters."""

from .demo import DemoAdapter, PageIds, Profile

__all__ = ["DemoAdapter", "PageIds", "Profile"]
