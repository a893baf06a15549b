"""Shared pytest fixtures for mainline tests."""

import pytest

from palette_fixtures import ScriptedAdapter


@pytest.fixture
def adapter() -> ScriptedAdapter:
    """Fresh scripted adapter serving the standard root page."""
    return ScriptedAdapter()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point every config path at a temporary directory."""
    monkeypatch.setattr("mainline.config.settings.MAINLINE_CONFIG_DIR", tmp_path)
    monkeypatch.setattr("mainline.utils.logging_utils.MAINLINE_CONFIG_DIR", tmp_path)
    for name in ("MAINLINE_LOG_LEVEL", "MAINLINE_HOTKEYS"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
