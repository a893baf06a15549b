"""Pilot-based tests for the palette host app and CommandPaletteScreen."""

from __future__ import annotations

import pytest
from textual.widgets import Input, ListView, Static

from mainline.config.ui_config import PaletteOptions
from mainline.engine import EngineState
from mainline.ui.command_palette.palette_app import MainlineApp
from mainline.ui.command_palette.palette_screen import (
    CommandPaletteScreen,
    PaletteInput,
    PaletteResultWidget,
)

from palette_fixtures import ScriptedAdapter

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _options(**overrides) -> PaletteOptions:
    options: PaletteOptions = {
        "hotkeys": True,
        "toggle_key": "ctrl+k",
        "trigger_label": "COMMAND",
        "theme": "textual-dark",
    }
    options.update(overrides)
    return options


async def _settle(app: MainlineApp, pilot) -> None:
    await app.presenter.engine.wait_until_idle()
    await pilot.pause()
    await pilot.pause()


def _row_ids(app: MainlineApp) -> list[str]:
    return [w.row.id for w in app.screen.query(PaletteResultWidget)]


async def _type(pilot, text: str) -> None:
    await pilot.press(*list(text))


# ---------------------------------------------------------------------------
# Tests: Opening and closing
# ---------------------------------------------------------------------------


class TestPaletteOpenClose:
    @pytest.mark.asyncio
    async def test_hotkey_opens_palette(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            assert isinstance(app.screen, CommandPaletteScreen)
            assert _row_ids(app) == ["open-settings", "say-hello", "disabled-cmd", "rename"]
            assert app.screen.query_one("#palette-input", PaletteInput).has_focus

    @pytest.mark.asyncio
    async def test_trigger_button_opens_palette(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options(hotkeys=False))
        async with app.run_test() as pilot:
            await pilot.click("#palette-trigger")
            await _settle(app, pilot)
            assert isinstance(app.screen, CommandPaletteScreen)

    @pytest.mark.asyncio
    async def test_hotkey_disabled(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options(hotkeys=False))
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)
            assert not isinstance(app.screen, CommandPaletteScreen)
            assert app.presenter.snapshot.state is EngineState.CLOSED

    @pytest.mark.asyncio
    async def test_escape_at_root_closes(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await pilot.press("escape")
            await _settle(app, pilot)
            assert not isinstance(app.screen, CommandPaletteScreen)
            assert app.presenter.snapshot.state is EngineState.CLOSED

    @pytest.mark.asyncio
    async def test_hotkey_toggles_closed(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)
            await pilot.press("ctrl+k")
            await _settle(app, pilot)
            assert not isinstance(app.screen, CommandPaletteScreen)

            # Reopens cleanly
            await pilot.press("ctrl+k")
            await _settle(app, pilot)
            assert isinstance(app.screen, CommandPaletteScreen)


# ---------------------------------------------------------------------------
# Tests: Browsing
# ---------------------------------------------------------------------------


class TestPaletteBrowsing:
    @pytest.mark.asyncio
    async def test_typing_filters(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await _type(pilot, "hello")
            await _settle(app, pilot)
            assert app.screen.query_one("#palette-input", Input).value == "hello"
            assert app.presenter.snapshot.query == "hello"
            assert _row_ids(app) == ["say-hello"]

    @pytest.mark.asyncio
    async def test_no_matches_shows_empty_state(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await _type(pilot, "zzz")
            await _settle(app, pilot)
            assert _row_ids(app) == []
            assert len(app.screen.query("#palette-empty")) == 1

    @pytest.mark.asyncio
    async def test_arrow_keys_move_active_row(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await pilot.press("down")
            await _settle(app, pilot)
            assert app.presenter.snapshot.active_item_id == "say-hello"
            assert app.screen.query_one("#palette-results", ListView).index == 1

            await pilot.press("up", "up")
            await _settle(app, pilot)
            assert app.presenter.snapshot.active_item_id == "rename"

    @pytest.mark.asyncio
    async def test_enter_drills_into_child_and_escape_returns(
        self, adapter: ScriptedAdapter
    ) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await pilot.press("enter")
            await _settle(app, pilot)
            assert _row_ids(app) == ["theme", "font"]
            assert app.presenter.view_model.title == "Settings"

            await pilot.press("escape")
            await _settle(app, pilot)
            assert isinstance(app.screen, CommandPaletteScreen)
            assert _row_ids(app)[0] == "open-settings"


# ---------------------------------------------------------------------------
# Tests: Input pages and errors
# ---------------------------------------------------------------------------


class TestPaletteInputAndErrors:
    @pytest.mark.asyncio
    async def test_input_page_submits_typed_value(self, adapter: ScriptedAdapter) -> None:
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await pilot.press("end", "enter")
            await _settle(app, pilot)
            assert app.presenter.view_model.is_input
            assert not app.screen.query_one("#palette-results", ListView).display

            await _type(pilot, "office")
            await pilot.press("enter")
            await _settle(app, pilot)
            adapter.submit.assert_awaited_once_with("rename-input", "office", {"target": "home"})

    @pytest.mark.asyncio
    async def test_execute_failure_shows_error(self, adapter: ScriptedAdapter) -> None:
        adapter.execute.side_effect = RuntimeError("boom")
        app = MainlineApp(adapter, options=_options())
        async with app.run_test() as pilot:
            await pilot.press("ctrl+k")
            await _settle(app, pilot)

            await pilot.press("down", "enter")
            await _settle(app, pilot)
            assert app.presenter.snapshot.state is EngineState.ERROR
            assert app.presenter.view_model.error == "boom"
            assert app.screen.query_one("#palette-error", Static).display

            await pilot.press("ctrl+r")
            await _settle(app, pilot)
            assert app.presenter.snapshot.state is EngineState.BROWSING
            assert not app.screen.query_one("#palette-error", Static).display
