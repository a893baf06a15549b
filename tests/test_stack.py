"""Tests for the navigation stack manager."""

from dataclasses import replace

import pytest

from mainline.models import Result
from mainline.stack import (
    EngineContext,
    LoadKind,
    LoadRequest,
    NavDirection,
    apply_loaded_page,
    apply_result,
    begin_child_load,
    begin_refresh_load,
    begin_root_load,
    begin_submit,
    move_active_id,
    pop_page,
    select_command,
    set_query,
)

from palette_fixtures import make_command, make_input_page, make_page, root_page, settings_page


def _item(page, command_id: str):
    return next(item for item in page.items if item.id == command_id)


def _at_root() -> EngineContext:
    return apply_loaded_page(begin_root_load(EngineContext()), root_page())


def _at_settings() -> EngineContext:
    context = _at_root()
    context = select_command(context, _item(root_page(), "open-settings"))
    context = begin_child_load(context)
    return apply_loaded_page(context, settings_page())


class TestApplyLoadedPage:
    def test_root_replaces_stack(self) -> None:
        context = _at_root()
        assert [p.id for p in context.stack] == ["root"]
        assert context.active_item_id == "open-settings"
        assert context.pending_load is None
        assert context.page_origins == (LoadRequest(LoadKind.ROOT),)

    def test_child_pushes_and_resets(self) -> None:
        context = _at_root()
        context = set_query(context, "set")
        context = select_command(context, _item(root_page(), "open-settings"))
        context = begin_child_load(context)
        assert context.pending_load.page_id == "settings"
        assert context.pending_load.query == "set"

        context = apply_loaded_page(context, settings_page())
        assert [p.id for p in context.stack] == ["root", "settings"]
        assert context.query == ""
        assert context.active_item_id == "theme"
        assert context.pending_command is None
        assert context.pending_load is None
        assert context.page_origins[-1].item_id == "open-settings"

    def test_refresh_replaces_top_only(self) -> None:
        context = _at_settings()
        refreshed = make_page("settings", make_command("density", label="Density"))
        context = apply_loaded_page(context, refreshed, LoadKind.REFRESH)
        assert [p.id for p in context.stack] == ["root", "settings"]
        assert context.current_page is refreshed
        assert context.active_item_id == "density"

    def test_meta_and_error_follow_new_page(self) -> None:
        page = make_page("p", make_command("a"), meta={"scope": "x"})
        context = replace(_at_root(), last_error="old")
        context = apply_loaded_page(context, page, LoadKind.CHILD)
        assert context.invocation_meta == {"scope": "x"}
        assert context.last_error is None


class TestApplyResult:
    def test_push_then_pop_restores_stack(self) -> None:
        before = _at_root()
        pushed = apply_result(before, Result.push_page(settings_page()))
        assert len(pushed.stack) == 2
        assert pushed.page_origins[-1] is None

        after = apply_result(pushed, Result.pop_page())
        assert after.stack == before.stack
        assert after.stack[0] is before.stack[0]
        assert after.query == ""
        assert after.active_item_id == "open-settings"

    def test_replace_swaps_top(self) -> None:
        context = _at_settings()
        page = make_page("other", make_command("x"))
        context = apply_result(context, Result.replace_page(page))
        assert [p.id for p in context.stack] == ["root", "other"]
        assert context.active_item_id == "x"

    def test_replace_on_empty_stack_acts_as_push(self) -> None:
        page = make_page("only", make_command("x"))
        context = apply_result(EngineContext(), Result.replace_page(page))
        assert [p.id for p in context.stack] == ["only"]

    def test_pop_at_root_is_noop(self) -> None:
        context = _at_root()
        assert apply_result(context, Result.pop_page()).stack == context.stack

    def test_error_keeps_stack(self) -> None:
        context = select_command(_at_root(), _item(root_page(), "say-hello"))
        context = apply_result(context, Result.error("nope"))
        assert context.last_error == "nope"
        assert context.pending_command is None
        assert [p.id for p in context.stack] == ["root"]

    def test_stay_clears_pending_command(self) -> None:
        context = select_command(_at_root(), _item(root_page(), "say-hello"))
        context = apply_result(context, Result.stay())
        assert context.pending_command is None
        assert [p.id for p in context.stack] == ["root"]


class TestMoveActiveId:
    @pytest.mark.parametrize("direction", [NavDirection.NEXT, NavDirection.PREV])
    def test_cycles_back_to_start(self, direction: NavDirection) -> None:
        context = _at_root()
        start = context.active_item_id
        count = len(context.filtered_commands)
        for _ in range(count):
            context = replace(context, active_item_id=move_active_id(context, direction))
        assert context.active_item_id == start

    def test_prev_inverts_next(self) -> None:
        context = _at_root()
        moved = replace(context, active_item_id=move_active_id(context, NavDirection.NEXT))
        assert move_active_id(moved, NavDirection.PREV) == context.active_item_id

    def test_wraps(self) -> None:
        context = _at_root()
        assert move_active_id(context, NavDirection.PREV) == "rename"

    def test_home_and_end(self) -> None:
        context = replace(_at_root(), active_item_id="say-hello")
        assert move_active_id(context, NavDirection.HOME) == "open-settings"
        assert move_active_id(context, NavDirection.END) == "rename"

    def test_missing_active_id(self) -> None:
        context = replace(_at_root(), active_item_id="gone")
        assert move_active_id(context, NavDirection.NEXT) == "open-settings"
        assert move_active_id(context, NavDirection.PREV) == "rename"

    def test_empty_list(self) -> None:
        context = set_query(_at_root(), "zzz")
        assert move_active_id(context, NavDirection.NEXT) is None


class TestTransitions:
    def test_begin_root_load_resets(self) -> None:
        dirty = replace(_at_root(), query="x", input_value="v", last_error="e")
        context = begin_root_load(dirty)
        assert context.query == ""
        assert context.input_value == ""
        assert context.last_error is None
        assert context.pending_load == LoadRequest(LoadKind.ROOT)

    def test_refresh_reissues_child_origin(self) -> None:
        context = begin_refresh_load(_at_settings())
        request = context.pending_load
        assert request.kind is LoadKind.REFRESH
        assert request.page_id == "settings"
        assert request.item_id == "open-settings"

    def test_refresh_of_pushed_page_targets_root(self) -> None:
        context = apply_result(_at_root(), Result.push_page(settings_page()))
        request = begin_refresh_load(context).pending_load
        assert request.kind is LoadKind.REFRESH
        assert request.targets_root

    def test_submit_uses_value_or_query(self) -> None:
        page = make_input_page("in", meta={"k": 1})
        context = apply_loaded_page(EngineContext(), page, LoadKind.ROOT)
        context = set_query(context, "typed")
        assert begin_submit(context).input_value == "typed"
        assert begin_submit(context, "explicit").input_value == "explicit"
        assert begin_submit(context).invocation_meta == {"k": 1}

    def test_pop_page(self) -> None:
        context = pop_page(_at_settings())
        assert [p.id for p in context.stack] == ["root"]
        assert len(context.page_origins) == 1
