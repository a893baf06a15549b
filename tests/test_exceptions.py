"""Tests for the mainline exception hierarchy."""

import pytest

from mainline.exceptions import (
    AdapterError,
    ConfigurationError,
    EngineStateError,
    InvalidCommandError,
    InvalidPageError,
    MainlineError,
    error_message,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_class",
        [AdapterError, InvalidPageError, InvalidCommandError, EngineStateError, ConfigurationError],
    )
    def test_all_derive_from_base(self, exc_class) -> None:
        assert issubclass(exc_class, MainlineError)

    def test_invalid_page_is_adapter_error(self) -> None:
        assert issubclass(InvalidPageError, AdapterError)


class TestFormatting:
    def test_context_in_str(self) -> None:
        error = MainlineError("Load failed", page_id="root")
        assert str(error) == "Load failed (page_id='root')"
        assert error.message == "Load failed"
        assert error.context == {"page_id": "root"}

    def test_no_context(self) -> None:
        assert str(MainlineError("plain")) == "plain"

    def test_invalid_page_defaults(self) -> None:
        error = InvalidPageError(received="int")
        assert error.message == "Expected a page from the adapter."
        assert error.context == {"received": "int"}

    def test_invalid_command_defaults(self) -> None:
        error = InvalidCommandError(command_id="broken")
        assert error.message == "Missing child page request details."
        assert "command_id='broken'" in str(error)

    def test_configuration_setting(self) -> None:
        error = ConfigurationError("bad value", setting="MAINLINE_HOTKEYS")
        assert error.context == {"setting": "MAINLINE_HOTKEYS"}


class TestErrorMessage:
    def test_mainline_error_drops_context(self) -> None:
        assert error_message(InvalidPageError(received="int")) == "Expected a page from the adapter."

    def test_plain_exception(self) -> None:
        assert error_message(RuntimeError("boom")) == "boom"

    def test_blank_message_uses_class_name(self) -> None:
        assert error_message(ValueError()) == "ValueError"
        assert error_message(RuntimeError("   ")) == "RuntimeError"
