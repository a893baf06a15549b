"""Custom exception hierarchy for mainline.

Exception Hierarchy:
    MainlineError (base)
    ├── AdapterError - faults raised by or detected in adapter calls
    │   └── InvalidPageError - adapter returned something that is not a Page
    ├── InvalidCommandError - command breaks the page-intent/child page invariant
    ├── EngineStateError - engine API used outside its lifecycle
    └── ConfigurationError - settings/environment issues

The engine never distinguishes causes beyond this: every adapter-side fault
ends up as a plain message in ``EngineContext.last_error``.

Usage:
    from mainline.exceptions import InvalidPageError

    if not isinstance(value, Page):
        raise InvalidPageError("Expected a page from the adapter.", received=type(value).__name__)
"""

from typing import Any, Optional


class MainlineError(Exception):
    """Base exception for all mainline errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., page ids)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Adapter Errors
# =============================================================================


class AdapterError(MainlineError):
    """Base exception for adapter faults."""

    pass


class InvalidPageError(AdapterError):
    """The adapter resolved a load with a value that is not a Page."""

    def __init__(
        self,
        message: str = "Expected a page from the adapter.",
        *,
        received: Optional[str] = None,
        **context: Any,
    ) -> None:
        if received:
            context["received"] = received
        super().__init__(message, **context)


class InvalidCommandError(MainlineError):
    """A page-intent command carries no child page id."""

    def __init__(
        self,
        message: str = "Missing child page request details.",
        *,
        command_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if command_id:
            context["command_id"] = command_id
        super().__init__(message, **context)


# =============================================================================
# Engine & Configuration Errors
# =============================================================================


class EngineStateError(MainlineError):
    """The engine was driven outside of its supported lifecycle."""

    pass


class ConfigurationError(MainlineError):
    """Invalid configuration or environment settings."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


def error_message(error: BaseException) -> str:
    """Human-readable message for an adapter failure.

    Mainline errors contribute their bare message (no context suffix). Other
    exceptions contribute ``str(error)`` and fall back to the class name when
    that is blank.
    """
    if isinstance(error, MainlineError) and error.message.strip():
        return error.message
    text = str(error)
    if text.strip():
        return text
    return type(error).__name__
