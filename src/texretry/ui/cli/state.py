"""Shared CLI state management utilities."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import logging
import sys
from typing import TYPE_CHECKING

from texretry.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "configure_logging",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Shared state controlling CLI diagnostics."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Return a lazily instantiated stdout console."""
        from rich.console import Console

        current = getattr(self._console, "file", None)
        if self._console is None or current is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a lazily instantiated stderr console."""
        from rich.console import Console

        current = getattr(self._err_console, "file", None)
        if self._err_console is None or current is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("texretry_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the process-wide CLI state, creating it on first use."""
    state = _STATE_VAR.get()
    if state is None:
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(*, verbosity: int | None = None, debug: bool | None = None) -> CLIState:
    """Update the CLI state, returning the current instance."""
    state = get_cli_state()
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def configure_logging(state: CLIState) -> None:
    """Route library logging through Rich according to the verbosity level."""
    from rich.logging import RichHandler

    if state.verbosity >= 2:
        level = logging.DEBUG
    elif state.verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger("texretry")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(
        RichHandler(console=state.err_console, show_path=False, rich_tracebacks=True)
    )


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Render a formatted message to stderr, including optional diagnostics."""
    from rich.text import Text

    state = get_cli_state()
    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))

    extra_lines: list[str] = []
    if exception is not None and state.verbosity >= 1:
        extra_lines.append(f"type: {type(exception).__name__}")
        if state.verbosity >= 2:
            chain = exception_messages(exception)[1:]
            if chain:
                extra_lines.append("caused by:")
                extra_lines.extend(f"  {entry}" for entry in chain)
    if extra_lines:
        text.append("\n" + "\n".join(extra_lines), style=style)

    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    """Log a warning-level message to stderr respecting verbosity settings."""
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    """Log an error-level message to stderr respecting verbosity settings."""
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    return get_cli_state().show_tracebacks
