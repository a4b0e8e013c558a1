"""Typer application wiring for the texretry CLI."""

from __future__ import annotations

import click
import typer

from texretry.ui.cli.commands.build import build

from .state import debug_enabled, emit_error, get_cli_state


app = typer.Typer(
    help="Build a LaTeX document with latexmk, installing missing packages with tlmgr.",
    add_completion=False,
    context_settings={"help_option_names": ["--help"]},
)


# Driver flags such as -pdf or -interaction=nonstopmode reach the command untouched.
app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(build)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        exit_code = app(standalone_mode=False)
    except (click.exceptions.Abort, KeyboardInterrupt) as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise SystemExit(1) from exc
    except click.ClickException as exc:
        exc.show()
        raise SystemExit(exc.exit_code) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise SystemExit(1) from exc
    if isinstance(exit_code, int) and exit_code != 0:
        raise SystemExit(exit_code)


__all__ = ["app", "main"]
