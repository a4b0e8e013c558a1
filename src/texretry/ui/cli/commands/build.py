"""Implementation of the `texretry` build command."""

from __future__ import annotations

import shutil
from typing import Annotated

import typer

from texretry.core.config import load_config
from texretry.core.exceptions import TexRetryError
from texretry.core.loop import run_build
from texretry.core.target import TargetSpec
from texretry.version import get_version

from ..state import configure_logging, debug_enabled, emit_error, emit_warning, set_cli_state


DRIVER_PANEL = "Driver"
RETRY_PANEL = "Retry policy"
DIAGNOSTICS_PANEL = "Diagnostics"


def split_arguments(arguments: list[str] | None) -> tuple[list[str], str | None]:
    """Separate pass-through driver arguments from the trailing document."""
    values = list(arguments or [])
    if not values:
        return [], None
    return values[:-1], values[-1]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"texretry {get_version()}")
        raise typer.Exit()


def build(
    arguments: Annotated[
        list[str] | None,
        typer.Argument(
            metavar="[DRIVER-ARGS]... DOCUMENT.tex",
            help="Arguments forwarded verbatim to the driver, followed by the .tex document.",
            show_default=False,
        ),
    ] = None,
    driver: Annotated[
        str | None,
        typer.Option(
            "--driver",
            envvar="TEXRETRY_DRIVER",
            help="Typesetting driver executable (default: latexmk).",
            rich_help_panel=DRIVER_PANEL,
        ),
    ] = None,
    installer: Annotated[
        str | None,
        typer.Option(
            "--installer",
            envvar="TEXRETRY_INSTALLER",
            help="Package manager executable invoked as '<installer> install <package>'.",
            rich_help_panel=DRIVER_PANEL,
        ),
    ] = None,
    keepalive_interval: Annotated[
        float | None,
        typer.Option(
            "--keepalive-interval",
            envvar="TEXRETRY_KEEPALIVE_INTERVAL",
            help="Seconds between blank lines sent to the driver's standard input.",
            rich_help_panel=DRIVER_PANEL,
        ),
    ] = None,
    max_attempts: Annotated[
        int | None,
        typer.Option(
            "--max-attempts",
            envvar="TEXRETRY_MAX_ATTEMPTS",
            help="Give up after this many clean+build cycles (default: retry until success).",
            rich_help_panel=RETRY_PANEL,
        ),
    ] = None,
    backoff: Annotated[
        float | None,
        typer.Option(
            "--backoff",
            envvar="TEXRETRY_BACKOFF",
            help="Initial delay in seconds between failed cycles, doubled after each one.",
            rich_help_panel=RETRY_PANEL,
        ),
    ] = None,
    empty_lines: Annotated[
        bool,
        typer.Option(
            "--empty-lines/--no-empty-lines",
            envvar="TEXRETRY_EMPTY_LINES",
            help="Classify blank driver output lines as empty messages.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            count=True,
            help="Increase logging verbosity (repeat for more detail).",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full tracebacks on failure.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Build a LaTeX document, installing missing packages until the PDF exists."""
    _ = version
    state = set_cli_state(verbosity=verbose, debug=debug)
    configure_logging(state)

    driver_args, document = split_arguments(arguments)
    try:
        target = TargetSpec.from_filename(document)
        config = load_config(
            driver=driver,
            installer=installer,
            driver_args=driver_args,
            keepalive_interval=keepalive_interval,
            max_attempts=max_attempts,
            backoff=backoff,
            empty_lines_as_empty=empty_lines,
        )

        for executable in (config.driver, config.installer):
            if shutil.which(executable) is None:
                emit_warning(f"'{executable}' was not found on PATH.")

        outcome = run_build(config, target, console=state.console)
    except TexRetryError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if outcome.installed:
        state.console.print(
            f"Installed {len(outcome.installed)} package(s): {', '.join(outcome.installed)}",
            markup=False,
            highlight=False,
        )
