from __future__ import annotations

import importlib
from pathlib import Path
import sys
from typing import Any

import pytest
from typer.testing import CliRunner

from texretry.core.config import BuildConfig
from texretry.core.exceptions import InstallerLaunchError
from texretry.core.loop import BuildOutcome
from texretry.core.target import TargetSpec
from texretry.ui.cli import app, main
from texretry.ui.cli.commands.build import split_arguments
import texretry.ui.cli.state as cli_state


build_cmd = importlib.import_module("texretry.ui.cli.commands.build")


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_state, "_STATE_VAR", cli_state.ContextVar("test_state", default=None))
    monkeypatch.setattr(build_cmd.shutil, "which", lambda name: f"/usr/bin/{name}")


def _record_build(monkeypatch: pytest.MonkeyPatch, outcome: BuildOutcome | None = None):
    recorded: dict[str, Any] = {}

    def fake_run_build(config: BuildConfig, target: TargetSpec, *, console: object) -> BuildOutcome:
        recorded["config"] = config
        recorded["target"] = target
        return outcome or BuildOutcome(attempts=1)

    monkeypatch.setattr(build_cmd, "run_build", fake_run_build)
    return recorded


def test_split_arguments() -> None:
    assert split_arguments(None) == ([], None)
    assert split_arguments(["main.tex"]) == ([], "main.tex")
    assert split_arguments(["-pdf", "-f", "main.tex"]) == (["-pdf", "-f"], "main.tex")


def test_driver_arguments_pass_through(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["-pdf", "-interaction=nonstopmode", "--shell-escape", "report.tex"],
    )

    assert result.exit_code == 0, result.output
    config = recorded["config"]
    assert config.driver_args == ["-pdf", "-interaction=nonstopmode", "--shell-escape"]
    assert recorded["target"].artifact == Path("report.pdf")


def test_options_configure_retry_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "--max-attempts",
            "4",
            "--backoff",
            "0.5",
            "--installer",
            "tlmgr-custom",
            "--driver",
            "latexmk-custom",
            "-xelatex",
            "thesis.tex",
        ],
    )

    assert result.exit_code == 0, result.output
    config = recorded["config"]
    assert config.max_attempts == 4
    assert config.backoff == 0.5
    assert config.installer == "tlmgr-custom"
    assert config.driver == "latexmk-custom"
    assert config.driver_args == ["-xelatex"]


def test_environment_variables_fill_options(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    runner = CliRunner()

    result = runner.invoke(
        app, ["paper.tex"], env={"TEXRETRY_MAX_ATTEMPTS": "2", "TEXRETRY_INSTALLER": "tlmgr"}
    )

    assert result.exit_code == 0, result.output
    assert recorded["config"].max_attempts == 2
    assert recorded["config"].installer == "tlmgr"


def test_defaults_retry_without_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    result = CliRunner().invoke(app, ["paper.tex"])

    assert result.exit_code == 0, result.output
    assert recorded["config"].max_attempts is None
    assert recorded["config"].backoff == 0.0


def test_non_tex_document_fails_before_build(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    result = CliRunner().invoke(app, ["-pdf", "report.txt"])

    assert result.exit_code == 1
    assert "report.txt" in result.output
    assert recorded == {}


def test_missing_document_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    result = CliRunner().invoke(app, [])

    assert result.exit_code == 1
    assert "last argument" in result.output
    assert recorded == {}


def test_invalid_option_value_reports_error(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded = _record_build(monkeypatch)
    result = CliRunner().invoke(app, ["--max-attempts", "0", "paper.tex"])

    assert result.exit_code == 1
    assert "Invalid build options" in result.output
    assert recorded == {}


def test_fatal_errors_exit_non_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_build(*_args: object, **_kwargs: object) -> BuildOutcome:
        raise InstallerLaunchError("Package manager 'tlmgr' could not be located.")

    monkeypatch.setattr(build_cmd, "run_build", failing_build)
    result = CliRunner().invoke(app, ["paper.tex"])

    assert result.exit_code == 1
    assert "could not be located" in result.output


def test_installed_packages_are_summarised(monkeypatch: pytest.MonkeyPatch) -> None:
    _record_build(monkeypatch, BuildOutcome(attempts=3, installed=["foo", "bar"]))
    result = CliRunner().invoke(app, ["paper.tex"])

    assert result.exit_code == 0, result.output
    assert "Installed 2 package(s): foo, bar" in result.output


def test_missing_executables_emit_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    _record_build(monkeypatch)
    monkeypatch.setattr(build_cmd.shutil, "which", lambda _name: None)
    result = CliRunner().invoke(app, ["paper.tex"])

    assert result.exit_code == 0
    assert "was not found on PATH" in result.output


def test_version_option() -> None:
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("texretry ")


def test_main_reports_cancellation(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def interrupted(*_args: object, **_kwargs: object) -> BuildOutcome:
        raise KeyboardInterrupt

    monkeypatch.setattr(build_cmd, "run_build", interrupted)
    monkeypatch.setattr(sys, "argv", ["texretry", "paper.tex"])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "Operation cancelled by user." in capsys.readouterr().err


def test_main_propagates_command_exit_code(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["texretry", "report.txt"])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "report.txt" in capsys.readouterr().err


def test_main_returns_normally_on_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _record_build(monkeypatch)
    monkeypatch.setattr(sys, "argv", ["texretry", "-pdf", "paper.tex"])

    main()
