"""Latexmk and tlmgr helpers plus output classification."""

from __future__ import annotations

from .diagnostics import (
    EMPTY_MESSAGE,
    DiagnosticMessage,
    DiagnosticRenderer,
    MessageKind,
    classify_line,
    classify_output,
)
from .driver import DriverResult, build_driver_command, run_driver
from .installer import build_install_command, install_package


__all__ = [
    "EMPTY_MESSAGE",
    "DiagnosticMessage",
    "DiagnosticRenderer",
    "DriverResult",
    "MessageKind",
    "build_driver_command",
    "build_install_command",
    "classify_line",
    "classify_output",
    "install_package",
    "run_driver",
]
