"""Retry latexmk builds, installing missing packages with tlmgr."""

from __future__ import annotations

from texretry.adapters.latex import (
    DiagnosticMessage,
    DriverResult,
    MessageKind,
    classify_line,
    classify_output,
    install_package,
    run_driver,
)
from texretry.core.config import BuildConfig, load_config
from texretry.core.exceptions import (
    ConfigurationError,
    DriverLaunchError,
    InstallerLaunchError,
    InvalidDocumentError,
    OutputDecodeError,
    RetryLimitExceededError,
    TexRetryError,
)
from texretry.core.loop import BuildLoop, BuildOutcome, run_build
from texretry.core.target import TargetSpec
from texretry.version import get_version


__version__ = get_version()

__all__ = [
    "BuildConfig",
    "BuildLoop",
    "BuildOutcome",
    "ConfigurationError",
    "DiagnosticMessage",
    "DriverLaunchError",
    "DriverResult",
    "InstallerLaunchError",
    "InvalidDocumentError",
    "MessageKind",
    "OutputDecodeError",
    "RetryLimitExceededError",
    "TargetSpec",
    "TexRetryError",
    "__version__",
    "classify_line",
    "classify_output",
    "install_package",
    "load_config",
    "run_build",
    "run_driver",
]
