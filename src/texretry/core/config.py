"""Configuration model driving the build-retry loop.

BuildConfig

`driver` (`str`)
: Executable of the typesetting driver. Defaults to `latexmk`.

`installer` (`str`)
: Executable of the TeX package manager, invoked as
  `<installer> install <package>`. Defaults to `tlmgr` (`tlmgr.bat` on
  Windows, where batch wrappers are not resolved implicitly).

`driver_args` (`list[str]`)
: Leading arguments forwarded verbatim to every driver invocation.

`clean_flag` (`str`)
: Flag appended to the driver arguments for the clean pass.

`keepalive_interval` (`float`)
: Seconds between blank lines written to the driver's standard input while
  it runs. Dismisses interactive prompts such as `Enter file name:`.

`max_attempts` (`int | None`)
: Upper bound on clean+build cycles. `None` retries until the target
  artifact appears.

`backoff` (`float`)
: Initial delay in seconds between failed cycles. `0` disables the delay.

`backoff_factor` (`float`)
: Multiplier applied to the delay after each failed cycle.

`max_backoff` (`float`)
: Ceiling for the delay between cycles.

`empty_lines_as_empty` (`bool`)
: Classify blank output lines as `EMPTY` instead of `UNKNOWN_INFO`.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from texretry.core.exceptions import ConfigurationError


DEFAULT_DRIVER = "latexmk"
DEFAULT_CLEAN_FLAG = "-c"


def default_installer() -> str:
    """Return the platform-specific package manager executable."""
    return "tlmgr.bat" if os.name == "nt" else "tlmgr"


class BuildConfig(BaseModel):
    """Options controlling driver invocation and retry policy."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    driver: str = DEFAULT_DRIVER
    installer: str = Field(default_factory=default_installer)
    driver_args: list[str] = Field(default_factory=list)
    clean_flag: str = DEFAULT_CLEAN_FLAG
    keepalive_interval: float = Field(default=0.05, gt=0)
    max_attempts: int | None = Field(default=None, ge=1)
    backoff: float = Field(default=0.0, ge=0)
    backoff_factor: float = Field(default=2.0, ge=1)
    max_backoff: float = Field(default=60.0, ge=0)
    empty_lines_as_empty: bool = False

    @model_validator(mode="after")
    def check_executables(self) -> BuildConfig:
        """Reject blank executable names."""
        if not self.driver.strip():
            raise ValueError("driver executable must not be empty")
        if not self.installer.strip():
            raise ValueError("installer executable must not be empty")
        return self

    def delay_for(self, attempt: int) -> float:
        """Return the pause to observe after the given failed attempt (1-based)."""
        if self.backoff <= 0:
            return 0.0
        delay = self.backoff * self.backoff_factor ** max(attempt - 1, 0)
        return min(delay, self.max_backoff)


def load_config(**values: Any) -> BuildConfig:
    """Validate raw option values, dropping unset entries."""
    provided = {key: value for key, value in values.items() if value is not None}
    try:
        return BuildConfig(**provided)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid build options: {details}") from exc


__all__ = [
    "DEFAULT_CLEAN_FLAG",
    "DEFAULT_DRIVER",
    "BuildConfig",
    "default_installer",
    "load_config",
]
