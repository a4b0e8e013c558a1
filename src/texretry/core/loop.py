"""Build-retry loop alternating clean passes, builds and package installs."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import logging
import time
from typing import Protocol

from rich.console import Console

from texretry.adapters.latex.diagnostics import DiagnosticRenderer
from texretry.adapters.latex.driver import DriverResult, build_driver_command, run_driver
from texretry.adapters.latex.installer import install_package
from texretry.core.config import BuildConfig
from texretry.core.exceptions import RetryLimitExceededError
from texretry.core.target import TargetSpec


logger = logging.getLogger(__name__)


class DriverRunner(Protocol):
    def __call__(
        self,
        argv: Sequence[str],
        *,
        console: Console,
        keepalive_interval: float,
        empty_as_empty: bool,
    ) -> DriverResult: ...


class PackageInstaller(Protocol):
    def __call__(self, package: str, *, installer: str) -> int: ...


@dataclass(slots=True)
class BuildOutcome:
    """Summary of a completed build loop."""

    attempts: int
    installed: list[str] = field(default_factory=list)


class BuildLoop:
    """Retry clean+build cycles until the target artifact exists.

    Each cycle installs at most one missing package: the first one reported
    by the build pass. Messages preceding it are printed, later ones are
    dropped. Without ``max_attempts`` the loop only ends on success.
    """

    def __init__(
        self,
        config: BuildConfig,
        target: TargetSpec,
        *,
        console: Console,
        driver: DriverRunner = run_driver,
        installer: PackageInstaller = install_package,
        artifact_exists: Callable[[], bool] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.target = target
        self.console = console
        self.renderer = DiagnosticRenderer(console)
        self._driver = driver
        self._installer = installer
        self._artifact_exists = artifact_exists or target.artifact_exists
        self._sleep = sleep

    def run(self) -> BuildOutcome:
        """Run cycles until success or until the attempt limit is hit."""
        outcome = BuildOutcome(attempts=0)
        while True:
            outcome.attempts += 1
            logger.debug("Build attempt %d for %s", outcome.attempts, self.target.document)
            self._clean()
            package = self._build()
            if package is not None:
                outcome.installed.append(package)

            if self._artifact_exists():
                logger.debug(
                    "%s produced after %d attempt(s)", self.target.artifact, outcome.attempts
                )
                return outcome

            limit = self.config.max_attempts
            if limit is not None and outcome.attempts >= limit:
                raise RetryLimitExceededError(outcome.attempts, str(self.target.artifact))

            delay = self.config.delay_for(outcome.attempts)
            if delay > 0:
                logger.info("Retrying in %.1f s", delay)
                self._sleep(delay)

    def _invoke(self, *, clean: bool) -> DriverResult:
        argv = build_driver_command(
            self.config.driver,
            self.config.driver_args,
            self.target.document,
            clean=clean,
            clean_flag=self.config.clean_flag,
        )
        return self._driver(
            argv,
            console=self.console,
            keepalive_interval=self.config.keepalive_interval,
            empty_as_empty=self.config.empty_lines_as_empty,
        )

    def _clean(self) -> None:
        result = self._invoke(clean=True)
        for message in result.messages:
            logger.debug("clean: %s", message.as_text())

    def _build(self) -> str | None:
        result = self._invoke(clean=False)
        for message in result.messages:
            package = message.package
            if package is None:
                self.renderer.render(message)
                continue
            self._installer(package, installer=self.config.installer)
            self.renderer.render_install(package, self.config.installer)
            return package
        return None


def run_build(config: BuildConfig, target: TargetSpec, *, console: Console) -> BuildOutcome:
    """Run the build loop with the real driver and package manager."""
    return BuildLoop(config, target, console=console).run()


__all__ = ["BuildLoop", "BuildOutcome", "DriverRunner", "PackageInstaller", "run_build"]
