"""Invocation of the TeX package manager."""

from __future__ import annotations

import logging
import subprocess

from texretry.core.exceptions import InstallerLaunchError


logger = logging.getLogger(__name__)


def build_install_command(installer: str, package: str) -> list[str]:
    """Return the argv installing ``package`` with ``installer``."""
    return [installer, "install", package]


def install_package(package: str, *, installer: str) -> int:
    """Run the package manager with inherited I/O and wait for it.

    The exit status is returned for logging only; a failed installation is
    detected by the next build attempt.
    """
    command = build_install_command(installer, package)
    logger.debug("Installing %s with %s", package, installer)
    try:
        result = subprocess.run(command, check=False)
    except FileNotFoundError as exc:
        raise InstallerLaunchError(
            f"Package manager '{installer}' could not be located."
        ) from exc
    except OSError as exc:
        raise InstallerLaunchError(f"Failed to invoke '{installer}': {exc}") from exc

    if result.returncode != 0:
        logger.info(
            "%s exited with code %s while installing %s", installer, result.returncode, package
        )
    return result.returncode


__all__ = ["build_install_command", "install_package"]
