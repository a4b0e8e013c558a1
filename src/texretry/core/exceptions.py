"""Custom exception hierarchy for the LaTeX build-retry loop."""

from __future__ import annotations


class TexRetryError(RuntimeError):
    """Base exception for build-loop failures."""


class InvalidDocumentError(TexRetryError):
    """Raised when the document argument is missing or is not a ``.tex`` file."""


class ConfigurationError(TexRetryError):
    """Raised when build options fail validation."""


class DriverLaunchError(TexRetryError):
    """Raised when the typesetting driver cannot be started."""


class InstallerLaunchError(TexRetryError):
    """Raised when the package manager cannot be started."""


class OutputDecodeError(TexRetryError):
    """Raised when captured driver output is not valid UTF-8."""


class RetryLimitExceededError(TexRetryError):
    """Raised when the configured number of build attempts is exhausted."""

    def __init__(self, attempts: int, artifact: str) -> None:
        super().__init__(f"'{artifact}' was not produced after {attempts} attempt(s).")
        self.attempts = attempts
        self.artifact = artifact


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "ConfigurationError",
    "DriverLaunchError",
    "InstallerLaunchError",
    "InvalidDocumentError",
    "OutputDecodeError",
    "RetryLimitExceededError",
    "TexRetryError",
    "exception_messages",
]
