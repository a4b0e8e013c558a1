"""Classification and presentation of LaTeX driver output lines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import ClassVar

from rich.console import Console
from rich.text import Text


class MessageKind(Enum):
    """Semantic category assigned to a single line of driver output."""

    NEEDS_INSTALL = "needs-install"
    UNKNOWN_ERROR = "unknown-error"
    UNKNOWN_INFO = "unknown-info"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class DiagnosticMessage:
    """Classified line of driver output.

    For ``NEEDS_INSTALL`` messages ``text`` holds the package identifier,
    otherwise it holds the trimmed line verbatim.
    """

    kind: MessageKind
    text: str = ""

    @property
    def package(self) -> str | None:
        """Return the missing package identifier, if any."""
        return self.text if self.kind is MessageKind.NEEDS_INSTALL else None

    def as_text(self) -> str:
        """Return the printable representation of the message."""
        if self.kind is MessageKind.EMPTY:
            return ""
        return self.text


EMPTY_MESSAGE = DiagnosticMessage(MessageKind.EMPTY)

ERROR_MARKER = "!"

_MISSING_FILE_PATTERN = re.compile(r"! LaTeX Error: File `(?P<name>.*)' not found\.")


def classify_line(line: str, *, empty_as_empty: bool = False) -> DiagnosticMessage:
    """Map one trimmed output line to exactly one message kind."""
    match = _MISSING_FILE_PATTERN.fullmatch(line)
    if match:
        package = match.group("name").split(".", 1)[0]
        return DiagnosticMessage(MessageKind.NEEDS_INSTALL, package)
    if line.startswith(ERROR_MARKER):
        return DiagnosticMessage(MessageKind.UNKNOWN_ERROR, line)
    if empty_as_empty and not line:
        return EMPTY_MESSAGE
    return DiagnosticMessage(MessageKind.UNKNOWN_INFO, line)


def classify_output(text: str, *, empty_as_empty: bool = False) -> list[DiagnosticMessage]:
    """Split captured output into trimmed lines and classify each of them.

    Only line feeds separate lines; a trailing one does not start an extra line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [classify_line(line.strip(), empty_as_empty=empty_as_empty) for line in lines]


class DiagnosticRenderer:
    """Render classified messages to a Rich console."""

    _STYLE: ClassVar[dict[MessageKind, str]] = {
        MessageKind.NEEDS_INSTALL: "bold yellow",
        MessageKind.UNKNOWN_ERROR: "bold red",
        MessageKind.UNKNOWN_INFO: "cyan",
        MessageKind.EMPTY: "grey50",
    }

    def __init__(self, console: Console) -> None:
        self.console = console

    def render(self, message: DiagnosticMessage) -> None:
        """Print a single message using its severity style."""
        style = self._STYLE.get(message.kind, "white")
        text = Text()
        if message.kind is MessageKind.UNKNOWN_ERROR:
            text.append("x ", style=style)
        text.append(message.as_text(), style=style)
        self.console.print(text)

    def render_install(self, package: str, installer: str) -> None:
        """Announce that ``installer`` is being started for ``package``."""
        self.console.print(
            Text.assemble(
                ("▲ ", "bold yellow"),
                (f"start {installer}", "yellow"),
                (f" (installing '{package}')", "grey58"),
            )
        )


__all__ = [
    "EMPTY_MESSAGE",
    "ERROR_MARKER",
    "DiagnosticMessage",
    "DiagnosticRenderer",
    "MessageKind",
    "classify_line",
    "classify_output",
]
