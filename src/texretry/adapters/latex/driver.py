"""Runtime helpers for invoking the typesetting driver."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
import shlex
import subprocess
import threading
from typing import IO

from rich.console import Console

from texretry.core.exceptions import DriverLaunchError, OutputDecodeError

from .diagnostics import DiagnosticMessage, classify_output


logger = logging.getLogger(__name__)

KEEPALIVE_BYTES = b"\n"


@dataclass(slots=True)
class DriverResult:
    """Captured output and exit status of one driver invocation."""

    returncode: int
    stdout: str
    stderr: str
    messages: list[DiagnosticMessage] = field(default_factory=list)


def build_driver_command(
    driver: str,
    base_args: Sequence[str],
    document: str,
    *,
    clean: bool = False,
    clean_flag: str = "-c",
) -> list[str]:
    """Clone the pass-through arguments and append the mode-specific tokens."""
    command = [driver, *base_args]
    if clean:
        command.append(clean_flag)
    command.append(document)
    return command


class _Keepalive(threading.Thread):
    """Write blank lines to the child's stdin until it exits."""

    def __init__(self, process: subprocess.Popen[bytes], interval: float) -> None:
        super().__init__(name="texretry-keepalive", daemon=True)
        self._process = process
        self._interval = interval
        self._stopped = threading.Event()

    def stop(self) -> None:
        self._stopped.set()

    def run(self) -> None:
        stdin = self._process.stdin
        if stdin is None:
            return
        while not self._stopped.is_set() and self._process.poll() is None:
            try:
                stdin.write(KEEPALIVE_BYTES)
                stdin.flush()
            except (OSError, ValueError):
                # The child closed its end of the pipe or has already exited.
                return
            self._stopped.wait(self._interval)


def _drain(stream: IO[bytes] | None, sink: list[bytes]) -> None:
    if stream is None:
        return
    sink.append(stream.read())


def _decode(payload: bytes, stream_name: str, command: Sequence[str]) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise OutputDecodeError(
            f"Output of '{shlex.join(command)}' on {stream_name} is not valid UTF-8: {exc}"
        ) from exc


def run_driver(
    argv: Sequence[str],
    *,
    console: Console,
    keepalive_interval: float = 0.05,
    empty_as_empty: bool = False,
) -> DriverResult:
    """Execute the driver, feed it keepalive newlines and classify its output.

    Messages are ordered with every stdout line first, then every stderr line.
    """
    command = list(argv)
    logger.debug("Running %s", shlex.join(command))
    try:
        process = subprocess.Popen(
            command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
        )
    except OSError as exc:
        raise DriverLaunchError(f"Failed to launch '{command[0]}': {exc}") from exc

    stdout_chunks: list[bytes] = []
    stderr_chunks: list[bytes] = []
    with process:
        readers = [
            threading.Thread(target=_drain, args=(process.stdout, stdout_chunks), daemon=True),
            threading.Thread(target=_drain, args=(process.stderr, stderr_chunks), daemon=True),
        ]
        keepalive = _Keepalive(process, keepalive_interval)
        for reader in readers:
            reader.start()
        keepalive.start()
        try:
            returncode = process.wait()
        finally:
            keepalive.stop()
            keepalive.join()
            for reader in readers:
                reader.join()

    console.print(f"status: {returncode}", markup=False, highlight=False)

    stdout = _decode(b"".join(stdout_chunks), "stdout", command)
    stderr = _decode(b"".join(stderr_chunks), "stderr", command)
    messages = classify_output(stdout, empty_as_empty=empty_as_empty)
    messages.extend(classify_output(stderr, empty_as_empty=empty_as_empty))
    return DriverResult(returncode=returncode, stdout=stdout, stderr=stderr, messages=messages)


__all__ = ["KEEPALIVE_BYTES", "DriverResult", "build_driver_command", "run_driver"]
