"""Output destinations for results and diagnostics.

An output is anything with ``write_out``, ``write_err`` and ``exit``. Results
go to ``write_out``; diagnostics go to ``write_err``; ``exit`` is only called
by the CLI's top-level error handler.
"""

import io
import sys
from typing import Protocol, TextIO

import typer
from rich.console import Console as RichConsole


class Output(Protocol):
    def write_out(self, text: str) -> None: ...

    def write_err(self, text: str) -> None: ...

    def exit(self, status: int) -> None: ...


class Console:
    """Writes results to stdout (or a file) and diagnostics to rich stderr."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self.console = RichConsole(stderr=True)

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write_out(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def write_err(self, text: str) -> None:
        self.console.print(text, end="", markup=False, highlight=False)

    def exit(self, status: int) -> None:
        raise typer.Exit(status)


class BufferOutput:
    """In-memory output; records the exit status instead of exiting."""

    def __init__(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.exit_status: int | None = None

    def write_out(self, text: str) -> None:
        self.out.write(text)

    def write_err(self, text: str) -> None:
        self.err.write(text)

    def exit(self, status: int) -> None:
        self.exit_status = status

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()
