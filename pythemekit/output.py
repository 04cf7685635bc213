"""Console output for CLI commands, built on rich."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

from .events import ThemeEvent


class OutputFormatter:
    """Render messages and theme events to the terminal.

    In JSON mode every event is printed as one JSON line and plain
    messages are suppressed. Failures always go to stderr.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or console or Console(stderr=True, highlight=False)
        self.failures = 0
        self.successes = 0

    def print(self, message: str = "") -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message, markup=False)

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error:[/red] {escape(message)}")

    def report(self, event: ThemeEvent) -> None:
        """Print one event and count its outcome."""
        if event.successful:
            self.successes += 1
        else:
            self.failures += 1

        if self.json_output:
            self.console.print(event.as_json(), markup=False, soft_wrap=True)
        elif not event.successful:
            self.err_console.print(event.message(), style="red", markup=False)
        elif not self.quiet:
            self.console.print(event.message(), style="green", markup=False)

    def print_summary(self) -> None:
        self.print(f"{self.successes} succeeded, {self.failures} failed")
