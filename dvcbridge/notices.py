from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from dvcbridge.models import CommandResult


class ConsoleNotifier:
    """Renders command results the way the vault UI shows notices."""

    def __init__(self, console: Console | None = None, *, show_command: bool = False) -> None:
        self.console = console or Console()
        self.show_command = show_command

    def __call__(self, result: CommandResult) -> None:
        if self.show_command:
            self.console.print(f"[dim]$ {escape(result.command)}[/dim]")
        text = result.text.rstrip()
        if result.ok:
            if text:
                self.console.print(escape(text))
            return
        label = result.failure.value.replace("_", " ") if result.failure else "failed"
        self.console.print(f"[red]{escape(result.command)} ({label})[/red]")
        if text:
            self.console.print(f"[red]{escape(text)}[/red]")
