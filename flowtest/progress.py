"""
Progress reporting on stderr, kept separate from the data on stdout.
"""
import sys

from rich.console import Console


class ProgressReporter:
    """Callable reporter: progress("message"), progress.error("message")."""

    def __init__(self, enabled=True, console=None):
        self.enabled = enabled
        self.console = console or Console(stderr=True)

    def __call__(self, message):
        if self.enabled:
            self.console.print(f"[dim]{message}[/dim]")

    def success(self, message):
        if self.enabled:
            self.console.print(f"[green]✓[/green] {message}")

    def error(self, message):
        # Errors are shown even when progress is disabled
        self.console.print(f"[bold red]✗[/bold red] {message}")


def get_progress(enabled=None):
    """
    Build a reporter. enabled=None means: only when stderr is a terminal.
    """
    if enabled is None:
        enabled = sys.stderr.isatty()
    return ProgressReporter(enabled=enabled)
