"""Rich console output utilities for the extension CLI."""

from rich.console import Console
from rich.markup import escape

console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True, highlight=False)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {escape(message)}", soft_wrap=True)


def print_text(text: str) -> None:
    """Print text verbatim, without markup or highlighting."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)
