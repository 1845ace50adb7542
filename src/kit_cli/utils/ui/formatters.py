"""Output formatters for plain (non-fullscreen) command output."""

from rich.columns import Columns
from rich.console import Console

from .console import get_console


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_columns(items: list[str], console: Console | None = None) -> None:
    """Print items in as many columns as the terminal width allows."""
    console = console or get_console()
    if not items:
        console.print("[yellow]No matches[/yellow]")
        return
    console.print(Columns(items, equal=True, column_first=True, padding=(0, 2)))
    console.print(f"[dim]{len(items)} total[/dim]")
