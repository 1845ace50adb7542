"""Main entry point for kit."""

import typer

from kit_cli import __version__
from kit_cli.commands.pomo import pomo
from kit_cli.commands.word import word
from kit_cli.utils.logger import set_verbosity
from kit_cli.utils.typer_helpers import SuggestingGroup
from kit_cli.utils.ui.console import get_console

app = typer.Typer(
    name="kit",
    cls=SuggestingGroup,
    help="A personal command-line toolkit",
    no_args_is_help=True,
)

console = get_console(highlight=False)


@app.callback()
def callback(
    debug: int = typer.Option(
        0, "--debug", "-d", count=True, help="Log more detail (repeat for debug logs)"
    ),
) -> None:
    """A personal command-line toolkit."""
    set_verbosity(debug)


app.command("pomo")(pomo)
app.command("word")(word)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]kit[/bold] version [cyan]{__version__}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
