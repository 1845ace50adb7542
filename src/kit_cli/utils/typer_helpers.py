"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from kit_cli.utils.exit_codes import ERROR_GENERAL
from kit_cli.utils.ui.console import get_console
from kit_cli.utils.ui.formatters import format_error

# At most this many suggestions, each at least this similar to the typo
MAX_SUGGESTIONS = 3
SIMILARITY_CUTOFF = 0.6


def suggest_commands(attempted: str, available: list[str]) -> list[str]:
    """Return the subcommand names closest to ``attempted``."""
    return get_close_matches(attempted, available, n=MAX_SUGGESTIONS, cutoff=SIMILARITY_CUTOFF)


class SuggestingGroup(TyperGroup):
    """Typer group that suggests the closest subcommand on typos.

    ``kit pmo`` prints "Did you mean this? pomo" instead of a bare usage error.
    """

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            suggestions = suggest_commands(args[0], list(self.commands)) if args else []
            if not suggestions:
                raise
            format_error(f'unknown command "{args[0]}" for "{ctx.info_name}"')
            console = get_console()
            console.print()
            if len(suggestions) == 1:
                console.print("[yellow]Did you mean this?[/yellow]")
            else:
                console.print("[yellow]Did you mean one of these?[/yellow]")
            for suggestion in suggestions:
                console.print(f"        {suggestion}")
            raise typer.Exit(ERROR_GENERAL) from e
