"""Command 'word' of kit: search English words with a regex."""

import re
import sys
from pathlib import Path

import typer

from kit_cli.config import DEFAULT_WORDS_FILE, load_word_config
from kit_cli.exceptions import InvalidConfiguration
from kit_cli.models.word import WordMatcher, load_words
from kit_cli.ui.word_prompt import WordPrompt
from kit_cli.utils.ui.formatters import format_columns

from .decorators import command_wrapper


@command_wrapper
async def word(
    pattern: str | None = typer.Argument(
        None, help="Regex matched against whole words (omit to start the interactive prompt)"
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Launch an interactive TUI to input regexes"
    ),
    words_file: Path = typer.Option(
        DEFAULT_WORDS_FILE,
        "--words",
        "-w",
        help="Word list, one word per line",
        envvar="KIT_WORDS_FILE",
    ),
) -> None:
    """Search for English words matching a regex input."""
    config = load_word_config(
        words_file=words_file,
        pattern=pattern or "",
        interactive=interactive or pattern is None,
    )
    matcher = WordMatcher(load_words(config.words_file), config.pattern)

    if config.interactive:
        await WordPrompt(matcher, title=" ".join(sys.argv)).run()
        return

    try:
        matches = matcher.matches()
    except re.error as e:
        raise InvalidConfiguration(f"invalid pattern {config.pattern!r}: {e}") from e
    format_columns(matches)
