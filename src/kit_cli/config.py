"""Configuration models for kit commands.

Values come from the command line (or their ``KIT_*`` environment variables)
and are validated here, before any interactive machinery is built.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from kit_cli.exceptions import InvalidConfiguration

DEFAULT_WORDS_FILE = Path("/usr/share/dict/words")


class PomoConfig(BaseModel):
    """Pomodoro session parameters, all in minutes except ``n_pomos``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: PositiveInt = Field(default=25)
    break_: PositiveInt = Field(default=5, alias="break")
    long_break: PositiveInt = Field(default=15)
    n_pomos: PositiveInt = Field(default=3)


class WordConfig(BaseModel):
    """Word search parameters."""

    model_config = ConfigDict(frozen=True)

    words_file: Path = Field(default=DEFAULT_WORDS_FILE)
    pattern: str = Field(default="")
    interactive: bool = Field(default=False)


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]).rstrip("_")
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


def load_pomo_config(**values) -> PomoConfig:
    """Build a PomoConfig, raising InvalidConfiguration on bad values."""
    try:
        return PomoConfig(**values)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid pomo options: {_describe(e)}") from e


def load_word_config(**values) -> WordConfig:
    """Build a WordConfig, raising InvalidConfiguration on bad values."""
    try:
        return WordConfig(**values)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid word options: {_describe(e)}") from e
