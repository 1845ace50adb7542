"""Tests for configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from kit_cli.config import (
    DEFAULT_WORDS_FILE,
    PomoConfig,
    WordConfig,
    load_pomo_config,
    load_word_config,
)
from kit_cli.exceptions import InvalidConfiguration


class TestPomoConfig:
    """Tests for PomoConfig."""

    def test_defaults(self):
        config = PomoConfig()

        assert (config.time, config.break_, config.long_break, config.n_pomos) == (25, 5, 15, 3)

    def test_break_accepts_alias_and_field_name(self):
        assert PomoConfig(**{"break": 7}).break_ == 7
        assert PomoConfig(break_=8).break_ == 8

    def test_is_frozen(self):
        config = PomoConfig()

        with pytest.raises(ValidationError):
            config.time = 10

    @pytest.mark.parametrize("field", ["time", "break_", "long_break", "n_pomos"])
    def test_zero_is_rejected(self, field):
        with pytest.raises(ValidationError):
            PomoConfig(**{field: 0})


class TestLoaders:
    """Tests for load_pomo_config() and load_word_config()."""

    def test_load_pomo_config(self):
        config = load_pomo_config(time=50, break_=10, long_break=30, n_pomos=2)

        assert config.time == 50
        assert config.n_pomos == 2

    def test_invalid_pomo_config_names_the_field(self):
        with pytest.raises(InvalidConfiguration) as exc_info:
            load_pomo_config(time=25, break_=0)

        message = str(exc_info.value)
        assert message.startswith("Invalid pomo options: break:")
        assert exc_info.value.exit_code == 2

    def test_load_word_config_defaults(self):
        config = load_word_config()

        assert config.words_file == DEFAULT_WORDS_FILE
        assert config.pattern == ""
        assert config.interactive is False

    def test_load_word_config(self):
        config = WordConfig(words_file="/tmp/words", pattern="c.t", interactive=True)

        assert config.words_file == Path("/tmp/words")
        assert load_word_config(pattern="x").pattern == "x"

    def test_invalid_word_config(self):
        with pytest.raises(InvalidConfiguration, match="Invalid word options"):
            load_word_config(interactive="perhaps")
