"""Regex search over an English word list."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from kit_cli.exceptions import KitError
from kit_cli.utils.exit_codes import ERROR_INVALID_ARGS

T = TypeVar("T")

COLUMN_SPACING = 2


def load_words(path: Path) -> str:
    """Read the word list, one word per line."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as e:
        raise KitError(f"word list not found: {path}", exit_code=ERROR_INVALID_ARGS) from e
    except OSError as e:
        raise KitError(f"could not read word list {path}: {e}") from e


@dataclass
class WordMatcher:
    """Matches whole lines of ``words`` against an anchored pattern."""

    words: str
    pattern: str = ""
    _cache: tuple[str, list[str]] | None = field(default=None, repr=False)

    def push(self, ch: str) -> None:
        self.pattern += ch

    def pop(self) -> None:
        self.pattern = self.pattern[:-1]

    def matches(self) -> list[str]:
        """Return every word matching the pattern.

        Raises:
            re.error: the pattern is not a valid regex.
        """
        if self._cache is not None and self._cache[0] == self.pattern:
            return self._cache[1]
        if not self.pattern:
            result: list[str] = []
        else:
            regex = re.compile(rf"^(?:{self.pattern})$", re.MULTILINE)
            result = [m.group(0) for m in regex.finditer(self.words) if m.group(0)]
        self._cache = (self.pattern, result)
        return result


def transpose(rows: list[list[T]]) -> list[list[T]]:
    """Turn rows into columns; ragged rows leave short columns."""
    columns: list[list[T]] = []
    for row in rows:
        for i, cell in enumerate(row):
            if len(columns) <= i:
                columns.append([])
            columns[i].append(cell)
    return columns


@dataclass(frozen=True)
class Page:
    """One screenful of matches laid out in columns."""

    rows: list[list[str]]
    column_width: int
    n_columns: int
    page: int
    n_pages: int


def layout_page(matches: list[str], width: int, height: int, page: int) -> Page:
    """Lay out ``matches`` column-first in a ``width`` x ``height`` area.

    ``page`` is clamped to the available pages.
    """
    longest = max((len(m) for m in matches), default=0)
    n_columns_wanted = len(matches) // max(width, 1)
    n_columns_available = width // (longest + COLUMN_SPACING) if longest else 1
    n_columns = max(min(n_columns_wanted, n_columns_available), 1)
    n_rows = max(height, 1)
    per_page = n_rows * n_columns
    n_pages = max(math.ceil(len(matches) / per_page), 1)
    page = min(max(page, 0), n_pages - 1)

    visible = matches[page * per_page : (page + 1) * per_page]
    columns = [visible[i : i + n_rows] for i in range(0, len(visible), n_rows)]
    return Page(
        rows=transpose(columns),
        column_width=longest,
        n_columns=n_columns,
        page=page,
        n_pages=n_pages,
    )
