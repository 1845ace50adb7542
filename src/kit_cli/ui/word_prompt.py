"""Interactive full-screen word search."""

from __future__ import annotations

import logging
import re

from rich.console import Console, Group
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from kit_cli.models.word import COLUMN_SPACING, WordMatcher, layout_page
from kit_cli.utils.ui.console import get_console

from .events import InputEvent, KeyEvent, TerminalEvents
from .terminal import TerminalSession

logger = logging.getLogger(__name__)

# input panel height plus borders and outer margin
_CHROME_HEIGHT = 3 + 2 + 4
_CHROME_WIDTH = 2 + 4


class WordPrompt:
    """Type a regex, see matching words update on every key press.

    Ctrl+U / Ctrl+D page through the matches; Escape or Ctrl+C quits.
    """

    def __init__(
        self,
        matcher: WordMatcher,
        title: str = "kit word",
        console: Console | None = None,
        terminal: TerminalSession | None = None,
        events: TerminalEvents | None = None,
    ):
        self.matcher = matcher
        self.title = title
        self.console = console or get_console()
        self.terminal = terminal or TerminalSession(self.console)
        self.events = events or TerminalEvents(self.terminal.fd)
        self.page = 0

    async def run(self) -> None:
        with self.terminal:
            self.events.attach()
            try:
                while True:
                    self.terminal.set_title(f"{self.title} - {self.matcher.pattern}")
                    self.terminal.draw(self.create_layout())
                    event = await self.events.next_event()
                    if event is None or not self.handle(event):
                        break
            finally:
                self.events.detach()

    def handle(self, event: InputEvent) -> bool:
        """Apply one event. Returns False when the prompt should close."""
        if not isinstance(event, KeyEvent):
            return True
        if event.ctrl:
            if event.key == "c":
                return False
            if event.key == "u":
                self.page = max(self.page - 1, 0)
            elif event.key == "d":
                self.page += 1
            return True
        if event.key == "escape":
            return False
        if event.key == "backspace":
            self.matcher.pop()
            self.page = 0
        elif len(event.key) == 1:
            self.matcher.push(event.key)
            self.page = 0
        return True

    def create_layout(self) -> Layout:
        width, height = self.console.size
        try:
            matches = self.matcher.matches()
        except re.error as e:
            logger.debug("bad pattern %r: %s", self.matcher.pattern, e)
            matches = None

        layout = Layout()
        layout.split_column(Layout(name="input", size=3), Layout(name="matches"))
        layout["input"].update(Panel(Text(f" > {self.matcher.pattern}", overflow="ellipsis")))

        if matches is None:
            layout["matches"].update(
                Panel(Text("Error parsing regex!", style="red"), title="Matches (0 total)")
            )
            return self._with_margin(layout)

        page = layout_page(
            matches,
            max(width - _CHROME_WIDTH, 1),
            max(height - _CHROME_HEIGHT, 1),
            self.page,
        )
        self.page = page.page
        table = Table.grid(padding=(0, COLUMN_SPACING))
        for _ in range(page.n_columns):
            table.add_column(min_width=page.column_width, no_wrap=True, overflow="ellipsis")
        for row in page.rows:
            table.add_row(*row)
        title = f"Matches ({len(matches)} total)"
        if page.n_pages > 1:
            title += f" - page {page.page + 1}/{page.n_pages}"
        layout["matches"].update(Panel(Group(table), title=title, title_align="left"))
        return self._with_margin(layout)

    def _with_margin(self, layout: Layout) -> Layout:
        outer = Layout()
        outer.split_column(Layout(Text(""), size=2), layout, Layout(Text(""), size=2))
        return outer
