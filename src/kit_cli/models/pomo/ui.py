"""Full-screen pomodoro UI."""

import logging

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.padding import Padding
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from kit_cli.exceptions import TerminalModeFailure
from kit_cli.ui.events import InputEvent, TerminalEvents
from kit_cli.ui.terminal import TerminalSession
from kit_cli.utils.ui.console import get_console

from .controls import HELP_ROWS
from .session import SEGMENT_HISTORY, SessionSnapshot

logger = logging.getLogger(__name__)

SEGMENTS_WIDTH = 22
SEGMENTS_HEIGHT = 9
HELP_WIDTH = 36
HELP_HEIGHT = 6


class PomoDisplay:
    """Draws session snapshots with rich and reads keys from the terminal."""

    def __init__(
        self,
        console: Console | None = None,
        terminal: TerminalSession | None = None,
        events: TerminalEvents | None = None,
    ):
        self.console = console or get_console()
        self.terminal = terminal or TerminalSession(self.console)
        self.events = events or TerminalEvents(self.terminal.fd)

    def open(self) -> None:
        self.terminal.setup()
        try:
            self.events.attach()
        except BaseException:
            try:
                self.terminal.teardown()
            except TerminalModeFailure as restore_error:
                logger.error("terminal restore after failed attach: %s", restore_error)
            raise

    def close(self) -> None:
        self.events.detach()
        self.terminal.teardown()

    def render(self, snapshot: SessionSnapshot) -> None:
        self.terminal.draw(self.create_layout(snapshot))

    async def next_event(self) -> InputEvent | None:
        return await self.events.next_event()

    def create_layout(self, snapshot: SessionSnapshot) -> Layout:
        """Build the screen: segment list, progress gauge and optional help."""
        height = self.console.size.height
        margin = max(height - (SEGMENTS_HEIGHT + HELP_HEIGHT), 0) // 4

        layout = Layout()
        layout.split_column(
            Layout(name="margin", size=margin),
            Layout(name="top", size=SEGMENTS_HEIGHT),
            Layout(name="bottom", size=HELP_HEIGHT),
            Layout(name="rest"),
        )
        layout["top"].split_row(
            Layout(name="segments", size=SEGMENTS_WIDTH),
            Layout(name="progress"),
        )
        layout["bottom"].split_row(
            Layout(name="help", size=HELP_WIDTH),
            Layout(name="spare"),
        )
        for name in ("margin", "rest", "spare"):
            layout[name].update(Text(""))

        layout["segments"].update(self._segments_panel(snapshot))
        layout["progress"].update(Padding(self._progress_panel(snapshot), (0, 4, 0, 0)))
        layout["help"].update(self._help_panel() if snapshot.help_visible else Text(""))
        return layout

    def _segments_panel(self, snapshot: SessionSnapshot) -> Panel:
        table = Table.grid(padding=(0, 0))
        table.add_column(width=SEGMENTS_WIDTH - 4, no_wrap=True)
        for _ in range(SEGMENT_HISTORY - snapshot.current):
            table.add_row("")
        for position, segment in enumerate(snapshot.segments):
            if position == snapshot.current:
                table.add_row(Text(f" > {segment.label}", style="green"))
            else:
                table.add_row(Text(f"   {segment.label}"))
        return Panel(table, title="Current segment", title_align="left")

    def _progress_panel(self, snapshot: SessionSnapshot) -> Panel:
        title = "Progress (PAUSED)" if snapshot.paused else "Progress"
        bar = ProgressBar(
            total=snapshot.total,
            completed=snapshot.total - snapshot.remaining,
            complete_style="bold green",
            finished_style="bold green",
        )
        body = Group(
            Align.center(Text(snapshot.clock, style="bold")),
            Text(""),
            bar,
        )
        return Panel(
            Align.center(body, vertical="middle"),
            title=title,
            title_align="left",
            border_style="yellow" if snapshot.paused else "white",
        )

    def _help_panel(self) -> Panel:
        table = Table.grid(padding=(0, 1))
        table.add_column(width=8, style="yellow")
        table.add_column(width=20)
        for keys, description in HELP_ROWS:
            table.add_row(keys, description)
        return Panel(table, title="Help", title_align="left")
