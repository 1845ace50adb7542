"""Full-screen terminal capability shared by the interactive commands.

Each interactive command composes one ``TerminalSession``: it puts the
terminal in raw mode, switches to the alternate screen and hides the cursor,
and undoes all three on the way out.
"""

from __future__ import annotations

import logging
import sys
import termios

from rich.console import Console, RenderableType
from rich.live import Live
from rich.text import Text

from kit_cli.exceptions import TerminalModeFailure
from kit_cli.utils.ui.console import get_console

logger = logging.getLogger(__name__)


def raw_mode_attrs(attrs: list) -> list:
    """Return a copy of termios ``attrs`` with input made raw.

    Output post-processing stays on so rich can keep writing plain newlines.
    Ctrl+C arrives as a key instead of SIGINT.
    """
    new = list(attrs)
    new[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    new[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(new[6])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    new[6] = cc
    return new


class TerminalSession:
    """Raw mode + alternate screen for one interactive command."""

    def __init__(self, console: Console | None = None, fd: int | None = None):
        self.console = console or get_console()
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved_attrs: list | None = None
        self._live: Live | None = None

    @property
    def active(self) -> bool:
        return self._live is not None

    def setup(self) -> None:
        """Enter raw mode and the alternate screen.

        Raises:
            TerminalModeFailure: the terminal refused; whatever was already
                changed has been restored.
        """
        try:
            self._saved_attrs = termios.tcgetattr(self.fd)
            termios.tcsetattr(self.fd, termios.TCSADRAIN, raw_mode_attrs(self._saved_attrs))
            self._live = Live(
                Text(""),
                console=self.console,
                screen=True,
                auto_refresh=False,
            )
            self._live.start()
        except (termios.error, OSError) as e:
            logger.error("terminal setup failed: %s", e)
            try:
                self.teardown()
            except TerminalModeFailure as restore_error:
                logger.error("terminal restore after failed setup: %s", restore_error)
            raise TerminalModeFailure(f"could not set up terminal: {e}") from e
        logger.debug("terminal setup complete")

    def draw(self, renderable: RenderableType) -> None:
        if self._live is None:
            raise TerminalModeFailure("terminal is not set up")
        self._live.update(renderable, refresh=True)

    def set_title(self, title: str) -> None:
        self.console.set_window_title(title)

    def teardown(self) -> None:
        """Leave the alternate screen, show the cursor and restore cooked mode.

        Every step is attempted even if an earlier one fails.
        """
        errors: list[str] = []
        if self._live is not None:
            try:
                self._live.stop()
            except OSError as e:
                errors.append(f"leaving alternate screen: {e}")
            finally:
                self._live = None
        try:
            self.console.show_cursor(True)
        except OSError as e:
            errors.append(f"showing cursor: {e}")
        if self._saved_attrs is not None:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
            except termios.error as e:
                errors.append(f"restoring terminal mode: {e}")
            finally:
                self._saved_attrs = None
        if errors:
            raise TerminalModeFailure("could not restore terminal: " + "; ".join(errors))
        logger.debug("terminal restored")

    def __enter__(self) -> TerminalSession:
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.teardown()
            return
        try:
            self.teardown()
        except TerminalModeFailure as restore_error:
            # the original failure is the one worth reporting
            logger.error("%s", restore_error)
