"""Shared test fixtures and configuration.

Keeps the application log out of the real user log directory and provides a
scripted presenter for driving pomodoro sessions without a terminal.
"""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import patch

import pytest

from kit_cli.ui.events import KeyEvent


# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Point the log file at *tmp_path* and reset the logger singleton."""
    import kit_cli.utils.logger as logger_mod

    original = logger_mod._logger
    logger_mod._logger = None
    logging.getLogger("kit_cli").handlers.clear()

    with patch("kit_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield tmp_path / "logs"

    logging.getLogger("kit_cli").handlers.clear()
    logger_mod._logger = original


# ---------------------------------------------------------------------------
# Scripted presenter
# ---------------------------------------------------------------------------


class FakePresenter:
    """Records snapshots and replays queued input events."""

    def __init__(self):
        self.events: asyncio.Queue = asyncio.Queue()
        self.snapshots = []
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def render(self, snapshot) -> None:
        self.snapshots.append(snapshot)

    async def next_event(self):
        item = await self.events.get()
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    def press(self, key: str, **modifiers) -> None:
        self.events.put_nowait(KeyEvent(key, **modifiers))

    def push(self, item) -> None:
        self.events.put_nowait(item)


@pytest.fixture()
def presenter():
    return FakePresenter()
