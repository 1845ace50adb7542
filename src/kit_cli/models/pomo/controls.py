"""Keyboard shortcuts for the pomodoro timer."""

from typing import Literal

from kit_cli.ui.events import InputEvent, KeyEvent

ControlAction = Literal["help", "pause", "skip", "quit"]

# Only matched when neither Ctrl nor Alt is held
_PLAIN_KEYS: dict[str, ControlAction] = {
    "h": "help",
    "q": "quit",
    "s": "skip",
}

HELP_ROWS: list[tuple[str, str]] = [
    ("h|?", "Toggle this help"),
    ("q|<Esc>", "Quit"),
    ("<Space>", "Pause timer"),
    ("s", "Skip to next segment"),
]


def route_input(event: InputEvent) -> ControlAction | None:
    """Map an input event to a control action, or None to ignore it."""
    if not isinstance(event, KeyEvent):
        return None
    if event.key == "escape":
        return "quit"
    if event.key == " ":
        return "pause"
    if event.key == "?":
        return "help"
    if event.ctrl:
        return "quit" if event.key == "c" and not event.alt else None
    if event.alt:
        return None
    return _PLAIN_KEYS.get(event.key)
