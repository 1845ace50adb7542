"""Terminal input events and an asyncio event source reading them from stdin."""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import shutil
import signal
import sys
from dataclasses import dataclass

from kit_cli.exceptions import InputStreamFailure

logger = logging.getLogger(__name__)

_READ_SIZE = 1024
# How long a trailing ESC waits for the rest of its sequence
ESCAPE_TIMEOUT = 0.05
_END = object()

# CSI final bytes and "~" parameters for the keys kit cares to name
_CSI_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "Z": "backtab",
}
_TILDE_KEYS = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageup",
    "6": "pagedown",
}
_CONTROL_NAMES = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}


@dataclass(frozen=True)
class KeyEvent:
    """A key press. ``key`` is the character, or a name such as ``escape``."""

    key: str
    ctrl: bool = False
    alt: bool = False


@dataclass(frozen=True)
class MouseEvent:
    """A mouse report; kit never acts on these."""

    raw: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


InputEvent = KeyEvent | MouseEvent | ResizeEvent


def _csi_end(data: str, start: int) -> int:
    """Index just past the CSI sequence whose parameters begin at ``start``."""
    i = start
    while i < len(data) and not ("\x40" <= data[i] <= "\x7e"):
        i += 1
    return min(i + 1, len(data))


def split_pending_escape(data: str) -> tuple[str, str]:
    """Split off a trailing escape sequence that may still be arriving.

    Returns ``(complete, pending)``. ``pending`` is a lone trailing ESC or an
    unterminated CSI/SS3/mouse sequence; everything before it is ``complete``.
    """
    start = data.rfind("\x1b")
    if start == -1:
        return data, ""
    tail = data[start:]
    if tail == "\x1b":
        return data[:start], tail
    if tail[1] == "[" and tail[2:3] == "M":
        finished = len(tail) >= 6
    elif tail[1] in ("[", "O"):
        finished = any("\x40" <= ch <= "\x7e" for ch in tail[2:])
    else:
        finished = True
    if finished:
        return data, ""
    return data[:start], tail


def decode_input(data: str) -> list[InputEvent]:
    """Split a chunk of terminal input into events.

    A lone ESC (end of chunk, or followed by another ESC) is the Escape key;
    ESC followed by a printable character is that character with Alt.
    """
    events: list[InputEvent] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            nxt = data[i + 1] if i + 1 < len(data) else ""
            if nxt == "[" and data[i + 2 : i + 3] == "M":
                # X10 mouse: ESC [ M b x y
                events.append(MouseEvent(data[i : i + 6]))
                i += 6
                continue
            if nxt == "[" and data[i + 2 : i + 3] == "<":
                end = _csi_end(data, i + 3)
                events.append(MouseEvent(data[i:end]))
                i = end
                continue
            if nxt in ("[", "O"):
                end = _csi_end(data, i + 2)
                body = data[i + 2 : end]
                final = body[-1:] if body else ""
                if final == "~":
                    name = _TILDE_KEYS.get(body[:-1].split(";")[0])
                elif nxt == "O" and final in ("P", "Q", "R", "S"):
                    name = "f" + str("PQRS".index(final) + 1)
                else:
                    name = _CSI_KEYS.get(final)
                events.append(KeyEvent(name or "unknown"))
                i = end
                continue
            if nxt and nxt != "\x1b":
                events.append(_decode_char(nxt, alt=True))
                i += 2
                continue
            events.append(KeyEvent("escape"))
            i += 1
            continue
        events.append(_decode_char(ch))
        i += 1
    return events


def _decode_char(ch: str, alt: bool = False) -> KeyEvent:
    if ch in _CONTROL_NAMES:
        return KeyEvent(_CONTROL_NAMES[ch], alt=alt)
    code = ord(ch)
    if code == 0:
        return KeyEvent(" ", ctrl=True, alt=alt)
    if code < 32:
        return KeyEvent(chr(code + 96), ctrl=True, alt=alt)
    return KeyEvent(ch, alt=alt)


class TerminalEvents:
    """Asyncio source of input events for a terminal file descriptor.

    Bytes are read by an event-loop reader callback and queued; SIGWINCH is
    turned into ResizeEvent. Once the stream ends, :meth:`next_event` returns
    None forever; once reading fails, it raises InputStreamFailure.
    """

    def __init__(self, fd: int | None = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._queue: asyncio.Queue[InputEvent | object] = asyncio.Queue()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._loop: asyncio.AbstractEventLoop | None = None
        self._finished = False
        self._failure: InputStreamFailure | None = None
        self._resize_handler = False
        self._pending = ""
        self._pending_timer: asyncio.TimerHandle | None = None

    def attach(self) -> None:
        """Start watching the descriptor. Must run inside the event loop."""
        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self.fd, self._on_readable)
        try:
            self._loop.add_signal_handler(signal.SIGWINCH, self._on_resize)
            self._resize_handler = True
        except (AttributeError, NotImplementedError, RuntimeError, ValueError):
            logger.debug("resize notifications unavailable")

    def detach(self) -> None:
        if self._loop is None:
            return
        self._loop.remove_reader(self.fd)
        if self._resize_handler:
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._resize_handler = False
        self._flush_pending()
        self._loop = None

    def feed(self, data: str) -> None:
        """Queue events decoded from ``data``."""
        for event in decode_input(data):
            self._queue.put_nowait(event)

    def _finish(self, failure: InputStreamFailure | None) -> None:
        self._flush_pending()
        self._finished = True
        self._failure = failure
        self._queue.put_nowait(_END)
        if self._loop is not None:
            self._loop.remove_reader(self.fd)

    def _on_readable(self) -> None:
        try:
            data = os.read(self.fd, _READ_SIZE)
        except OSError as e:
            logger.error("error reading input: %s", e)
            self._finish(InputStreamFailure(f"error reading input: {e}"))
            return
        if not data:
            logger.info("input stream ended")
            self._finish(None)
            return
        self._receive(self._decoder.decode(data))

    def _receive(self, text: str) -> None:
        """Queue decoded input, holding back an escape sequence split across reads."""
        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None
        complete, self._pending = split_pending_escape(self._pending + text)
        self.feed(complete)
        if self._pending and self._loop is not None:
            self._pending_timer = self._loop.call_later(ESCAPE_TIMEOUT, self._flush_pending)
        elif self._pending:
            self._flush_pending()

    def _flush_pending(self) -> None:
        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None
        pending, self._pending = self._pending, ""
        self.feed(pending)

    def _on_resize(self) -> None:
        size = shutil.get_terminal_size()
        self._queue.put_nowait(ResizeEvent(size.columns, size.lines))

    async def next_event(self) -> InputEvent | None:
        """Wait for the next event; None means the input stream has ended."""
        if self._finished and self._queue.empty():
            return self._end()
        item = await self._queue.get()
        if item is _END:
            return self._end()
        return item

    def _end(self) -> None:
        if self._failure is not None:
            raise self._failure
        return None
