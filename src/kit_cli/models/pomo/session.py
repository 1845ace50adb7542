"""Pomodoro session: segment transitions and the render/input loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from kit_cli.ui.events import InputEvent

from .controls import ControlAction, route_input
from .countdown import TICK_SECONDS, CountdownEngine
from .segments import Segment, SegmentSequence

logger = logging.getLogger(__name__)

# Segments shown before the current one, and the total list length
SEGMENT_HISTORY = 2
SEGMENT_WINDOW = 7


@dataclass
class SessionState:
    """Mutable session state, written only by PomodoroSession."""

    segment_index: int
    remaining: float
    paused: bool = False
    help_visible: bool = False


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the presenter needs for one render pass."""

    segments: tuple[Segment, ...]
    current: int  # position of the active segment in ``segments``
    index: int
    remaining: float
    total: int
    paused: bool
    help_visible: bool

    @property
    def segment(self) -> Segment:
        return self.segments[self.current]

    @property
    def progress(self) -> float:
        if self.total <= 0:
            return 1.0
        return min(max((self.total - self.remaining) / self.total, 0.0), 1.0)

    @property
    def clock(self) -> str:
        seconds = int(self.remaining)
        return f"{seconds // 60:02d}:{seconds % 60:02d}"


class TerminalPresenter(Protocol):
    """Draws snapshots and supplies input events."""

    def open(self) -> None:
        """Prepare the terminal. Raises TerminalModeFailure."""
        ...

    def render(self, snapshot: SessionSnapshot) -> None: ...

    async def next_event(self) -> InputEvent | None:
        """Next input event; None once the input stream has ended."""
        ...

    def close(self) -> None:
        """Restore the terminal. Raises TerminalModeFailure."""
        ...


class PomodoroSession:
    """Runs segments back to back until the user quits.

    Each segment gets a fresh CountdownEngine. Every loop pass samples the
    engine's latest remaining time, renders, then waits up to one refresh
    interval for input.
    """

    def __init__(
        self,
        sequence: SegmentSequence,
        presenter: TerminalPresenter,
        *,
        engine_factory: Callable[[float], CountdownEngine] = CountdownEngine,
        refresh: float = TICK_SECONDS,
    ):
        self.sequence = sequence
        self.presenter = presenter
        self.engine_factory = engine_factory
        self.refresh = refresh
        self.state = SessionState(segment_index=0, remaining=float(sequence[0].duration))
        self.engine: CountdownEngine | None = None
        self.terminated = False

    @property
    def segment(self) -> Segment:
        return self.sequence[self.state.segment_index]

    def snapshot(self) -> SessionSnapshot:
        index = self.state.segment_index
        history = min(index, SEGMENT_HISTORY)
        segments = self.sequence.window(index - history, history + SEGMENT_WINDOW - SEGMENT_HISTORY)
        return SessionSnapshot(
            segments=tuple(segments),
            current=history,
            index=index,
            remaining=self.state.remaining,
            total=self.segment.duration,
            paused=self.state.paused,
            help_visible=self.state.help_visible,
        )

    async def run(self) -> None:
        """Run until quit. The presenter is closed on every exit path."""
        self.presenter.open()
        try:
            self._start_engine()
            while not self.terminated:
                await self.step()
        finally:
            if self.engine is not None:
                self.engine.cancel()
                self.engine.release()
            self.presenter.close()
        logger.info("session ended at segment %d", self.state.segment_index)

    async def step(self) -> None:
        """One pass of the loop: completion check, render, wait for input."""
        if self.engine.done:
            self.advance()
        self.state.remaining = self.engine.remaining.borrow()
        self.presenter.render(self.snapshot())
        self.handle(await self._next_action())

    def handle(self, action: ControlAction | None) -> None:
        if action == "help":
            self.state.help_visible = not self.state.help_visible
        elif action == "pause":
            self.state.paused = not self.state.paused
            self.engine.set_paused(self.state.paused)
            logger.info("%s", "paused" if self.state.paused else "resumed")
        elif action == "skip":
            self.advance(skipped=True)
        elif action == "quit":
            self.terminated = True

    def advance(self, skipped: bool = False) -> None:
        """Retire the current engine and start the next segment."""
        if self.engine is not None:
            if skipped:
                self.engine.cancel()
            self.engine.release()
        logger.info(
            "segment %d (%s) %s",
            self.state.segment_index,
            self.segment.label,
            "skipped" if skipped else "completed",
        )
        self.state.segment_index += 1
        self.state.remaining = float(self.segment.duration)
        self.state.paused = False
        self._start_engine()

    def _start_engine(self) -> None:
        self.engine = self.engine_factory(self.segment.duration)
        self.engine.start()
        logger.info("segment %d (%s) started", self.state.segment_index, self.segment.label)

    async def _next_action(self) -> ControlAction | None:
        try:
            event = await asyncio.wait_for(self.presenter.next_event(), timeout=self.refresh)
        except asyncio.TimeoutError:
            return None
        if event is None:
            return "quit"
        return route_input(event)
