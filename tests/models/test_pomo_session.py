"""Tests for PomodoroSession driven by a scripted presenter."""

from __future__ import annotations

import asyncio
from functools import partial

import pytest

from kit_cli.exceptions import InputStreamFailure
from kit_cli.models.pomo.countdown import CountdownEngine
from kit_cli.models.pomo.segments import Segment, SegmentSequence
from kit_cli.models.pomo.session import PomodoroSession, SessionSnapshot
from kit_cli.ui.events import KeyEvent, MouseEvent, ResizeEvent


async def _until(predicate, timeout: float = 2.0) -> None:
    """Poll until ``predicate()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


@pytest.fixture()
def sequence():
    return SegmentSequence(25, 5, 15, 3)


class TestSessionSnapshot:
    """Tests for SessionSnapshot helpers."""

    def _snapshot(self, remaining, total=1500):
        return SessionSnapshot(
            segments=(Segment("work", total),),
            current=0,
            index=0,
            remaining=remaining,
            total=total,
            paused=False,
            help_visible=False,
        )

    def test_clock_formats_minutes_and_seconds(self):
        assert self._snapshot(1500).clock == "25:00"
        assert self._snapshot(61.9).clock == "01:01"
        assert self._snapshot(0).clock == "00:00"

    def test_progress_ratio(self):
        assert self._snapshot(1500).progress == 0.0
        assert self._snapshot(750).progress == 0.5
        assert self._snapshot(0).progress == 1.0


class TestSessionLifecycle:
    """Start, quit and teardown."""

    @pytest.mark.asyncio
    async def test_quit_ends_session_and_closes_presenter(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        presenter.press("q")

        await asyncio.wait_for(session.run(), timeout=1)

        assert presenter.opened and presenter.closed
        assert session.terminated
        assert len(presenter.snapshots) == 1
        first = presenter.snapshots[0]
        assert first.index == 0
        assert first.segment == Segment("work", 1500)
        assert first.remaining == 1500.0
        assert first.total == 1500
        assert await asyncio.wait_for(session.engine.wait(), timeout=1) == "cancelled"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event", [KeyEvent("escape"), KeyEvent("c", ctrl=True)])
    async def test_other_quit_keys(self, sequence, presenter, event):
        session = PomodoroSession(sequence, presenter)
        presenter.push(event)

        await asyncio.wait_for(session.run(), timeout=1)

        assert session.terminated

    @pytest.mark.asyncio
    async def test_end_of_input_quits(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        presenter.push(None)

        await asyncio.wait_for(session.run(), timeout=1)

        assert session.terminated
        assert presenter.closed

    @pytest.mark.asyncio
    async def test_input_failure_propagates_after_teardown(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        presenter.push(InputStreamFailure("error reading input: boom"))

        with pytest.raises(InputStreamFailure):
            await asyncio.wait_for(session.run(), timeout=1)

        assert presenter.closed

    @pytest.mark.asyncio
    async def test_redraws_without_input(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter, refresh=0.02)
        task = asyncio.create_task(session.run())

        await _until(lambda: len(presenter.snapshots) >= 5)
        presenter.press("q")
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_unrecognised_events_are_ignored(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        presenter.push(MouseEvent("\x1b[M !!"))
        presenter.push(ResizeEvent(100, 40))
        presenter.press("x")
        presenter.press("q")

        await asyncio.wait_for(session.run(), timeout=1)

        assert [s.index for s in presenter.snapshots] == [0, 0, 0, 0]
        assert not any(s.help_visible or s.paused for s in presenter.snapshots)


class TestSessionControls:
    """Help, pause and skip."""

    @pytest.mark.asyncio
    async def test_help_toggles_overlay(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        presenter.press("h")
        presenter.press("?")
        presenter.press("q")

        await asyncio.wait_for(session.run(), timeout=1)

        assert [s.help_visible for s in presenter.snapshots] == [False, True, False]

    @pytest.mark.asyncio
    async def test_pause_propagates_to_engine(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        task = asyncio.create_task(session.run())

        presenter.press(" ")
        await _until(lambda: session.state.paused)
        assert session.engine.paused.borrow() is True
        await _until(lambda: session.engine.state == "paused")
        frozen = session.engine.remaining.borrow()
        await asyncio.sleep(0.25)
        assert session.engine.remaining.borrow() == frozen
        assert presenter.snapshots[-1].paused

        presenter.press(" ")
        await _until(lambda: not session.state.paused)
        assert session.engine.paused.borrow() is False

        presenter.press("q")
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_skip_advances_before_completion(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        task = asyncio.create_task(session.run())
        await _until(lambda: session.engine is not None)
        first = session.engine

        presenter.press("s")
        await _until(lambda: session.state.segment_index == 1)

        assert session.engine is not first
        assert 299.0 < session.state.remaining <= 300.0
        assert await asyncio.wait_for(first.wait(), timeout=1) == "cancelled"
        assert first.ticks < first.total_ticks
        assert first.remaining.closed

        presenter.press("q")
        await asyncio.wait_for(task, timeout=1)
        shown = [s.segment.kind for s in presenter.snapshots]
        assert shown[0] == "work"
        assert shown[-1] == "short_break"

    @pytest.mark.asyncio
    async def test_skip_while_paused_resets_pause(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        task = asyncio.create_task(session.run())
        await _until(lambda: session.engine is not None)
        first = session.engine

        presenter.press(" ")
        await _until(lambda: first.state == "paused")
        presenter.press("s")
        await _until(lambda: session.state.segment_index == 1)

        assert session.state.paused is False
        assert session.engine.paused.borrow() is False
        assert await asyncio.wait_for(first.wait(), timeout=0.5) == "cancelled"

        presenter.press("q")
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_repeated_skips_walk_the_cycle(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        for _ in range(7):
            presenter.press("s")
        presenter.press("q")

        await asyncio.wait_for(session.run(), timeout=2)

        assert session.state.segment_index == 7
        kinds = [s.segment.kind for s in presenter.snapshots]
        assert kinds == [
            "work",
            "short_break",
            "work",
            "short_break",
            "work",
            "long_break",
            "work",
            "short_break",
        ]


class TestSessionCompletion:
    """Segments ending on their own."""

    @pytest.mark.asyncio
    async def test_completed_segment_advances_without_cancel(self, presenter):
        sequence = SegmentSequence(1, 1, 1, 1)
        sequence.cycle = (Segment("work", 1), Segment("long_break", 1))
        session = PomodoroSession(
            sequence,
            presenter,
            engine_factory=partial(CountdownEngine, tick=0.02),
            refresh=0.02,
        )
        task = asyncio.create_task(session.run())
        await _until(lambda: session.engine is not None)
        first = session.engine

        await _until(lambda: session.state.segment_index == 1, timeout=5)

        assert first.state == "completed"
        assert session.segment.kind == "long_break"
        assert session.state.remaining <= 1.0

        presenter.press("q")
        await asyncio.wait_for(task, timeout=1)


class TestSnapshotWindow:
    """The segment list handed to the presenter."""

    @pytest.mark.asyncio
    async def test_window_keeps_recent_history(self, sequence, presenter):
        session = PomodoroSession(sequence, presenter)
        for _ in range(3):
            presenter.press("s")
        presenter.press("q")

        await asyncio.wait_for(session.run(), timeout=2)

        start = presenter.snapshots[0]
        assert start.current == 0
        assert len(start.segments) == 5

        later = presenter.snapshots[-1]
        assert later.index == 3
        assert later.current == 2
        assert len(later.segments) == 7
        assert list(later.segments) == sequence.window(1, 7)
