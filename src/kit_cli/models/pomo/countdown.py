"""Background countdown for a single segment."""

import asyncio
import logging
import math
from typing import Literal

from kit_cli.exceptions import ChannelClosed

from .channels import CancelToken, Watch

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1

EngineState = Literal["running", "paused", "cancelled", "completed"]


class Ticker:
    """Fixed-period ticks.

    A late tick pushes the schedule back instead of firing the missed ticks
    in a burst.
    """

    def __init__(self, period: float):
        self.period = period
        self._deadline: float | None = None

    def reset(self) -> None:
        """Schedule the next tick one full period from now."""
        self._deadline = asyncio.get_running_loop().time() + self.period

    async def tick(self) -> None:
        loop = asyncio.get_running_loop()
        if self._deadline is None:
            self.reset()
        delay = self._deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)
        now = loop.time()
        if now - self._deadline >= self.period:
            self._deadline = now + self.period
        else:
            self._deadline += self.period


class CountdownEngine:
    """Counts a segment down to zero on its own asyncio task.

    The remaining time is published on :attr:`remaining` once per tick; the
    pause flag is read from :attr:`paused`; :meth:`cancel` stops the engine
    within one tick, or at once while it is waiting on a pause change.
    Closing either channel stops the engine as if it had been cancelled.
    """

    def __init__(self, duration: float, *, tick: float = TICK_SECONDS):
        self.duration = duration
        self.tick = tick
        self.total_ticks = math.ceil(round(duration / tick, 6))
        self.remaining: Watch[float] = Watch(float(duration))
        self.paused: Watch[bool] = Watch(False)
        self._cancel = CancelToken()
        self._state: EngineState = "running"
        self._ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def ticks(self) -> int:
        """Ticks that advanced the countdown so far."""
        return self._ticks

    @property
    def done(self) -> bool:
        """True once the engine task has finished, for whatever reason."""
        return self._task is not None and self._task.done()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="countdown")
        return self._task

    def set_paused(self, paused: bool) -> None:
        self.paused.send(paused)

    def cancel(self) -> bool:
        """Signal cancellation. Returns False if already signalled."""
        return self._cancel.cancel()

    def release(self) -> None:
        """Drop the controller's ends of both channels."""
        self.remaining.close()
        self.paused.close()

    async def wait(self) -> EngineState:
        """Wait for the engine task and return its final state."""
        if self._task is not None:
            await self._task
        return self._state

    def _remaining_after(self, ticks: int) -> float:
        if ticks >= self.total_ticks:
            return 0.0
        return max(round(self.duration - ticks * self.tick, 6), 0.0)

    async def _run(self) -> None:
        logger.debug("countdown started: %.1fs in %d ticks", self.duration, self.total_ticks)
        try:
            await self._countdown()
        except ChannelClosed:
            logger.debug("countdown channel closed after %d ticks", self._ticks)
            self._state = "cancelled"
        logger.debug("countdown finished: %s after %d ticks", self._state, self._ticks)

    async def _countdown(self) -> None:
        ticker = Ticker(self.tick)
        seen = self.paused.version
        while self._ticks < self.total_ticks:
            if self._cancel.cancelled:
                self._state = "cancelled"
                return
            if self.paused.borrow():
                self._state = "paused"
                if await self._wait_cancel_or_pause_change(seen) is None:
                    self._state = "cancelled"
                    return
                # The cancel token is not consulted again until unpaused.
                await self.paused.wait_for(lambda paused: not paused)
                seen = self.paused.version
                self._state = "running"
                ticker.reset()
            await ticker.tick()
            if self._cancel.cancelled:
                self._state = "cancelled"
                return
            self._ticks += 1
            self.remaining.send(self._remaining_after(self._ticks))
        self._state = "completed"

    async def _wait_cancel_or_pause_change(self, seen: int) -> int | None:
        """Return the new pause version, or None if cancelled first."""
        cancelled = asyncio.ensure_future(self._cancel.wait())
        changed = asyncio.ensure_future(self.paused.changed(seen))
        try:
            await asyncio.wait({cancelled, changed}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            changed.cancel()
        if self._cancel.cancelled:
            return None
        return changed.result()
