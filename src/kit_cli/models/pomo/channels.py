"""Message-passing primitives shared by the countdown engine and the session.

``Watch`` is a single-slot, last-write-wins value with change notification.
``CancelToken`` is a one-shot signal. Both live on one asyncio event loop and
need no locking.
"""

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

from kit_cli.exceptions import ChannelClosed

T = TypeVar("T")


class Watch(Generic[T]):
    """Latest-value broadcast.

    Readers peek at the current value with :meth:`borrow` and never see
    queued history. Waiting readers keep their own ``seen`` version so a
    change sent before they started waiting is not lost.
    """

    def __init__(self, value: T):
        self._value = value
        self._version = 0
        self._closed = False
        self._event = asyncio.Event()

    @property
    def version(self) -> int:
        return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    def borrow(self) -> T:
        """Return the latest value without waiting."""
        return self._value

    def send(self, value: T) -> None:
        """Replace the value and wake every waiter.

        Raises:
            ChannelClosed: the other side has gone away.
        """
        if self._closed:
            raise ChannelClosed("watch channel is closed")
        self._value = value
        self._version += 1
        self._notify()

    def close(self) -> None:
        """Close the channel; pending and future waits raise ChannelClosed."""
        if not self._closed:
            self._closed = True
            self._notify()

    def _notify(self) -> None:
        event, self._event = self._event, asyncio.Event()
        event.set()

    async def changed(self, seen: int) -> int:
        """Wait until the version moves past ``seen`` and return the new version."""
        while self._version == seen:
            if self._closed:
                raise ChannelClosed("watch channel is closed")
            await self._event.wait()
        return self._version

    async def wait_for(self, predicate: Callable[[T], bool]) -> T:
        """Wait until the current value satisfies ``predicate``."""
        while not predicate(self._value):
            if self._closed:
                raise ChannelClosed("watch channel is closed")
            await self._event.wait()
        return self._value


class CancelToken:
    """One-shot cancellation signal with capacity one."""

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Deliver the signal. Returns False if it was already delivered."""
        if self._event.is_set():
            return False
        self._event.set()
        return True

    async def wait(self) -> None:
        await self._event.wait()
