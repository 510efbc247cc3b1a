"""Restartable timer for trailing-edge debouncing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class DebounceTimer:
    """Run a coroutine once input has been quiet for ``delay`` seconds.

    Every :meth:`schedule` call replaces the pending call and restarts the
    quiet period, so only the last call of a burst runs. Once a call has
    fired it runs to completion; :meth:`cancel` only discards calls that are
    still waiting.

    Must be used from inside a running event loop.

    Example:
        >>> timer = DebounceTimer(0.5)
        >>> timer.schedule(search, "rah")
        >>> timer.schedule(search, "rahman")  # "rah" never runs
        >>> await timer.wait()
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._running: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> bool:
        """True while a scheduled call is still waiting to fire."""
        return self._handle is not None

    @property
    def busy(self) -> bool:
        """True while a call is waiting or running."""
        return self.pending or bool(self._running)

    def schedule(self, callback: Callable[..., Awaitable[Any]], *args: Any) -> None:
        """Replace any pending call with ``callback(*args)`` and restart the delay."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback, args)

    def cancel(self) -> bool:
        """Discard the pending call. Returns True if one was waiting."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def close(self) -> None:
        """Discard the pending call and cancel calls that already fired."""
        self.cancel()
        for task in list(self._running):
            task.cancel()

    async def wait(self) -> None:
        """Wait until nothing is pending and every fired call has finished."""
        loop = asyncio.get_running_loop()
        while self.busy:
            if self._running:
                await asyncio.gather(*self._running, return_exceptions=True)
            elif self._handle is not None:
                await asyncio.sleep(max(0.0, self._handle.when() - loop.time()))

    def _fire(self, callback: Callable[..., Awaitable[Any]], args: tuple[Any, ...]) -> None:
        self._handle = None
        task = asyncio.ensure_future(callback(*args))
        self._running.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._running.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Debounced call failed", exc_info=task.exception())
