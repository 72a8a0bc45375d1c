"""Round countdown resource."""

import asyncio
from typing import Any, Callable, Optional

from ...infrastructure.logging import LoggerMixin

TickCallback = Callable[[], bool]


def _current_task() -> Optional["asyncio.Task[Any]"]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class Countdown(LoggerMixin):
    """A single repeating tick handle.

    ``on_tick`` runs every ``interval`` seconds and returns whether the
    countdown should keep going. Only one ticking task exists per instance:
    ``start`` always cancels the previous one first. Use ``async with`` for a
    scoped acquisition that is released on exit.
    """

    def __init__(self, on_tick: TickCallback, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("Countdown interval must be positive")
        self._on_tick = on_tick
        self._interval = interval
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the countdown, replacing any active one.

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        self.logger.debug(f"Countdown armed ({self._interval}s interval)")

    def cancel(self) -> None:
        """Release the countdown. Safe to call repeatedly."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        # A tick handler cancelling its own countdown just lets the loop exit
        if task is not _current_task():
            task.cancel()
        self.logger.debug("Countdown cancelled")

    async def _run(self) -> None:
        me = _current_task()
        try:
            while self._task is me:
                await asyncio.sleep(self._interval)
                if self._task is not me:
                    break
                if not self._on_tick():
                    break
        finally:
            if self._task is me:
                self._task = None

    async def __aenter__(self) -> "Countdown":
        self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cancel()
