from __future__ import annotations

import asyncio
from typing import Callable, Generic, TypeVar


T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Delay-and-coalesce for user input (asyncio).

    - push(value) (re)starts the countdown; only the last value pushed survives.
    - When the countdown elapses uninterrupted, `value` is updated and `callback` runs once.
    - cancel() drops a pending countdown without applying it (used on teardown).
    - delay_seconds <= 0 applies synchronously.
    """

    def __init__(
        self,
        delay_seconds: float,
        initial: T,
        callback: Callable[[T], None] | None = None,
    ) -> None:
        self._delay = float(delay_seconds)
        self._value = initial
        self._callback = callback
        self._pending_value: T | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def value(self) -> T:
        return self._value

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: T) -> None:
        self.cancel()
        if self._delay <= 0:
            self._apply(value)
            return

        self._pending_value = value
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._countdown(value))

    def flush(self) -> None:
        if not self.pending:
            return
        value = self._pending_value
        self.cancel()
        self._apply(value)  # type: ignore[arg-type]

    def cancel(self) -> None:
        task = self._task
        self._task = None
        self._pending_value = None
        if task is not None and not task.done():
            task.cancel()

    async def wait(self) -> None:
        """Wait for the pending countdown (if any) to apply or be cancelled."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _countdown(self, value: T) -> None:
        await asyncio.sleep(self._delay)
        self._task = None
        self._pending_value = None
        self._apply(value)

    def _apply(self, value: T) -> None:
        self._value = value
        if self._callback is not None:
            self._callback(value)
