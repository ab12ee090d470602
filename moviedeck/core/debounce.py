# moviedeck/core/debounce.py

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set


class Debouncer:
    """
    Run an async callable only once input has been quiet for `delay` seconds.
    Each call() restarts the wait with the newest arguments. Only the wait is
    cancellable: once the quiet period has passed the callable runs in its own
    task and always completes.
    """

    def __init__(self, func: Callable[..., Awaitable[Any]], delay: float):
        self.func = func
        self.delay = delay
        self._task: Optional[asyncio.Task] = None
        self._running: Set[asyncio.Task] = set()

    async def _fire(self, args: tuple, kwargs: dict) -> None:
        await asyncio.sleep(self.delay)
        self._running = {t for t in self._running if not t.done()}
        self._running.add(asyncio.get_running_loop().create_task(self.func(*args, **kwargs)))

    def call(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire(args, kwargs))
        return self._task

    def cancel(self) -> bool:
        """Drop the call still waiting for quiet, if any. True when something was cancelled."""
        if self._task and not self._task.done():
            self._task.cancel()
            return True
        return False

    @property
    def pending(self) -> bool:
        """A call is still inside its quiet period."""
        return bool(self._task and not self._task.done())

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._running)

    async def wait(self) -> None:
        """Await the pending call and every call already running."""
        if self._task is not None:
            await asyncio.wait({self._task})
        tasks = set(self._running)
        if not tasks:
            return
        await asyncio.wait(tasks)
        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
