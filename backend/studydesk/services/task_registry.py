from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScopeClosedError(Exception):
    """Raised to the awaiting caller when its scope was torn down mid-call."""


class TaskScope:
    """Registry of the in-flight remote calls owned by one view.

    ``close()`` cancels every outstanding task; callers awaiting one of them
    get ``ScopeClosedError`` and must drop the result.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._running_tasks: dict[str, asyncio.Task[Any]] = {}
        self._counter = itertools.count(1)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def start_task(
        self, coro: Coroutine[Any, Any, T], key: str | None = None
    ) -> asyncio.Task[T]:
        """Create an asyncio task and register it under *key*."""
        if self._closed:
            coro.close()
            raise ScopeClosedError(f"Scope {self.name} is closed")
        key = key or f"call-{next(self._counter)}"
        task = asyncio.create_task(coro, name=f"{self.name}:{key}")
        self._running_tasks[key] = task
        task.add_done_callback(lambda _: self._running_tasks.pop(key, None))
        return task

    async def call(self, coro: Coroutine[Any, Any, T], key: str | None = None) -> T:
        task = self.start_task(coro, key)
        try:
            return await task
        except asyncio.CancelledError:
            if self._closed and task.cancelled():
                raise ScopeClosedError(f"Scope {self.name} closed during {key or 'call'}") from None
            raise

    def is_running(self, key: str) -> bool:
        task = self._running_tasks.get(key)
        return task is not None and not task.done()

    @property
    def pending(self) -> int:
        return sum(1 for task in self._running_tasks.values() if not task.done())

    async def close(self) -> None:
        """Cancel outstanding tasks and wait for them to unwind."""
        if self._closed:
            return
        self._closed = True
        tasks = [task for task in self._running_tasks.values() if not task.done()]
        if tasks:
            logger.info("Cancelling %d pending call(s) in %s", len(tasks), self.name)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
