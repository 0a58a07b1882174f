"""Fire-and-forget task tracking."""
import asyncio
import logging
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Holds references to spawned tasks until they finish.

    The event loop keeps only weak references to tasks, so every
    fire-and-forget coroutine is parked here. Exceptions escaping a task
    are logged when it completes.
    """

    def __init__(self, log: Optional[logging.LoggerAdapter] = None) -> None:
        self._tasks: set[asyncio.Task] = set()
        self._log = log or logger

    def spawn(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("Task %s failed: %s", task.get_name(), exc, exc_info=exc)

    async def join(self) -> None:
        """Wait until every task, including ones spawned meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def __len__(self) -> int:
        return len(self._tasks)
