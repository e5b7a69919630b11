"""
Task ownership for view-models.

A view-model schedules its fetches as asyncio tasks on the running loop and
must stop touching state once its owner invalidates it. This module holds
that bookkeeping so both view-models share one implementation.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class TaskScope:
    """
    Liveness flag plus the set of tasks a view-model has in flight.

    Continuations check ``is_alive`` before mutating state or notifying
    observers; ``invalidate`` cancels whatever is still pending.
    """

    def __init__(self) -> None:
        self._alive = True
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def pending_tasks(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._tasks)

    def invalidate(self) -> None:
        """Mark the owner disposed and cancel its pending tasks."""
        if not self._alive:
            return
        self._alive = False
        for task in list(self._tasks):
            task.cancel()
        logger.debug(f"{type(self).__name__} invalidated")

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Schedule a coroutine on the running loop and track it."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
