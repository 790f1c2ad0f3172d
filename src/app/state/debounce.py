"""Debouncing of async callbacks"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs only the last of a burst of calls, ``delay`` seconds after it

    Each call cancels the pending one, so rapid edits coalesce into a
    single run. Must be used from within a running event loop.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def call(self, callback: Callable[[], Awaitable]) -> asyncio.Task:
        self.cancel()
        self._task = asyncio.create_task(self._run(callback))
        return self._task

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()

    async def _run(self, callback: Callable[[], Awaitable]) -> None:
        await asyncio.sleep(self.delay)
        try:
            await callback()
        except Exception as e:
            logger.error(f"Debounced call failed: {e}")
            raise
