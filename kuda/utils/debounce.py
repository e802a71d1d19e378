"""
Keyed debouncing for async calls
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyedDebouncer(Generic[T]):
    """
    Runs an async call only after input has been stable for `delay` seconds.

    Scheduling a new key cancels the pending call for the previous key. A
    result that arrives for a key that is no longer current is discarded.
    """

    def __init__(self, call: Callable[[Hashable], Awaitable[T]], delay: float = 0.5):
        """
        Args:
            call: coroutine function invoked with the key once it settles
            delay: quiet period in seconds before the call fires
        """
        self.call = call
        self.delay = delay
        self.current_key: Optional[Hashable] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None
        self.current_key = None

    def schedule(self, key: Hashable) -> "asyncio.Task[Optional[T]]":
        """Schedule the call for `key`, replacing any pending one."""
        if self.pending:
            logger.debug("Debounce: superseding pending call for %s", self.current_key)
            self._task.cancel()
        self.current_key = key
        self._task = asyncio.get_running_loop().create_task(self._run(key))
        return self._task

    async def wait(self) -> Optional[T]:
        """Wait for the pending call, if any. Cancelled calls yield None."""
        if self._task is None:
            return None
        try:
            return await self._task
        except asyncio.CancelledError:
            return None

    async def _run(self, key: Hashable) -> Optional[Any]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if key != self.current_key:
            return None
        result = await self.call(key)
        if key != self.current_key:
            logger.debug("Debounce: discarding stale result for %s", key)
            return None
        return result
