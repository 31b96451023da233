"""
Single-flight coalescing for async work.

The first caller starts the work and stores the in-flight task; callers that
arrive while it is running await the same task instead of starting their own.
The stored task is cleared once it settles, so a failed attempt is never
handed out again and the next caller starts a fresh one.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Share one in-progress execution of an async callable among callers."""

    def __init__(self, name: str = "single-flight"):
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None

    async def do(self, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``fn`` unless a run is already in flight, then await its outcome.

        Every caller attached to the same run receives the same result or the
        same exception. Cancelling one caller does not cancel the shared run.
        """
        if self._task is None:
            logger.debug(f"{self.name}: starting new execution")
            self._task = asyncio.ensure_future(self._run(fn))
        else:
            logger.debug(f"{self.name}: joining in-flight execution")
        return await asyncio.shield(self._task)

    async def _run(self, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        finally:
            self._task = None
