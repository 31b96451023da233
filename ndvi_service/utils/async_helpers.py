"""
Async helpers for running blocking Earth Engine client calls off the event loop.

The Earth Engine Python client performs synchronous HTTP requests for every
evaluation (getInfo, getMapId, Initialize). These helpers push those calls
into a shared thread pool so a slow evaluation for one request never stalls
the handshake or the evaluations of other requests.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

from ndvi_service.config.settings import get_settings

logger = logging.getLogger(__name__)

# Shared thread pool for blocking Earth Engine calls
_executor: ThreadPoolExecutor | None = None
_executor_max_workers = 10

# Semaphore limiting concurrent Earth Engine calls (quota protection)
_ee_semaphore: asyncio.Semaphore | None = None

T = TypeVar("T")


def get_executor() -> ThreadPoolExecutor:
    """
    Get or create the shared thread pool executor.

    Returns:
        ThreadPoolExecutor: Shared executor for blocking Earth Engine calls
    """
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=_executor_max_workers,
            thread_name_prefix="ee_worker_"
        )
        logger.info(f"Created thread pool executor with {_executor_max_workers} workers")
    return _executor


def get_semaphore() -> asyncio.Semaphore:
    """
    Get or create the Earth Engine concurrency semaphore.

    Returns:
        asyncio.Semaphore: Semaphore limiting concurrent Earth Engine calls
    """
    global _ee_semaphore
    if _ee_semaphore is None:
        limit = get_settings().gee_max_concurrent
        _ee_semaphore = asyncio.Semaphore(limit)
        logger.info(f"Created Earth Engine semaphore with {limit} concurrent limit")
    return _ee_semaphore


async def run_in_executor(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking function in the shared thread pool.

    Args:
        func: Blocking function to execute
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the blocking function
    """
    loop = asyncio.get_event_loop()
    executor = get_executor()

    if kwargs:
        return await loop.run_in_executor(executor, partial(func, *args, **kwargs))
    return await loop.run_in_executor(executor, func, *args)


async def run_in_executor_with_limit(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """
    Run a blocking Earth Engine evaluation under the concurrency limit.

    Example:
        >>> stats = await run_in_executor_with_limit(dictionary.getInfo)
    """
    semaphore = get_semaphore()
    async with semaphore:
        return await run_in_executor(func, *args, **kwargs)


def shutdown_executor():
    """
    Shutdown the shared thread pool executor.

    Called from the application lifespan on shutdown.
    """
    global _executor, _ee_semaphore
    if _executor is not None:
        logger.info("Shutting down thread pool executor")
        _executor.shutdown(wait=True)
        _executor = None
    _ee_semaphore = None
