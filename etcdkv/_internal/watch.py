"""Long-poll watch with an optional timeout."""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from etcdkv.errors import ClusterError, WatchError, WatchTimeoutError

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def _await_change(work: Awaitable[T]) -> T:
    try:
        return await work
    except ClusterError as e:
        raise WatchError(f"Watch failed: {e}", errors=e.errors) from e


async def wait_for_change(work: Awaitable[T], timeout: Optional[float] = None) -> T:
    """Await a dispatched long-poll, racing it against a timer if given.

    When the timer fires first the long-poll is cancelled and its late
    response, if any, is never processed.

    Args:
        work: The dispatched long-poll get
        timeout: Seconds to wait before giving up, or None to wait forever

    Returns:
        The result of the long-poll

    Raises:
        WatchTimeoutError: If the timeout elapsed first
        WatchError: If every endpoint failed
    """
    if timeout is None:
        return await _await_change(work)

    try:
        return await asyncio.wait_for(_await_change(work), timeout)
    except asyncio.TimeoutError as e:
        logger.debug("Watch timed out after %s seconds", timeout)
        raise WatchTimeoutError(timeout) from e
