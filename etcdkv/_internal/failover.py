"""Sequential first-success-wins dispatch across cluster endpoints."""

import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

from etcdkv.errors import ClusterError, EtcdError

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def first_ok(
    endpoints: Sequence[str],
    operation: Callable[[str], Awaitable[T]],
) -> T:
    """Run an operation against each endpoint in order until one succeeds.

    Endpoints are tried one at a time, never concurrently, and each is tried
    exactly once. Only errors derived from EtcdError count as a failed attempt;
    anything else propagates immediately.

    Args:
        endpoints: Endpoints to try, in order
        operation: Async function taking one endpoint

    Returns:
        The result of the first successful attempt

    Raises:
        ClusterError: If every attempt failed. ``errors`` holds one error per
            endpoint in the order tried, and is empty when ``endpoints`` is.
    """
    errors: List[EtcdError] = []

    for endpoint in endpoints:
        try:
            return await operation(endpoint)
        except EtcdError as e:
            logger.debug("Request to %s failed: %r", endpoint, e)
            errors.append(e)

    logger.debug("All %d endpoint(s) failed", len(errors))
    raise ClusterError(errors)
