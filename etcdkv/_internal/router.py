"""Request router for directing operations to cluster endpoints."""

from typing import AsyncIterator, Awaitable, Callable, List, Sequence, TypeVar

from etcdkv._internal.connection import HttpTransport
from etcdkv._internal.failover import first_ok

T = TypeVar("T")

RequestFn = Callable[[HttpTransport, str], Awaitable[T]]
"""Async function sending one request to one endpoint."""


class Router:
    """Routes requests to cluster endpoints over a shared transport."""

    def __init__(self, transport: HttpTransport, endpoints: Sequence[str]):
        """Initialize the router.

        Args:
            transport: Transport used for every request
            endpoints: Normalized endpoint URLs, tried in this order
        """
        self._transport = transport
        self._endpoints = tuple(endpoints)

    @property
    def endpoints(self) -> List[str]:
        return list(self._endpoints)

    async def route(self, request_fn: RequestFn[T]) -> T:
        """Send a request to the first endpoint that handles it successfully.

        Args:
            request_fn: Async function taking the transport and an endpoint

        Returns:
            The result from the first endpoint that succeeded

        Raises:
            ClusterError: If every endpoint failed
        """
        return await first_ok(
            self._endpoints, lambda endpoint: request_fn(self._transport, endpoint)
        )

    async def broadcast(self, request_fn: RequestFn[T]) -> AsyncIterator[T]:
        """Send a request to every endpoint in turn, yielding each result.

        Endpoints are visited in order. An endpoint's error is raised from the
        iterator when that endpoint is reached.

        Args:
            request_fn: Async function taking the transport and an endpoint

        Yields:
            One result per endpoint
        """
        for endpoint in self._endpoints:
            yield await request_fn(self._transport, endpoint)
