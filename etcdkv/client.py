"""etcd v2 key-value API client implementation.

The term "node" refers to a key-value pair or a directory of key-value
pairs. For example, "/foo" is a key if it has a value, but it is a
directory if there are other nodes "underneath" it, such as "/foo/bar".
"""

from typing import AsyncIterator, Optional

import httpx

from etcdkv._internal.connection import HttpTransport, normalize_endpoints
from etcdkv._internal.request import (
    KEYS_PREFIX,
    build_url,
    delete_query,
    get_query,
    key_path,
    set_form,
    set_method,
)
from etcdkv._internal.response import classify
from etcdkv._internal.router import Router
from etcdkv._internal.watch import wait_for_change
from etcdkv.auth import AuthAPI
from etcdkv.members import MembersAPI
from etcdkv.stats import StatsAPI
from etcdkv.types import (
    ClientConfig,
    ComparisonConditions,
    DeleteOptions,
    GetOptions,
    Health,
    KeyValueInfo,
    Response,
    SetOptions,
    VersionInfo,
    WatchOptions,
)


class EtcdClient:
    """Async client for the etcd v2 HTTP API.

    Every operation is tried against the configured endpoints in order until
    one succeeds. If all of them fail, ClusterError lists what went wrong on
    each.

    Example:
        >>> config = ClientConfig(endpoints=["http://localhost:2379"])
        >>> async with EtcdClient(config) as client:
        ...     await client.set("/greeting", "hello")
        ...     response = await client.get("/greeting")
        ...     print(response.data.node.value)
    """

    def __init__(
        self,
        config: ClientConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client.

        Args:
            config: Client configuration
            http_client: Optional pre-configured httpx client. The caller
                keeps ownership of it.

        Raises:
            NoEndpointsError: If no endpoints were configured
            InvalidUrlError: If an endpoint is not a valid URL
        """
        endpoints = normalize_endpoints(config.endpoints)

        self._config = config
        self._transport = HttpTransport(
            basic_auth=config.basic_auth,
            timeout=config.timeout,
            max_connections=config.max_connections,
            verify=config.verify,
            http_client=http_client,
        )
        self._router = Router(self._transport, endpoints)

        self.members = MembersAPI(self._router)
        self.auth = AuthAPI(self._router)
        self.stats = StatsAPI(self._router)

    @property
    def endpoints(self):
        """Normalized endpoint URLs, in the order they are tried."""
        return self._router.endpoints

    async def close(self) -> None:
        """Close connections to the cluster."""
        await self._transport.close()

    async def __aenter__(self) -> "EtcdClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Async context manager exit."""
        await self.close()

    def is_closed(self) -> bool:
        """Check if the client has been closed."""
        return self._transport.is_closed()

    # =========================================================================
    # Key-value Operations
    # =========================================================================

    async def get(
        self, key: str, options: Optional[GetOptions] = None
    ) -> Response[KeyValueInfo]:
        """Get the value of a node.

        Args:
            key: The name of the node to retrieve
            options: Optional get options (recursion, sorting, consistency)

        Returns:
            The node, with cluster metadata

        Raises:
            ClusterError: If every endpoint failed, e.g. the key doesn't exist
        """
        return await self._raw_get(key, options or GetOptions())

    async def set(
        self, key: str, value: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Set the value of a key-value pair.

        Any previous value and TTL will be replaced.

        Args:
            key: The name of the key-value pair to set
            value: The new value
            ttl: If given, the node will expire after this many seconds

        Raises:
            ClusterError: If every endpoint failed, e.g. the node is a directory
        """
        return await self._raw_set(key, SetOptions(value=value, ttl=ttl))

    async def create(
        self, key: str, value: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Create a new key-value pair.

        Raises:
            ClusterError: If every endpoint failed, e.g. the key already exists
        """
        return await self._raw_set(
            key, SetOptions(value=value, ttl=ttl, prev_exist=False)
        )

    async def create_dir(
        self, key: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Create a new empty directory.

        Raises:
            ClusterError: If every endpoint failed, e.g. the key already exists
        """
        return await self._raw_set(
            key, SetOptions(dir=True, ttl=ttl, prev_exist=False)
        )

    async def create_in_order(
        self, key: str, value: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Create a key-value pair in a directory under a generated key name.

        The server names the new key after its creation index, so each key
        created this way sorts after its siblings.

        Args:
            key: The directory to create the key-value pair in
            value: The value of the new key-value pair
            ttl: If given, the node will expire after this many seconds

        Raises:
            ClusterError: If every endpoint failed, e.g. the key exists and is
                not a directory
        """
        return await self._raw_set(
            key, SetOptions(value=value, ttl=ttl, create_in_order=True)
        )

    async def update(
        self, key: str, value: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Update an existing key-value pair.

        Raises:
            ClusterError: If every endpoint failed, e.g. the key doesn't exist
        """
        return await self._raw_set(
            key, SetOptions(value=value, ttl=ttl, prev_exist=True)
        )

    async def update_dir(
        self, key: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Update a directory.

        An existing directory only has its TTL updated. A key-value pair loses
        its value and has its TTL updated.

        Raises:
            ClusterError: If every endpoint failed, e.g. the node doesn't exist
        """
        return await self._raw_set(
            key, SetOptions(dir=True, ttl=ttl, prev_exist=True)
        )

    async def set_dir(
        self, key: str, ttl: Optional[int] = None
    ) -> Response[KeyValueInfo]:
        """Set the key to an empty directory.

        An existing key-value pair is replaced, an existing directory is not.
        """
        return await self._raw_set(key, SetOptions(dir=True, ttl=ttl))

    async def delete(
        self, key: str, recursive: bool = False
    ) -> Response[KeyValueInfo]:
        """Delete a node.

        Args:
            key: The name of the node to delete
            recursive: Also delete the children of a directory

        Raises:
            ClusterError: If every endpoint failed, e.g. the key is a directory
                and ``recursive`` is False
        """
        return await self._raw_delete(key, DeleteOptions(recursive=recursive))

    async def delete_dir(self, key: str) -> Response[KeyValueInfo]:
        """Delete an empty directory or a key-value pair."""
        return await self._raw_delete(key, DeleteOptions(dir=True))

    async def compare_and_swap(
        self,
        key: str,
        value: str,
        ttl: Optional[int] = None,
        current_value: Optional[str] = None,
        current_modified_index: Optional[int] = None,
    ) -> Response[KeyValueInfo]:
        """Update a node only if its current value and/or modified index match.

        Args:
            key: The name of the node to update
            value: The new value
            ttl: If given, the node will expire after this many seconds
            current_value: The value the node must currently have
            current_modified_index: The index the node must currently be at

        Raises:
            InvalidConditionsError: If neither condition was given. No request
                is sent.
            ClusterError: If every endpoint failed, e.g. a condition didn't match
        """
        return await self._raw_set(
            key,
            SetOptions(
                value=value,
                ttl=ttl,
                conditions=ComparisonConditions(
                    value=current_value, modified_index=current_modified_index
                ),
            ),
        )

    async def compare_and_delete(
        self,
        key: str,
        current_value: Optional[str] = None,
        current_modified_index: Optional[int] = None,
    ) -> Response[KeyValueInfo]:
        """Delete a node only if its current value and/or modified index match.

        Raises:
            InvalidConditionsError: If neither condition was given. No request
                is sent.
            ClusterError: If every endpoint failed, e.g. a condition didn't match
        """
        return await self._raw_delete(
            key,
            DeleteOptions(
                conditions=ComparisonConditions(
                    value=current_value, modified_index=current_modified_index
                )
            ),
        )

    async def watch(
        self, key: str, options: Optional[WatchOptions] = None
    ) -> Response[KeyValueInfo]:
        """Wait for a node to change and return its new state.

        If ``options.index`` is older than the history the cluster retains,
        the watch fails with an "event index cleared" ApiError (see
        ``ApiError.is_event_index_cleared``). Get the key again and watch from
        its current modified index in that case.

        Args:
            key: The name of the node to watch
            options: Optional watch options (starting index, recursion, timeout)

        Raises:
            WatchTimeoutError: If the timeout elapsed without a change
            WatchError: If every endpoint failed
        """
        opts = options or WatchOptions()

        work = self._raw_get(
            key,
            GetOptions(
                recursive=opts.recursive,
                wait=True,
                wait_index=opts.index,
            ),
        )
        return await wait_for_change(work, opts.timeout)

    # =========================================================================
    # Cluster Checks
    # =========================================================================

    async def health(self) -> AsyncIterator[Response[Health]]:
        """Check the health of each endpoint in turn.

        Yields:
            One response per endpoint, in endpoint order
        """

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request("GET", build_url(endpoint, "/health"))
            return classify(response, (200,), Health.from_dict, on_error="status")

        async for result in self._router.broadcast(request):
            yield result

    async def versions(self) -> AsyncIterator[Response[VersionInfo]]:
        """Get the server and cluster versions of each endpoint in turn.

        Yields:
            One response per endpoint, in endpoint order
        """

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request("GET", build_url(endpoint, "/version"))
            return classify(response, (200,), VersionInfo.from_dict, on_error="status")

        async for result in self._router.broadcast(request):
            yield result

    # =========================================================================
    # Request Pipelines
    # =========================================================================

    async def _raw_get(
        self, key: str, options: GetOptions
    ) -> Response[KeyValueInfo]:
        params = get_query(options)
        path = key_path(key)

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET",
                build_url(endpoint, KEYS_PREFIX, path),
                params=params,
                wait=options.wait,
            )
            return classify(response, (200,), KeyValueInfo.from_dict)

        return await self._router.route(request)

    async def _raw_set(
        self, key: str, options: SetOptions
    ) -> Response[KeyValueInfo]:
        # Validation happens here, once, before any endpoint is contacted
        form = set_form(options)
        method = set_method(options)
        path = key_path(key)

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                method, build_url(endpoint, KEYS_PREFIX, path), form=form
            )
            return classify(response, (200, 201), KeyValueInfo.from_dict)

        return await self._router.route(request)

    async def _raw_delete(
        self, key: str, options: DeleteOptions
    ) -> Response[KeyValueInfo]:
        params = delete_query(options)
        path = key_path(key)

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "DELETE", build_url(endpoint, KEYS_PREFIX, path), params=params
            )
            return classify(response, (200,), KeyValueInfo.from_dict)

        return await self._router.route(request)
