"""Basic integration tests for EtcdClient construction and lifecycle."""

import pytest

from etcdkv import (
    BasicAuth,
    ClientConfig,
    ClusterError,
    EtcdClient,
    InvalidUrlError,
    NoEndpointsError,
    TransportError,
)
from tests.integration.helpers.mock_server import MockCluster


class TestClientConstruction:
    """Test client construction without a server."""

    def test_client_creation(self):
        """Should create a client without contacting the cluster."""
        client = EtcdClient(ClientConfig(endpoints=["http://localhost:2379"]))
        assert client is not None
        assert not client.is_closed()

    def test_endpoints_are_normalized(self):
        """Should strip trailing slashes and keep the configured order."""
        config = ClientConfig(
            endpoints=["http://node2:2379/", "https://node1:2379", "http://node3:2379"]
        )
        client = EtcdClient(config)

        assert client.endpoints == [
            "http://node2:2379",
            "https://node1:2379",
            "http://node3:2379",
        ]

    def test_no_endpoints(self):
        """Should reject an empty endpoint list."""
        with pytest.raises(NoEndpointsError):
            EtcdClient(ClientConfig(endpoints=[]))

    @pytest.mark.parametrize(
        "endpoint", ["localhost:2379", "ftp://localhost:2379", "/v2/keys", ""]
    )
    def test_invalid_endpoint(self, endpoint):
        """Should reject an endpoint that is not an absolute http(s) URL."""
        with pytest.raises(InvalidUrlError):
            EtcdClient(ClientConfig(endpoints=["http://localhost:2379", endpoint]))

    def test_configuration_values(self):
        """Should keep the configuration it was given."""
        config = ClientConfig(
            endpoints=["http://node1:2379"],
            basic_auth=BasicAuth("root", "secret"),
            timeout=10000,
        )
        client = EtcdClient(config)

        assert client._config.timeout == 10000
        assert client._config.basic_auth.username == "root"
        assert client._config.max_connections == 10

    def test_client_context_manager_structure(self):
        """Should support the async context manager protocol."""
        client = EtcdClient(ClientConfig(endpoints=["http://localhost:2379"]))
        assert hasattr(client, "__aenter__")
        assert hasattr(client, "__aexit__")


@pytest.mark.asyncio
class TestClientLifecycle:
    """Test opening and closing the client."""

    async def test_context_manager_closes(self):
        """Should be closed after leaving the context."""
        async with EtcdClient(ClientConfig(endpoints=["http://localhost:2379"])) as client:
            assert not client.is_closed()

        assert client.is_closed()

    async def test_close_is_idempotent(self):
        """Should allow closing twice."""
        client = EtcdClient(ClientConfig(endpoints=["http://localhost:2379"]))
        await client.close()
        await client.close()
        assert client.is_closed()

    async def test_request_after_close(self):
        """Should fail every endpoint once the client is closed."""
        cluster = MockCluster(["etcd1", "etcd2"])
        http_client = cluster.http_client()
        client = EtcdClient(ClientConfig(endpoints=cluster.endpoints), http_client=http_client)
        await client.close()

        with pytest.raises(ClusterError) as exc_info:
            await client.get("/key")

        assert all(isinstance(error, TransportError) for error in exc_info.value.errors)
        assert cluster.requests == []
        await http_client.aclose()

    async def test_injected_client_stays_open(self):
        """Should leave a caller-provided http client open."""
        cluster = MockCluster(["etcd1"])
        http_client = cluster.http_client()

        async with EtcdClient(
            ClientConfig(endpoints=cluster.endpoints), http_client=http_client
        ) as client:
            await client.set("/key", "value")

        assert not http_client.is_closed
        await http_client.aclose()

    async def test_basic_auth_header(self):
        """Should send credentials with every request."""
        cluster = MockCluster(["etcd1"])
        http_client = cluster.http_client()
        config = ClientConfig(
            endpoints=cluster.endpoints, basic_auth=BasicAuth("root", "secret")
        )

        async with EtcdClient(config, http_client=http_client) as client:
            await client.set("/key", "value")

        assert cluster.requests[0].headers["authorization"].startswith("Basic ")
        await http_client.aclose()
