"""Integration tests for the cluster membership API."""

import json

import pytest

from etcdkv import ClientConfig, ClusterError, EtcdClient, Member
from tests.integration.helpers.mock_server import MockCluster


@pytest.fixture
def mock_cluster():
    """Create a three member mock cluster."""
    return MockCluster(["etcd1", "etcd2", "etcd3"])


@pytest.fixture
async def client(mock_cluster):
    """Create a client connected to every member of the mock cluster."""
    http_client = mock_cluster.http_client()
    config = ClientConfig(endpoints=mock_cluster.endpoints)
    async with EtcdClient(config, http_client=http_client) as client:
        yield client
    await http_client.aclose()


@pytest.mark.asyncio
class TestMembers:
    """Test listing and changing cluster members."""

    async def test_list(self, client):
        """Should list every member with its URLs."""
        response = await client.members.list()

        members = response.data
        assert [member.name for member in members] == ["etcd1", "etcd2", "etcd3"]
        assert isinstance(members[0], Member)
        assert members[0].client_urls == ["http://etcd1:2379"]
        assert members[0].peer_urls == ["http://etcd1:2380"]

    async def test_add(self, client, mock_cluster):
        """Should post the new member's peer URLs."""
        response = await client.members.add(["http://etcd4:2380"])
        assert response.data is None

        request = mock_cluster.requests[-1]
        assert request.method == "POST"
        assert json.loads(request.content) == {"peerURLs": ["http://etcd4:2380"]}

        members = (await client.members.list()).data
        assert len(members) == 4
        assert members[-1].peer_urls == ["http://etcd4:2380"]

    async def test_update(self, client):
        """Should replace a member's peer URLs."""
        members = (await client.members.list()).data

        response = await client.members.update(members[1].id, ["http://10.0.0.2:2380"])
        assert response.data is None

        members = (await client.members.list()).data
        assert members[1].peer_urls == ["http://10.0.0.2:2380"]

    async def test_delete(self, client):
        """Should remove a member."""
        members = (await client.members.list()).data

        await client.members.delete(members[2].id)

        remaining = (await client.members.list()).data
        assert [member.name for member in remaining] == ["etcd1", "etcd2"]

    async def test_delete_unknown_member(self, client):
        """Should fail on every endpoint for an unknown member."""
        with pytest.raises(ClusterError) as exc_info:
            await client.members.delete("ffffffffffffffff")

        assert len(exc_info.value.errors) == 3

    async def test_list_fails_over(self, client, mock_cluster):
        """Should list members through the next reachable endpoint."""
        mock_cluster.set_state("etcd1", "down")

        response = await client.members.list()
        assert len(response.data) == 3
        assert len(mock_cluster.requests_to("etcd2")) == 1
