"""Cluster membership API.

These endpoints are used to inspect and change cluster membership.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping

from etcdkv._internal.connection import HttpTransport
from etcdkv._internal.request import MEMBERS_PREFIX, build_url
from etcdkv._internal.response import classify
from etcdkv._internal.router import Router
from etcdkv.types import Response


def _string_list(data: Mapping[str, Any], key: str) -> List[str]:
    values = data[key]
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise TypeError(f"{key} must be a list of strings")
    return values


@dataclass(frozen=True)
class Member:
    """A server that is a member of the cluster."""

    id: str
    """Internal identifier of the member."""

    name: str
    """Human-readable name of the member."""

    peer_urls: List[str]
    """URLs exposing the member's peer API."""

    client_urls: List[str]
    """URLs exposing the member's client API."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Member":
        if not isinstance(data["id"], str) or not isinstance(data["name"], str):
            raise TypeError("member id and name must be strings")
        return cls(
            id=data["id"],
            name=data["name"],
            peer_urls=_string_list(data, "peerURLs"),
            client_urls=_string_list(data, "clientURLs"),
        )


def _member_list(data: Mapping[str, Any]) -> List[Member]:
    members = data["members"]
    if not isinstance(members, list):
        raise TypeError("members must be a list")
    return [Member.from_dict(member) for member in members]


class MembersAPI:
    """Operations on /v2/members."""

    def __init__(self, router: Router):
        self._router = router

    async def list(self) -> Response[List[Member]]:
        """List the members of the cluster."""

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET", build_url(endpoint, MEMBERS_PREFIX)
            )
            return classify(response, (200,), _member_list)

        return await self._router.route(request)

    async def add(self, peer_urls: List[str]) -> Response[None]:
        """Add a new member to the cluster.

        Args:
            peer_urls: URLs exposing the new member's peer API
        """
        body = {"peerURLs": list(peer_urls)}

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "POST", build_url(endpoint, MEMBERS_PREFIX), json_body=body
            )
            return classify(response, (201,), None)

        return await self._router.route(request)

    async def update(self, id: str, peer_urls: List[str]) -> Response[None]:
        """Update the peer URLs of a member.

        Args:
            id: Identifier of the member to update
            peer_urls: URLs exposing the member's peer API
        """
        body = {"peerURLs": list(peer_urls)}

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "PUT", build_url(endpoint, MEMBERS_PREFIX, f"/{id}"), json_body=body
            )
            return classify(response, (204,), None)

        return await self._router.route(request)

    async def delete(self, id: str) -> Response[None]:
        """Remove a member from the cluster.

        Args:
            id: Identifier of the member to remove
        """

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "DELETE", build_url(endpoint, MEMBERS_PREFIX, f"/{id}")
            )
            return classify(response, (204,), None)

        return await self._router.route(request)
