"""Cluster statistics API."""

from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Mapping, Optional

from etcdkv._internal.connection import HttpTransport
from etcdkv._internal.request import STATS_PREFIX, build_url
from etcdkv._internal.response import classify
from etcdkv._internal.router import Router
from etcdkv.types import Response


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number")
    return float(value)


@dataclass(frozen=True)
class CountStats:
    """Counts of failed and successful Raft RPC requests to a follower."""

    fail: int
    success: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CountStats":
        return cls(
            fail=int(_number(data, "fail")), success=int(_number(data, "success"))
        )


@dataclass(frozen=True)
class LatencyStats:
    """Latency of Raft RPC requests to a follower, in milliseconds."""

    average: float
    current: float
    maximum: float
    minimum: float
    standard_deviation: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LatencyStats":
        return cls(
            average=_number(data, "average"),
            current=_number(data, "current"),
            maximum=_number(data, "maximum"),
            minimum=_number(data, "minimum"),
            standard_deviation=_number(data, "standardDeviation"),
        )


@dataclass(frozen=True)
class FollowerStats:
    """Statistics about one follower, as seen by the leader."""

    counts: CountStats
    latency: LatencyStats

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FollowerStats":
        return cls(
            counts=CountStats.from_dict(data["counts"]),
            latency=LatencyStats.from_dict(data["latency"]),
        )


@dataclass(frozen=True)
class LeaderStats:
    """Statistics about the leader and its view of the followers."""

    leader: str
    """Identifier of the leader member."""

    followers: Dict[str, FollowerStats]
    """Follower statistics keyed by member identifier."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LeaderStats":
        leader = data["leader"]
        if not isinstance(leader, str):
            raise TypeError("leader must be a string")
        return cls(
            leader=leader,
            followers={
                id: FollowerStats.from_dict(stats)
                for id, stats in (data.get("followers") or {}).items()
            },
        )


@dataclass(frozen=True)
class LeaderInfo:
    """A member's knowledge of the current leader."""

    leader: str
    uptime: str
    start_time: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LeaderInfo":
        return cls(
            leader=str(data["leader"]),
            uptime=str(data["uptime"]),
            start_time=str(data["startTime"]),
        )


@dataclass(frozen=True)
class SelfStats:
    """Statistics about one member."""

    id: str
    name: str
    state: str
    start_time: str
    leader_info: LeaderInfo
    recv_append_request_count: int
    send_append_request_count: int
    recv_bandwidth_rate: Optional[float] = None
    recv_pkg_rate: Optional[float] = None
    send_bandwidth_rate: Optional[float] = None
    send_pkg_rate: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SelfStats":
        def _rate(key: str) -> Optional[float]:
            return _number(data, key) if data.get(key) is not None else None

        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            state=str(data["state"]),
            start_time=str(data["startTime"]),
            leader_info=LeaderInfo.from_dict(data["leaderInfo"]),
            recv_append_request_count=int(_number(data, "recvAppendRequestCnt")),
            send_append_request_count=int(_number(data, "sendAppendRequestCnt")),
            # Rates are only reported while traffic is flowing
            recv_bandwidth_rate=_rate("recvBandwidthRate"),
            recv_pkg_rate=_rate("recvPkgRate"),
            send_bandwidth_rate=_rate("sendBandwidthRate"),
            send_pkg_rate=_rate("sendPkgRate"),
        )


def _store_stats(data: Mapping[str, Any]) -> Dict[str, int]:
    """Store operation counters, e.g. ``getsSuccess`` or ``watchers``."""
    return {name: int(_number(data, name)) for name in data}


class StatsAPI:
    """Operations on /v2/stats."""

    def __init__(self, router: Router):
        self._router = router

    async def leader_stats(self) -> Response[LeaderStats]:
        """Get statistics about the leader and its followers.

        Only the leader can answer; other members reply with an error and the
        next endpoint is tried.
        """

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET", build_url(endpoint, STATS_PREFIX, "/leader")
            )
            return classify(response, (200,), LeaderStats.from_dict)

        return await self._router.route(request)

    async def self_stats(self) -> AsyncIterator[Response[SelfStats]]:
        """Get each member's statistics about itself, one endpoint at a time."""

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET", build_url(endpoint, STATS_PREFIX, "/self")
            )
            return classify(response, (200,), SelfStats.from_dict)

        async for result in self._router.broadcast(request):
            yield result

    async def store_stats(self) -> AsyncIterator[Response[Dict[str, int]]]:
        """Get each member's store operation counters, one endpoint at a time."""

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET", build_url(endpoint, STATS_PREFIX, "/store")
            )
            return classify(response, (200,), _store_stats)

        async for result in self._router.broadcast(request):
            yield result
