"""Type definitions for the etcd client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, List, Mapping, Optional, TypeVar, Union

T = TypeVar("T")


def _optional(data: Mapping[str, Any], key: str, kind: type) -> Any:
    """Read an optional field, rejecting values of the wrong type."""
    value = data.get(key)
    if value is None:
        return None
    # bool is a subclass of int; an index must not decode from true/false
    if kind is int and isinstance(value, bool):
        raise TypeError(f"{key} must be an integer")
    if not isinstance(value, kind):
        raise TypeError(f"{key} must be of type {kind.__name__}")
    return value


class Action(str, Enum):
    """The action the server performed for a key-value request."""

    COMPARE_AND_DELETE = "compareAndDelete"
    COMPARE_AND_SWAP = "compareAndSwap"
    CREATE = "create"
    DELETE = "delete"
    EXPIRE = "expire"
    GET = "get"
    SET = "set"
    UPDATE = "update"


@dataclass(frozen=True)
class Node:
    """A key or directory in the store.

    A node whose ``nodes`` list is populated is a directory snapshot.
    """

    key: Optional[str] = None
    """The name of the key."""

    value: Optional[str] = None
    """The value of the key. None for directories."""

    dir: Optional[bool] = None
    """Whether or not the node is a directory."""

    created_index: Optional[int] = None
    """Index at which the node was created."""

    modified_index: Optional[int] = None
    """Index at which the node was last modified."""

    ttl: Optional[int] = None
    """Remaining time to live in seconds."""

    expiration: Optional[str] = None
    """ISO 8601 timestamp for when the key will expire."""

    nodes: Optional[List["Node"]] = None
    """Child nodes of a directory."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Node":
        if not isinstance(data, Mapping):
            raise TypeError("node must be a JSON object")
        children = data.get("nodes")
        if children is not None and not isinstance(children, list):
            raise TypeError("nodes must be a list")
        return cls(
            key=_optional(data, "key", str),
            value=_optional(data, "value", str),
            dir=_optional(data, "dir", bool),
            created_index=_optional(data, "createdIndex", int),
            modified_index=_optional(data, "modifiedIndex", int),
            ttl=_optional(data, "ttl", int),
            expiration=_optional(data, "expiration", str),
            nodes=[cls.from_dict(child) for child in children]
            if children is not None
            else None,
        )

    def is_dir(self) -> bool:
        return bool(self.dir)


@dataclass(frozen=True)
class KeyValueInfo:
    """Result of a successful key-value operation."""

    action: Action
    """The action that was taken, e.g. ``get`` or ``set``."""

    node: Node
    """The node that was operated upon."""

    prev_node: Optional[Node] = None
    """The previous state of the node, if any."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeyValueInfo":
        if not isinstance(data, Mapping):
            raise TypeError("response must be a JSON object")
        prev_node = data.get("prevNode")
        return cls(
            action=Action(data["action"]),
            node=Node.from_dict(data["node"]),
            prev_node=Node.from_dict(prev_node) if prev_node is not None else None,
        )


@dataclass(frozen=True)
class ClusterInfo:
    """Cluster metadata reported in response headers."""

    cluster_id: Optional[str] = None
    """Value of the X-Etcd-Cluster-Id header."""

    etcd_index: Optional[int] = None
    """Value of the X-Etcd-Index header."""

    raft_index: Optional[int] = None
    """Value of the X-Raft-Index header."""

    raft_term: Optional[int] = None
    """Value of the X-Raft-Term header."""

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ClusterInfo":
        def _int(name: str) -> Optional[int]:
            raw = headers.get(name)
            if raw is None:
                return None
            try:
                return int(raw)
            except ValueError:
                return None

        return cls(
            cluster_id=headers.get("x-etcd-cluster-id"),
            etcd_index=_int("x-etcd-index"),
            raft_index=_int("x-raft-index"),
            raft_term=_int("x-raft-term"),
        )


@dataclass(frozen=True)
class Response(Generic[T]):
    """A successful response: decoded data plus cluster metadata."""

    data: T
    cluster_info: ClusterInfo = field(default_factory=ClusterInfo)


@dataclass(frozen=True)
class ComparisonConditions:
    """Conditions for compare-and-swap and compare-and-delete.

    At least one field must be given.
    """

    value: Optional[str] = None
    """The node must currently have this value."""

    modified_index: Optional[int] = None
    """The node must currently be at this modified index."""

    def is_empty(self) -> bool:
        return self.value is None and self.modified_index is None


@dataclass
class GetOptions:
    """Options for get operations."""

    recursive: bool = False
    """If the node is a directory, return its children as well."""

    sort: Optional[bool] = None
    """Sort returned child nodes alphabetically."""

    strong_consistency: bool = False
    """Have the serving member synchronize with the quorum before replying."""

    wait: bool = False
    """Long-poll until the node changes."""

    wait_index: Optional[int] = None
    """With ``wait``, return the first change at or after this index."""


@dataclass
class SetOptions:
    """Options for set operations."""

    value: Optional[str] = None
    ttl: Optional[int] = None
    dir: Optional[bool] = None
    prev_exist: Optional[bool] = None
    create_in_order: bool = False
    """POST to the directory to create a key named after the next index."""

    conditions: Optional[ComparisonConditions] = None


@dataclass
class DeleteOptions:
    """Options for delete operations."""

    recursive: Optional[bool] = None
    dir: Optional[bool] = None
    conditions: Optional[ComparisonConditions] = None


@dataclass
class WatchOptions:
    """Options for watch operations."""

    index: Optional[int] = None
    """Return the first change at this index or greater, allowing changes
    that happened in the past to be observed."""

    recursive: bool = False
    """Watch all child keys as well."""

    timeout: Optional[float] = None
    """Give up after this many seconds without a change."""


@dataclass(frozen=True)
class BasicAuth:
    """Credentials for HTTP Basic authentication."""

    username: str
    password: str


@dataclass
class ClientConfig:
    """Configuration for EtcdClient."""

    endpoints: List[str]
    """Base URLs of cluster members, tried in this order."""

    basic_auth: Optional[BasicAuth] = None
    """Credentials sent with every request."""

    timeout: int = 5000
    """Default request timeout in milliseconds. Watch requests never time out
    at the transport level."""

    max_connections: int = 10
    """Max pooled connections."""

    verify: Union[bool, str] = True
    """TLS verification flag or path to a CA bundle."""


@dataclass(frozen=True)
class Health:
    """Result of a member health check."""

    health: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Health":
        health = data["health"]
        if not isinstance(health, str):
            raise TypeError("health must be a string")
        return cls(health=health)


@dataclass(frozen=True)
class VersionInfo:
    """Server and cluster versions reported by a member."""

    server_version: str
    cluster_version: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VersionInfo":
        server_version = data["etcdserver"]
        cluster_version = data["etcdcluster"]
        if not isinstance(server_version, str) or not isinstance(cluster_version, str):
            raise TypeError("versions must be strings")
        return cls(server_version=server_version, cluster_version=cluster_version)
