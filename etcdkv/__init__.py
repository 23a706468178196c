"""etcd Python Client SDK.

An asyncio client for the etcd v2 HTTP API. Requests are sent to the
configured cluster members in order until one of them succeeds.

Example:
    >>> import asyncio
    >>> from etcdkv import EtcdClient, ClientConfig
    >>>
    >>> async def main():
    ...     config = ClientConfig(endpoints=["http://localhost:2379"])
    ...     async with EtcdClient(config) as client:
    ...         # Set a value
    ...         await client.set("/my-key", "my-value")
    ...
    ...         # Get a value
    ...         response = await client.get("/my-key")
    ...         print(response.data.node.value)  # "my-value"
    ...
    ...         # Delete a value
    ...         await client.delete("/my-key")
    >>>
    >>> asyncio.run(main())
"""

__version__ = "0.1.0"

from etcdkv.auth import (
    AuthChange,
    NewUser,
    Role,
    RoleUpdate,
    User,
    UserDetail,
    UserUpdate,
)
from etcdkv.client import EtcdClient
from etcdkv.errors import (
    ApiError,
    ClusterError,
    EtcdError,
    InvalidConditionsError,
    InvalidUrlError,
    NoEndpointsError,
    SerializationError,
    TransportError,
    UnexpectedStatusError,
    WatchError,
    WatchTimeoutError,
)
from etcdkv.members import Member
from etcdkv.stats import LeaderStats, SelfStats
from etcdkv.types import (
    Action,
    BasicAuth,
    ClientConfig,
    ClusterInfo,
    ComparisonConditions,
    DeleteOptions,
    GetOptions,
    Health,
    KeyValueInfo,
    Node,
    Response,
    SetOptions,
    VersionInfo,
    WatchOptions,
)

__all__ = [
    "__version__",
    # Client
    "EtcdClient",
    # Configuration
    "ClientConfig",
    "BasicAuth",
    # Options
    "GetOptions",
    "SetOptions",
    "DeleteOptions",
    "WatchOptions",
    "ComparisonConditions",
    # Results and types
    "Action",
    "Node",
    "KeyValueInfo",
    "ClusterInfo",
    "Response",
    "Health",
    "VersionInfo",
    "Member",
    "LeaderStats",
    "SelfStats",
    # Auth
    "AuthChange",
    "NewUser",
    "User",
    "UserDetail",
    "UserUpdate",
    "Role",
    "RoleUpdate",
    # Errors
    "EtcdError",
    "InvalidConditionsError",
    "NoEndpointsError",
    "InvalidUrlError",
    "TransportError",
    "UnexpectedStatusError",
    "SerializationError",
    "ApiError",
    "ClusterError",
    "WatchError",
    "WatchTimeoutError",
]
