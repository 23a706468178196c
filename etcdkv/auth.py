"""Authentication and authorization API.

These endpoints are used to manage users and roles, and to turn
authentication on and off for the whole cluster.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from etcdkv._internal.connection import HttpTransport
from etcdkv._internal.request import AUTH_PREFIX, build_url
from etcdkv._internal.response import classify
from etcdkv._internal.router import Router
from etcdkv.errors import UnexpectedStatusError
from etcdkv.types import ClusterInfo, Response


class AuthChange(str, Enum):
    """Outcome of enabling or disabling authentication."""

    CHANGED = "changed"
    """The setting was changed."""

    UNCHANGED = "unchanged"
    """The setting was already in the requested state."""


def _string_list(value: Any, name: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{name} must be a list of strings")
    return value


@dataclass
class Permission:
    """Read and write grants on key patterns."""

    read: Optional[List[str]] = None
    write: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Permission":
        read = data.get("read")
        write = data.get("write")
        return cls(
            read=_string_list(read, "read") if read is not None else None,
            write=_string_list(write, "write") if write is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.read is not None:
            data["read"] = self.read
        if self.write is not None:
            data["write"] = self.write
        return data

    def add_read(self, key: str) -> None:
        if self.read is None:
            self.read = []
        self.read.append(key)

    def add_write(self, key: str) -> None:
        if self.write is None:
            self.write = []
        self.write.append(key)


@dataclass
class Permissions:
    """Permissions grouped by API. Only the key-value API is supported."""

    kv: Permission = field(default_factory=Permission)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Permissions":
        return cls(kv=Permission.from_dict(data["kv"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"kv": self.kv.to_dict()}


@dataclass
class Role:
    """A named set of permissions."""

    name: str
    permissions: Permissions = field(default_factory=Permissions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Role":
        name = data["role"]
        if not isinstance(name, str):
            raise TypeError("role must be a string")
        return cls(name=name, permissions=Permissions.from_dict(data["permissions"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.name, "permissions": self.permissions.to_dict()}

    def grant_kv_read_permission(self, key: str) -> None:
        self.permissions.kv.add_read(key)

    def grant_kv_write_permission(self, key: str) -> None:
        self.permissions.kv.add_write(key)

    @property
    def kv_read_permissions(self) -> List[str]:
        return self.permissions.kv.read or []

    @property
    def kv_write_permissions(self) -> List[str]:
        return self.permissions.kv.write or []


@dataclass
class RoleUpdate:
    """Permission changes to apply to an existing role."""

    name: str
    grants: Optional[Permissions] = None
    revocations: Optional[Permissions] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.name}
        if self.grants is not None:
            data["grant"] = self.grants.to_dict()
        if self.revocations is not None:
            data["revoke"] = self.revocations.to_dict()
        return data

    def _grants(self) -> Permissions:
        if self.grants is None:
            self.grants = Permissions()
        return self.grants

    def _revocations(self) -> Permissions:
        if self.revocations is None:
            self.revocations = Permissions()
        return self.revocations

    def grant_kv_read_permission(self, key: str) -> None:
        self._grants().kv.add_read(key)

    def grant_kv_write_permission(self, key: str) -> None:
        self._grants().kv.add_write(key)

    def revoke_kv_read_permission(self, key: str) -> None:
        self._revocations().kv.add_read(key)

    def revoke_kv_write_permission(self, key: str) -> None:
        self._revocations().kv.add_write(key)


@dataclass(frozen=True)
class User:
    """A user with the names of its roles."""

    name: str
    roles: List[str]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        name = data["user"]
        if not isinstance(name, str):
            raise TypeError("user must be a string")
        roles = data.get("roles")
        return cls(
            name=name, roles=_string_list(roles, "roles") if roles is not None else []
        )


@dataclass(frozen=True)
class UserDetail:
    """A user with its roles expanded."""

    name: str
    roles: List[Role]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserDetail":
        name = data["user"]
        if not isinstance(name, str):
            raise TypeError("user must be a string")
        roles = data.get("roles") or []
        return cls(name=name, roles=[Role.from_dict(role) for role in roles])


@dataclass
class NewUser:
    """A user to create."""

    name: str
    password: str
    roles: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"user": self.name, "password": self.password}
        if self.roles is not None:
            data["roles"] = self.roles
        return data

    def add_role(self, role: str) -> None:
        if self.roles is None:
            self.roles = []
        self.roles.append(role)


@dataclass
class UserUpdate:
    """Changes to apply to an existing user."""

    name: str
    password: Optional[str] = None
    grants: Optional[List[str]] = None
    revocations: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"user": self.name}
        if self.password is not None:
            data["password"] = self.password
        if self.grants is not None:
            data["grant"] = self.grants
        if self.revocations is not None:
            data["revoke"] = self.revocations
        return data

    def update_password(self, password: str) -> None:
        self.password = password

    def grant_role(self, role: str) -> None:
        if self.grants is None:
            self.grants = []
        self.grants.append(role)

    def revoke_role(self, role: str) -> None:
        if self.revocations is None:
            self.revocations = []
        self.revocations.append(role)


def _auth_enabled(data: Mapping[str, Any]) -> bool:
    enabled = data["enabled"]
    if not isinstance(enabled, bool):
        raise TypeError("enabled must be a boolean")
    return enabled


def _user_list(data: Mapping[str, Any]) -> List[UserDetail]:
    return [UserDetail.from_dict(user) for user in data.get("users") or []]


def _role_list(data: Mapping[str, Any]) -> List[Role]:
    return [Role.from_dict(role) for role in data.get("roles") or []]


class AuthAPI:
    """Operations on /v2/auth."""

    def __init__(self, router: Router):
        self._router = router

    async def status(self) -> Response[bool]:
        """Check whether authentication is enabled."""

        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET", build_url(endpoint, AUTH_PREFIX, "/enable")
            )
            return classify(response, (200,), _auth_enabled)

        return await self._router.route(request)

    async def enable(self) -> Response[AuthChange]:
        """Enable authentication.

        Returns AuthChange.UNCHANGED if it was already enabled.
        """
        return await self._toggle("PUT")

    async def disable(self) -> Response[AuthChange]:
        """Disable authentication.

        Returns AuthChange.UNCHANGED if it was already disabled.
        """
        return await self._toggle("DELETE")

    async def _toggle(self, method: str) -> Response[AuthChange]:
        # 409 Conflict means the setting was already in the requested state
        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                method, build_url(endpoint, AUTH_PREFIX, "/enable")
            )
            cluster_info = ClusterInfo.from_headers(response.headers)
            if response.status_code == 200:
                return Response(data=AuthChange.CHANGED, cluster_info=cluster_info)
            if response.status_code == 409:
                return Response(data=AuthChange.UNCHANGED, cluster_info=cluster_info)
            raise UnexpectedStatusError(response.status_code)

        return await self._router.route(request)

    async def create_user(self, user: NewUser) -> Response[User]:
        """Create a user."""
        return await self._put(
            f"/users/{user.name}", user.to_dict(), User.from_dict, (200, 201)
        )

    async def update_user(self, user: UserUpdate) -> Response[User]:
        """Change a user's password or roles."""
        return await self._put(
            f"/users/{user.name}", user.to_dict(), User.from_dict, (200,)
        )

    async def get_user(self, name: str) -> Response[UserDetail]:
        """Get a user and its roles."""
        return await self._get(f"/users/{name}", UserDetail.from_dict)

    async def get_users(self) -> Response[List[UserDetail]]:
        """List all users."""
        return await self._get("/users", _user_list)

    async def delete_user(self, name: str) -> Response[None]:
        """Delete a user."""
        return await self._delete(f"/users/{name}")

    async def create_role(self, role: Role) -> Response[Role]:
        """Create a role."""
        return await self._put(
            f"/roles/{role.name}", role.to_dict(), Role.from_dict, (200, 201)
        )

    async def update_role(self, role: RoleUpdate) -> Response[Role]:
        """Grant or revoke permissions on a role."""
        return await self._put(
            f"/roles/{role.name}", role.to_dict(), Role.from_dict, (200,)
        )

    async def get_role(self, name: str) -> Response[Role]:
        """Get a role."""
        return await self._get(f"/roles/{name}", Role.from_dict)

    async def get_roles(self) -> Response[List[Role]]:
        """List all roles."""
        return await self._get("/roles", _role_list)

    async def delete_role(self, name: str) -> Response[None]:
        """Delete a role."""
        return await self._delete(f"/roles/{name}")

    async def _get(self, path, decode):
        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "GET", build_url(endpoint, AUTH_PREFIX, path)
            )
            return classify(response, (200,), decode, on_error="status")

        return await self._router.route(request)

    async def _put(self, path, body, decode, ok_statuses):
        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "PUT", build_url(endpoint, AUTH_PREFIX, path), json_body=body
            )
            return classify(response, ok_statuses, decode, on_error="status")

        return await self._router.route(request)

    async def _delete(self, path):
        async def request(transport: HttpTransport, endpoint: str):
            response = await transport.request(
                "DELETE", build_url(endpoint, AUTH_PREFIX, path)
            )
            return classify(response, (200,), None, on_error="status")

        return await self._router.route(request)
