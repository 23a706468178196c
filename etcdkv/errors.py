"""Custom error classes for the etcd client."""

from typing import Any, Dict, List, Optional

import httpx


# Error codes returned by the etcd v2 API in the ``errorCode`` field.
KEY_NOT_FOUND = 100
TEST_FAILED = 101
NOT_A_FILE = 102
NOT_A_DIRECTORY = 104
NODE_EXISTS = 105
ROOT_READ_ONLY = 107
DIRECTORY_NOT_EMPTY = 108
EVENT_INDEX_CLEARED = 401


class EtcdError(Exception):
    """Base error class for all etcd client errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code

    def __repr__(self) -> str:
        if self.code:
            return f"{self.__class__.__name__}(message={str(self)!r}, code={self.code!r})"
        return f"{self.__class__.__name__}(message={str(self)!r})"


class InvalidConditionsError(EtcdError):
    """A conditional operation was requested without any condition.

    Raised before any request is sent.
    """

    def __init__(
        self,
        message: str = "Current value or modified index is required for a conditional operation",
    ):
        super().__init__(message, "INVALID_CONDITIONS")


class NoEndpointsError(EtcdError):
    """Error indicating the client was given no endpoints."""

    def __init__(self, message: str = "At least one endpoint is required"):
        super().__init__(message, "NO_ENDPOINTS")


class InvalidUrlError(EtcdError):
    """Error indicating an endpoint or request URL could not be parsed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, "INVALID_URL")
        self.url = url

    def __repr__(self) -> str:
        return f"InvalidUrlError(message={str(self)!r}, url={self.url!r})"


class TransportError(EtcdError):
    """Error indicating the HTTP layer failed for one endpoint.

    Covers refused connections, DNS and TLS failures, and transport timeouts.
    """

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message, "TRANSPORT")
        self.endpoint = endpoint

    def __repr__(self) -> str:
        return (
            f"TransportError(message={str(self)!r}, endpoint={self.endpoint!r})"
        )


class UnexpectedStatusError(EtcdError):
    """Error indicating the response status matched no expected outcome."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(
            message or f"Unexpected HTTP status {status_code}", "UNEXPECTED_STATUS"
        )
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"UnexpectedStatusError(message={str(self)!r}, "
            f"status_code={self.status_code})"
        )


class SerializationError(EtcdError):
    """Error indicating a body could not be encoded or decoded."""

    def __init__(self, message: str):
        super().__init__(message, "SERIALIZATION")


class ApiError(EtcdError):
    """Structured error payload returned by the server.

    Attributes mirror the JSON error body: ``errorCode``, ``message``,
    ``cause`` and ``index``.
    """

    def __init__(
        self,
        error_code: int,
        message: str,
        cause: Optional[str] = None,
        index: Optional[int] = None,
    ):
        super().__init__(message, "API_ERROR")
        self.error_code = error_code
        self.message = message
        self.cause = cause
        self.index = index

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiError":
        error_code = data["errorCode"]
        message = data["message"]
        if not isinstance(error_code, int) or not isinstance(message, str):
            raise TypeError("errorCode must be an integer and message a string")
        return cls(
            error_code=error_code,
            message=message,
            cause=data.get("cause"),
            index=data.get("index"),
        )

    def is_key_not_found(self) -> bool:
        return self.error_code == KEY_NOT_FOUND

    def is_test_failed(self) -> bool:
        return self.error_code == TEST_FAILED

    def is_node_exists(self) -> bool:
        return self.error_code == NODE_EXISTS

    def is_not_a_file(self) -> bool:
        return self.error_code == NOT_A_FILE

    def is_not_a_directory(self) -> bool:
        return self.error_code == NOT_A_DIRECTORY

    def is_root_read_only(self) -> bool:
        return self.error_code == ROOT_READ_ONLY

    def is_directory_not_empty(self) -> bool:
        return self.error_code == DIRECTORY_NOT_EMPTY

    def is_event_index_cleared(self) -> bool:
        return self.error_code == EVENT_INDEX_CLEARED

    def __repr__(self) -> str:
        return (
            f"ApiError(error_code={self.error_code}, message={self.message!r}, "
            f"cause={self.cause!r}, index={self.index!r})"
        )


class ClusterError(EtcdError):
    """Error indicating every endpoint failed.

    ``errors`` holds one error per endpoint tried, in the order tried.
    """

    def __init__(self, errors: List[EtcdError], message: Optional[str] = None):
        if message is None:
            if errors:
                message = (
                    f"All {len(errors)} endpoint(s) failed; last error: {errors[-1]}"
                )
            else:
                message = "No endpoints were attempted"
        super().__init__(message, "CLUSTER_ERROR")
        self.errors = errors

    def __repr__(self) -> str:
        return f"ClusterError(message={str(self)!r}, errors={self.errors!r})"


class WatchError(EtcdError):
    """Error indicating a watch operation failed.

    ``errors`` holds the per-endpoint errors collected while waiting.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[EtcdError]] = None,
        code: str = "WATCH_ERROR",
    ):
        super().__init__(message, code)
        self.errors = errors or []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={str(self)!r}, errors={self.errors!r})"


class WatchTimeoutError(WatchError):
    """Error indicating the watch timeout elapsed before a change arrived."""

    def __init__(self, timeout: float):
        super().__init__(
            f"Watch timed out after {timeout} seconds", code="WATCH_TIMEOUT"
        )
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"WatchTimeoutError(message={str(self)!r}, timeout={self.timeout!r})"


def from_http_error(error: Exception, endpoint: Optional[str] = None) -> EtcdError:
    """Convert an httpx exception to an etcd client error.

    Args:
        error: Exception raised by httpx while sending a request
        endpoint: Endpoint the request was sent to

    Returns:
        Appropriate EtcdError subclass
    """
    if isinstance(error, EtcdError):
        return error

    if isinstance(error, httpx.InvalidURL):
        return InvalidUrlError(str(error) or "Invalid URL", url=endpoint)

    if isinstance(error, httpx.TimeoutException):
        return TransportError(f"Request timed out: {error}", endpoint)

    if isinstance(error, httpx.ConnectError):
        return TransportError(f"Connection failed: {error}", endpoint)

    message = str(error) or error.__class__.__name__
    return TransportError(message, endpoint)
