"""HTTP transport shared by all requests from one client."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from etcdkv.errors import (
    InvalidUrlError,
    NoEndpointsError,
    TransportError,
    from_http_error,
)
from etcdkv.types import BasicAuth

logger = logging.getLogger(__name__)


def normalize_endpoints(endpoints: Sequence[str]) -> List[str]:
    """Validate endpoint URLs and strip trailing slashes.

    Raises:
        NoEndpointsError: If no endpoints were given
        InvalidUrlError: If an endpoint is not an absolute http(s) URL
    """
    if not endpoints:
        raise NoEndpointsError()

    normalized = []
    for endpoint in endpoints:
        try:
            url = httpx.URL(endpoint)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidUrlError(f"Invalid endpoint {endpoint!r}: {e}", endpoint) from e

        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidUrlError(
                f"Endpoint must be an absolute http or https URL: {endpoint!r}",
                endpoint,
            )

        normalized.append(str(endpoint).rstrip("/"))

    return normalized


class HttpTransport:
    """Sends requests to cluster members over a pooled httpx client."""

    def __init__(
        self,
        basic_auth: Optional[BasicAuth] = None,
        timeout: int = 5000,
        max_connections: int = 10,
        verify: Any = True,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the transport.

        Args:
            basic_auth: Credentials added to every request
            timeout: Request timeout in milliseconds
            max_connections: Max pooled connections
            verify: TLS verification flag or CA bundle path
            http_client: Pre-configured client to use instead of creating one.
                The caller keeps ownership and must close it.
        """
        self._timeout = timeout / 1000.0  # Convert to seconds
        self._auth = (
            httpx.BasicAuth(basic_auth.username, basic_auth.password)
            if basic_auth
            else None
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            limits=httpx.Limits(max_connections=max_connections),
            verify=verify,
        )
        self._closed = False

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, str]] = None,
        form: Optional[Mapping[str, str]] = None,
        json_body: Optional[Any] = None,
        wait: bool = False,
    ) -> httpx.Response:
        """Send a request and read the whole response body.

        Args:
            method: HTTP method
            url: Absolute request URL
            params: Query parameters
            form: Fields sent as a form-encoded body
            json_body: Object sent as a JSON body
            wait: Long-poll request; disables the request timeout

        Returns:
            The response with its body loaded

        Raises:
            TransportError: If the request could not be completed
            InvalidUrlError: If the URL could not be built
        """
        if self._closed:
            raise TransportError("Transport is closed", url)

        kwargs: Dict[str, Any] = {}
        if self._auth is not None:
            kwargs["auth"] = self._auth
        if wait:
            kwargs["timeout"] = None

        logger.debug("%s %s params=%s", method, url, dict(params or {}))

        try:
            return await self._client.request(
                method,
                url,
                params=params,
                data=form,
                json=json_body,
                **kwargs,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise from_http_error(e, url) from e

    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._closed:
            return

        self._closed = True

        if self._owns_client:
            await self._client.aclose()

    def is_closed(self) -> bool:
        """Check if the transport is closed."""
        return self._closed
