"""Classification of HTTP responses into results or typed errors."""

import json
from typing import Any, Callable, Collection, Literal, Optional, TypeVar

import httpx

from etcdkv.errors import ApiError, SerializationError, UnexpectedStatusError
from etcdkv.types import ClusterInfo, Response

T = TypeVar("T")

ErrorShape = Literal["api", "status"]
"""How a non-success status is reported.

- api: decode the body as a structured API error
- status: report the status code alone
"""


def decode_body(body: bytes, decode: Callable[[Any], T]) -> T:
    """Parse a JSON body and convert it with ``decode``.

    Raises:
        SerializationError: If the body is not JSON or does not have the
            expected shape
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise SerializationError(f"Response body is not valid JSON: {e}") from e

    try:
        return decode(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise SerializationError(
            f"Response body has an unexpected shape: {e!r}"
        ) from e


def decode_api_error(body: bytes) -> ApiError:
    """Decode a structured error body.

    Raises:
        SerializationError: If the body is not a valid error payload
    """
    return decode_body(body, ApiError.from_dict)


def classify(
    response: httpx.Response,
    ok_statuses: Collection[int],
    decode: Optional[Callable[[Any], T]],
    on_error: ErrorShape = "api",
) -> Response[T]:
    """Turn an HTTP response into a Response or raise a typed error.

    Args:
        response: The received response, body already read
        ok_statuses: Status codes that mean success for this operation
        decode: Converts the parsed JSON body; None if success carries no body
        on_error: How to report any other status

    Returns:
        Decoded data with the cluster metadata from the headers

    Raises:
        SerializationError: If a body fails to decode as the expected shape
        ApiError: If the server returned a structured error
        UnexpectedStatusError: If the status matched nothing expected
    """
    cluster_info = ClusterInfo.from_headers(response.headers)

    if response.status_code in ok_statuses:
        if decode is None:
            return Response(data=None, cluster_info=cluster_info)  # type: ignore[arg-type]
        return Response(
            data=decode_body(response.content, decode), cluster_info=cluster_info
        )

    if on_error == "status":
        raise UnexpectedStatusError(response.status_code)

    raise decode_api_error(response.content)
