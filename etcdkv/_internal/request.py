"""Translation of key-value options into URLs, query strings and form bodies."""

from typing import Dict, Optional
from urllib.parse import quote

from etcdkv.errors import InvalidConditionsError
from etcdkv.types import ComparisonConditions, DeleteOptions, GetOptions, SetOptions

KEYS_PREFIX = "/v2/keys"
MEMBERS_PREFIX = "/v2/members"
AUTH_PREFIX = "/v2/auth"
STATS_PREFIX = "/v2/stats"


def build_url(endpoint: str, prefix: str, path: str = "") -> str:
    """Join a normalized endpoint, an API prefix and a path."""
    return f"{endpoint}{prefix}{path}"


def key_path(key: str) -> str:
    """Return the key as an absolute URL path, escaping everything but `/`."""
    if not key.startswith("/"):
        key = "/" + key
    return quote(key, safe="/")


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def validate_conditions(conditions: Optional[ComparisonConditions]) -> None:
    """Reject a conditions value that names no condition.

    Raises:
        InvalidConditionsError: If both the value and the index are absent
    """
    if conditions is not None and conditions.is_empty():
        raise InvalidConditionsError()


def _add_conditions(
    params: Dict[str, str], conditions: Optional[ComparisonConditions]
) -> None:
    if conditions is None:
        return
    if conditions.modified_index is not None:
        params["prevIndex"] = str(conditions.modified_index)
    if conditions.value is not None:
        params["prevValue"] = conditions.value


def get_query(options: GetOptions) -> Dict[str, str]:
    """Build the query parameters for a get or watch request."""
    params = {"recursive": format_bool(options.recursive)}

    if options.sort is not None:
        params["sorted"] = format_bool(options.sort)

    if options.wait:
        params["wait"] = "true"

    if options.wait_index is not None:
        params["waitIndex"] = str(options.wait_index)

    if options.strong_consistency:
        params["quorum"] = "true"

    return params


def delete_query(options: DeleteOptions) -> Dict[str, str]:
    """Build the query parameters for a delete request.

    Raises:
        InvalidConditionsError: If empty conditions were given
    """
    validate_conditions(options.conditions)

    params: Dict[str, str] = {}

    if options.recursive is not None:
        params["recursive"] = format_bool(options.recursive)

    if options.dir is not None:
        params["dir"] = format_bool(options.dir)

    _add_conditions(params, options.conditions)
    return params


def set_form(options: SetOptions) -> Dict[str, str]:
    """Build the form fields for a set request.

    Raises:
        InvalidConditionsError: If empty conditions were given
    """
    validate_conditions(options.conditions)

    fields: Dict[str, str] = {}

    if options.value is not None:
        fields["value"] = options.value

    if options.ttl is not None:
        fields["ttl"] = str(options.ttl)

    if options.dir is not None:
        fields["dir"] = format_bool(options.dir)

    if options.prev_exist is not None:
        fields["prevExist"] = format_bool(options.prev_exist)

    _add_conditions(fields, options.conditions)
    return fields


def set_method(options: SetOptions) -> str:
    """Ordered-key creation POSTs to the directory; everything else PUTs."""
    return "POST" if options.create_in_order else "PUT"
