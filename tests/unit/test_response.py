"""Unit tests for response classification."""

import httpx
import pytest
from etcdkv._internal.response import classify, decode_body
from etcdkv.errors import ApiError, SerializationError, UnexpectedStatusError
from etcdkv.types import Action, KeyValueInfo

HEADERS = {"X-Etcd-Cluster-Id": "abc", "X-Etcd-Index": "8"}


def make_response(status, body=None, content=None):
    if body is not None:
        return httpx.Response(status, json=body, headers=HEADERS)
    return httpx.Response(status, content=content or b"", headers=HEADERS)


class TestDecodeBody:
    """Tests for decode_body."""

    def test_valid(self):
        """Should parse and convert the body."""
        assert decode_body(b'{"a": 1}', lambda data: data["a"]) == 1

    def test_invalid_json(self):
        """Should report a body that is not JSON."""
        with pytest.raises(SerializationError):
            decode_body(b"<html>", lambda data: data)

    def test_wrong_shape(self):
        """Should report a body missing expected fields."""
        with pytest.raises(SerializationError):
            decode_body(b"[]", lambda data: data["a"])


class TestClassify:
    """Tests for classify."""

    def test_success(self):
        """Should decode the body and read the cluster headers."""
        response = make_response(
            200, {"action": "get", "node": {"key": "/foo", "value": "bar"}}
        )

        result = classify(response, (200,), KeyValueInfo.from_dict)
        assert result.data.action == Action.GET
        assert result.data.node.value == "bar"
        assert result.cluster_info.cluster_id == "abc"
        assert result.cluster_info.etcd_index == 8

    def test_any_listed_status_is_success(self):
        """Should accept every listed status."""
        response = make_response(201, {"action": "create", "node": {"key": "/foo"}})

        result = classify(response, (200, 201), KeyValueInfo.from_dict)
        assert result.data.action == Action.CREATE

    def test_success_without_payload(self):
        """Should ignore the body when no decoder is given."""
        result = classify(make_response(204), (204,), None)
        assert result.data is None
        assert result.cluster_info.etcd_index == 8

    def test_success_with_bad_body(self):
        """Should report a success body that does not decode."""
        with pytest.raises(SerializationError):
            classify(make_response(200, content=b"garbage"), (200,), KeyValueInfo.from_dict)

    def test_api_error(self):
        """Should raise the structured error from the body."""
        response = make_response(
            404,
            {"errorCode": 100, "message": "Key not found", "cause": "/foo", "index": 8},
        )

        with pytest.raises(ApiError) as exc_info:
            classify(response, (200,), KeyValueInfo.from_dict)

        assert exc_info.value.is_key_not_found()
        assert exc_info.value.cause == "/foo"

    def test_api_error_on_unlisted_success_status(self):
        """Should treat a status outside the list as an error."""
        response = make_response(
            201, {"errorCode": 105, "message": "Key already exists"}
        )

        with pytest.raises(ApiError):
            classify(response, (200,), KeyValueInfo.from_dict)

    def test_api_error_with_bad_body(self):
        """Should report an error body that does not decode."""
        response = make_response(500, content=b"internal error")

        with pytest.raises(SerializationError):
            classify(response, (200,), KeyValueInfo.from_dict)

    def test_status_error(self):
        """Should report the status alone when asked to."""
        response = make_response(401, {"message": "Insufficient credentials"})

        with pytest.raises(UnexpectedStatusError) as exc_info:
            classify(response, (200,), None, on_error="status")

        assert exc_info.value.status_code == 401
