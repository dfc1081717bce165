"""Test the HTTP application built by create_app."""
from fastapi.testclient import TestClient
import pytest

from calculator_rpc.common.codec import REPLY_CODEC, REQUEST_CODEC
from calculator_rpc.common.messages import INT64_MAX, PROTOBUF_MEDIA_TYPE, BinaryOperationRequest


def encode(a: int, b: int) -> bytes:
    return REQUEST_CODEC.encode(BinaryOperationRequest(operand_a=a, operand_b=b))


def test_add_returns_encoded_sum(app_client: TestClient) -> None:
    """POST /add with (2, 3) answers 200 and result 5."""
    response = app_client.post("/add", content=encode(2, 3))
    assert response.status_code == 200
    assert response.headers["content-type"] == PROTOBUF_MEDIA_TYPE
    assert REPLY_CODEC.decode(response.content).result == 5


def test_subtract_returns_encoded_difference(app_client: TestClient) -> None:
    """POST /subtract with (10, 4) answers 200 and result 6."""
    response = app_client.post("/subtract", content=encode(10, 4))
    assert response.status_code == 200
    assert REPLY_CODEC.decode(response.content).result == 6


@pytest.mark.parametrize("path", ["/divide", "/multiply", "/", "/ADD", "/docs", "/openapi.json"])
def test_unknown_path_is_404_with_empty_body(app_client: TestClient, path: str) -> None:
    """Unknown operations answer 404 with nothing in the body."""
    response = app_client.post(path, content=encode(2, 3))
    assert response.status_code == 404
    assert response.content == b""


def test_get_is_dispatched_too(app_client: TestClient) -> None:
    """The method does not matter for routing."""
    response = app_client.get("/divide")
    assert response.status_code == 404
    assert response.content == b""


def test_query_string_is_ignored(app_client: TestClient) -> None:
    """Only the path names the operation."""
    response = app_client.post("/add?verbose=1", content=encode(1, 2))
    assert response.status_code == 200
    assert REPLY_CODEC.decode(response.content).result == 3


def test_corrupt_body_is_400(app_client: TestClient) -> None:
    """A body that does not decode answers 400 and never a fabricated result."""
    response = app_client.post("/add", content=b"\x08\x80")
    assert response.status_code == 400
    assert response.json()["error"]["type"] == "malformed_payload"


def test_overflow_is_500(app_client: TestClient) -> None:
    """A result that does not fit in int64 answers 500."""
    response = app_client.post("/add", content=encode(INT64_MAX, 1))
    assert response.status_code == 500
    assert response.json()["error"]["type"] == "encode_error"


def test_app_recovers_after_error(app_client: TestClient) -> None:
    """A failed request does not affect the next one."""
    assert app_client.post("/add", content=b"\x08").status_code == 400
    response = app_client.post("/add", content=encode(20, 22))
    assert REPLY_CODEC.decode(response.content).result == 42


@pytest.mark.parametrize("method", ["DELETE", "PATCH", "HEAD", "OPTIONS"])
def test_unknown_path_is_404_for_any_method(app_client: TestClient, method: str) -> None:
    """The method never turns an unknown path into anything but a 404."""
    response = app_client.request(method, "/divide")
    assert response.status_code == 404
    assert response.content == b""


@pytest.mark.parametrize("method", ["DELETE", "PATCH", "OPTIONS"])
def test_add_is_dispatched_for_any_method(app_client: TestClient, method: str) -> None:
    """Known operations are dispatched whatever the method."""
    response = app_client.request(method, "/add", content=encode(2, 3))
    assert response.status_code == 200
    assert REPLY_CODEC.decode(response.content).result == 5


@pytest.mark.parametrize("path", ["/%61dd", "/%2Fadd"])
def test_percent_encoded_path_is_dispatched(app_client: TestClient, path: str) -> None:
    """Escapes in the request path are decoded before the operation lookup."""
    response = app_client.post(path, content=encode(2, 3))
    assert response.status_code == 200
    assert REPLY_CODEC.decode(response.content).result == 5


def test_path_is_percent_decoded_only_once(app_client: TestClient) -> None:
    """An escaped percent sign stays a literal percent sign."""
    response = app_client.post("/%2561dd", content=encode(2, 3))
    assert response.status_code == 404
    assert response.content == b""


@pytest.mark.parametrize("body", [
    b"\x0a\x01x",    # operand_a sent as length-delimited
    b"\x18\x05",     # field 3 does not exist
])
def test_unexpected_fields_are_400(app_client: TestClient, body: bytes) -> None:
    """Bodies carrying fields outside the request message are rejected, not answered with 0."""
    response = app_client.post("/add", content=body)
    assert response.status_code == 400
    assert response.json()["error"]["type"] == "malformed_payload"
