"""ErrorNormalizer: classification precedence and message format."""

from __future__ import annotations

import httpx
import pytest

from adapters.error_normalizer import NO_RESPONSE_DETAIL, normalize
from core.errors import ApiError, ErrorKind, validation_error

_REQUEST = httpx.Request("GET", "http://lms.test/api/Course/1")


def _status_error(status_code: int, **kwargs) -> httpx.HTTPStatusError:
    response = httpx.Response(status_code, request=_REQUEST, **kwargs)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=_REQUEST, response=response)


def test_body_message_wins() -> None:
    err = normalize(_status_error(400, json={"message": "Title already taken"}), "Create course")

    assert err.kind is ErrorKind.SERVER
    assert err.status_code == 400
    assert err.message == "Create course: Title already taken"
    assert str(err) == err.message


def test_404_is_not_found() -> None:
    err = normalize(_status_error(404, json={"message": "Course missing"}), "Get course by ID")

    assert err.kind is ErrorKind.NOT_FOUND
    assert err.message == "Get course by ID: Course missing"


def test_status_text_when_body_has_no_message() -> None:
    err = normalize(_status_error(500, text="<html>boom</html>"), "List courses")

    assert err.kind is ErrorKind.SERVER
    assert err.message == "List courses: Internal Server Error"


def test_generic_text_when_nothing_else() -> None:
    err = normalize(_status_error(599), "List courses")

    assert err.message == "List courses: Server error occurred"


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ReadTimeout("timed out", request=_REQUEST),
        httpx.ConnectTimeout("timed out", request=_REQUEST),
        httpx.ConnectError("connection refused", request=_REQUEST),
    ],
)
def test_no_response_is_network(exc: Exception) -> None:
    err = normalize(exc, "List courses")

    assert err.kind is ErrorKind.NETWORK
    assert err.message == f"List courses: {NO_RESPONSE_DETAIL}"


def test_unknown_keeps_underlying_message() -> None:
    err = normalize(TypeError("Object of type set is not JSON serializable"), "Create course")

    assert err.kind is ErrorKind.UNKNOWN
    assert err.message == "Create course: Object of type set is not JSON serializable"


def test_unknown_without_message() -> None:
    assert normalize(RuntimeError(), "Delete course").message == "Delete course: Unknown error occurred"


def test_api_error_passes_through() -> None:
    original = validation_error("Get course by ID", "Valid ID is required")

    assert normalize(original, "Other context") is original


def test_repr_mentions_kind() -> None:
    err = ApiError("List roles", ErrorKind.NETWORK, NO_RESPONSE_DETAIL)

    assert "network" in repr(err)
