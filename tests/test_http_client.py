"""HttpClient: headers, token injection, 401 handling and timeouts."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from adapters.http_client import HttpClient, build_async_client
from adapters.session import InMemoryAuthStore, LoggingNavigator, SessionInvalidator
from adapters.uploads import UploadProgressReporter
from conftest import FakeBackend, make_settings


def _client(backend: FakeBackend, store: InMemoryAuthStore, on_unauthorized=lambda: None, **settings) -> HttpClient:
    return HttpClient(
        make_settings(**settings),
        token_provider=store.current_token,
        on_unauthorized=on_unauthorized,
        transport=backend.transport,
    )


@pytest.mark.asyncio
async def test_returns_decoded_body_directly(backend: FakeBackend) -> None:
    backend.reply(200, json={"id": 1, "title": "X"})

    async with _client(backend, InMemoryAuthStore()) as http:
        payload = await http.request("GET", "/api/Course/1")

    assert payload == {"id": 1, "title": "X"}


@pytest.mark.asyncio
async def test_empty_body_decodes_to_none(backend: FakeBackend) -> None:
    backend.reply(204)

    async with _client(backend, InMemoryAuthStore()) as http:
        assert await http.request("DELETE", "/api/Course/delete/1") is None


@pytest.mark.asyncio
async def test_default_headers(backend: FakeBackend) -> None:
    async with _client(backend, InMemoryAuthStore("abc")) as http:
        await http.request("POST", "/api/Course/create", json={"title": "X"})

    sent = backend.last
    assert sent.url == httpx.URL("http://lms.test/api/Course/create")
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.headers["ngrok-skip-browser-warning"] == "1"
    assert sent.headers["Authorization"] == "Bearer abc"
    assert json.loads(sent.content) == {"title": "X"}


@pytest.mark.asyncio
async def test_token_is_read_on_every_request(backend: FakeBackend) -> None:
    store = InMemoryAuthStore()
    async with _client(backend, store) as http:
        await http.request("GET", "/api/Course/list")
        store.set_token("fresh")
        await http.request("GET", "/api/Course/list")

    first, second = backend.requests
    assert "Authorization" not in first.headers
    assert second.headers["Authorization"] == "Bearer fresh"


@pytest.mark.asyncio
async def test_multipart_overrides_json_content_type(backend: FakeBackend) -> None:
    async with _client(backend, InMemoryAuthStore()) as http:
        await http.request(
            "POST",
            "/api/Course/create",
            form={"title": "X"},
            files={"thumbnail": ("cover.png", b"\x89PNG", "image/png")},
        )

    content_type = backend.last.headers["Content-Type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    assert b'name="title"' in backend.last.content
    assert b'filename="cover.png"' in backend.last.content


@pytest.mark.asyncio
async def test_non_2xx_raises_status_error(backend: FakeBackend) -> None:
    backend.reply(500, json={"message": "boom"})

    async with _client(backend, InMemoryAuthStore()) as http:
        with pytest.raises(httpx.HTTPStatusError):
            await http.request("GET", "/api/Course/list")


@pytest.mark.asyncio
async def test_401_invalidates_then_rejects(backend: FakeBackend) -> None:
    backend.reply(401, json={"message": "expired"})
    calls: list[str] = []

    async with _client(backend, InMemoryAuthStore("t"), on_unauthorized=lambda: calls.append("401")) as http:
        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            await http.request("GET", "/api/Course/list")

    assert calls == ["401"]
    assert excinfo.value.response.status_code == 401


@pytest.mark.asyncio
async def test_concurrent_401s_redirect_once(backend: FakeBackend) -> None:
    backend.reply(401)
    store = InMemoryAuthStore("t")
    navigator = LoggingNavigator("/courses")
    invalidator = SessionInvalidator(store, navigator, "/login")

    async with _client(backend, store, on_unauthorized=invalidator) as http:
        results = await asyncio.gather(
            *(http.request("GET", "/api/Course/list") for _ in range(5)),
            return_exceptions=True,
        )

    assert all(isinstance(r, httpx.HTTPStatusError) for r in results)
    assert store.current_token() is None
    assert navigator.history == ["/login"]
    assert store.clear_count == 5


@pytest.mark.asyncio
async def test_transport_errors_propagate_raw(backend: FakeBackend) -> None:
    def _timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    backend.responder = _timeout
    async with _client(backend, InMemoryAuthStore()) as http:
        with pytest.raises(httpx.ReadTimeout):
            await http.request("GET", "/api/Course/list")


def test_timeout_and_base_url_come_from_settings() -> None:
    client = build_async_client(make_settings(http_timeout_seconds=30))

    assert client.timeout == httpx.Timeout(30.0)
    assert client.base_url == httpx.URL("http://lms.test/")
    assert client.headers["ngrok-skip-browser-warning"] == "1"


@pytest.mark.asyncio
async def test_serialization_failure_never_sends(backend: FakeBackend) -> None:
    async with _client(backend, InMemoryAuthStore()) as http:
        with pytest.raises(TypeError):
            await http.request("POST", "/api/Course/create", json={"tags": {1, 2}})

    assert backend.requests == []



def _trickle(body: bytes, interval: float):
    async def _chunks():
        for byte in body:
            await asyncio.sleep(interval)
            yield bytes([byte])

    return _chunks()


@pytest.mark.asyncio
async def test_wall_clock_limit_covers_a_trickling_body(backend: FakeBackend) -> None:
    body = b'{"id": 1, "title": "x", "instructor": "y"}'
    backend.responder = lambda request: httpx.Response(200, content=_trickle(body, 0.05))
    loop = asyncio.get_running_loop()

    async with _client(backend, InMemoryAuthStore(), http_timeout_seconds=0.3) as http:
        started = loop.time()
        with pytest.raises(httpx.TimeoutException):
            await http.request("GET", "/api/Course/1")
        elapsed = loop.time() - started

    assert elapsed < 1.0


@pytest.mark.asyncio
async def test_wall_clock_limit_fails_the_upload(backend: FakeBackend) -> None:
    backend.responder = lambda request: httpx.Response(200, content=_trickle(b'{"id": 4}', 0.1))
    seen: list[int] = []
    progress = UploadProgressReporter(lambda event: seen.append(event.percentage))

    async with _client(backend, InMemoryAuthStore(), http_timeout_seconds=0.2) as http:
        with pytest.raises(httpx.TimeoutException):
            await http.request(
                "POST",
                "/api/Course/1/upload-video",
                files={"file": ("clip.mp4", b"v" * 4096, "video/mp4")},
                progress=progress,
            )

    assert progress.finished
    assert 100 not in seen


@pytest.mark.asyncio
async def test_failing_401_hook_keeps_the_status_error(backend: FakeBackend) -> None:
    backend.reply(401, json={"message": "expired"})
    seen: list[int] = []
    progress = UploadProgressReporter(lambda event: seen.append(event.percentage))

    def _broken_hook() -> None:
        raise RuntimeError("navigator unavailable")

    async with _client(backend, InMemoryAuthStore("t"), on_unauthorized=_broken_hook) as http:
        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            await http.request(
                "POST",
                "/api/Course/1/upload-video",
                files={"file": ("clip.mp4", b"v" * 4096, "video/mp4")},
                progress=progress,
            )

    assert excinfo.value.response.status_code == 401
    assert progress.finished
    assert 100 not in seen


def test_auth_store_token_lifecycle() -> None:
    store = InMemoryAuthStore("t")

    store.set_token("fresh")
    assert store.current_token() == "fresh"

    store.clear_session()
    store.clear_session()
    assert store.current_token() is None
    assert store.clear_count == 2
