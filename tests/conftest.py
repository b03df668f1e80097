"""Shared pytest fixtures for the LMS façade test suite.

Guidelines
----------
* No network access in any test: HTTP goes through ``httpx.MockTransport``.
* Offline latency is never slept for real: a recording ``sleep`` is injected.
* Settings never read the developer's ``.env`` files.
"""

from __future__ import annotations

import os
import random
from typing import Any, Callable

import httpx
import pytest

from adapters.session import InMemoryAuthStore, LoggingNavigator
from core.config import AppSettings, get_settings
from core.services import build_lms_api

BASE_URL = "http://lms.test"

Responder = Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {"api_base_url": BASE_URL}
    values.update(overrides)
    return get_settings(_env_file=None, **values)


class RecordingSleep:
    """Async stand-in for ``asyncio.sleep`` that only records durations."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeBackend:
    """Mock HTTP backend: records every request, answers via ``responder``."""

    def __init__(self, responder: Responder | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Responder = responder or (lambda request: httpx.Response(200, json={}))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def reply(self, status_code: int = 200, **kwargs: Any) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def _clean_lms_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("LMS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def auth_store() -> InMemoryAuthStore:
    return InMemoryAuthStore("token-1")


@pytest.fixture
def navigator() -> LoggingNavigator:
    return LoggingNavigator("/courses")


@pytest.fixture
async def online_api(backend: FakeBackend, auth_store: InMemoryAuthStore, navigator: LoggingNavigator):
    api = build_lms_api(
        make_settings(offline_mode=False),
        auth_store=auth_store,
        navigator=navigator,
        transport=backend.transport,
    )
    yield api
    await api.aclose()


@pytest.fixture
def offline_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
async def offline_api(
    offline_sleep: RecordingSleep,
    auth_store: InMemoryAuthStore,
    navigator: LoggingNavigator,
):
    api = build_lms_api(
        make_settings(offline_mode=True),
        auth_store=auth_store,
        navigator=navigator,
        sleep=offline_sleep,
        rng=random.Random(7),
    )
    yield api
    await api.aclose()
