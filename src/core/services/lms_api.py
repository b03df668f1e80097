"""Composition root of the data-access façade.

The data source is chosen exactly once, here: with ``offline_mode`` every
module is served by the fixture simulator, otherwise by the HTTP backend.
Modules never ask which mode they are in.
"""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx

from adapters.http_client import HttpClient
from adapters.offline import FixtureDataSource
from adapters.remote_source import RemoteDataSource
from adapters.session import SessionInvalidator
from core.config import AppSettings, get_settings
from core.interfaces.data_source import DataSource
from core.interfaces.session import AuthStore, Navigator
from core.services.categories import CategoryApi
from core.services.course_videos import CourseVideoApi
from core.services.courses import CourseApi
from core.services.enrollments import UserCourseApi
from core.services.groups import GroupApi
from core.services.roles import RoleApi

log = logging.getLogger(__name__)


class LmsApi:
    """Every resource module over one shared data source."""

    def __init__(self, source: DataSource, settings: AppSettings) -> None:
        self.source = source
        self.settings = settings
        self.courses = CourseApi(source, settings)
        self.course_videos = CourseVideoApi(source, settings)
        self.roles = RoleApi(source, settings)
        self.groups = GroupApi(source, settings)
        self.categories = CategoryApi(source, settings)
        self.user_courses = UserCourseApi(source, settings)

    @property
    def offline(self) -> bool:
        return isinstance(self.source, FixtureDataSource)

    async def __aenter__(self) -> "LmsApi":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.source.aclose()


def build_lms_api(
    settings: AppSettings | None = None,
    *,
    auth_store: AuthStore,
    navigator: Navigator,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Any = None,
    rng: random.Random | None = None,
) -> LmsApi:
    """Wire settings, session collaborators and the selected data source."""

    settings = settings or get_settings()
    source: DataSource
    if settings.offline_mode:
        log.info("offline mode: serving fixtures")
        source = FixtureDataSource(settings, sleep=sleep, rng=rng)
    else:
        http = HttpClient(
            settings,
            token_provider=auth_store.current_token,
            on_unauthorized=SessionInvalidator(auth_store, navigator, settings.login_path),
            transport=transport,
        )
        source = RemoteDataSource(http)
    return LmsApi(source, settings)
