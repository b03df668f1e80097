"""Course module over the HTTP backend (MockTransport).

Coverage:
* Query string casing and page-size clamping on ``list``.
* The three collection shapes normalize into one ``PaginatedResult``.
* Invalid ids and incomplete drafts fail with Validation before any request.
* JSON vs multipart is chosen by the presence of a file.
* Transport and status failures surface as ``"<Operation>: <reason>"``.
* ``create`` followed by ``get_by_id`` returns the submitted fields.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from core.domain.models import Course, CourseDraft, UploadedMedia
from core.domain.uploads import UploadFile, UploadProgressEvent
from core.errors import ApiError, ErrorKind
from core.services import build_lms_api
from adapters.session import InMemoryAuthStore, LoggingNavigator
from conftest import FakeBackend, make_settings

INVALID_IDS = [0, -1, "5", 1.5, True, None]


def _course_rows(n: int) -> list[dict]:
    return [{"id": i + 1, "title": f"Course {i + 1}", "instructor": "Jane"} for i in range(n)]


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_sends_backend_casing(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"items": [], "totalCount": 0, "pageNumber": 1, "pageSize": 10, "totalPages": 0})

    await online_api.courses.list({"search_term": "react", "sort_by": "rating", "category_id": 2})

    sent = backend.last
    assert sent.method == "GET"
    assert sent.url.path == "/api/Course/list"
    assert dict(sent.url.params) == {
        "PageNumber": "1",
        "PageSize": "10",
        "SearchTerm": "react",
        "SortBy": "rating",
        "CategoryId": "2",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("requested, sent_size", [(500, "100"), (0, "1"), (-3, "1"), (25, "25")])
async def test_list_clamps_page_size(online_api, backend: FakeBackend, requested: int, sent_size: str) -> None:
    backend.reply(200, json=[])

    page = await online_api.courses.list({"page_size": requested, "page_number": -4})

    assert backend.last.url.params["PageSize"] == sent_size
    assert backend.last.url.params["PageNumber"] == "1"
    assert page.page_size == int(sent_size)


@pytest.mark.asyncio
async def test_list_wraps_bare_array(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json=_course_rows(25))

    page = await online_api.courses.list({"page_number": 3, "page_size": 10})

    assert [c.id for c in page.items] == [21, 22, 23, 24, 25]
    assert page.total_count == 25
    assert page.total_pages == 3
    assert all(isinstance(c, Course) for c in page.items)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"", b"null", b'"nope"', b"{}"])
async def test_list_empty_or_garbage_gives_empty_page(online_api, backend: FakeBackend, body: bytes) -> None:
    backend.reply(200, content=body)

    page = await online_api.courses.list({"page_size": 20})

    assert page.items == []
    assert page.total_count == 0
    assert page.page_number == 1
    assert page.page_size == 20
    assert page.total_pages == 0


@pytest.mark.asyncio
async def test_list_rejects_unknown_params(online_api, backend: FakeBackend) -> None:
    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.list({"pageNumbr": 2})

    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert excinfo.value.context == "List courses"
    assert backend.requests == []


# ---------------------------------------------------------------------------
# get / update / delete: id validation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", INVALID_IDS)
async def test_invalid_ids_never_reach_the_network(online_api, backend: FakeBackend, bad_id: object) -> None:
    draft = {"title": "X", "instructor": "Y"}
    operations = [
        ("Get course by ID", online_api.courses.get_by_id(bad_id)),
        ("Update course", online_api.courses.update(bad_id, draft)),
        ("Delete course", online_api.courses.delete(bad_id)),
    ]

    for context, operation in operations:
        with pytest.raises(ApiError) as excinfo:
            await operation
        assert excinfo.value.kind is ErrorKind.VALIDATION
        assert excinfo.value.message == f"{context}: Valid ID is required"

    assert backend.requests == []


@pytest.mark.asyncio
async def test_get_by_id_decodes_course(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"id": 3, "title": "Python", "instructor": "Jane", "isActive": True})

    course = await online_api.courses.get_by_id(3)

    assert backend.last.url.path == "/api/Course/3"
    assert course.title == "Python"
    assert course.is_active is True


@pytest.mark.asyncio
@pytest.mark.parametrize("status, body", [(200, b""), (200, b"null"), (200, b"{}")])
async def test_get_by_id_empty_body_is_not_found(online_api, backend: FakeBackend, status: int, body: bytes) -> None:
    backend.reply(status, content=body)

    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.get_by_id(9)

    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert excinfo.value.message == "Get course by ID: Course not found"


@pytest.mark.asyncio
async def test_get_by_id_404_is_not_found(online_api, backend: FakeBackend) -> None:
    backend.reply(404, json={"message": "Course 9 does not exist"})

    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.get_by_id(9)

    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert excinfo.value.message == "Get course by ID: Course 9 does not exist"


# ---------------------------------------------------------------------------
# create / update
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_missing_instructor_fails_before_io(online_api, backend: FakeBackend) -> None:
    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.create({"title": "X"})

    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert excinfo.value.message == "Create course: instructor is required"
    assert backend.requests == []


@pytest.mark.asyncio
async def test_create_blank_title_fails_before_io(online_api, backend: FakeBackend) -> None:
    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.create({"title": "   ", "instructor": "Y"})

    assert excinfo.value.message == "Create course: title is required"
    assert backend.requests == []


@pytest.mark.asyncio
async def test_create_without_file_sends_json(online_api, backend: FakeBackend) -> None:
    backend.reply(201, json={"id": 77, "title": "X", "instructor": "Y"})

    created = await online_api.courses.create(CourseDraft(title="X", instructor="Y", price=10, category_id=2))

    sent = backend.last
    assert sent.method == "POST"
    assert sent.url.path == "/api/Course/create"
    assert sent.headers["Content-Type"] == "application/json"
    assert json.loads(sent.content) == {
        "title": "X",
        "instructor": "Y",
        "price": 10.0,
        "categoryId": 2,
        "isActive": True,
    }
    assert isinstance(created, Course) and created.id == 77


@pytest.mark.asyncio
async def test_create_with_thumbnail_sends_multipart(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"id": 78, "title": "X"})

    await online_api.courses.create(
        {"title": "X", "instructor": "Y", "is_active": False, "thumbnail": UploadFile("cover.png", b"png")}
    )

    sent = backend.last
    assert sent.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="title"' in sent.content
    assert b'name="isActive"\r\n\r\nfalse' in sent.content
    assert b'filename="cover.png"' in sent.content
    assert b"application/json" not in sent.content


@pytest.mark.asyncio
async def test_create_returns_ack_when_not_a_resource(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"message": "Course created"})

    assert await online_api.courses.create({"title": "X", "instructor": "Y"}) == {"message": "Course created"}


@pytest.mark.asyncio
async def test_update_puts_to_resource_path(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"id": 5, "title": "New", "instructor": "Y"})

    updated = await online_api.courses.update(5, {"title": "New", "instructor": "Y"})

    assert backend.last.method == "PUT"
    assert backend.last.url.path == "/api/Course/update/5"
    assert updated.title == "New"


@pytest.mark.asyncio
async def test_create_then_get_round_trip(online_api, backend: FakeBackend) -> None:
    stored: dict[int, dict] = {}

    def _server(request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/api/Course/create":
            record = {"id": 42, **json.loads(request.content)}
            stored[42] = record
            return httpx.Response(201, json=record)
        if request.method == "GET" and request.url.path == "/api/Course/42":
            return httpx.Response(200, json=stored[42])
        return httpx.Response(404)

    backend.responder = _server
    payload = {
        "title": "Rust for Pythonistas",
        "instructor": "Ada",
        "description": "Ownership without tears",
        "difficulty": "Advanced",
        "price": 19.5,
        "category_id": 1,
    }

    created = await online_api.courses.create(payload)
    fetched = await online_api.courses.get_by_id(created.id)

    assert isinstance(fetched, Course)
    assert fetched.id == 42
    for field, value in payload.items():
        assert getattr(fetched, field) == value


@pytest.mark.asyncio
async def test_update_without_file_support_is_rejected(online_api, backend: FakeBackend) -> None:
    with pytest.raises(ApiError) as excinfo:
        await online_api.course_videos.update(
            3,
            {"course_id": 1, "title": "T", "file": UploadFile("a.mp4", b"x")},
        )

    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert backend.requests == []


# ---------------------------------------------------------------------------
# failures
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_server_error_uses_body_message(online_api, backend: FakeBackend) -> None:
    backend.reply(409, json={"message": "Title already taken"})

    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.create({"title": "X", "instructor": "Y"})

    assert excinfo.value.kind is ErrorKind.SERVER
    assert excinfo.value.message == "Create course: Title already taken"
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_timeout_is_network(online_api, backend: FakeBackend) -> None:
    def _timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    backend.responder = _timeout

    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.list()

    assert excinfo.value.kind is ErrorKind.NETWORK
    assert excinfo.value.message == "List courses: No response from server. Please check your connection."


@pytest.mark.asyncio
async def test_wall_clock_timeout_is_network(backend: FakeBackend) -> None:
    async def _slow_body():
        for byte in b'{"id": 1, "title": "x", "instructor": "y"}':
            await asyncio.sleep(0.05)
            yield bytes([byte])

    backend.responder = lambda request: httpx.Response(200, content=_slow_body())
    api = build_lms_api(
        make_settings(http_timeout_seconds=0.3),
        auth_store=InMemoryAuthStore(),
        navigator=LoggingNavigator(),
        transport=backend.transport,
    )

    async with api:
        with pytest.raises(ApiError) as excinfo:
            await api.courses.get_by_id(1)

    assert excinfo.value.kind is ErrorKind.NETWORK
    assert excinfo.value.message == "Get course by ID: No response from server. Please check your connection."


@pytest.mark.asyncio
async def test_401_logs_out_and_rejects(online_api, backend: FakeBackend, auth_store, navigator) -> None:
    backend.reply(401, json={"message": "Token expired"})

    with pytest.raises(ApiError) as excinfo:
        await online_api.courses.get_by_id(1)

    assert excinfo.value.message == "Get course by ID: Token expired"
    assert auth_store.current_token() is None
    assert navigator.history == ["/login"]


# ---------------------------------------------------------------------------
# relations
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_upload_video_reports_progress(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"id": 4, "url": "/videos/intro.mp4", "filename": "intro.mp4"})
    seen: list[int] = []

    media = await online_api.courses.upload_video(
        1,
        UploadFile("intro.mp4", b"v" * 100_000),
        on_progress=lambda event: seen.append(event.percentage),
    )

    assert backend.last.url.path == "/api/Course/1/upload-video"
    assert isinstance(media, UploadedMedia) and media.filename == "intro.mp4"
    assert seen[-1] == 100 and seen == sorted(seen)


@pytest.mark.asyncio
async def test_upload_requires_file_and_size_limit(backend: FakeBackend) -> None:
    api = build_lms_api(
        make_settings(max_upload_bytes=2 * 1024 * 1024),
        auth_store=InMemoryAuthStore(),
        navigator=LoggingNavigator(),
        transport=backend.transport,
    )
    async with api:
        with pytest.raises(ApiError) as missing:
            await api.courses.upload_document(1, None)  # type: ignore[arg-type]
        with pytest.raises(ApiError) as too_big:
            await api.courses.upload_document(1, UploadFile("big.pdf", b"0" * (3 * 1024 * 1024)))

    assert missing.value.message == "Upload document: File is required"
    assert too_big.value.message == "Upload document: File size must be less than 2MB"
    assert backend.requests == []


@pytest.mark.asyncio
async def test_relation_lists_accept_any_shape(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"items": [{"id": 1, "courseId": 1, "fileName": "a.pdf"}], "totalCount": 1})
    documents = await online_api.courses.get_documents(1)

    backend.reply(200, content=b"")
    videos = await online_api.courses.get_videos(1)

    assert [d.file_name for d in documents] == ["a.pdf"]
    assert videos == []
    assert backend.requests[0].url.path == "/api/Course/1/documents"
    assert backend.requests[1].url.path == "/api/Course/1/videos"


@pytest.mark.asyncio
async def test_delete_document_returns_ack(online_api, backend: FakeBackend) -> None:
    backend.reply(200, json={"success": True})

    assert await online_api.courses.delete_document(12) == {"success": True}
    assert backend.last.method == "DELETE"
    assert backend.last.url.path == "/api/Course/document/12"


def test_progress_event_is_frozen() -> None:
    event = UploadProgressEvent(10)

    with pytest.raises(AttributeError):
        event.percentage = 20  # type: ignore[misc]
