"""Fuente de datos offline (simulador de fixtures).

Por qué existe:
- Demos y desarrollo sin backend: misma fachada, mismos tipos de retorno.
- Devuelve payloads con la forma del cable (envelopes camelCase, objetos,
  `None` para "no existe"), así la decodificación y los errores son los
  mismos que en modo online.

Cada llamada espera un retardo uniforme en `[offline_min_delay_ms,
offline_max_delay_ms]` antes de responder. `sleep` y `rng` son inyectables
para que los tests no duerman de verdad.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import random
from typing import Any, Awaitable, Callable

from adapters.offline.store import FixtureStore, utc_now
from core.config import AppSettings
from core.domain.resources import ALL_RESOURCES, ResourceSpec
from core.interfaces.data_source import ApiCall, RequestBody

log = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]
Handler = Callable[[ApiCall], Awaitable[Any]]

# Campo URL que recibe el nombre de un archivo subido offline.
_FILE_URL_FIELDS: dict[tuple[str, str], str] = {
    ("course", "thumbnail"): "thumbnailUrl",
    ("course_video", "file"): "videoUrl",
}

_UPLOAD_STEPS = (25, 50, 75, 100)


def _offline_url(kind: str, filename: str) -> str:
    return f"offline://{kind}/{filename}"


class FixtureDataSource:
    """`DataSource` servido desde un `FixtureStore` en memoria."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        store: FixtureStore | None = None,
        sleep: Sleep | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        self.store = store or FixtureStore()
        self._sleep: Sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()
        self._specs: dict[str, ResourceSpec] = {spec.name: spec for spec in ALL_RESOURCES}
        self._handlers: dict[str, Handler] = {
            "course.by_category": self._courses_by_category,
            "course.upload_video": self._upload_video,
            "course.videos": self._videos_of_course,
            "course.upload_document": self._upload_document,
            "course.documents": self._documents_of_course,
            "course.delete_document": self._delete_document,
            "course.enrollments": self._enrollments_of_course,
            "course_video.list_by_course": self._videos_of_course,
            "group.courses": self._group_courses,
            "group.bulk_update_courses": self._bulk_update_group_courses,
            "user_course.subscribe": self._subscribe,
            "user_course.unsubscribe": self._unsubscribe,
            "user_course.my_courses": self._my_courses,
            "user_course.subscribed_list": self._subscribed_list,
            "user_course.check": self._check_subscription,
        }

    async def execute(self, call: ApiCall) -> Any:
        await self._delay()

        handler = self._handlers.get(call.action)
        if handler is not None:
            return await handler(call)

        spec = self._specs.get(call.resource)
        crud: dict[str, Handler] = {
            "list": self._list,
            "get": self._get,
            "create": self._create,
            "update": self._update,
            "delete": self._delete,
        }
        if spec is None or call.verb not in crud:
            raise LookupError(f"No offline handler for action '{call.action}'")
        return await crud[call.verb](call)

    async def aclose(self) -> None:
        return None

    async def _delay(self) -> None:
        low = self._settings.offline_min_delay_ms
        high = self._settings.offline_max_delay_ms
        await self._sleep(self._rng.uniform(low, high) / 1000)

    # ------------------------------------------------------------------
    # CRUD genérico
    # ------------------------------------------------------------------

    async def _list(self, call: ApiCall) -> dict[str, Any]:
        spec = self._specs[call.resource]
        return self.store.query(
            spec.name,
            call.params,
            search_fields=spec.search_fields,
            sort_options=spec.sort_options,
        )

    async def _get(self, call: ApiCall) -> dict[str, Any] | None:
        record = self.store.find(call.resource, call.path_args["id"])
        return copy.deepcopy(record) if record is not None else None

    async def _create(self, call: ApiCall) -> dict[str, Any]:
        body = call.body or RequestBody()
        await self._simulate_upload(body)
        now = utc_now()
        record: dict[str, Any] = {
            **body.fields,
            **self._file_urls(call.resource, body),
            "id": self.store.unused_id(call.resource, self._rng),
            "createdAt": now,
            "updatedAt": now,
        }
        self.store.insert(call.resource, record)
        log.info("offline create %s id=%s", call.resource, record["id"])
        return copy.deepcopy(record)

    async def _update(self, call: ApiCall) -> dict[str, Any]:
        body = call.body or RequestBody()
        await self._simulate_upload(body)
        record_id = call.path_args["id"]
        changes: dict[str, Any] = {
            **body.fields,
            **self._file_urls(call.resource, body),
            "id": record_id,
            "updatedAt": utc_now(),
        }
        merged = self.store.merge(call.resource, record_id, changes)
        return copy.deepcopy(merged if merged is not None else changes)

    async def _delete(self, call: ApiCall) -> None:
        log.info("offline delete %s id=%s (no-op)", call.resource, call.path_args.get("id"))
        return None

    def _file_urls(self, resource: str, body: RequestBody) -> dict[str, str]:
        urls: dict[str, str] = {}
        for key, upload in body.files.items():
            target = _FILE_URL_FIELDS.get((resource, key), f"{key}Url")
            if not body.fields.get(target):
                urls[target] = _offline_url(resource, upload.filename)
        return urls

    async def _simulate_upload(self, body: RequestBody) -> None:
        progress = body.progress
        if progress is None or not body.is_multipart:
            return
        total = body.total_bytes
        progress.begin(total)
        if total is not None:
            for step in _UPLOAD_STEPS:
                progress.tick(total * step // 100)
        progress.complete()

    # ------------------------------------------------------------------
    # Cursos: relaciones
    # ------------------------------------------------------------------

    async def _courses_by_category(self, call: ApiCall) -> list[dict[str, Any]]:
        rows = self.store.where("course", categoryId=call.path_args["category_id"])
        return copy.deepcopy(rows)

    async def _videos_of_course(self, call: ApiCall) -> list[dict[str, Any]]:
        rows = self.store.where("course_video", courseId=call.path_args["course_id"])
        rows.sort(key=lambda r: r.get("orderIndex") or 0)
        return copy.deepcopy(rows)

    async def _upload_video(self, call: ApiCall) -> dict[str, Any]:
        body = call.body or RequestBody()
        await self._simulate_upload(body)
        upload = next(iter(body.files.values()), None)
        filename = upload.filename if upload is not None else "video"
        return {
            "id": self._rng.randint(1000, 9999),
            "url": _offline_url("videos", filename),
            "filename": filename,
        }

    async def _upload_document(self, call: ApiCall) -> dict[str, Any]:
        body = call.body or RequestBody()
        await self._simulate_upload(body)
        upload = next(iter(body.files.values()), None)
        filename = upload.filename if upload is not None else "document"
        record = {
            "id": self.store.unused_id("course_document", self._rng),
            "courseId": call.path_args["course_id"],
            "fileName": filename,
            "fileUrl": _offline_url("documents", filename),
            "fileSize": body.total_bytes or 0,
            "uploadedAt": utc_now(),
            "uploadedBy": "Offline User",
        }
        self.store.insert("course_document", record)
        return copy.deepcopy(record)

    async def _documents_of_course(self, call: ApiCall) -> list[dict[str, Any]]:
        return copy.deepcopy(self.store.where("course_document", courseId=call.path_args["course_id"]))

    async def _delete_document(self, call: ApiCall) -> None:
        log.info("offline delete document id=%s (no-op)", call.path_args.get("document_id"))
        return None

    async def _enrollments_of_course(self, call: ApiCall) -> list[dict[str, Any]]:
        return copy.deepcopy(self.store.where("course_enrollment", courseId=call.path_args["course_id"]))

    # ------------------------------------------------------------------
    # Grupos
    # ------------------------------------------------------------------

    async def _group_courses(self, call: ApiCall) -> dict[str, Any]:
        rows = self.store.where("group_course", groupId=call.path_args["group_id"])
        params = call.params or {}
        return self.store.query(
            "group_course",
            params,
            search_fields=("courseName",),
            records=rows,
        )

    async def _bulk_update_group_courses(self, call: ApiCall) -> dict[str, Any]:
        fields = (call.body or RequestBody()).fields
        group_id = fields.get("groupId")
        for item in fields.get("courses") or []:
            course_id = item.get("courseId")
            existing = self.store.where("group_course", groupId=group_id, courseId=course_id)
            if existing:
                existing[0]["isEnable"] = bool(item.get("isEnable"))
                continue
            course = self.store.find("course", course_id)
            self.store.insert(
                "group_course",
                {
                    "groupId": group_id,
                    "courseId": course_id,
                    "isEnable": bool(item.get("isEnable")),
                    "courseName": course.get("title") if course else None,
                },
            )
        return {"success": True, "message": "Courses updated successfully"}

    # ------------------------------------------------------------------
    # Inscripciones (UserCourse)
    # ------------------------------------------------------------------

    async def _subscribe(self, call: ApiCall) -> dict[str, Any]:
        fields = dict((call.body or RequestBody()).fields)
        course_id = fields.get("courseId")
        user_id = fields.get("userId")
        if self.store.where("enrolled_course", courseId=course_id, userId=user_id):
            return {"message": "Already subscribed", **fields}

        course = self.store.find("course", course_id) or {"id": course_id, "title": "New Course"}
        self.store.insert(
            "enrolled_course",
            {
                "id": self.store.unused_id("enrolled_course", self._rng),
                "userId": user_id,
                "courseId": course_id,
                "enrolledAt": utc_now(),
                "progress": 0,
                "status": "Active",
                "course": {
                    key: course.get(key)
                    for key in (
                        "id",
                        "title",
                        "description",
                        "instructor",
                        "difficulty",
                        "durationHours",
                        "price",
                        "rating",
                        "thumbnailUrl",
                    )
                    if course.get(key) is not None
                },
            },
        )
        return {"message": "Subscribed successfully", **fields}

    async def _unsubscribe(self, call: ApiCall) -> dict[str, Any]:
        fields = dict((call.body or RequestBody()).fields)
        self.store.remove_where(
            "enrolled_course",
            courseId=fields.get("courseId"),
            userId=fields.get("userId"),
        )
        return {"message": "Unsubscribed successfully", **fields}

    async def _my_courses(self, call: ApiCall) -> dict[str, Any]:
        params = call.params or {}
        rows = self.store.collection("enrolled_course")
        return self.store.query(
            "enrolled_course",
            {k: v for k, v in params.items() if k in ("Status", "PageNumber", "PageSize")},
            records=rows,
        )

    async def _subscribed_list(self, call: ApiCall) -> list[dict[str, Any]]:
        return copy.deepcopy(self.store.collection("enrolled_course"))

    async def _check_subscription(self, call: ApiCall) -> dict[str, Any]:
        matches = self.store.where("enrolled_course", courseId=call.path_args["course_id"])
        if not matches:
            return {"isSubscribed": False}
        first = matches[0]
        return {
            "isSubscribed": True,
            "enrollmentId": first.get("id"),
            "enrolledAt": first.get("enrolledAt"),
            "progress": first.get("progress"),
        }


