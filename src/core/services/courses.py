"""Courses: CRUD plus the course-scoped relations (videos, documents,
enrollments, categories)."""

from __future__ import annotations

from typing import Any

from adapters.uploads import UploadProgressReporter
from core.domain.models import (
    Category,
    Course,
    CourseDocument,
    CourseEnrollment,
    CourseVideo,
    UploadedMedia,
)
from core.domain.resources import CATEGORY, COURSE
from core.domain.uploads import ProgressCallback, UploadFile
from core.interfaces.data_source import ApiCall, RequestBody
from core.services.base import ResourceApi


class CourseApi(ResourceApi[Course]):
    """Course catalogue.

    `update` accepts a new `thumbnail` file (multipart); every other write is
    JSON unless a file is attached.
    """

    spec = COURSE

    async def get_by_category(self, category_id: int) -> list[Course]:
        context = "Get courses by category"
        self._id(category_id, context, "category ID")
        raw = await self._execute(
            context,
            ApiCall("course.by_category", path_args={"category_id": category_id}),
        )
        return self._items(raw, Course, context)

    async def get_categories(self) -> list[Category]:
        context = "List categories"
        raw = await self._execute(context, ApiCall(CATEGORY.action("list"), params={"PageNumber": 1, "PageSize": 100}))
        return self._items(raw, Category, context)

    async def upload_video(
        self,
        course_id: int,
        file: UploadFile,
        on_progress: ProgressCallback | None = None,
    ) -> UploadedMedia | Any:
        context = "Upload video"
        self._id(course_id, context, "course ID")
        upload = self._check_upload(context, file)
        raw = await self._execute(
            context,
            ApiCall(
                "course.upload_video",
                path_args={"course_id": course_id},
                body=RequestBody(files={"file": upload}, progress=UploadProgressReporter(on_progress)),
            ),
        )
        return self._written(raw, UploadedMedia)

    async def get_videos(self, course_id: int) -> list[CourseVideo]:
        context = "Get videos for course"
        self._id(course_id, context, "course ID")
        raw = await self._execute(context, ApiCall("course.videos", path_args={"course_id": course_id}))
        return self._items(raw, CourseVideo, context)

    async def upload_document(
        self,
        course_id: int,
        file: UploadFile,
        on_progress: ProgressCallback | None = None,
    ) -> CourseDocument | Any:
        context = "Upload document"
        self._id(course_id, context, "course ID")
        upload = self._check_upload(context, file)
        raw = await self._execute(
            context,
            ApiCall(
                "course.upload_document",
                path_args={"course_id": course_id},
                body=RequestBody(files={"file": upload}, progress=UploadProgressReporter(on_progress)),
            ),
        )
        return self._written(raw, CourseDocument)

    async def get_documents(self, course_id: int) -> list[CourseDocument]:
        context = "Get documents for course"
        self._id(course_id, context, "course ID")
        raw = await self._execute(context, ApiCall("course.documents", path_args={"course_id": course_id}))
        return self._items(raw, CourseDocument, context)

    async def delete_document(self, document_id: int) -> Any:
        context = "Delete document"
        self._id(document_id, context, "document ID")
        return await self._execute(
            context,
            ApiCall("course.delete_document", path_args={"document_id": document_id}),
        )

    async def get_enrollments(self, course_id: int) -> list[CourseEnrollment]:
        context = "Get enrollments for course"
        self._id(course_id, context, "course ID")
        raw = await self._execute(context, ApiCall("course.enrollments", path_args={"course_id": course_id}))
        return self._items(raw, CourseEnrollment, context)
