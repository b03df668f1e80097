"""Course videos: CRUD, plus listing the videos of one course.

A video is created either from an external URL (JSON) or from an attached
file (multipart, with upload progress).
"""

from __future__ import annotations

from core.domain.models import CourseVideo, DraftModel
from core.domain.resources import COURSE_VIDEO
from core.interfaces.data_source import ApiCall
from core.services.base import ResourceApi


class CourseVideoApi(ResourceApi[CourseVideo]):
    spec = COURSE_VIDEO

    async def list_by_course(self, course_id: int) -> list[CourseVideo]:
        context = "List videos by course"
        self._id(course_id, context, "course ID")
        raw = await self._execute(
            context,
            ApiCall(COURSE_VIDEO.action("list_by_course"), path_args={"course_id": course_id}),
        )
        videos = self._items(raw, CourseVideo, context)
        return sorted(videos, key=lambda v: v.order_index if v.order_index is not None else 0)

    def _create_path_args(self, draft: DraftModel) -> dict[str, int]:
        return {"course_id": draft.course_id}  # type: ignore[attr-defined]
