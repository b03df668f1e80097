"""Groups: CRUD plus the per-group course toggles."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from core.domain.models import Group, GroupCourse, GroupCourseToggle
from core.domain.pagination import ListParams, PaginatedResult
from core.domain.resources import GROUP
from core.interfaces.data_source import ApiCall, RequestBody
from core.services.base import ResourceApi


class GroupApi(ResourceApi[Group]):
    spec = GROUP

    async def get_group_courses(
        self,
        group_id: int,
        params: ListParams | Mapping[str, Any] | None = None,
    ) -> PaginatedResult[GroupCourse]:
        context = "Get group courses"
        self._id(group_id, context, "group ID")
        parsed = self._list_params(context, params)
        raw = await self._execute(
            context,
            ApiCall(GROUP.action("courses"), path_args={"group_id": group_id}, params=parsed.to_query()),
        )
        return self._page(raw, GroupCourse, parsed, context)

    async def bulk_update_courses(
        self,
        group_id: int,
        courses: Iterable[GroupCourseToggle | Mapping[str, Any]],
    ) -> Any:
        """Enable/disable several courses for a group in one request.

        Every course id is checked before anything is sent; the server's
        acknowledgement is returned as-is.
        """

        context = "Update group courses"
        self._id(group_id, context, "group ID")
        toggles = [self._draft(context, GroupCourseToggle, item) for item in courses]
        body = RequestBody(fields={"groupId": group_id, "courses": [t.to_wire() for t in toggles]})
        return await self._execute(context, ApiCall(GROUP.action("bulk_update_courses"), body=body))
