"""Enrollment (UserCourse): subscriptions of users to courses."""

from __future__ import annotations

from typing import Any, Mapping

from core.domain.models import EnrolledCourse, SubscriptionStatus
from core.domain.pagination import ListParams, PaginatedResult
from core.interfaces.data_source import ApiCall, RequestBody
from core.services.base import ApiModule


class UserCourseApi(ApiModule):
    async def subscribe(self, course_id: int, user_id: int) -> Any:
        context = "Subscribe to course"
        return await self._membership(context, "user_course.subscribe", course_id, user_id)

    async def unsubscribe(self, course_id: int, user_id: int) -> Any:
        context = "Unsubscribe from course"
        return await self._membership(context, "user_course.unsubscribe", course_id, user_id)

    async def _membership(self, context: str, action: str, course_id: int, user_id: int) -> Any:
        self._id(course_id, context, "course ID")
        self._id(user_id, context, "user ID")
        body = RequestBody(fields={"courseId": course_id, "userId": user_id})
        return await self._execute(context, ApiCall(action, body=body))

    async def get_my_courses(
        self,
        params: ListParams | Mapping[str, Any] | None = None,
    ) -> PaginatedResult[EnrolledCourse]:
        """Courses of the current user; `status` filters (`"all"` disables it)."""

        context = "Get my courses"
        parsed = self._list_params(context, params)
        raw = await self._execute(context, ApiCall("user_course.my_courses", params=parsed.to_query()))
        return self._page(raw, EnrolledCourse, parsed, context)

    async def get_subscribed_list(self) -> list[EnrolledCourse]:
        context = "Get subscribed courses"
        raw = await self._execute(context, ApiCall("user_course.subscribed_list"))
        return self._items(raw, EnrolledCourse, context)

    async def check_subscription(self, course_id: int) -> SubscriptionStatus:
        context = "Check subscription status"
        self._id(course_id, context, "course ID")
        raw = await self._execute(context, ApiCall("user_course.check", path_args={"course_id": course_id}))
        return self._entity(raw, SubscriptionStatus, context, "subscription")
