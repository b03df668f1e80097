"""Rutas del backend LMS por acción.

Centraliza todas las URLs: los módulos de API solo conocen acciones
(`"course.list"`), nunca paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class Endpoint:
    method: str
    path: str

    def format(self, path_args: Mapping[str, int]) -> str:
        return self.path.format(**path_args)


ENDPOINTS: dict[str, Endpoint] = {
    # Course
    "course.list": Endpoint("GET", "/api/Course/list"),
    "course.get": Endpoint("GET", "/api/Course/{id}"),
    "course.create": Endpoint("POST", "/api/Course/create"),
    "course.update": Endpoint("PUT", "/api/Course/update/{id}"),
    "course.delete": Endpoint("DELETE", "/api/Course/delete/{id}"),
    "course.by_category": Endpoint("GET", "/api/Course/category/{category_id}"),
    "course.upload_video": Endpoint("POST", "/api/Course/{course_id}/upload-video"),
    "course.videos": Endpoint("GET", "/api/Course/{course_id}/videos"),
    "course.upload_document": Endpoint("POST", "/api/Course/{course_id}/upload-doc"),
    "course.documents": Endpoint("GET", "/api/Course/{course_id}/documents"),
    "course.delete_document": Endpoint("DELETE", "/api/Course/document/{document_id}"),
    "course.enrollments": Endpoint("GET", "/api/Course/{course_id}/enrollments"),
    # Course video
    "course_video.list": Endpoint("GET", "/api/CourseVideo/list"),
    "course_video.list_by_course": Endpoint("GET", "/api/CourseVideo/list/{course_id}"),
    "course_video.get": Endpoint("GET", "/api/CourseVideo/{id}"),
    "course_video.create": Endpoint("POST", "/api/Course/{course_id}/upload-video"),
    "course_video.update": Endpoint("PUT", "/api/CourseVideo/update/{id}"),
    "course_video.delete": Endpoint("DELETE", "/api/CourseVideo/delete/{id}"),
    # Category
    "category.list": Endpoint("GET", "/api/Category/list"),
    "category.get": Endpoint("GET", "/api/Category/{id}"),
    "category.create": Endpoint("POST", "/api/Category/create"),
    "category.update": Endpoint("PUT", "/api/Category/update/{id}"),
    "category.delete": Endpoint("DELETE", "/api/Category/delete/{id}"),
    # Role
    "role.list": Endpoint("GET", "/api/Roles/list"),
    "role.get": Endpoint("GET", "/api/user-permissions/roles/{id}"),
    "role.create": Endpoint("POST", "/api/Roles/create"),
    "role.update": Endpoint("PUT", "/api/Roles/update/{id}"),
    "role.delete": Endpoint("DELETE", "/api/Roles/delete/{id}"),
    # Group
    "group.list": Endpoint("GET", "/api/Groups/list"),
    "group.get": Endpoint("GET", "/api/Groups/{id}"),
    "group.create": Endpoint("POST", "/api/Groups/create"),
    "group.update": Endpoint("PUT", "/api/Groups/update/{id}"),
    "group.delete": Endpoint("DELETE", "/api/Groups/Delete/{id}"),
    "group.courses": Endpoint("GET", "/api/Groups/group-courses/{group_id}"),
    "group.bulk_update_courses": Endpoint("PUT", "/api/Groups/bulk-update-courses"),
    # Enrollment (UserCourse)
    "user_course.subscribe": Endpoint("POST", "/api/UserCourse/subscribe"),
    "user_course.unsubscribe": Endpoint("POST", "/api/UserCourse/unsubscribe"),
    "user_course.my_courses": Endpoint("GET", "/api/UserCourse/my-courses"),
    "user_course.subscribed_list": Endpoint("GET", "/api/UserCourse/Subscribed-List"),
    "user_course.check": Endpoint("GET", "/api/UserCourse/check/{course_id}"),
}


def endpoint_for(action: str) -> Endpoint:
    try:
        return ENDPOINTS[action]
    except KeyError:
        raise LookupError(f"No endpoint registered for action '{action}'") from None
