"""Modelos del dominio LMS (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field) sin acoplar el
  Core a librerías de I/O.
- El backend habla camelCase; Python habla snake_case. `alias_generator`
  resuelve la traducción en un solo lugar.

Dos familias:
- Recursos (lo que devuelve el servidor): toleran campos extra y solo exigen
  un `id` positivo.
- Drafts (lo que envía la UI): validan campos obligatorios *antes* de
  cualquier request, para no gastar un round trip.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.domain.uploads import UploadFile
from core.errors import is_positive_id


class WireModel(BaseModel):
    """Base de recursos: camelCase en el cable, extras preservados."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class DraftModel(BaseModel):
    """Base de payloads de escritura (create/update)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
    )

    def file_fields(self) -> dict[str, UploadFile]:
        """Archivos presentes en el draft, por nombre de campo en el cable."""

        out: dict[str, UploadFile] = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if isinstance(value, UploadFile):
                out[info.alias or name] = value
        return out

    def to_wire(self) -> dict[str, Any]:
        """Campos no-archivo en camelCase, sin `None`."""

        exclude = {
            name
            for name in type(self).model_fields
            if isinstance(getattr(self, name), UploadFile)
        }
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude, mode="json")


def _positive(value: Any, name: str) -> int | None:
    # Se evalúa antes de la coerción de pydantic: "5" o True no son ids.
    if value is None:
        return None
    if not is_positive_id(value):
        raise ValueError(f"Valid {name} is required")
    return value


# ---------------------------------------------------------------------------
# Catálogo
# ---------------------------------------------------------------------------


class Category(WireModel):
    id: int = Field(..., ge=1)
    category_name: str | None = None


class Course(WireModel):
    """Curso tal como lo publica el backend."""

    id: int = Field(..., ge=1)
    title: str | None = None
    description: str | None = None
    instructor: str | None = None
    difficulty: str | None = None
    duration_hours: float | None = None
    price: float | None = None
    rating: float | None = None
    is_active: bool | None = None
    category_id: int | None = None
    thumbnail_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class CourseVideo(WireModel):
    id: int = Field(..., ge=1)
    course_id: int | None = None
    title: str | None = None
    description: str | None = None
    video_url: str | None = None
    duration: int | None = None
    order_index: int | None = None
    thumbnail_url: str | None = None
    is_preview: bool | None = None
    created_at: str | None = None
    updated_at: str | None = None


class CourseDocument(WireModel):
    id: int = Field(..., ge=1)
    course_id: int | None = None
    file_name: str | None = None
    file_url: str | None = None
    file_size: int | None = None
    uploaded_at: str | None = None
    uploaded_by: str | None = None


class UploadedMedia(WireModel):
    """Respuesta de `upload-video`: el backend solo confirma url/nombre."""

    id: int | None = None
    url: str | None = None
    filename: str | None = None


class EnrolledUserInfo(WireModel):
    id: int
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None


class CourseEnrollment(WireModel):
    """Usuario inscrito en un curso (vista del instructor)."""

    id: int = Field(..., ge=1)
    user_id: int | None = None
    course_id: int | None = None
    enrolled_at: str | None = None
    progress: int | None = None
    status: str | None = None
    user: EnrolledUserInfo | None = None


# ---------------------------------------------------------------------------
# Roles / grupos / inscripciones
# ---------------------------------------------------------------------------


class Permission(WireModel):
    id: int = Field(..., ge=1)
    permission_name: str | None = None


class Role(WireModel):
    id: int = Field(..., ge=1)
    role_name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    permissions: list[Permission] = Field(default_factory=list)


class Group(WireModel):
    id: int = Field(..., ge=1)
    group_name: str | None = None
    tenant_id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None


class GroupCourse(WireModel):
    course_id: int = Field(..., ge=1)
    is_enable: bool = False
    course_name: str | None = None


class EnrolledCourseInfo(WireModel):
    id: int
    title: str | None = None
    description: str | None = None
    instructor: str | None = None
    thumbnail_url: str | None = None
    difficulty: str | None = None
    duration_hours: float | None = None
    price: float | None = None
    rating: float | None = None


class EnrolledCourse(WireModel):
    """Curso del usuario actual (my-courses)."""

    id: int = Field(..., ge=1)
    course_id: int | None = None
    user_id: int | None = None
    enrolled_at: str | None = None
    completed_at: str | None = None
    progress: int = 0
    status: str | None = None
    course: EnrolledCourseInfo | None = None


class SubscriptionStatus(WireModel):
    is_subscribed: bool = False
    enrollment_id: int | None = None
    enrolled_at: str | None = None
    progress: int | None = None


# ---------------------------------------------------------------------------
# Drafts (escritura)
# ---------------------------------------------------------------------------


class CourseDraft(DraftModel):
    """Payload de create/update de curso.

    `title` e `instructor` son obligatorios y no pueden quedar en blanco.
    `thumbnail` (opcional) fuerza multipart.
    """

    title: str = Field(..., min_length=1)
    instructor: str = Field(..., min_length=1)
    description: str | None = None
    difficulty: str | None = None
    duration_hours: float | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    is_active: bool = True
    category_id: int | None = None
    thumbnail_url: str | None = None
    thumbnail: UploadFile | None = None

    @field_validator("category_id", mode="before")
    @classmethod
    def _category(cls, v: int | None) -> int | None:
        return _positive(v, "categoryId")


class CourseVideoDraft(DraftModel):
    """Payload de video: URL externa o archivo (`file`), al menos uno."""

    course_id: int
    title: str = Field(..., min_length=1)
    description: str | None = None
    video_url: str | None = None
    duration: int | None = Field(default=None, ge=0)
    order_index: int = Field(default=1, ge=0)
    thumbnail_url: str | None = None
    is_preview: bool = False
    file: UploadFile | None = None

    @field_validator("course_id", mode="before")
    @classmethod
    def _course(cls, v: int) -> int:
        return _positive(v, "courseId")  # type: ignore[return-value]

    @model_validator(mode="after")
    def _source_present(self) -> "CourseVideoDraft":
        if not self.video_url and self.file is None:
            raise ValueError("Video URL is required")
        return self


class RoleDraft(DraftModel):
    role_name: str = Field(..., min_length=1)
    permission_ids: list[int] = Field(default_factory=list)

    @field_validator("permission_ids", mode="before")
    @classmethod
    def _permissions(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            for pid in v:
                _positive(pid, "permissionId")
        return v


class GroupDraft(DraftModel):
    group_name: str = Field(..., min_length=1)
    tenant_id: int | None = None

    @field_validator("tenant_id", mode="before")
    @classmethod
    def _tenant(cls, v: int | None) -> int | None:
        return _positive(v, "tenantId")


class CategoryDraft(DraftModel):
    category_name: str = Field(..., min_length=1)


class GroupCourseToggle(DraftModel):
    course_id: int
    is_enable: bool

    @field_validator("course_id", mode="before")
    @classmethod
    def _course(cls, v: int) -> int:
        return _positive(v, "courseId")  # type: ignore[return-value]
