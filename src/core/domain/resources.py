"""Descriptores de recursos.

Por qué:
- El contrato list/get/create/update/delete es idéntico para cada recurso;
  lo que cambia (modelo, draft, textos de contexto, campos buscables) vive
  aquí como datos, no como código duplicado.
- Las reglas de búsqueda/orden son compartidas por el modo offline, así
  ambos modos filtran igual.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from core.domain.models import (
    Category,
    CategoryDraft,
    Course,
    CourseDraft,
    CourseVideo,
    CourseVideoDraft,
    Group,
    GroupDraft,
    Role,
    RoleDraft,
)


@dataclass(frozen=True)
class SortOption:
    field: str
    descending: bool = False


# Claves en camelCase: se aplican sobre registros del cable.
COMMON_SORTS: dict[str, SortOption] = {
    "newest": SortOption("createdAt", descending=True),
    "oldest": SortOption("createdAt"),
}

COURSE_SORTS: dict[str, SortOption] = {
    **COMMON_SORTS,
    "title": SortOption("title"),
    "price-low": SortOption("price"),
    "price-high": SortOption("price", descending=True),
    "rating": SortOption("rating", descending=True),
}


@dataclass(frozen=True)
class ResourceSpec:
    """Describe un recurso del backend.

    `name` es la clave de acción (`"<name>.<verbo>"`) compartida por las
    fuentes remota y offline.
    """

    name: str
    singular: str
    plural: str
    model: type[BaseModel]
    draft: type[BaseModel]
    search_fields: tuple[str, ...] = ()
    sort_options: dict[str, SortOption] = field(default_factory=lambda: dict(COMMON_SORTS))
    update_accepts_files: bool = False

    def action(self, verb: str) -> str:
        return f"{self.name}.{verb}"


COURSE = ResourceSpec(
    name="course",
    singular="course",
    plural="courses",
    model=Course,
    draft=CourseDraft,
    search_fields=("title", "description", "instructor"),
    sort_options=COURSE_SORTS,
    update_accepts_files=True,
)

COURSE_VIDEO = ResourceSpec(
    name="course_video",
    singular="video",
    plural="videos",
    model=CourseVideo,
    draft=CourseVideoDraft,
    search_fields=("title", "description"),
    sort_options={**COMMON_SORTS, "order": SortOption("orderIndex"), "title": SortOption("title")},
)

ROLE = ResourceSpec(
    name="role",
    singular="role",
    plural="roles",
    model=Role,
    draft=RoleDraft,
    search_fields=("roleName",),
    sort_options={**COMMON_SORTS, "name": SortOption("roleName")},
)

GROUP = ResourceSpec(
    name="group",
    singular="group",
    plural="groups",
    model=Group,
    draft=GroupDraft,
    search_fields=("groupName",),
    sort_options={**COMMON_SORTS, "name": SortOption("groupName")},
)

CATEGORY = ResourceSpec(
    name="category",
    singular="category",
    plural="categories",
    model=Category,
    draft=CategoryDraft,
    search_fields=("categoryName",),
    sort_options={"name": SortOption("categoryName")},
)

ALL_RESOURCES: tuple[ResourceSpec, ...] = (COURSE, COURSE_VIDEO, ROLE, GROUP, CATEGORY)
