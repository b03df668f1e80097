"""Contrato de paginación.

Por qué un modelo propio:
- El backend devuelve envelopes, arrays sueltos o cuerpos vacíos; la UI
  siempre recibe `PaginatedResult[T]`.
- `total_pages` se calcula, no se copia del servidor: el invariante
  `total_pages == ceil(total_count / page_size)` se cumple por construcción.
"""

from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def page_count(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if page_size > 0 else 0


def clamp_page_size(value: int | None, *, default: int = DEFAULT_PAGE_SIZE, maximum: int = MAX_PAGE_SIZE) -> int:
    if value is None:
        return default
    return max(1, min(int(value), maximum))


def clamp_page_number(value: int | None) -> int:
    if value is None:
        return 1
    return max(1, int(value))


class PaginatedResult(BaseModel, Generic[T]):
    """Una página de resultados, idéntica en modo online y offline."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: list[T] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return page_count(self.total_count, self.page_size)

    @classmethod
    def empty(cls, page_size: int) -> "PaginatedResult[T]":
        return cls(items=[], total_count=0, page_number=1, page_size=page_size)


class ListParams(BaseModel):
    """Parámetros de listado.

    `page_number` y `page_size` se normalizan (no se rechazan): la UI puede
    mandar cualquier número y siempre recibe una página válida.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    search_term: str | None = None
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_by: str | None = None
    category_id: int | None = None
    difficulty: str | None = None
    status: str | None = None
    tenant_id: int | None = None

    @field_validator("page_number", mode="before")
    @classmethod
    def _clamp_page_number(cls, v: Any) -> int:
        return clamp_page_number(v)

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, v: Any) -> int:
        return clamp_page_size(v)

    @field_validator("search_term", "sort_by", "difficulty", "status", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    def with_page_size_limit(self, maximum: int) -> "ListParams":
        if self.page_size <= maximum:
            return self
        return self.model_copy(update={"page_size": maximum})

    def to_query(self) -> dict[str, Any]:
        """Query string con el casing exacto que espera el backend."""

        query: dict[str, Any] = {
            "PageNumber": self.page_number,
            "PageSize": self.page_size,
        }
        optional = {
            "SearchTerm": self.search_term,
            "SortBy": self.sort_by,
            "CategoryId": self.category_id,
            "Difficulty": self.difficulty,
            "Status": self.status,
            "TenantId": self.tenant_id,
        }
        query.update({k: v for k, v in optional.items() if v is not None})
        return query
