"""Decode step for raw wire payloads.

The backend answers collections in three shapes (a pagination envelope, a
bare array, or an empty/garbage body) and single resources as an object or
an empty body. Each call decodes its payload exactly once, here, into a
tagged result: ``Parsed(value)`` or ``Malformed(reason)``. What a
``Malformed`` means is decided by the caller (empty page, ``[]``,
NotFound), never by the decoder.

Both data sources (remote and fixture) hand their raw payloads to these
functions, so online and offline results cannot drift apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar, Union

from pydantic import BaseModel, ValidationError

from core.domain.pagination import PaginatedResult, clamp_page_number

log = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T


@dataclass(frozen=True)
class Malformed:
    reason: str


Decoded = Union[Parsed[T], Malformed]

_ENVELOPE_KEYS = ("items", "totalCount")


def _validate_items(raw_items: list[Any], model: type[M]) -> list[M]:
    items: list[M] = []
    for index, raw in enumerate(raw_items):
        try:
            items.append(model.model_validate(raw))
        except ValidationError as exc:
            log.warning("dropping malformed %s at index %d: %s", model.__name__, index, exc.errors()[:1])
    return items


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return default


def is_envelope(raw: Any) -> bool:
    return isinstance(raw, Mapping) and isinstance(raw.get("items"), list)


def decode_page(
    raw: Any,
    model: type[M],
    *,
    page_number: int,
    page_size: int,
) -> Decoded[PaginatedResult[M]]:
    """Normalize any collection payload into one ``PaginatedResult``."""

    if is_envelope(raw):
        items = _validate_items(raw["items"], model)
        total = _as_int(raw.get("totalCount"), len(raw["items"]))
        size = _as_int(raw.get("pageSize"), page_size)
        number = _as_int(raw.get("pageNumber"), page_number)
        return Parsed(
            PaginatedResult[model](  # type: ignore[valid-type]
                items=items,
                total_count=max(total, 0),
                page_number=clamp_page_number(number),
                page_size=size if size >= 1 else page_size,
            )
        )

    if isinstance(raw, list):
        # The server ignored paging: slice the requested page locally.
        start = (page_number - 1) * page_size
        window = raw[start : start + page_size]
        return Parsed(
            PaginatedResult[model](  # type: ignore[valid-type]
                items=_validate_items(window, model),
                total_count=len(raw),
                page_number=page_number,
                page_size=page_size,
            )
        )

    if raw is None or raw == "" or raw == {}:
        return Malformed("empty body")
    return Malformed(f"unexpected collection payload: {type(raw).__name__}")


def decode_entity(raw: Any, model: type[M]) -> Decoded[M]:
    if raw is None or raw == "" or raw == {}:
        return Malformed("empty body")
    if not isinstance(raw, Mapping):
        return Malformed(f"unexpected entity payload: {type(raw).__name__}")
    try:
        return Parsed(model.model_validate(raw))
    except ValidationError as exc:
        return Malformed(f"entity does not match {model.__name__}: {exc.error_count()} errors")


def decode_list(raw: Any, model: type[M]) -> Decoded[list[M]]:
    """Plain collections (videos of a course, categories...)."""

    if is_envelope(raw):
        return Parsed(_validate_items(raw["items"], model))
    if isinstance(raw, list):
        return Parsed(_validate_items(raw, model))
    return Malformed(f"unexpected list payload: {type(raw).__name__}")
