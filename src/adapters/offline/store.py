"""Almacén en memoria del modo offline.

Colecciones de registros en forma de cable, mutadas in place. Sin
aislamiento entre llamadas concurrentes: es un simulador de demo, no una
base de datos.
"""

from __future__ import annotations

import copy
import random
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from adapters.offline.fixtures import Record, build_fixtures
from core.domain.pagination import clamp_page_number, clamp_page_size, page_count
from core.domain.resources import SortOption

OFFLINE_ID_RANGE = (1000, 9999)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _matches_search(record: Record, term: str, fields: Iterable[str]) -> bool:
    needle = term.casefold()
    for name in fields:
        value = record.get(name)
        if isinstance(value, str) and needle in value.casefold():
            return True
    return False


def _matches_status(record: Record, status: str) -> bool:
    wanted = status.casefold()
    if wanted == "all":
        return True
    if "isActive" in record and wanted in ("active", "inactive"):
        return bool(record["isActive"]) == (wanted == "active")
    value = record.get("status")
    return isinstance(value, str) and value.casefold() == wanted


def _sort_records(records: list[Record], option: SortOption) -> list[Record]:
    present = [r for r in records if r.get(option.field) is not None]
    missing = [r for r in records if r.get(option.field) is None]
    present.sort(key=lambda r: r[option.field], reverse=option.descending)
    return present + missing


def paginate(records: list[Record], page_number: Any, page_size: Any) -> dict[str, Any]:
    """Envelope de paginación, con las mismas claves que el backend."""

    size = clamp_page_size(page_size)
    number = clamp_page_number(page_number)
    start = (number - 1) * size
    return {
        "items": copy.deepcopy(records[start : start + size]),
        "totalCount": len(records),
        "pageNumber": number,
        "pageSize": size,
        "totalPages": page_count(len(records), size),
    }


class FixtureStore:
    """Colecciones offline por nombre de recurso.

    `seed` produce el estado inicial; `reset()` lo restaura.
    """

    def __init__(self, seed: Callable[[], dict[str, list[Record]]] = build_fixtures) -> None:
        self._seed = seed
        self.collections: dict[str, list[Record]] = {}
        self.reset()

    def reset(self) -> None:
        self.collections = self._seed()

    def collection(self, name: str) -> list[Record]:
        return self.collections.setdefault(name, [])

    def where(self, name: str, **criteria: Any) -> list[Record]:
        return [
            r
            for r in self.collection(name)
            if all(r.get(key) == value for key, value in criteria.items())
        ]

    def find(self, name: str, record_id: int) -> Record | None:
        for record in self.collection(name):
            if record.get("id") == record_id:
                return record
        return None

    def query(
        self,
        name: str,
        params: Mapping[str, Any] | None,
        *,
        search_fields: Iterable[str] = (),
        sort_options: Mapping[str, SortOption] | None = None,
        records: list[Record] | None = None,
    ) -> dict[str, Any]:
        """Filtra, ordena y pagina; `params` usa el casing del query string."""

        params = params or {}
        rows = list(self.collection(name) if records is None else records)

        term = params.get("SearchTerm")
        if term:
            rows = [r for r in rows if _matches_search(r, str(term), search_fields)]

        category_id = params.get("CategoryId")
        if category_id is not None:
            rows = [r for r in rows if r.get("categoryId") == category_id]

        difficulty = params.get("Difficulty")
        if difficulty:
            wanted = str(difficulty).casefold()
            rows = [r for r in rows if str(r.get("difficulty") or "").casefold() == wanted]

        status = params.get("Status")
        if status:
            rows = [r for r in rows if _matches_status(r, str(status))]

        tenant_id = params.get("TenantId")
        if tenant_id is not None:
            rows = [r for r in rows if r.get("tenantId") in (None, tenant_id)]

        sort_by = params.get("SortBy")
        option = (sort_options or {}).get(sort_by) if sort_by else None
        if option is not None:
            rows = _sort_records(rows, option)

        return paginate(rows, params.get("PageNumber"), params.get("PageSize"))

    def unused_id(self, name: str, rng: random.Random) -> int:
        low, high = OFFLINE_ID_RANGE
        taken = {r.get("id") for r in self.collection(name)}
        in_range = {i for i in taken if isinstance(i, int) and low <= i <= high}
        if len(in_range) > high - low:
            raise RuntimeError(f"offline id range exhausted for '{name}'")
        while True:
            candidate = rng.randint(low, high)
            if candidate not in taken:
                return candidate

    def insert(self, name: str, record: Record) -> Record:
        self.collection(name).append(record)
        return record

    def merge(self, name: str, record_id: int, changes: Mapping[str, Any]) -> Record | None:
        record = self.find(name, record_id)
        if record is None:
            return None
        record.update(changes)
        return record

    def remove_where(self, name: str, **criteria: Any) -> int:
        rows = self.collection(name)
        keep = [r for r in rows if not all(r.get(k) == v for k, v in criteria.items())]
        removed = len(rows) - len(keep)
        rows[:] = keep
        return removed
