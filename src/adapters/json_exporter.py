"""Exportación JSON de resultados de la fachada.

Por qué JSON:
- Permite volcar páginas/recursos para scripts y pipelines sin pasar por
  las tablas Rich.
- Usa los alias del cable (camelCase), igual que el backend.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def to_jsonable(payload: Any) -> Any:
    """Convierte modelos (o listas de modelos) a estructuras JSON."""

    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(payload, (list, tuple)):
        return [to_jsonable(item) for item in payload]
    if isinstance(payload, dict):
        return {key: to_jsonable(value) for key, value in payload.items()}
    return payload


def dumps(payload: Any) -> str:
    return json.dumps(to_jsonable(payload), ensure_ascii=False, indent=2, sort_keys=True)


def export_json(payload: Any, output_path: Path) -> Path:
    """Escribe `payload` como JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps(payload) + "\n", encoding="utf-8")
    return output_path
