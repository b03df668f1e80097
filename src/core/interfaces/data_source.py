"""Contrato de fuentes de datos.

Por qué Protocol:
- La fachada elige *una vez* (al componer) entre red y fixtures; los módulos
  de API no preguntan por el modo en cada operación.
- Ambas implementaciones devuelven el payload crudo del cable, así el paso de
  decodificación y la taxonomía de errores son compartidos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

from core.domain.uploads import UploadFile

if TYPE_CHECKING:
    from adapters.uploads import UploadProgressReporter


@dataclass(frozen=True)
class RequestBody:
    """Cuerpo de escritura, ya validado.

    `fields` usa claves del cable (camelCase) y valores sin stringificar; la
    fuente remota decide cómo serializarlos. Si hay al menos un archivo, el
    cuerpo es multipart; si no, JSON. Nunca ambos.
    """

    fields: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, UploadFile] = field(default_factory=dict)
    progress: "UploadProgressReporter | None" = None

    @property
    def is_multipart(self) -> bool:
        return bool(self.files)

    @property
    def total_bytes(self) -> int | None:
        sizes = [f.size for f in self.files.values()]
        if not sizes or any(s is None for s in sizes):
            return None
        return sum(s for s in sizes if s is not None)


@dataclass(frozen=True)
class ApiCall:
    """Una operación de la fachada: `action` = `"<recurso>.<verbo>"`."""

    action: str
    path_args: Mapping[str, int] = field(default_factory=dict)
    params: Mapping[str, Any] | None = None
    body: RequestBody | None = None

    @property
    def resource(self) -> str:
        return self.action.split(".", 1)[0]

    @property
    def verb(self) -> str:
        return self.action.split(".", 1)[-1]


@runtime_checkable
class DataSource(Protocol):
    """Ejecuta una `ApiCall` y devuelve el payload decodificado del cable.

    Reglas:
    - Un solo intento por llamada (sin reintentos ni coalescing).
    - Los errores se propagan crudos; la normalización ocurre en el módulo.
    """

    async def execute(self, call: ApiCall) -> Any:
        ...

    async def aclose(self) -> None:
        ...
