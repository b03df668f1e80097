"""Subidas multipart con reporte de progreso.

Responsabilidad:
- Ensamblar el cuerpo multipart campo por campo (los archivos van binarios,
  el resto como texto).
- Envolver el stream de httpx para contar bytes enviados y traducirlos a
  porcentajes monótonos.

Reglas de progreso:
- `floor(loaded * 100 / total)` en cada chunk, tope 99 mientras hay bytes en
  vuelo: el 100 se reserva para la respuesta exitosa.
- Total desconocido (chunked) => silencio total; la UI muestra un spinner.
- Si la subida falla, no se emite nada más (nunca 100). Sin reanudación.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Mapping

import httpx

from core.domain.uploads import ProgressCallback, UploadFile, UploadProgressEvent

log = logging.getLogger(__name__)


class UploadProgressReporter:
    """Envuelve exactamente una request multipart."""

    def __init__(self, on_progress: ProgressCallback | None = None) -> None:
        self._on_progress = on_progress
        self._total: int | None = None
        self._last = -1
        self._finished = False

    @property
    def last_percentage(self) -> int | None:
        return self._last if self._last >= 0 else None

    @property
    def finished(self) -> bool:
        return self._finished

    def begin(self, total: int | None) -> None:
        self._total = total if total and total > 0 else None

    def tick(self, loaded: int, total: int | None = None) -> None:
        if total is not None:
            self.begin(total)
        if self._finished or self._total is None:
            return
        percentage = min(loaded * 100 // self._total, 99)
        if percentage > self._last:
            self._emit(percentage)

    def complete(self) -> None:
        if self._finished:
            return
        self._finished = True
        if self._total is None:
            return
        self._emit(100)

    def fail(self) -> None:
        if not self._finished:
            log.debug("upload aborted at %s%%", self.last_percentage)
        self._finished = True

    def _emit(self, percentage: int) -> None:
        self._last = percentage
        if self._on_progress is not None:
            self._on_progress(UploadProgressEvent(percentage))


class ProgressByteStream(httpx.AsyncByteStream):
    """Stream async que reporta cada chunk enviado."""

    def __init__(self, inner: Any, reporter: UploadProgressReporter) -> None:
        self._inner = inner
        self._reporter = reporter

    async def __aiter__(self) -> AsyncIterator[bytes]:
        loaded = 0
        async for chunk in self._inner:
            loaded += len(chunk)
            self._reporter.tick(loaded)
            yield chunk

    async def aclose(self) -> None:
        close = getattr(self._inner, "aclose", None)
        if close is not None:
            await close()


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def build_multipart(
    fields: Mapping[str, Any],
    files: Mapping[str, UploadFile],
) -> tuple[dict[str, str], dict[str, tuple[str, Any, str]]]:
    """Ensambla `data`/`files` para httpx.

    - `None` se omite.
    - Booleanos: "true"/"false". Listas y dicts: JSON.
    - Archivos: `(filename, contenido, content_type)`.
    """

    data: dict[str, str] = {}
    for key, value in fields.items():
        if value is None or isinstance(value, UploadFile):
            continue
        data[key] = _form_value(value)

    encoded_files = {
        key: (upload.filename, upload.content, upload.content_type)
        for key, upload in files.items()
    }
    return data, encoded_files
