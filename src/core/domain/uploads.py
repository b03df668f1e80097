"""Tipos de subida (multipart) y progreso.

Por qué en el dominio:
- Los módulos de API validan archivos antes de cualquier I/O; necesitan un
  tipo propio que no dependa de httpx.
- El evento de progreso es lo único que ve la UI del transporte.
"""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable


class UploadFile:
    """Archivo a enviar en un cuerpo multipart.

    `content` puede ser `bytes` o un objeto binario con `read()`. Si el objeto
    no es "seekable" (pipe, socket), el tamaño es desconocido y el transporte
    usará chunked transfer.
    """

    __slots__ = ("filename", "content", "content_type")

    def __init__(
        self,
        filename: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> None:
        self.filename = filename
        self.content = content
        self.content_type = (
            content_type
            or mimetypes.guess_type(filename)[0]
            or "application/octet-stream"
        )

    @classmethod
    def from_path(cls, path: Path | str, content_type: str | None = None) -> "UploadFile":
        p = Path(path)
        return cls(p.name, p.read_bytes(), content_type)

    @property
    def size(self) -> int | None:
        if isinstance(self.content, (bytes, bytearray)):
            return len(self.content)
        try:
            if not self.content.seekable():
                return None
            current = self.content.tell()
            end = self.content.seek(0, os.SEEK_END)
            self.content.seek(current)
            return end - current
        except (AttributeError, OSError, ValueError):
            return None

    def __repr__(self) -> str:
        return f"UploadFile(filename={self.filename!r}, size={self.size!r})"


@dataclass(frozen=True, slots=True)
class UploadProgressEvent:
    """Porcentaje de subida en [0, 100]."""

    percentage: int

    def __post_init__(self) -> None:
        if not 0 <= self.percentage <= 100:
            raise ValueError(f"percentage out of range: {self.percentage}")


ProgressCallback = Callable[[UploadProgressEvent], None]
