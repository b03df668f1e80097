"""Clasificación y re-etiquetado de fallos.

Toma cualquier excepción cruda (httpx, serialización, lo que sea) y la
convierte en un `ApiError` con el contexto de la operación.

Precedencia (gana la primera):
1. Hubo respuesta no-2xx -> `message` del cuerpo, o el reason phrase, o un
   texto genérico. Kind `not_found` si es 404, si no `server`.
2. Se envió pero no hubo respuesta (timeout, red caída) -> texto fijo de
   conexión. Kind `network`.
3. Nada de lo anterior (la request nunca salió) -> mensaje subyacente. Kind
   `unknown`.

`normalize` nunca lanza.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.errors import ApiError, ErrorKind

log = logging.getLogger(__name__)

NO_RESPONSE_DETAIL = "No response from server. Please check your connection."
SERVER_ERROR_DETAIL = "Server error occurred"
UNKNOWN_ERROR_DETAIL = "Unknown error occurred"

_NO_RESPONSE_ERRORS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)


def _body_message(response: httpx.Response) -> str | None:
    try:
        body: Any = response.json()
    except Exception:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _status_detail(response: httpx.Response) -> str:
    return _body_message(response) or (response.reason_phrase or "").strip() or SERVER_ERROR_DETAIL


def normalize(error: BaseException, context: str) -> ApiError:
    """Devuelve el `ApiError` equivalente a `error` para la operación `context`."""

    log.warning("[%s] %r", context, error)

    if isinstance(error, ApiError):
        return error

    try:
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            kind = ErrorKind.NOT_FOUND if status == 404 else ErrorKind.SERVER
            return ApiError(context, kind, _status_detail(error.response), status_code=status)

        if isinstance(error, _NO_RESPONSE_ERRORS):
            return ApiError(context, ErrorKind.NETWORK, NO_RESPONSE_DETAIL)

        detail = str(error).strip() or UNKNOWN_ERROR_DETAIL
        return ApiError(context, ErrorKind.UNKNOWN, detail)
    except Exception:  # pragma: no cover
        log.exception("[%s] error while normalizing %r", context, error)
        return ApiError(context, ErrorKind.UNKNOWN, UNKNOWN_ERROR_DETAIL)
