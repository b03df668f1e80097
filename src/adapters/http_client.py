"""Wrapper de httpx (único transporte de la fachada).

Por qué un wrapper:
- Estandariza base URL, timeout y headers para todos los módulos de API.
- Inyecta el token en cada request (leído en el momento, nunca cacheado).
- Desenvuelve respuestas 2xx y centraliza el manejo global del 401.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.

No hace: reintentos, coalescing de requests ni cancelación.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping

import httpx

from adapters.uploads import ProgressByteStream, UploadProgressReporter
from core.config import AppSettings

log = logging.getLogger(__name__)

TokenProvider = Callable[[], "str | None"]
UnauthorizedHandler = Callable[[], None]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults del backend LMS.

    - `base_url` y timeout fijo desde `AppSettings`.
    - Header de bypass del túnel (página de aviso del proxy).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "Accept": "application/json",
        settings.tunnel_bypass_header: settings.tunnel_bypass_value,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def decode_body(response: httpx.Response) -> Any:
    """Cuerpo decodificado: JSON si se puede, texto si no, `None` si vacío."""

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpClient:
    """Cliente HTTP de la fachada.

    Dependencias inyectadas (nada de singletons globales):
    - `token_provider`: devuelve el token vigente o `None`.
    - `on_unauthorized`: invalida la sesión y redirige al login.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        token_provider: TokenProvider,
        on_unauthorized: UnauthorizedHandler,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized
        self._client = build_async_client(self._settings, transport=transport)

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, *, multipart: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if not multipart:
            headers["Content-Type"] = "application/json"
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        form: Mapping[str, str] | None = None,
        files: Mapping[str, Any] | None = None,
        progress: UploadProgressReporter | None = None,
    ) -> Any:
        """Envía una request y devuelve el cuerpo decodificado.

        Errores:
        - Fallo al construir la request (p.ej. JSON no serializable): se
          propaga tal cual, nunca se envió nada.
        - Transporte (timeout/red): `httpx.TransportError`; el límite total
          de `http_timeout_seconds` se reporta como `httpx.TimeoutException`.
        - Status no-2xx: `httpx.HTTPStatusError` (tras el hook de 401).
        """

        multipart = bool(files)
        request = self._client.build_request(
            method,
            path,
            params=dict(params) if params else None,
            json=None if multipart else json,
            data=dict(form) if multipart and form else None,
            files=dict(files) if multipart else None,
            headers=self._headers(multipart=multipart),
        )
        if progress is not None and multipart:
            length = request.headers.get("Content-Length")
            progress.begin(int(length) if length and length.isdigit() else None)
            request.stream = ProgressByteStream(request.stream, progress)

        log.debug("%s %s", method, request.url)
        try:
            response = await self._send(request)
        except Exception:
            if progress is not None:
                progress.fail()
            raise

        if not response.is_success:
            if progress is not None:
                progress.fail()
            if response.status_code == 401:
                log.warning("401 on %s %s: invalidating session", method, request.url.path)
                try:
                    self._on_unauthorized()
                except Exception:
                    log.exception("session invalidation hook failed")
            response.raise_for_status()

        payload = decode_body(response)
        if progress is not None:
            progress.complete()
        return payload

    async def _send(self, request: httpx.Request) -> httpx.Response:
        """`send` con límite total de reloj.

        Los timeouts de httpx son por fase (connect/read/write/pool): un
        servidor que gotea bytes nunca los dispara. El límite cubre la
        request completa, cuerpo de la respuesta incluido.
        """

        limit = self._settings.http_timeout_seconds
        try:
            return await asyncio.wait_for(self._client.send(request), timeout=limit)
        except asyncio.TimeoutError as exc:
            raise httpx.TimeoutException(
                f"Request exceeded {limit:g}s", request=request
            ) from exc
