"""Fuente de datos remota (HTTP).

Traduce cada `ApiCall` a una request del backend: resuelve la ruta, elige
la codificación (JSON o multipart, nunca ambas) y delega en `HttpClient`.
Devuelve el payload crudo; la decodificación es del módulo de API.
"""

from __future__ import annotations

from typing import Any

from adapters.endpoints import endpoint_for
from adapters.http_client import HttpClient
from adapters.uploads import build_multipart
from core.interfaces.data_source import ApiCall


class RemoteDataSource:
    """`DataSource` sobre el backend real."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def execute(self, call: ApiCall) -> Any:
        endpoint = endpoint_for(call.action)
        path = endpoint.format(call.path_args)
        body = call.body

        if body is None:
            return await self._http.request(endpoint.method, path, params=call.params)

        if body.is_multipart:
            form, files = build_multipart(body.fields, body.files)
            return await self._http.request(
                endpoint.method,
                path,
                params=call.params,
                form=form,
                files=files,
                progress=body.progress,
            )

        return await self._http.request(
            endpoint.method,
            path,
            params=call.params,
            json=dict(body.fields),
        )

    async def aclose(self) -> None:
        await self._http.aclose()
