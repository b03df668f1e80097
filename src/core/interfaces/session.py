"""Colaboradores externos de sesión.

El token y la navegación pertenecen a la app (auth store, router). La
fachada solo los *lee* o los *invoca* por inyección, nunca los persiste.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AuthStore(Protocol):
    """Dueño del token de sesión."""

    def current_token(self) -> str | None:
        """Token vigente (leído en cada request, sin cachear)."""

        ...

    def clear_session(self) -> None:
        """Invalida la sesión. Debe ser idempotente."""

        ...


@runtime_checkable
class Navigator(Protocol):
    """Mecanismo de navegación para la redirección forzada al login."""

    @property
    def current_path(self) -> str:
        ...

    def navigate(self, path: str) -> None:
        ...
