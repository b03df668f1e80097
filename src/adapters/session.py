"""Sesión: auth store en memoria, navegador y el hook de 401.

`InMemoryAuthStore` y `LoggingNavigator` son implementaciones mínimas de los
colaboradores externos (la app real usa su propio store y router); los usan
la CLI y los tests.
"""

from __future__ import annotations

import logging

from core.interfaces.session import AuthStore, Navigator

log = logging.getLogger(__name__)


class InMemoryAuthStore:
    """Token en memoria de proceso; `clear_session` es idempotente."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self.clear_count = 0

    def current_token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        self._token = token

    def clear_session(self) -> None:
        self._token = None
        self.clear_count += 1


class LoggingNavigator:
    """Navegador sin UI: recuerda la ruta actual y registra redirecciones."""

    def __init__(self, current_path: str = "/") -> None:
        self._current_path = current_path
        self.history: list[str] = []

    @property
    def current_path(self) -> str:
        return self._current_path

    def navigate(self, path: str) -> None:
        log.info("redirecting to %s", path)
        self._current_path = path
        self.history.append(path)


class SessionInvalidator:
    """Callback `on_unauthorized` del `HttpClient`.

    Limpia la sesión (no-op si ya estaba limpia) y fuerza la navegación al
    login solo si no estamos ya ahí: N respuestas 401 concurrentes producen
    una única redirección.
    """

    def __init__(self, store: AuthStore, navigator: Navigator, login_path: str = "/login") -> None:
        self._store = store
        self._navigator = navigator
        self._login_path = login_path

    def __call__(self) -> None:
        self._store.clear_session()
        if self._navigator.current_path.startswith(self._login_path):
            return
        self._navigator.navigate(self._login_path)
