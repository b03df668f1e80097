"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/fixtures) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "lms-facade"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "lms-facade"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lms-facade"
    return Path.home() / ".config" / "lms-facade"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Los valores `None` se ignoran (no borran entradas existentes).
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# LMS facade user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la fachada de datos.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="LMS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:5000",
        min_length=1,
        description="Base URL del backend LMS.",
    )
    api_token: str | None = Field(
        default=None,
        description="Token inicial para el auth store de la CLI (opcional).",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Límite total de reloj por request, cuerpo incluido (segundos).",
    )

    offline_mode: bool = Field(
        default=False,
        description="Sirve todas las operaciones desde fixtures en memoria.",
    )
    offline_min_delay_ms: int = Field(
        default=400,
        ge=0,
        description="Latencia simulada mínima en modo offline (ms).",
    )
    offline_max_delay_ms: int = Field(
        default=800,
        ge=0,
        description="Latencia simulada máxima en modo offline (ms).",
    )

    tunnel_bypass_header: str = Field(
        default="ngrok-skip-browser-warning",
        min_length=1,
        description="Header para saltar la página de aviso del túnel.",
    )
    tunnel_bypass_value: str = Field(default="1", description="Valor del header de bypass.")
    login_path: str = Field(
        default="/login",
        min_length=1,
        description="Destino de la redirección forzada ante un 401.",
    )

    default_page_size: int = Field(default=10, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1, le=1000)
    max_upload_bytes: int = Field(
        default=500 * 1024 * 1024,
        gt=0,
        description="Tamaño máximo aceptado para subidas multipart (bytes).",
    )

    log_level: str = Field(default="INFO", description="Nivel del canal de diagnóstico.")

    @model_validator(mode="after")
    def _check_delay_range(self) -> "AppSettings":
        if self.offline_min_delay_ms > self.offline_max_delay_ms:
            raise ValueError("offline_min_delay_ms must not exceed offline_max_delay_ms")
        return self


def get_settings(**overrides: object) -> AppSettings:
    """Construye la configuración; `overrides` pisa env/.env (útil en CLI y tests)."""

    return AppSettings(**overrides)
