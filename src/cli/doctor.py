"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_settings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_backend(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = get_settings()

    table = Table(title="LMS Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.api_base_url)
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    if settings.api_token:
        table.add_row("Token", "OK", "Bearer token configured")
    else:
        table.add_row("Token", "OPTIONAL", "No token set -> anonymous requests")
    table.add_row(
        "Offline mode",
        "ON" if settings.offline_mode else "OFF",
        f"{settings.offline_min_delay_ms}-{settings.offline_max_delay_ms} ms simulated latency",
    )

    # Connectivity (best-effort)
    if settings.offline_mode:
        table.add_row("Backend connectivity", "SKIPPED", "Offline mode serves fixtures")
        ok_http = True
    else:
        ok_http, detail_http = asyncio.run(_check_backend(settings))
        table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] The backend is unreachable. Use `--offline` to work against fixtures."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current = get_settings()
    base_url = typer.prompt("Backend base URL", default=current.api_base_url, show_default=True).strip()
    token = typer.prompt(
        "Bearer token (empty to keep)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()
    offline = typer.confirm("Enable offline mode by default?", default=current.offline_mode)

    if not base_url:
        raise typer.BadParameter("base URL is required")

    env_path = write_user_env_vars(
        {
            "LMS_API_BASE_URL": base_url,
            "LMS_API_TOKEN": token or None,
            "LMS_OFFLINE_MODE": "true" if offline else "false",
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
