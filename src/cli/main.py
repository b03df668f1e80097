"""CLI de la fachada LMS (Typer).

Por qué una CLI:
- Superficie mínima para ejercitar la fachada sin la SPA: listar, crear,
  subir archivos y revisar inscripciones, online u offline.
- Toda la lógica vive en `core.services`; aquí solo se parsean opciones y
  se renderiza (Rich o JSON).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from adapters.json_exporter import dumps, export_json
from adapters.session import InMemoryAuthStore, LoggingNavigator
from cli import doctor
from cli.ui_components import (
    UploadProgressBar,
    build_course_panel,
    build_courses_table,
    build_enrollments_table,
    build_group_courses_table,
    build_groups_table,
    build_roles_table,
    page_caption,
    print_banner,
)
from core.config import AppSettings, get_settings
from core.domain.uploads import UploadFile
from core.errors import ApiError
from core.observability import setup_logging
from core.services import LmsApi, build_lms_api

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="LMS data-access façade: courses, groups, roles, enrollments.")
courses_app = typer.Typer(no_args_is_help=True, help="Course catalogue.")
groups_app = typer.Typer(no_args_is_help=True, help="Groups and their courses.")
roles_app = typer.Typer(no_args_is_help=True, help="Roles.")
enrollments_app = typer.Typer(no_args_is_help=True, help="Course subscriptions.")

app.add_typer(courses_app, name="courses")
app.add_typer(groups_app, name="groups")
app.add_typer(roles_app, name="roles")
app.add_typer(enrollments_app, name="enrollments")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class CliState:
    offline: bool | None = None
    as_json: bool = False
    output: Path | None = None
    verbose: bool = False

    def settings(self) -> AppSettings:
        overrides: dict[str, Any] = {}
        if self.offline is not None:
            overrides["offline_mode"] = self.offline
        return get_settings(**overrides)


@app.callback()
def main(
    ctx: typer.Context,
    offline: bool | None = typer.Option(
        None,
        "--offline/--online",
        help="Serve from in-memory fixtures (default: LMS_OFFLINE_MODE).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON instead of tables."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the result to this JSON file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    state = CliState(offline=offline, as_json=as_json, output=output, verbose=verbose)
    ctx.obj = state
    settings = state.settings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    if verbose and not as_json:
        print_banner(_err_console, offline=settings.offline_mode)


def _state(ctx: typer.Context) -> CliState:
    state = ctx.obj
    if not isinstance(state, CliState):
        state = CliState()
        ctx.obj = state
    return state


def _call(state: CliState, operation: Callable[[LmsApi], Awaitable[T]]) -> T:
    """Ejecuta una operación de la fachada; un `ApiError` termina con código 1."""

    settings = state.settings()
    auth_store = InMemoryAuthStore(settings.api_token)

    async def _go() -> T:
        async with build_lms_api(settings, auth_store=auth_store, navigator=LoggingNavigator()) as api:
            return await operation(api)

    try:
        return asyncio.run(_go())
    except ApiError as exc:
        _err_console.print(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(code=1) from None


def _emit(state: CliState, payload: Any, render: Callable[[], Any]) -> None:
    if state.output is not None:
        path = export_json(payload, state.output)
        _err_console.print(f"[green]Saved JSON to:[/green] {path}")
    if state.as_json:
        typer.echo(dumps(payload))
        return
    _console.print(render())


# ---------------------------------------------------------------------------
# courses
# ---------------------------------------------------------------------------


@courses_app.command("list")
def courses_list(
    ctx: typer.Context,
    search: str | None = typer.Option(None, "--search", "-s", help="Substring of title/description/instructor."),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)."),
    page_size: int | None = typer.Option(None, "--page-size", help="Items per page (1-100)."),
    sort: str | None = typer.Option(None, "--sort", help="newest, oldest, title, price-low, price-high, rating."),
    category: int | None = typer.Option(None, "--category", help="Category ID."),
    difficulty: str | None = typer.Option(None, "--difficulty", help="Beginner, Intermediate, Advanced."),
    status: str | None = typer.Option(None, "--status", help="active, inactive or all."),
) -> None:
    """List courses (paginated)."""

    state = _state(ctx)
    params: dict[str, Any] = {
        "search_term": search,
        "page_number": page,
        "sort_by": sort,
        "category_id": category,
        "difficulty": difficulty,
        "status": status,
    }
    if page_size is not None:
        params["page_size"] = page_size
    result = _call(state, lambda api: api.courses.list(params))
    _emit(state, result, lambda: build_courses_table(result.items, caption=page_caption(result)))


@courses_app.command("show")
def courses_show(ctx: typer.Context, course_id: int = typer.Argument(..., help="Course ID.")) -> None:
    """Show one course."""

    state = _state(ctx)
    course = _call(state, lambda api: api.courses.get_by_id(course_id))
    _emit(state, course, lambda: build_course_panel(course))


@courses_app.command("create")
def courses_create(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", help="Course title."),
    instructor: str = typer.Option(..., "--instructor", help="Instructor name."),
    description: str | None = typer.Option(None, "--description"),
    difficulty: str | None = typer.Option(None, "--difficulty"),
    duration_hours: float | None = typer.Option(None, "--duration", help="Duration in hours."),
    price: float | None = typer.Option(None, "--price"),
    category: int | None = typer.Option(None, "--category", help="Category ID."),
    inactive: bool = typer.Option(False, "--inactive", help="Create the course unpublished."),
    thumbnail: Path | None = typer.Option(None, "--thumbnail", exists=True, dir_okay=False, help="Image file."),
) -> None:
    """Create a course (multipart when --thumbnail is given)."""

    state = _state(ctx)
    payload: dict[str, Any] = {
        "title": title,
        "instructor": instructor,
        "description": description,
        "difficulty": difficulty,
        "duration_hours": duration_hours,
        "price": price,
        "category_id": category,
        "is_active": not inactive,
    }
    if thumbnail is not None:
        payload["thumbnail"] = UploadFile.from_path(thumbnail)
    created = _call(state, lambda api: api.courses.create(payload))
    if hasattr(created, "id"):
        _emit(state, created, lambda: build_course_panel(created))
    else:
        _emit(state, created, lambda: created)


@courses_app.command("upload-video")
def courses_upload_video(
    ctx: typer.Context,
    course_id: int = typer.Argument(..., help="Course ID."),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Video file."),
) -> None:
    """Upload a video file to a course, with a progress bar."""

    state = _state(ctx)
    upload = UploadFile.from_path(path)
    with UploadProgressBar(_err_console, f"Uploading {upload.filename}", known_size=upload.size is not None) as bar:
        result = _call(state, lambda api: api.courses.upload_video(course_id, upload, on_progress=bar))
    _emit(state, result, lambda: f"[green]Uploaded[/green] {escape(upload.filename)}")


@courses_app.command("delete")
def courses_delete(ctx: typer.Context, course_id: int = typer.Argument(..., help="Course ID.")) -> None:
    """Delete a course."""

    state = _state(ctx)
    result = _call(state, lambda api: api.courses.delete(course_id))
    _emit(state, result, lambda: f"[green]Deleted course[/green] {course_id}")


# ---------------------------------------------------------------------------
# groups / roles
# ---------------------------------------------------------------------------


@groups_app.command("list")
def groups_list(
    ctx: typer.Context,
    search: str | None = typer.Option(None, "--search", "-s"),
    page: int = typer.Option(1, "--page", "-p"),
    page_size: int | None = typer.Option(None, "--page-size"),
) -> None:
    """List groups (paginated)."""

    state = _state(ctx)
    params: dict[str, Any] = {"search_term": search, "page_number": page}
    if page_size is not None:
        params["page_size"] = page_size
    result = _call(state, lambda api: api.groups.list(params))
    _emit(state, result, lambda: build_groups_table(result.items, caption=page_caption(result)))


@groups_app.command("courses")
def groups_courses(ctx: typer.Context, group_id: int = typer.Argument(..., help="Group ID.")) -> None:
    """Courses enabled/disabled for a group."""

    state = _state(ctx)
    result = _call(state, lambda api: api.groups.get_group_courses(group_id))
    _emit(state, result, lambda: build_group_courses_table(result.items, caption=page_caption(result)))


@roles_app.command("list")
def roles_list(
    ctx: typer.Context,
    search: str | None = typer.Option(None, "--search", "-s"),
    page: int = typer.Option(1, "--page", "-p"),
) -> None:
    """List roles (paginated)."""

    state = _state(ctx)
    result = _call(state, lambda api: api.roles.list({"search_term": search, "page_number": page}))
    _emit(state, result, lambda: build_roles_table(result.items, caption=page_caption(result)))


# ---------------------------------------------------------------------------
# enrollments
# ---------------------------------------------------------------------------


@enrollments_app.command("mine")
def enrollments_mine(
    ctx: typer.Context,
    status: str | None = typer.Option(None, "--status", help="Active, Completed or all."),
    page: int = typer.Option(1, "--page", "-p"),
) -> None:
    """Courses of the current user."""

    state = _state(ctx)
    result = _call(state, lambda api: api.user_courses.get_my_courses({"status": status, "page_number": page}))
    _emit(state, result, lambda: build_enrollments_table(result.items, caption=page_caption(result)))


@enrollments_app.command("subscribe")
def enrollments_subscribe(
    ctx: typer.Context,
    course_id: int = typer.Argument(..., help="Course ID."),
    user_id: int = typer.Argument(..., help="User ID."),
) -> None:
    """Subscribe a user to a course."""

    state = _state(ctx)
    ack = _call(state, lambda api: api.user_courses.subscribe(course_id, user_id))
    message = ack.get("message") if isinstance(ack, dict) else None
    _emit(state, ack, lambda: f"[green]{escape(str(message or 'Subscribed'))}[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
