"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
from rich.text import Text

from core.domain.models import Course, EnrolledCourse, Group, GroupCourse, Role
from core.domain.pagination import PaginatedResult
from core.domain.uploads import UploadProgressEvent


def print_banner(console: Console, *, offline: bool) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("LMS", style="bold cyan")
    mode = "offline (fixtures)" if offline else "online"
    subtitle = Text(f"Fachada de datos • {mode}", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _yes_no(value: bool | None) -> str:
    if value is None:
        return "-"
    return "[green]yes[/green]" if value else "[red]no[/red]"


def _cell(value: Any) -> str:
    return "-" if value is None else str(value)


def page_caption(page: PaginatedResult[Any]) -> str:
    return f"Page {page.page_number}/{max(page.total_pages, 1)} • {page.total_count} total"


def build_courses_table(courses: Iterable[Course], *, caption: str | None = None) -> Table:
    table = Table(title="Courses", caption=caption)
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Title", style="white")
    table.add_column("Instructor", style="magenta")
    table.add_column("Difficulty")
    table.add_column("Price", justify="right")
    table.add_column("Rating", justify="right")
    table.add_column("Active")
    for course in courses:
        table.add_row(
            str(course.id),
            _cell(course.title),
            _cell(course.instructor),
            _cell(course.difficulty),
            f"{course.price:.2f}" if course.price is not None else "-",
            f"{course.rating:.1f}" if course.rating is not None else "-",
            _yes_no(course.is_active),
        )
    return table


def build_course_panel(course: Course) -> Panel:
    body = Text()
    body.append(f"{course.title or '(untitled)'}\n", style="bold")
    if course.description:
        body.append(course.description.strip() + "\n\n")
    for label, value in (
        ("Instructor", course.instructor),
        ("Difficulty", course.difficulty),
        ("Duration (h)", course.duration_hours),
        ("Price", course.price),
        ("Rating", course.rating),
        ("Category", course.category_id),
    ):
        body.append(f"{label}: ", style="dim")
        body.append(f"{_cell(value)}\n")
    return Panel(body, title=f"Course #{course.id}", border_style="cyan")


def build_groups_table(groups: Iterable[Group], *, caption: str | None = None) -> Table:
    table = Table(title="Groups", caption=caption)
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Name", style="white")
    table.add_column("Tenant", style="dim")
    table.add_column("Created", style="dim")
    for group in groups:
        table.add_row(str(group.id), _cell(group.group_name), _cell(group.tenant_id), _cell(group.created_at))
    return table


def build_group_courses_table(rows: Iterable[GroupCourse], *, caption: str | None = None) -> Table:
    table = Table(title="Group courses", caption=caption)
    table.add_column("Course", style="cyan", no_wrap=True, justify="right")
    table.add_column("Name", style="white")
    table.add_column("Enabled")
    for row in rows:
        table.add_row(str(row.course_id), _cell(row.course_name), _yes_no(row.is_enable))
    return table


def build_roles_table(roles: Iterable[Role], *, caption: str | None = None) -> Table:
    table = Table(title="Roles", caption=caption)
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Role", style="white")
    table.add_column("Permissions", justify="right")
    for role in roles:
        table.add_row(str(role.id), _cell(role.role_name), str(len(role.permissions)))
    return table


def build_enrollments_table(rows: Iterable[EnrolledCourse], *, caption: str | None = None) -> Table:
    table = Table(title="My courses", caption=caption)
    table.add_column("Course", style="cyan", no_wrap=True, justify="right")
    table.add_column("Title", style="white")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Enrolled", style="dim")
    for row in rows:
        title = row.course.title if row.course else None
        table.add_row(
            _cell(row.course_id),
            _cell(title),
            _cell(row.status),
            f"{row.progress}%",
            _cell(row.enrolled_at),
        )
    return table


class UploadProgressBar:
    """Barra Rich alimentada por `UploadProgressEvent`.

    Con tamaño desconocido nunca llegan eventos: queda el spinner.
    """

    def __init__(self, console: Console, description: str, *, known_size: bool) -> None:
        columns: list[Any] = [SpinnerColumn(), TextColumn("{task.description}")]
        if known_size:
            columns += [BarColumn(), TaskProgressColumn()]
        self._progress = Progress(*columns, console=console, transient=False)
        self._task = self._progress.add_task(description, total=100 if known_size else None)

    def __enter__(self) -> "UploadProgressBar":
        self._progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._progress.stop()

    def __call__(self, event: UploadProgressEvent) -> None:
        self._progress.update(self._task, completed=event.percentage)
