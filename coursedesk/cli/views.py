"""
Rich rendering for router Views.

One render function per Screen; ``render`` dispatches on ``view.screen``.
"""
from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from coursedesk.core.models import Course, Module
from coursedesk.core.router import Screen, View

STYLES = {
    "title": "bold cyan",
    "message": "green",
    "error": "bold red",
    "dim": "dim",
    "selected": "bold yellow",
}

NO_MODULES = "No modules available for this course."


# =============================================================================
# Building blocks
# =============================================================================


def course_table(courses: tuple[Course, ...], selected: Course | None = None) -> Table:
    table = Table(title="Courses", title_style=STYLES["title"])
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Description", style=STYLES["dim"])

    for course in courses:
        marker = selected is not None and course.id == selected.id
        title = f"[{STYLES['selected']}]{course.title}[/]" if marker else course.title
        table.add_row(str(course.id), title, course.description)
    return table


def module_panel(module: Module) -> Panel:
    body = module.description
    if module.content:
        body += f"\n\n{module.content}"
    return Panel(body, title=module.title, title_align="left", border_style="cyan")


def module_table(modules: tuple[Module, ...]) -> Table:
    table = Table(title="Modules", title_style=STYLES["title"])
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Description", style=STYLES["dim"])
    for module in modules:
        table.add_row("" if module.id is None else str(module.id), module.title, module.description)
    return table


def _status(console: Console, view: View) -> None:
    if view.loading:
        console.print(f"[{STYLES['dim']}]Loading...[/]")
    if view.error:
        console.print(f"[{STYLES['error']}]{view.error}[/]")
    elif view.message:
        console.print(f"[{STYLES['message']}]{view.message}[/]")


# =============================================================================
# Screens
# =============================================================================


def render_auth(console: Console, view: View) -> None:
    title = "Login" if view.screen is Screen.LOGIN else "Register"
    hint = (
        "Don't have an account? Choose [bold]register-mode[/]."
        if view.screen is Screen.LOGIN
        else "Already have an account? Choose [bold]login-mode[/]."
    )
    console.print(Panel(hint, title=f"[{STYLES['title']}]{title}[/]", border_style="cyan"))
    _status(console, view)


def render_course_list(console: Console, view: View) -> None:
    console.print(f"[{STYLES['title']}]Select a Course[/]")
    _status(console, view)
    console.print(course_table(view.courses))


def render_module_list(console: Console, view: View) -> None:
    title = view.selected.title if view.selected else ""
    console.print(f"[{STYLES['title']}]{title} Modules[/]")
    _status(console, view)
    if view.empty:
        console.print(NO_MODULES)
        return
    for module in view.modules:
        console.print(module_panel(module))


def render_author_dashboard(console: Console, view: View) -> None:
    console.print(f"[{STYLES['title']}]Course and Module Management[/]")
    _status(console, view)
    console.print(course_table(view.courses, view.selected))
    if view.selected is None:
        return
    console.print(f"[{STYLES['title']}]Add Module to {view.selected.title}[/]")
    if view.empty:
        console.print(NO_MODULES)
    elif view.modules:
        console.print(module_table(view.modules))


RENDERERS = {
    Screen.LOGIN: render_auth,
    Screen.REGISTER: render_auth,
    Screen.COURSE_LIST: render_course_list,
    Screen.MODULE_LIST: render_module_list,
    Screen.AUTHOR_DASHBOARD: render_author_dashboard,
}


def render(console: Console, view: View) -> None:
    RENDERERS[view.screen](console, view)
