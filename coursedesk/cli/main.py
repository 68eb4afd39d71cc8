"""
coursedesk CLI.

Commands:
- coursedesk login          - Sign in and store the session
- coursedesk register       - Create an account
- coursedesk logout         - Forget the stored session
- coursedesk whoami         - Show the stored session
- coursedesk courses        - List courses
- coursedesk modules ID     - List a course's modules
- coursedesk create-course  - Create a course (instructors)
- coursedesk add-module ID  - Add a module to a course (instructors)
- coursedesk shell          - Interactive session
"""
import asyncio
import sys
from typing import Annotated, Awaitable, Callable

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from config import Settings, get_settings
from coursedesk.core.errors import AuthFailure, CourseDeskError
from coursedesk.core.models import CourseDraft, Credentials, ModuleDraft, Role
from coursedesk.core.workspace import Workspace

from . import views

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="coursedesk",
    help="Browse courses and manage modules on the course backend",
    no_args_is_help=True,
)
console = Console()

NOT_LOGGED_IN = "Not logged in. Run 'coursedesk login' first."


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="5 MB")


@app.callback()
def main_callback() -> None:
    """coursedesk: terminal client for the course backend."""
    configure_logging(get_settings())


def _run(action: Callable[[Workspace], Awaitable[None]]) -> None:
    """Run one action against a fresh workspace, reporting errors as exit 1."""

    async def runner() -> None:
        async with Workspace.from_settings(get_settings()) as ws:
            await action(ws)

    try:
        asyncio.run(runner())
    except CourseDeskError as e:
        console.print(f"[bold red]{e.message}[/]")
        raise typer.Exit(code=1)


async def _signed_in(ws: Workspace) -> None:
    if not ws.auth.is_authenticated:
        raise AuthFailure(NOT_LOGGED_IN)
    await ws.start()


# =============================================================================
# Account Commands
# =============================================================================


@app.command()
def login(
    username: Annotated[str, typer.Argument(help="Account username")],
    password: Annotated[
        str, typer.Option("--password", "-p", prompt=True, hide_input=True, help="Account password")
    ],
) -> None:
    """Sign in. Replaces any stored session."""

    async def action(ws: Workspace) -> None:
        if ws.auth.is_authenticated:
            ws.sign_out()
        await ws.login(Credentials(username=username, password=password))
        views.render(console, ws.view())

    _run(action)


@app.command()
def register(
    username: Annotated[str, typer.Argument(help="New account username")],
    email: Annotated[str, typer.Option("--email", "-e", prompt=True, help="Email address")],
    password: Annotated[
        str,
        typer.Option(
            "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True,
            help="Account password",
        ),
    ],
    role: Annotated[Role, typer.Option("--role", "-r", help="Account role")] = Role.LEARNER,
) -> None:
    """Create an account. Log in afterwards."""

    async def action(ws: Workspace) -> None:
        await ws.register(Credentials(username=username, password=password, email=email, role=role))
        console.print(f"[green]{ws.auth.message}[/]")

    _run(action)


@app.command()
def logout() -> None:
    """Forget the stored session."""

    async def action(ws: Workspace) -> None:
        ws.sign_out()
        console.print("[green]Logged out.[/]")

    _run(action)


@app.command()
def whoami() -> None:
    """Show who the stored session belongs to."""

    async def action(ws: Workspace) -> None:
        session = ws.session
        if not session.is_authenticated:
            console.print(f"[yellow]{NOT_LOGGED_IN}[/]")
            return
        console.print(f"User [bold]{session.user_id}[/] ({session.role.label})")

    _run(action)


# =============================================================================
# Course / Module Commands
# =============================================================================


@app.command()
def courses() -> None:
    """List the courses visible to you."""

    async def action(ws: Workspace) -> None:
        await _signed_in(ws)
        views.render(console, ws.view())

    _run(action)


@app.command()
def modules(
    course_id: Annotated[int, typer.Argument(help="Course ID")],
) -> None:
    """List the modules of a course."""

    async def action(ws: Workspace) -> None:
        await _signed_in(ws)
        await ws.catalog.select(course_id)
        views.render(console, ws.view())

    _run(action)


@app.command("create-course")
def create_course(
    title: Annotated[str, typer.Option("--title", "-t", prompt=True, help="Course title")],
    description: Annotated[
        str, typer.Option("--description", "-d", prompt=True, help="Course description")
    ],
) -> None:
    """Create a course (instructors only)."""

    async def action(ws: Workspace) -> None:
        await _signed_in(ws)
        await ws.catalog.create_course(CourseDraft(title=title, description=description))
        views.render(console, ws.view())

    _run(action)


@app.command("add-module")
def add_module(
    course_id: Annotated[int, typer.Argument(help="Course ID")],
    title: Annotated[str, typer.Option("--title", "-t", prompt=True, help="Module title")],
    description: Annotated[
        str, typer.Option("--description", "-d", prompt=True, help="Module description")
    ],
    content: Annotated[str, typer.Option("--content", "-c", help="Module content")] = "",
) -> None:
    """Add a module to a course (instructors only)."""

    async def action(ws: Workspace) -> None:
        await _signed_in(ws)
        await ws.catalog.select(course_id)
        await ws.modules.add_module(
            ModuleDraft(title=title, description=description, content=content)
        )
        views.render(console, ws.view())

    _run(action)


# =============================================================================
# Interactive Shell
# =============================================================================


def _ask_draft_field(label: str, current: str) -> str:
    return Prompt.ask(label, default=current, show_default=bool(current))


async def _shell_step(ws: Workspace, choice: str) -> bool:
    """Apply one shell action. Returns False when the user quits."""
    if choice == "quit":
        return False

    if choice == "login":
        username = Prompt.ask("Username")
        password = Prompt.ask("Password", password=True)
        await ws.login(Credentials(username=username, password=password))
    elif choice == "register":
        username = Prompt.ask("Username")
        email = Prompt.ask("Email")
        password = Prompt.ask("Password", password=True)
        role = Prompt.ask("Role", choices=[r.value for r in Role], default=Role.LEARNER.value)
        await ws.register(
            Credentials(username=username, password=password, email=email, role=Role(role))
        )
    elif choice in ("register-mode", "login-mode"):
        ws.auth.toggle_mode()
    elif choice == "select":
        await ws.catalog.select(IntPrompt.ask("Course ID"))
    elif choice == "back":
        ws.catalog.deselect()
    elif choice == "refresh":
        await ws.catalog.refresh()
        if ws.catalog.selected is not None:
            await ws.modules.load_for(ws.catalog.selected.id)
    elif choice == "create-course":
        draft = ws.catalog.draft
        draft.title = _ask_draft_field("Course title", draft.title)
        draft.description = _ask_draft_field("Course description", draft.description)
        await ws.catalog.create_course()
    elif choice == "add-module":
        draft = ws.modules.draft
        draft.title = _ask_draft_field("Module title", draft.title)
        draft.description = _ask_draft_field("Module description", draft.description)
        draft.content = _ask_draft_field("Module content", draft.content)
        await ws.modules.add_module()
    elif choice == "logout":
        ws.sign_out()
    return True


@app.command()
def shell() -> None:
    """Interactive session: pick actions from the current screen."""

    async def action(ws: Workspace) -> None:
        try:
            await ws.start()
        except CourseDeskError as e:
            console.print(f"[bold red]{e.message}[/]")
        running = True
        while running:
            view = ws.view()
            console.rule()
            views.render(console, view)
            choice = Prompt.ask("Action", choices=list(view.actions))
            try:
                running = await _shell_step(ws, choice)
            except CourseDeskError as e:
                console.print(f"[bold red]{e.message}[/]")

    _run(action)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
