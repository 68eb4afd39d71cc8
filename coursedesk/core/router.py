"""
View routing: which screen to show for the current auth state, role and
selection. Rendering itself lives in coursedesk.cli.views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .auth_flow import AuthFlow, AuthMode, AuthState
from .catalog import CourseCatalogController
from .models import Course, Module, Role


class Screen(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    COURSE_LIST = "course_list"  # learner, nothing selected
    MODULE_LIST = "module_list"  # learner, course selected
    AUTHOR_DASHBOARD = "author_dashboard"


@dataclass(frozen=True)
class View:
    """Everything a renderer needs for one frame."""

    screen: Screen
    role: Role | None = None
    courses: tuple[Course, ...] = ()
    selected: Course | None = None
    modules: tuple[Module, ...] = ()
    message: str = ""
    error: str | None = None
    loading: bool = False
    empty: bool = False
    actions: tuple[str, ...] = field(default_factory=tuple)


# Actions reachable from each screen; the shell only offers these.
SCREEN_ACTIONS: dict[Screen, tuple[str, ...]] = {
    Screen.LOGIN: ("login", "register-mode", "quit"),
    Screen.REGISTER: ("register", "login-mode", "quit"),
    Screen.COURSE_LIST: ("select", "refresh", "logout", "quit"),
    Screen.MODULE_LIST: ("back", "refresh", "logout", "quit"),
    Screen.AUTHOR_DASHBOARD: (
        "create-course",
        "select",
        "add-module",
        "back",
        "refresh",
        "logout",
        "quit",
    ),
}


def route(auth: AuthFlow, catalog: CourseCatalogController) -> View:
    """Map the current state to a View."""
    if not auth.is_authenticated:
        screen = Screen.REGISTER if auth.mode is AuthMode.REGISTER else Screen.LOGIN
        return View(
            screen=screen,
            message=auth.message,
            error=auth.message if auth.state is AuthState.ERROR else None,
            loading=auth.state is AuthState.SUBMITTING,
            actions=SCREEN_ACTIONS[screen],
        )

    role = auth.session.role
    modules = catalog.modules
    if role is Role.AUTHOR:
        screen = Screen.AUTHOR_DASHBOARD
    elif catalog.selected is None:
        screen = Screen.COURSE_LIST
    else:
        screen = Screen.MODULE_LIST

    actions = SCREEN_ACTIONS[screen]
    if screen is Screen.AUTHOR_DASHBOARD and catalog.selected is None:
        actions = tuple(a for a in actions if a not in ("add-module", "back"))

    return View(
        screen=screen,
        role=role,
        courses=tuple(catalog.courses),
        selected=catalog.selected,
        modules=tuple(modules.modules) if catalog.selected is not None else (),
        message=modules.message or catalog.message,
        error=modules.error or catalog.error,
        loading=catalog.loading or modules.loading,
        empty=catalog.selected is not None and modules.is_empty,
        actions=actions,
    )
