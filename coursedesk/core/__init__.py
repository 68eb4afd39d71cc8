"""
Core Module - session, navigation and data synchronization.

Components:
- session_store: Persisted token/role/user id (all-or-nothing)
- auth_flow: Login/registration state machine
- catalog: Course cache, selection, course creation
- modules: Module cache for the selected course, module creation
- router: Screen selection for the current state
- workspace: Composition root wiring the above together
"""

from coursedesk.core.errors import (
    AuthFailure,
    AuthorizationDenied,
    BackendError,
    CourseDeskError,
    DraftInvalid,
    FetchFailure,
    InvalidTransition,
    NoSelection,
    NotFound,
)
from coursedesk.core.models import (
    Course,
    CourseDraft,
    Credentials,
    Module,
    ModuleDraft,
    Role,
    Session,
)
from coursedesk.core.session_store import (
    JsonFileSlot,
    KeyValueSlot,
    MemorySlot,
    SessionStore,
)
from coursedesk.core.auth_flow import AuthFlow, AuthMode, AuthState
from coursedesk.core.modules import ModuleController
from coursedesk.core.catalog import CourseCatalogController
from coursedesk.core.router import Screen, View, route

__all__ = [
    # Errors
    "CourseDeskError",
    "AuthFailure",
    "FetchFailure",
    "NotFound",
    "NoSelection",
    "AuthorizationDenied",
    "InvalidTransition",
    "DraftInvalid",
    "BackendError",
    # Models
    "Role",
    "Session",
    "Course",
    "Module",
    "CourseDraft",
    "ModuleDraft",
    "Credentials",
    # Session persistence
    "KeyValueSlot",
    "MemorySlot",
    "JsonFileSlot",
    "SessionStore",
    # Controllers
    "AuthFlow",
    "AuthMode",
    "AuthState",
    "CourseCatalogController",
    "ModuleController",
    # Routing
    "Screen",
    "View",
    "route",
]
