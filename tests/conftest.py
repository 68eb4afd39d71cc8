"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import asyncio
import sys
from pathlib import Path
from typing import Any

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from coursedesk.core.catalog import CourseCatalogController  # noqa: E402
from coursedesk.core.errors import BackendError  # noqa: E402
from coursedesk.core.models import Course, Module, Role, Session  # noqa: E402
from coursedesk.core.modules import ModuleController  # noqa: E402
from coursedesk.core.session_store import MemorySlot, SessionStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeBackend:
    """
    In-memory stand-in for BackendClient.

    ``hold_modules(course_id)`` / ``hold_courses()`` return an asyncio.Event
    that the matching fetch waits on, so tests decide completion order.
    ``fail(op, ...)`` makes the named operation raise BackendError.
    """

    def __init__(self):
        self.courses: list[dict[str, Any]] = []
        self.modules: dict[int, list[dict[str, Any]]] = {}
        self.login_result: Session | None = None
        self.calls: list[tuple[str, Any]] = []
        self._failures: dict[str, BackendError] = {}
        self._module_gates: dict[int, asyncio.Event] = {}
        self._course_gate: asyncio.Event | None = None
        self._login_gate: asyncio.Event | None = None
        self._next_id = 100

    # --- test controls ---------------------------------------------------

    def fail(self, op: str, status_code: int | None = 500, error: str | None = None) -> None:
        self._failures[op] = BackendError(
            error or "boom", status_code=status_code, error=error
        )

    def recover(self, op: str) -> None:
        self._failures.pop(op, None)

    def hold_modules(self, course_id: int) -> asyncio.Event:
        gate = asyncio.Event()
        self._module_gates[course_id] = gate
        return gate

    def hold_courses(self) -> asyncio.Event:
        self._course_gate = asyncio.Event()
        return self._course_gate

    def hold_login(self) -> asyncio.Event:
        self._login_gate = asyncio.Event()
        return self._login_gate

    def calls_to(self, op: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == op]

    def _check(self, op: str) -> None:
        if op in self._failures:
            raise self._failures[op]

    # --- BackendClient surface -------------------------------------------

    async def login(self, username: str, password: str) -> Session:
        self.calls.append(("login", {"username": username, "password": password}))
        if self._login_gate is not None:
            await self._login_gate.wait()
        self._check("login")
        return self.login_result

    async def register(self, payload: dict[str, Any]) -> None:
        self.calls.append(("register", payload))
        self._check("register")

    async def list_courses(self) -> list[Course]:
        self.calls.append(("list_courses", None))
        snapshot = [Course.model_validate(c) for c in self.courses]
        gate, self._course_gate = self._course_gate, None
        if gate is not None:
            await gate.wait()
        self._check("list_courses")
        return snapshot

    async def create_course(self, payload: dict[str, Any]) -> None:
        self.calls.append(("create_course", payload))
        self._check("create_course")
        self._next_id += 1
        self.courses.append(
            {"id": self._next_id, "title": payload["title"], "description": payload["description"]}
        )

    async def list_modules(self, course_id: int) -> list[Module]:
        self.calls.append(("list_modules", course_id))
        snapshot = [Module.model_validate(m) for m in self.modules.get(course_id, [])]
        gate = self._module_gates.pop(course_id, None)
        if gate is not None:
            await gate.wait()
        self._check("list_modules")
        return snapshot

    async def create_module(self, payload: dict[str, Any]) -> None:
        self.calls.append(("create_module", payload))
        self._check("create_module")
        self._next_id += 1
        self.modules.setdefault(payload["course_id"], []).append(
            {"id": self._next_id, **payload}
        )


@pytest.fixture
def backend():
    """Fake backend with two courses; only Algebra has a module."""
    fake = FakeBackend()
    fake.courses = [
        {"id": 1, "title": "Algebra", "description": "Linear equations"},
        {"id": 2, "title": "Biology", "description": "Cells"},
    ]
    fake.modules = {
        1: [{"id": 10, "course_id": 1, "title": "Variables", "description": "x and y"}],
        2: [],
    }
    return fake


@pytest.fixture
def author_session():
    return Session(token="t1", role=Role.AUTHOR, user_id=7)


@pytest.fixture
def learner_session():
    return Session(token="t2", role=Role.LEARNER, user_id=8)


@pytest.fixture
def slot():
    return MemorySlot()


@pytest.fixture
def store(slot):
    return SessionStore(slot)


@pytest.fixture
def author_store(store, author_session):
    store.save(author_session)
    return store


@pytest.fixture
def learner_store(store, learner_session):
    store.save(learner_session)
    return store


@pytest.fixture
def author_controllers(backend, author_store):
    modules = ModuleController(backend, author_store)
    return CourseCatalogController(backend, author_store, modules), modules


@pytest.fixture
def learner_controllers(backend, learner_store):
    modules = ModuleController(backend, learner_store)
    return CourseCatalogController(backend, learner_store, modules), modules
