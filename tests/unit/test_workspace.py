"""
Unit tests for the Workspace composition root and the draft models.
"""

import asyncio
import json

import pytest

from config import Settings
from coursedesk.core.auth_flow import AuthMode, AuthState
from coursedesk.core.errors import DraftInvalid
from coursedesk.core.models import Course, CourseDraft, Credentials, ModuleDraft, Role, Session
from coursedesk.core.router import Screen
from coursedesk.core.workspace import Workspace


@pytest.fixture
def workspace(backend, store):
    return Workspace(backend, store)


class TestWorkspace:

    @pytest.mark.asyncio
    async def test_start_without_session_fetches_nothing(self, workspace, backend):
        await workspace.start()

        assert backend.calls == []
        assert workspace.view().screen is Screen.LOGIN

    @pytest.mark.asyncio
    async def test_start_with_restored_session_refreshes(self, backend, author_store):
        ws = Workspace(backend, author_store)

        await ws.start()

        assert backend.calls_to("list_courses") == [None]
        assert ws.view().screen is Screen.AUTHOR_DASHBOARD

    @pytest.mark.asyncio
    async def test_login_refreshes_catalog(self, workspace, backend, learner_session):
        backend.login_result = learner_session

        session = await workspace.login(Credentials(username="carol", password="pw"))

        assert session == learner_session
        assert workspace.session == learner_session
        assert [c.title for c in workspace.catalog.courses] == ["Algebra", "Biology"]
        assert workspace.view().screen is Screen.COURSE_LIST

    @pytest.mark.asyncio
    async def test_sign_out_while_login_pending(self, workspace, backend, store, author_session):
        backend.login_result = author_session
        gate = backend.hold_login()

        pending = asyncio.create_task(workspace.login(Credentials(username="alice", password="x")))
        await asyncio.sleep(0)
        workspace.sign_out()
        gate.set()

        assert await pending is None
        assert workspace.auth.state is AuthState.ANONYMOUS
        assert workspace.session == Session.empty()
        assert store.slot.data == {}
        assert backend.calls_to("list_courses") == []
        assert workspace.view().screen is Screen.LOGIN

    @pytest.mark.asyncio
    async def test_register_switches_mode_then_back(self, workspace, backend):
        await workspace.register(Credentials(username="dan", password="pw", email="d@x.io"))

        assert workspace.auth.mode is AuthMode.LOGIN
        assert backend.calls_to("register")[0]["role"] == "student"
        assert backend.calls_to("list_courses") == []

    @pytest.mark.asyncio
    async def test_sign_out_drops_every_cache(self, backend, author_store):
        ws = Workspace(backend, author_store)
        await ws.start()
        await ws.catalog.select(1)

        ws.sign_out()

        assert ws.auth.state is AuthState.ANONYMOUS
        assert ws.session == Session.empty()
        assert ws.catalog.courses == []
        assert ws.catalog.selected is None
        assert ws.modules.modules == []
        assert ws.view().screen is Screen.LOGIN

    @pytest.mark.asyncio
    async def test_from_settings_restores_persisted_session(self, tmp_path):
        session_file = tmp_path / "session.json"
        session_file.write_text(json.dumps({"token": "t9", "role": "student", "user_id": 3}))
        settings = Settings(session_file=session_file, api_base_url="http://localhost:5000")

        async with Workspace.from_settings(settings) as ws:
            assert ws.session == Session(token="t9", role=Role.LEARNER, user_id=3)
            assert ws.auth.is_authenticated
            assert ws.client.base_url == "http://localhost:5000"

    @pytest.mark.asyncio
    async def test_from_settings_discards_partial_session(self, tmp_path):
        session_file = tmp_path / "session.json"
        session_file.write_text(json.dumps({"token": "t9"}))

        async with Workspace.from_settings(Settings(session_file=session_file)) as ws:
            assert ws.session == Session.empty()
            assert ws.auth.state is AuthState.ANONYMOUS

        assert not session_file.exists()


class TestDrafts:

    def test_course_draft_payload(self):
        draft = CourseDraft(title="Geometry", description="Shapes")

        draft.validate()

        assert draft.to_payload(7) == {"title": "Geometry", "description": "Shapes", "instructor_id": 7}

    @pytest.mark.parametrize("title,description,field", [
        ("", "Shapes", "title"),
        ("Geometry", "  ", "description"),
    ])
    def test_course_draft_requires_fields(self, title, description, field):
        with pytest.raises(DraftInvalid) as exc_info:
            CourseDraft(title=title, description=description).validate()

        assert exc_info.value.field == field

    def test_module_content_optional(self):
        ModuleDraft(title="Intro", description="d").validate()

    def test_role_from_wire(self):
        assert Role.from_wire("instructor") is Role.AUTHOR
        assert Role.AUTHOR.label == "Instructor"
        with pytest.raises(ValueError):
            Role.from_wire("admin")

    def test_course_ignores_unknown_fields(self):
        course = Course.model_validate({"id": 1, "title": "Algebra", "instructor_id": 7})

        assert course.description == ""
