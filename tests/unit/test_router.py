"""
Unit tests for view routing.
"""

import pytest

from coursedesk.core.auth_flow import AuthFlow, AuthMode, AuthState
from coursedesk.core.catalog import CREATE_OK, CourseCatalogController
from coursedesk.core.errors import FetchFailure
from coursedesk.core.models import CourseDraft, ModuleDraft, Role
from coursedesk.core.modules import ADD_OK, ModuleController
from coursedesk.core.router import SCREEN_ACTIONS, Screen, route


@pytest.fixture
def signed_out(backend, store):
    modules = ModuleController(backend, store)
    catalog = CourseCatalogController(backend, store, modules)
    return AuthFlow(backend, store), catalog


class TestUnauthenticated:

    def test_login_screen(self, signed_out):
        auth, catalog = signed_out

        view = route(auth, catalog)

        assert view.screen is Screen.LOGIN
        assert view.actions == SCREEN_ACTIONS[Screen.LOGIN]
        assert view.error is None
        assert view.role is None

    def test_register_screen_shows_error(self, signed_out):
        auth, catalog = signed_out
        auth.set_mode(AuthMode.REGISTER)
        auth.state = AuthState.ERROR
        auth.message = "Username taken"

        view = route(auth, catalog)

        assert view.screen is Screen.REGISTER
        assert view.error == "Username taken"


class TestLearner:

    @pytest.mark.asyncio
    async def test_course_list_then_module_list(self, backend, learner_store, learner_controllers):
        catalog, _ = learner_controllers
        auth = AuthFlow(backend, learner_store)
        await catalog.refresh()

        view = route(auth, catalog)
        assert view.screen is Screen.COURSE_LIST
        assert view.role is Role.LEARNER
        assert [c.title for c in view.courses] == ["Algebra", "Biology"]
        assert view.modules == ()

        await catalog.select(1)
        view = route(auth, catalog)
        assert view.screen is Screen.MODULE_LIST
        assert view.selected.id == 1
        assert [m.title for m in view.modules] == ["Variables"]
        assert "create-course" not in view.actions
        assert "add-module" not in view.actions

    @pytest.mark.asyncio
    async def test_empty_flag_only_after_load(self, backend, learner_store, learner_controllers):
        catalog, _ = learner_controllers
        auth = AuthFlow(backend, learner_store)
        await catalog.refresh()

        assert route(auth, catalog).empty is False

        await catalog.select(2)

        assert route(auth, catalog).empty is True


class TestAuthor:

    @pytest.mark.asyncio
    async def test_dashboard_without_selection(self, backend, author_store, author_controllers):
        catalog, _ = author_controllers
        auth = AuthFlow(backend, author_store)
        await catalog.refresh()

        view = route(auth, catalog)

        assert view.screen is Screen.AUTHOR_DASHBOARD
        assert "create-course" in view.actions
        assert "add-module" not in view.actions
        assert "back" not in view.actions

    @pytest.mark.asyncio
    async def test_dashboard_with_selection(self, backend, author_store, author_controllers):
        catalog, _ = author_controllers
        auth = AuthFlow(backend, author_store)
        await catalog.refresh()
        await catalog.select(1)

        view = route(auth, catalog)

        assert view.screen is Screen.AUTHOR_DASHBOARD
        assert view.actions == SCREEN_ACTIONS[Screen.AUTHOR_DASHBOARD]
        assert [m.title for m in view.modules] == ["Variables"]

    @pytest.mark.asyncio
    async def test_latest_success_message_shown(self, backend, author_store, author_controllers):
        catalog, modules = author_controllers
        auth = AuthFlow(backend, author_store)
        await catalog.refresh()
        await catalog.select(1)

        await modules.add_module(ModuleDraft(title="Intro", description="d"))
        assert route(auth, catalog).message == ADD_OK

        await catalog.create_course(CourseDraft(title="Geometry", description="Shapes"))
        assert route(auth, catalog).message == CREATE_OK

        await modules.add_module(ModuleDraft(title="Outro", description="d"))
        assert route(auth, catalog).message == ADD_OK

    @pytest.mark.asyncio
    async def test_fetch_error_surfaces(self, backend, author_store, author_controllers):
        catalog, _ = author_controllers
        auth = AuthFlow(backend, author_store)
        backend.fail("list_courses")

        with pytest.raises(FetchFailure):
            await catalog.refresh()

        assert route(auth, catalog).error == catalog.error
