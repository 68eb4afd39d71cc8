"""
Module list controller.

Holds the read-through cache of the selected course's modules. Loads follow
last-request-wins: each load takes a ticket (generation, course id) when it
is issued and may only commit while that ticket is still current. A
superseded completion, success or failure, is dropped without a trace.

``course_id`` is the target of the latest load. ``selected_course_id``
mirrors the catalog's selection and is set only by the catalog; writes go
there and nowhere else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from .errors import AuthorizationDenied, BackendError, FetchFailure, NoSelection
from .models import Module, ModuleDraft
from .session_store import SessionStore

if TYPE_CHECKING:
    from ..integrations.backend_client import BackendClient

FETCH_ERROR = "Error fetching modules"
ADD_ERROR = "Error adding module"
ADD_OK = "Module added successfully!"


class ModuleController:
    """Module cache for the currently targeted course."""

    def __init__(self, client: BackendClient, session_store: SessionStore):
        self.client = client
        self.session_store = session_store
        self.modules: list[Module] = []
        self.course_id: int | None = None
        self.selected_course_id: int | None = None
        self.loaded_course_id: int | None = None
        self.draft = ModuleDraft()
        self.loading = False
        self.error: str | None = None
        self.message = ""
        self._generation = 0

    @property
    def is_empty(self) -> bool:
        """True once the targeted course has loaded and has no modules."""
        return (
            self.course_id is not None
            and self.loaded_course_id == self.course_id
            and not self.modules
        )

    def _is_current(self, ticket: int, course_id: int) -> bool:
        return ticket == self._generation and course_id == self.course_id

    async def load_for(self, course_id: int) -> bool:
        """
        Fetch the modules of course_id and replace the cache.

        Returns:
            True if the result was committed, False if a newer request
            superseded it

        Raises:
            FetchFailure: The current request failed; cache is left as it was
        """
        self._generation += 1
        ticket = self._generation
        if course_id != self.course_id:
            self.modules = []
            self.loaded_course_id = None
        self.course_id = course_id
        self.loading = True
        logger.debug(f"Loading modules for course {course_id} (request {ticket})")

        try:
            modules = await self.client.list_modules(course_id)
        except BackendError as e:
            if not self._is_current(ticket, course_id):
                logger.debug(f"Dropping failed stale module request {ticket}")
                return False
            self.loading = False
            self.error = FETCH_ERROR
            logger.warning(f"Module fetch for course {course_id} failed: {e}")
            raise FetchFailure(self.error) from e

        if not self._is_current(ticket, course_id):
            logger.debug(f"Dropping stale module response {ticket} for course {course_id}")
            return False

        self.modules = modules
        self.loaded_course_id = course_id
        self.loading = False
        self.error = None
        return True

    async def add_module(self, draft: ModuleDraft | None = None) -> None:
        """
        Create a module in the selected course, then reload its modules.

        Raises:
            AuthorizationDenied: Session is not an instructor
            NoSelection: No course is selected in the catalog
            DraftInvalid: Title or description missing
            FetchFailure: Backend rejected the module or was unreachable
        """
        if not self.session_store.current.is_author:
            raise AuthorizationDenied("Only instructors can add modules")
        course_id = self.selected_course_id
        if course_id is None:
            raise NoSelection("No course selected")

        if draft is not None:
            self.draft = draft
        self.draft.validate()

        try:
            await self.client.create_module(self.draft.to_payload(course_id))
        except BackendError as e:
            self.error = ADD_ERROR
            self.message = ""
            logger.warning(f"Adding module to course {course_id} failed: {e}")
            raise FetchFailure(self.error) from e

        logger.info(f"Added module {self.draft.title!r} to course {course_id}")
        self.draft = ModuleDraft()
        self.message = ADD_OK
        self.error = None

        # Selection may have moved on while the write was in flight.
        if self.selected_course_id == course_id:
            await self.load_for(course_id)

    def clear(self) -> None:
        """Empty the cache and orphan any in-flight load."""
        self._generation += 1
        self.modules = []
        self.course_id = None
        self.selected_course_id = None
        self.loaded_course_id = None
        self.loading = False
        self.error = None
