"""
Course catalog controller.

Keeps the last fetched course list, the current selection, and the
course-creation draft. Selecting a course is what drives ModuleController.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from .errors import AuthorizationDenied, BackendError, FetchFailure, NotFound
from .models import Course, CourseDraft, ModuleDraft
from .modules import ModuleController
from .session_store import SessionStore

if TYPE_CHECKING:
    from ..integrations.backend_client import BackendClient

FETCH_ERROR = "Error fetching courses"
CREATE_ERROR = "Error creating course"
CREATE_OK = "Course created successfully!"
SERVER_ERROR = "Server error. Please check your connection."


class CourseCatalogController:
    """Course cache, selection, and course creation."""

    def __init__(
        self,
        client: BackendClient,
        session_store: SessionStore,
        modules: ModuleController,
    ):
        self.client = client
        self.session_store = session_store
        self.modules = modules
        self.courses: list[Course] = []
        self.selected: Course | None = None
        self.draft = CourseDraft()
        self.loading = False
        self.error: str | None = None
        self.message = ""
        self._generation = 0

    def find(self, course_id: int) -> Course | None:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None

    # =========================================================================
    # Fetch
    # =========================================================================

    async def refresh(self) -> bool:
        """
        Re-fetch the course list and replace the cache.

        Returns:
            True if committed, False if a later refresh superseded this one

        Raises:
            FetchFailure: Request failed; the previous list is kept
        """
        self._generation += 1
        ticket = self._generation
        self.loading = True

        try:
            courses = await self.client.list_courses()
        except BackendError as e:
            if ticket != self._generation:
                return False
            self.loading = False
            self.error = FETCH_ERROR
            logger.warning(f"Course fetch failed: {e}")
            raise FetchFailure(self.error) from e

        if ticket != self._generation:
            logger.debug(f"Dropping stale course response {ticket}")
            return False

        self.courses = courses
        self.loading = False
        self.error = None
        return True

    # =========================================================================
    # Selection
    # =========================================================================

    async def select(self, course_id: int) -> Course:
        """
        Select a cached course and load its modules.

        Raises:
            NotFound: course_id is not in the current cache (refresh and retry)
            FetchFailure: The module load failed
        """
        course = self.find(course_id)
        if course is None:
            raise NotFound(f"Course {course_id} is not in the course list", course_id=course_id)

        if self.selected is None or self.selected.id != course.id:
            self.modules.clear()
        self.selected = course
        self.modules.selected_course_id = course.id
        await self.modules.load_for(course.id)
        return course

    def deselect(self) -> None:
        self.selected = None
        self.modules.clear()

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_course(self, draft: CourseDraft | None = None) -> None:
        """
        Create a course as the signed-in instructor, then refresh.

        Raises:
            AuthorizationDenied: Session is not an instructor
            DraftInvalid: Title or description missing
            FetchFailure: Backend rejected the course or was unreachable
        """
        session = self.session_store.current
        if not session.is_author:
            raise AuthorizationDenied("Only instructors can create courses")

        if draft is not None:
            self.draft = draft
        self.draft.validate()

        try:
            await self.client.create_course(self.draft.to_payload(session.user_id))
        except BackendError as e:
            self.error = SERVER_ERROR if e.is_transport_error else (e.error or CREATE_ERROR)
            self.message = ""
            logger.warning(f"Creating course {self.draft.title!r} failed: {e}")
            raise FetchFailure(self.error) from e

        logger.info(f"Created course {self.draft.title!r}")
        self.draft = CourseDraft()
        self.message = CREATE_OK
        self.modules.message = ""
        self.error = None
        await self.refresh()

    def reset(self) -> None:
        """Forget everything tied to the previous session."""
        self._generation += 1
        self.courses = []
        self.selected = None
        self.draft = CourseDraft()
        self.loading = False
        self.error = None
        self.message = ""
        self.modules.clear()
        self.modules.draft = ModuleDraft()
        self.modules.message = ""
