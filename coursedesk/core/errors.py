"""
Error taxonomy for coursedesk.

Every error carries a user-displayable ``message``. None of them are fatal:
the component that raised leaves itself in a retryable state.
"""

from __future__ import annotations


class CourseDeskError(Exception):
    """Base class for all coursedesk errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthFailure(CourseDeskError):
    """Backend rejected the login or registration, or could not be reached."""


class FetchFailure(CourseDeskError):
    """A fetch or write against the backend failed."""


class NotFound(CourseDeskError):
    """Requested course is not present in the current cache."""

    def __init__(self, message: str, course_id: int | None = None):
        super().__init__(message)
        self.course_id = course_id


class NoSelection(NotFound):
    """A module operation needs a selected course and there is none."""


class AuthorizationDenied(CourseDeskError):
    """Write attempted by a session without the author role."""


class InvalidTransition(CourseDeskError):
    """AuthFlow event not allowed in its current state."""


class DraftInvalid(CourseDeskError):
    """Draft is missing a required field."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


class BackendError(Exception):
    """
    Failed backend call, raised by the HTTP client layer.

    ``status_code`` is None for transport failures (connection refused,
    timeout). ``error`` is the backend's own ``error`` field when it sent one.
    Controllers translate this into the errors above.
    """

    def __init__(self, message: str, status_code: int | None = None, error: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.error = error

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None
