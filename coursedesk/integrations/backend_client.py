"""
E-learning backend API client.

Handles HTTP communication with the course backend: login, registration,
and the course/module collections. Authenticated calls attach the bearer
token currently held by the SessionStore.

Usage:
    async with BackendClient(settings.api_base_url, store) as client:
        session = await client.login("alice", "secret")
        courses = await client.list_courses()
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..core.errors import BackendError
from ..core.models import Course, Module, Role, Session
from ..core.session_store import SessionStore

LOGIN_ENDPOINT = "/login"
REGISTER_ENDPOINT = "/register"
COURSES_ENDPOINT = "/courses"
MODULES_ENDPOINT = "/modules"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_field(response: httpx.Response) -> str | None:
    """Extract ``{"error": ...}`` from a response body, if present."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None


class BackendClient:
    """Async HTTP client for the e-learning backend."""

    def __init__(
        self,
        base_url: str,
        session_store: SessionStore | None = None,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize backend client.

        Args:
            base_url: Backend address, e.g. http://localhost:5000
            session_store: Source of the bearer token for authenticated calls
            timeout_seconds: Request timeout
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Content-Type": "application/json"},
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # Plumbing
    # =========================================================================

    def _auth_headers(self) -> dict[str, str]:
        token = self.session_store.token if self.session_store else None
        if token is None:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def _checked(self, method: str, path: str, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        error = _error_field(response)
        logger.warning(f"{method} {path} failed with {response.status_code}")
        raise BackendError(
            error or f"Backend returned {response.status_code}",
            status_code=response.status_code,
            error=error,
        )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self.client.get(path, params=params, headers=self._auth_headers())
        except httpx.HTTPError as e:
            logger.warning(f"GET {path} request error: {e}")
            raise BackendError(f"Request to {path} failed: {e}") from e
        return self._checked("GET", path, response)

    async def _post(self, path: str, payload: dict[str, Any], auth: bool = True) -> httpx.Response:
        headers = self._auth_headers() if auth else {}
        try:
            response = await self.client.post(path, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"POST {path} request error: {e}")
            raise BackendError(f"Request to {path} failed: {e}") from e
        return self._checked("POST", path, response)

    @staticmethod
    def _parse_list(response: httpx.Response, model: type[ModelT]) -> list[ModelT]:
        try:
            data = response.json()
        except ValueError as e:
            raise BackendError("Response was not JSON", status_code=response.status_code) from e
        if not isinstance(data, list):
            raise BackendError("Expected a JSON list", status_code=response.status_code)
        try:
            return [model.model_validate(item) for item in data]
        except ValidationError as e:
            raise BackendError(
                f"Malformed {model.__name__.lower()} payload: {e.error_count()} error(s)",
                status_code=response.status_code,
            ) from e

    # =========================================================================
    # Accounts
    # =========================================================================

    async def login(self, username: str, password: str) -> Session:
        """
        Exchange credentials for a session.

        Raises:
            BackendError: On rejection, transport failure, or a malformed reply
        """
        response = await self._post(
            LOGIN_ENDPOINT,
            {"username": username, "password": password},
            auth=False,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise BackendError("Login response was not JSON", status_code=response.status_code) from e

        token = data.get("token") if isinstance(data, dict) else None
        user_id = data.get("user_id") if isinstance(data, dict) else None
        if not token or user_id is None:
            raise BackendError("Login response is missing token or user_id", status_code=response.status_code)
        try:
            role = Role.from_wire(data.get("role"))
        except ValueError as e:
            raise BackendError(str(e), status_code=response.status_code) from e

        return Session(token=token, role=role, user_id=user_id)

    async def register(self, payload: dict[str, Any]) -> None:
        """Create an account. Success carries no session."""
        await self._post(REGISTER_ENDPOINT, payload, auth=False)

    # =========================================================================
    # Courses
    # =========================================================================

    async def list_courses(self) -> list[Course]:
        """Fetch every course visible to the current session."""
        response = await self._get(COURSES_ENDPOINT)
        courses = self._parse_list(response, Course)
        logger.debug(f"Fetched {len(courses)} courses")
        return courses

    async def create_course(self, payload: dict[str, Any]) -> None:
        await self._post(COURSES_ENDPOINT, payload)

    # =========================================================================
    # Modules
    # =========================================================================

    async def list_modules(self, course_id: int) -> list[Module]:
        """Fetch all modules of one course."""
        response = await self._get(MODULES_ENDPOINT, params={"course_id": course_id})
        modules = self._parse_list(response, Module)
        logger.debug(f"Fetched {len(modules)} modules for course {course_id}")
        return modules

    async def create_module(self, payload: dict[str, Any]) -> None:
        await self._post(MODULES_ENDPOINT, payload)
