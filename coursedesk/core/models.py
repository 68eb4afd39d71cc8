"""
Domain models for coursedesk.

Courses and modules are pydantic models parsed from backend payloads; the
client never edits them, it only replaces its cached lists. Sessions, drafts
and credentials are plain dataclasses owned by the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import DraftInvalid

UserId = Union[int, str]


class Role(str, Enum):
    """User role. Values are the backend's wire names."""

    LEARNER = "student"
    AUTHOR = "instructor"

    @classmethod
    def from_wire(cls, value: Any) -> Role:
        """Parse a backend role string, raising ValueError when unknown."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None

    @property
    def is_author(self) -> bool:
        return self is Role.AUTHOR

    @property
    def label(self) -> str:
        return "Instructor" if self.is_author else "Student"


@dataclass(frozen=True)
class Session:
    """
    Authenticated identity held client-side.

    All-or-nothing: either all three fields are set or none are.
    """

    token: str | None = None
    role: Role | None = None
    user_id: UserId | None = None

    def __post_init__(self) -> None:
        present = [self.token is not None, self.role is not None, self.user_id is not None]
        if any(present) and not all(present):
            raise ValueError("Session requires token, role and user_id together")

    @classmethod
    def empty(cls) -> Session:
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def is_author(self) -> bool:
        return self.role is Role.AUTHOR


class Course(BaseModel):
    """A course as returned by ``GET /courses``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str = Field(min_length=1)
    description: str = ""


class Module(BaseModel):
    """A module as returned by ``GET /modules``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    course_id: int
    title: str = Field(min_length=1)
    description: str = ""
    content: str | None = None


def _require(value: str, field_name: str, label: str) -> None:
    if not value.strip():
        raise DraftInvalid(f"{label} is required", field=field_name)


@dataclass
class CourseDraft:
    """In-progress course form value."""

    title: str = ""
    description: str = ""

    def validate(self) -> None:
        _require(self.title, "title", "Course title")
        _require(self.description, "description", "Course description")

    def to_payload(self, instructor_id: UserId) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "instructor_id": instructor_id,
        }


@dataclass
class ModuleDraft:
    """In-progress module form value. Content is optional."""

    title: str = ""
    description: str = ""
    content: str = ""

    def validate(self) -> None:
        _require(self.title, "title", "Module title")
        _require(self.description, "description", "Module description")

    def to_payload(self, course_id: int) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "course_id": course_id,
        }


@dataclass
class Credentials:
    """Login / registration form value."""

    username: str
    password: str
    email: str = ""
    role: Role = field(default=Role.LEARNER)

    def register_payload(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "role": self.role.value,
        }
