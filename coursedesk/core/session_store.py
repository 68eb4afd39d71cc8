"""
Session persistence for coursedesk.

The token, role and user id live as three independent keys in a key-value
slot. The slot itself has no cross-key atomicity; SessionStore is what keeps
the persisted session all-or-nothing.

The default slot is a JSON file in ~/.coursedesk/session.json
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from loguru import logger

from .models import Role, Session

TOKEN_KEY = "token"
ROLE_KEY = "role"
USER_ID_KEY = "user_id"
SESSION_KEYS = (TOKEN_KEY, ROLE_KEY, USER_ID_KEY)


# =============================================================================
# Persistence Slots
# =============================================================================


class KeyValueSlot(ABC):
    """Process-external key-value storage. Each key is read/written on its own."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""


class MemorySlot(KeyValueSlot):
    """In-process slot, for tests and throwaway runs."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self.data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileSlot(KeyValueSlot):
    """
    Slot backed by a single JSON object on disk.

    The file is re-read on every access, so each key behaves like an
    independent storage cell. A corrupted or unreadable file reads as empty.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            if data:
                self._write(data)
            else:
                self.path.unlink()


# =============================================================================
# Session Store
# =============================================================================


class SessionStore:
    """
    Single writer for the client session.

    Everything else reads ``current``; only ``save`` and ``clear`` change it.
    """

    def __init__(self, slot: KeyValueSlot):
        self.slot = slot
        self._current = Session.empty()

    @property
    def current(self) -> Session:
        return self._current

    @property
    def token(self) -> str | None:
        return self._current.token

    def load(self) -> Session:
        """Read the persisted session. Partial leftovers are discarded."""
        token = self.slot.get(TOKEN_KEY)
        raw_role = self.slot.get(ROLE_KEY)
        user_id = self.slot.get(USER_ID_KEY)

        if token is None and raw_role is None and user_id is None:
            self._current = Session.empty()
            return self._current

        role: Role | None = None
        if raw_role is not None:
            try:
                role = Role.from_wire(raw_role)
            except ValueError:
                logger.warning(f"Persisted session has unknown role {raw_role!r}")

        if token is None or role is None or user_id is None:
            logger.warning("Discarding partially persisted session")
            self._delete_keys()
            self._current = Session.empty()
            return self._current

        self._current = Session(token=token, role=role, user_id=user_id)
        logger.debug(f"Loaded session for user {user_id} ({role.value})")
        return self._current

    def save(self, session: Session) -> None:
        """Persist all three fields. On a failed write nothing is left behind."""
        if not session.is_authenticated:
            raise ValueError("Cannot save an empty session; use clear()")

        try:
            self.slot.set(TOKEN_KEY, session.token)
            self.slot.set(ROLE_KEY, session.role.value)
            self.slot.set(USER_ID_KEY, session.user_id)
        except Exception:
            logger.error("Failed to persist session; clearing partial write")
            self._current = Session.empty()
            self._delete_keys()
            raise

        self._current = session

    def clear(self) -> None:
        """Forget the session in memory and in the slot."""
        self._current = Session.empty()
        self._delete_keys()

    def _delete_keys(self) -> None:
        for key in SESSION_KEYS:
            self.slot.delete(key)
