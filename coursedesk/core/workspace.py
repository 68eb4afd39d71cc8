"""
Composition root.

Wires one SessionStore, one BackendClient, the AuthFlow and both
controllers together, and owns the cross-component reactions:
signing in refreshes the catalog, signing out drops every cache.

Usage:
    async with Workspace.from_settings(get_settings()) as ws:
        await ws.start()
        await ws.login(Credentials("alice", "secret"))
        await ws.catalog.select(1)
"""

from __future__ import annotations

from typing import Any

from config import Settings
from ..integrations.backend_client import BackendClient
from .auth_flow import AuthFlow, AuthMode
from .catalog import CourseCatalogController
from .models import Credentials, Session
from .modules import ModuleController
from .router import View, route
from .session_store import JsonFileSlot, SessionStore


class Workspace:
    """The signed-in (or not) client and everything hanging off it."""

    def __init__(self, client: BackendClient, session_store: SessionStore):
        self.client = client
        self.session_store = session_store
        self.auth = AuthFlow(client, session_store)
        self.modules = ModuleController(client, session_store)
        self.catalog = CourseCatalogController(client, session_store, self.modules)

    @classmethod
    def from_settings(cls, settings: Settings) -> Workspace:
        """Build a workspace over the on-disk session file, loading it once."""
        store = SessionStore(JsonFileSlot(settings.session_file))
        store.load()
        client = BackendClient(
            settings.api_base_url,
            session_store=store,
            timeout_seconds=settings.request_timeout_seconds,
        )
        return cls(client, store)

    async def __aenter__(self) -> Workspace:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    @property
    def session(self) -> Session:
        return self.session_store.current

    async def start(self) -> None:
        """Populate the catalog when a persisted session was restored."""
        if self.auth.is_authenticated:
            await self.catalog.refresh()

    async def login(self, credentials: Credentials) -> Session | None:
        if self.auth.mode is not AuthMode.LOGIN:
            self.auth.set_mode(AuthMode.LOGIN)
        session = await self.auth.submit(credentials)
        if session is not None:
            await self.catalog.refresh()
        return session

    async def register(self, credentials: Credentials) -> None:
        if self.auth.mode is not AuthMode.REGISTER:
            self.auth.set_mode(AuthMode.REGISTER)
        await self.auth.submit(credentials)

    def sign_out(self) -> None:
        self.auth.sign_out()
        self.catalog.reset()

    def view(self) -> View:
        return route(self.auth, self.catalog)
