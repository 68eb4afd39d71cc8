"""
Login / registration state machine.

States:
    anonymous --submit--> submitting --success--> authenticated (login)
                                     --success--> anonymous     (register)
                                     --failure--> error
    error --submit--> submitting
    any --sign_out--> anonymous    (an in-flight submit is dropped)

Only a successful login writes the SessionStore.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from .errors import AuthFailure, BackendError, InvalidTransition
from .models import Credentials, Session
from .session_store import SessionStore

if TYPE_CHECKING:
    from ..integrations.backend_client import BackendClient

LOGIN_OK = "Login successful!"
REGISTER_OK = "Registration successful! Please login."
GENERIC_ERROR = "An error occurred"
SERVER_ERROR = "Server error. Please try again."
SAVE_ERROR = "Could not store the session locally."


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    SUBMITTING = "submitting"
    AUTHENTICATED = "authenticated"
    ERROR = "error"


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"

    @property
    def other(self) -> AuthMode:
        return AuthMode.REGISTER if self is AuthMode.LOGIN else AuthMode.LOGIN


class AuthFlow:
    """Drives the login/registration exchange and owns sign-out."""

    def __init__(self, client: BackendClient, session_store: SessionStore):
        self.client = client
        self.session_store = session_store
        self.mode = AuthMode.LOGIN
        self.message = ""
        self._generation = 0
        self.state = (
            AuthState.AUTHENTICATED
            if session_store.current.is_authenticated
            else AuthState.ANONYMOUS
        )

    @property
    def session(self) -> Session:
        return self.session_store.current

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    @property
    def accepts_input(self) -> bool:
        return self.state in (AuthState.ANONYMOUS, AuthState.ERROR)

    # =========================================================================
    # Mode
    # =========================================================================

    def set_mode(self, mode: AuthMode) -> None:
        if not self.accepts_input:
            raise InvalidTransition(f"Cannot switch to {mode.value} while {self.state.value}")
        self.mode = mode

    def toggle_mode(self) -> AuthMode:
        self.set_mode(self.mode.other)
        return self.mode

    # =========================================================================
    # Submit
    # =========================================================================

    async def submit(self, credentials: Credentials) -> Session | None:
        """
        Submit the form in the current mode.

        Returns:
            The new Session after a login, None after a registration or
            when a sign-out overtook the request

        Raises:
            AuthFailure: Backend rejected the request or was unreachable
            InvalidTransition: Already submitting or signed in
        """
        if not self.accepts_input:
            raise InvalidTransition(f"Cannot submit while {self.state.value}")

        self.state = AuthState.SUBMITTING
        self.message = ""
        mode = self.mode
        ticket = self._generation

        try:
            if mode is AuthMode.LOGIN:
                session = await self.client.login(credentials.username, credentials.password)
            else:
                await self.client.register(credentials.register_payload())
                session = None
        except BackendError as e:
            if ticket != self._generation:
                logger.debug(f"Dropping {mode.value} failure that finished after sign-out")
                return None
            self.state = AuthState.ERROR
            if e.is_transport_error:
                self.message = SERVER_ERROR
            else:
                self.message = e.error or GENERIC_ERROR
            logger.warning(f"{mode.value} failed for {credentials.username}: {e}")
            raise AuthFailure(self.message) from e

        if ticket != self._generation:
            logger.debug(f"Dropping {mode.value} result that finished after sign-out")
            return None

        if session is None:
            self.state = AuthState.ANONYMOUS
            self.mode = AuthMode.LOGIN
            self.message = REGISTER_OK
            logger.info(f"Registered {credentials.username} as {credentials.role.value}")
            return None

        try:
            self.session_store.save(session)
        except OSError as e:
            self.state = AuthState.ERROR
            self.message = SAVE_ERROR
            raise AuthFailure(self.message) from e

        self.state = AuthState.AUTHENTICATED
        self.message = LOGIN_OK
        logger.info(f"Logged in as user {session.user_id} ({session.role.value})")
        return session

    # =========================================================================
    # Sign-out
    # =========================================================================

    def sign_out(self) -> None:
        """
        Clear the session unconditionally and return to the login form.

        A login or registration still in flight can no longer commit.
        """
        self._generation += 1
        self.session_store.clear()
        self.state = AuthState.ANONYMOUS
        self.mode = AuthMode.LOGIN
        self.message = ""
        logger.info("Signed out")
