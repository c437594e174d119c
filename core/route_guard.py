"""
Route guard for protected dashboard pages.

Two states, no "checking" state in between: validity is a synchronous local
check, so it is settled before a page loader runs.
"""

from enum import Enum
from typing import Optional

from core.session_store import SessionStore
from logging_config import get_logger

logger = get_logger(__name__)

LOGIN_VIEW = "login"


class GuardState(str, Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"


class RouteGuard:
    def __init__(self, session_store: SessionStore):
        self.session_store = session_store
        # Unset until the first entry check; storage may not be loaded yet
        self._state: Optional[GuardState] = None

    @property
    def state(self) -> GuardState:
        if self._state is None:
            return GuardState.AUTHORIZED if self.session_store.is_valid() else GuardState.UNAUTHORIZED
        return self._state

    @property
    def redirect_to(self) -> Optional[str]:
        return None if self.state is GuardState.AUTHORIZED else LOGIN_VIEW

    async def enter(self, page: str = "") -> GuardState:
        """Check the session on entry to a protected page."""
        if self.session_store.is_valid():
            self._state = GuardState.AUTHORIZED
            return self._state

        logger.info(f"Blocked entry to '{page or 'protected page'}': no valid session")
        await self._deauthorize()
        return self.state

    async def on_session_expired(self) -> GuardState:
        """Gateway reported a 401 mid-page."""
        logger.info("Session expired during request; redirecting to login")
        await self._deauthorize()
        return self.state

    async def _deauthorize(self) -> None:
        # Idempotent with SessionStore.clear_session
        await self.session_store.clear_session()
        self._state = GuardState.UNAUTHORIZED
