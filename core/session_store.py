"""
Session management for the dashboard MCP server.
Single source of truth for "is the user authenticated".
"""

import time
from typing import Callable, Optional

from core.local_storage import LocalStorage
from models import Session
from logging_config import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "token"
TOKEN_EXPIRY_KEY = "token_expiry"
USER_KEY = "mail"


def now_epoch_ms() -> int:
    return int(time.time() * 1000)


class SessionStore:
    """Stores the bearer token, its expiry (epoch ms) and the user's email."""

    def __init__(self, storage: LocalStorage, clock: Callable[[], int] = now_epoch_ms):
        self.storage = storage
        self.clock = clock

    async def set_session(self, token: str, ttl_ms: int, user_identifier: str) -> None:
        expires_at = self.clock() + int(ttl_ms)
        await self.storage.set_items(
            {TOKEN_KEY: token, TOKEN_EXPIRY_KEY: str(expires_at), USER_KEY: user_identifier}
        )
        logger.info(f"Session stored for {user_identifier} (expires at {expires_at})")

    def get_session(self) -> Optional[Session]:
        token = self.storage.get_item(TOKEN_KEY)
        expiry = self.storage.get_item(TOKEN_EXPIRY_KEY)
        user = self.storage.get_item(USER_KEY)
        if not token or not expiry or user is None:
            return None
        try:
            expires_at = int(float(expiry))
        except (ValueError, OverflowError):
            logger.warning(f"Ignoring malformed token expiry: {expiry!r}")
            return None
        return Session(token=token, expires_at_epoch_ms=expires_at, user_identifier=user)

    def is_valid(self) -> bool:
        """Pure check of stored state against the wall clock. No I/O."""
        session = self.get_session()
        return session is not None and not session.is_expired(self.clock())

    async def clear_session(self) -> None:
        await self.storage.remove_items(TOKEN_KEY, TOKEN_EXPIRY_KEY, USER_KEY)
        logger.info("Session cleared")
