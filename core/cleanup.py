"""
Background expiry sweep for the dashboard MCP server.
Clears a stored session once its token expiry has passed.
"""

import asyncio

from config import config
from core.session_store import SessionStore
from logging_config import get_logger

logger = get_logger(__name__)


async def clear_expired_session(session_store: SessionStore) -> bool:
    """Clear the stored session if it has expired. Returns True when cleared."""
    session = session_store.get_session()
    if session is None or not session.is_expired(session_store.clock()):
        return False
    logger.info(f"Session for {session.user_identifier} expired; clearing it")
    await session_store.clear_session()
    return True


async def expire_sessions_periodically(session_store: SessionStore, interval_seconds: int = None):
    """
    Periodic expiry check.
    Runs continuously in background until cancelled.
    """
    interval = interval_seconds or config.expiry_check_interval_seconds
    logger.info("Background session expiry task started")

    while True:
        try:
            await clear_expired_session(session_store)
            await asyncio.sleep(interval)

        except asyncio.CancelledError:
            logger.info("Background session expiry task cancelled")
            break
        except Exception as e:
            logger.error(f"Error in session expiry check: {e}")
            logger.exception("Full expiry check error details:")
            await asyncio.sleep(interval)
