"""
API gateway: the only place requests reach the backend.
Attaches the bearer token, maps HTTP failures onto the dashboard error
taxonomy and clears the session on 401.
"""

import asyncio
import json
from typing import Any, Optional

import aiohttp

from core.errors import NetworkUnavailable, RequestFailed, SessionExpired
from core.session_store import SessionStore
from logging_config import get_logger

logger = get_logger(__name__)


def extract_error_message(text: str, status: int) -> str:
    """`error` or `message` from a JSON body, else the raw text."""
    if text:
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            for key in ("error", "message"):
                if parsed.get(key):
                    return str(parsed[key])
        return text
    return f"Server error: {status}"


class ApiGateway:
    """POSTs JSON to `base_url + path` on behalf of the stored session."""

    def __init__(
        self,
        session_store: SessionStore,
        base_url: str,
        timeout_seconds: Optional[float] = None,
    ):
        self.session_store = session_store
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _client_kwargs(self) -> dict:
        if self.timeout_seconds is None:
            return {}
        return {"timeout": aiohttp.ClientTimeout(total=self.timeout_seconds)}

    async def call(self, path: str, body: Optional[dict] = None, authenticated: bool = True) -> Any:
        """
        Issue the request and return the parsed JSON body.

        Raises:
            SessionExpired: 401 from the backend, or no stored session
            RequestFailed: any other non-2xx status, or a non-JSON 2xx body
            NetworkUnavailable: no response at all
        """
        endpoint_url = self.base_url + path
        headers = {"Content-Type": "application/json"}

        if authenticated:
            session = self.session_store.get_session()
            if session is None:
                await self.session_store.clear_session()
                raise SessionExpired("You are not logged in.")
            headers["Authorization"] = f"Bearer {session.token}"

        logger.info(f"POST {endpoint_url}")
        try:
            async with aiohttp.ClientSession(**self._client_kwargs()) as http_session:
                async with http_session.post(
                    endpoint_url, json=body or {}, headers=headers
                ) as response:
                    status = response.status
                    text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Network failure calling {endpoint_url}: {e!r}")
            raise NetworkUnavailable() from e

        # On /login a 401 means bad credentials, not an expired session
        if status == 401 and authenticated:
            logger.warning(f"401 from {path}; clearing session")
            await self.session_store.clear_session()
            raise SessionExpired()

        if not 200 <= status < 300:
            message = extract_error_message(text, status)
            logger.error(f"Backend error: {status} - {message}")
            raise RequestFailed(status, message)

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError:
            logger.error(f"Non-JSON success body from {path}: {text[:200]!r}")
            raise RequestFailed(status, "Malformed response from server")
