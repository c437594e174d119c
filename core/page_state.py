"""
Per-page load state: Idle -> Loading -> Loaded | Failed.

Each load is stamped with a generation number. Leaving the page (cancel)
bumps the generation, so a response that arrives afterwards is dropped
instead of updating a page nobody is looking at.
"""

from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from core.errors import DashboardError, NetworkUnavailable, RequestFailed
from logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class PageState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class StaleResult(Exception):
    """The page was left before its request finished."""


class PageLoader(Generic[T]):
    def __init__(self, name: str):
        self.name = name
        self.state = PageState.IDLE
        self.data: Optional[T] = None
        self.error: Optional[DashboardError] = None
        self._generation = 0

    def start(self) -> int:
        self._generation += 1
        self.state = PageState.LOADING
        self.error = None
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def resolve(self, token: int, data: T) -> bool:
        if not self.is_current(token):
            logger.info(f"Discarding stale result for page '{self.name}'")
            return False
        self.data = data
        self.state = PageState.LOADED
        return True

    def fail(self, token: int, error: DashboardError) -> bool:
        if not self.is_current(token):
            logger.info(f"Discarding stale failure for page '{self.name}': {error}")
            return False
        # Previously loaded data stays available next to the error
        self.error = error
        self.state = PageState.FAILED
        return True

    def cancel(self) -> None:
        """Leave the page; in-flight results will be ignored."""
        self._generation += 1
        if self.state is PageState.LOADING:
            self.state = PageState.LOADED if self.data is not None else PageState.IDLE

    async def load(self, fetch: Callable[[], Awaitable[T]]) -> T:
        """
        Run `fetch` under a fresh token.

        Raises:
            StaleResult: the page was cancelled while fetch was in flight
            RequestFailed / NetworkUnavailable: recorded on the page, then re-raised
        """
        token = self.start()
        try:
            result = await fetch()
        except (RequestFailed, NetworkUnavailable) as e:
            if not self.fail(token, e):
                raise StaleResult(self.name) from e
            raise
        except BaseException:
            # SessionExpired and friends are not page-local
            if self.is_current(token):
                self.state = PageState.LOADED if self.data is not None else PageState.IDLE
            raise
        if not self.resolve(token, result):
            raise StaleResult(self.name)
        return result

    @property
    def has_data(self) -> bool:
        return self.data is not None
