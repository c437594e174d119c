"""
Application context for the dashboard MCP server.
Wires the services once and hands them to tools explicitly, so tests can
build a context against a temporary storage file and a fake backend.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Optional

from config import config, ENDPOINTS, EndpointConfig
from core.context_store import WarehouseContextStore
from core.gateway import ApiGateway
from core.local_storage import LocalStorage
from core.page_state import PageLoader
from core.route_guard import RouteGuard
from core.session_store import SessionStore, now_epoch_ms
from core.utilization import UtilizationAggregator
from core.warehouse_client import WarehouseClient

# Use forward references to avoid circular imports
if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP


@dataclass
class AppContext:
    """Everything a tool needs; one instance per server."""

    storage: LocalStorage
    session_store: SessionStore
    context_store: WarehouseContextStore
    gateway: ApiGateway
    client: WarehouseClient
    guard: RouteGuard
    aggregator: UtilizationAggregator
    pages: Dict[str, PageLoader] = field(default_factory=dict)
    active_page: Optional[str] = None

    def navigate(self, page: str) -> PageLoader:
        """Switch to `page`, discarding whatever the previous page had in flight."""
        if self.active_page and self.active_page != page and self.active_page in self.pages:
            self.pages[self.active_page].cancel()
        self.active_page = page
        if page not in self.pages:
            self.pages[page] = PageLoader(page)
        return self.pages[page]


def build_app_context(
    storage_path: Optional[str] = None,
    base_url: Optional[str] = None,
    clock: Callable[[], int] = now_epoch_ms,
    endpoints: EndpointConfig = ENDPOINTS,
) -> AppContext:
    storage = LocalStorage(storage_path or config.storage_path)
    session_store = SessionStore(storage, clock=clock)
    gateway = ApiGateway(
        session_store,
        base_url or endpoints.backend_base_url,
        timeout_seconds=config.request_timeout_seconds,
    )
    client = WarehouseClient(gateway, session_store, endpoints)
    return AppContext(
        storage=storage,
        session_store=session_store,
        context_store=WarehouseContextStore(storage),
        gateway=gateway,
        client=client,
        guard=RouteGuard(session_store),
        aggregator=UtilizationAggregator(client),
    )


def get_app_context(mcp: "FastMCP") -> AppContext:
    """
    A typed helper to retrieve the AppContext attached to the server.
    This provides full IntelliSense for the session and context stores.
    """
    return mcp.app_context
