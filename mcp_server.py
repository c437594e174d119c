"""
MCP Server for the cold-chain warehouse dashboard.
Exposes login, warehouses, products, sensors, batches, alerts, reports and
utilization as MCP tools over a REST backend.
"""

import asyncio
import os
import uvicorn
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

# FastMCP imports
from mcp.server.fastmcp import FastMCP
from starlette.middleware.cors import CORSMiddleware
from starlette.applications import Starlette

# Local imports
from logging_config import get_logger
from config import config, BACKEND_BASE_URL
from context import AppContext, build_app_context
from core.cleanup import expire_sessions_periodically

# Tool imports
from tools.auth_tools import register_auth_tools
from tools.warehouse_tools import register_warehouse_tools
from tools.product_tools import register_product_tools
from tools.sensor_tools import register_sensor_tools
from tools.alert_tools import register_alert_tools
from tools.report_tools import register_ai_report_tools, register_utilization_tools

logger = get_logger(__name__)


# ===== Lifespan =====
@asynccontextmanager
async def dashboard_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Load durable storage and run the session expiry sweep while serving."""
    app_ctx = server.app_context
    await app_ctx.storage.load()
    expiry_task = asyncio.create_task(expire_sessions_periodically(app_ctx.session_store))
    try:
        yield app_ctx
    finally:
        expiry_task.cancel()
        try:
            await expiry_task
        except asyncio.CancelledError:
            pass


# ===== FastMCP with CORS Support =====
class FastMCPWithCORS(FastMCP):
    """FastMCP server with CORS middleware for SSE transport.

    This subclass adds CORS headers to allow browser-based clients
    like the MCP Inspector to connect to the SSE endpoint. It also carries
    the AppContext that tools receive through get_app_context.
    """

    def __init__(self, name: str, app_context: AppContext, **kwargs):
        self.app_context = app_context
        super().__init__(name, lifespan=dashboard_lifespan, **kwargs)

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Override sse_app to add CORS middleware."""
        app = super().sse_app(mount_path)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],  # In production, specify your client domains
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        return app

    def run(self, transport: str = "sse"):
        """Override run to bind to 0.0.0.0 instead of 127.0.0.1"""
        host = os.getenv("MCP_HOST", "0.0.0.0")
        port = int(os.getenv("MCP_SERVER_PORT", str(self.settings.port)))

        if transport == "sse":
            app = self.sse_app()
            uvicorn.run(app, host=host, port=port)
        else:
            super().run(transport)


def create_server(app_context: AppContext = None) -> FastMCPWithCORS:
    server = FastMCPWithCORS(
        "coldchain-dashboard", app_context=app_context or build_app_context(), port=8001
    )

    # Register all tools
    register_auth_tools(server)
    register_warehouse_tools(server)
    register_product_tools(server)
    register_sensor_tools(server)
    register_alert_tools(server)
    register_ai_report_tools(server)
    register_utilization_tools(server)

    # ===== Resource Implementations =====
    @server.resource("session://current")
    async def get_current_session() -> str:
        """Get information about the current session."""
        session_store = server.app_context.session_store
        session = session_store.get_session()
        if session and session_store.is_valid():
            return f"Current session: {session.user_identifier} (expires at {session.expires_at_epoch_ms} ms)"
        else:
            return "No active session"

    @server.resource("config://server")
    def get_server_config() -> str:
        """Get server configuration information."""
        return f"""Cold-Chain Dashboard MCP Server Configuration:
- Backend URL: {BACKEND_BASE_URL}
- Session TTL: {config.default_ttl_ms // 60000} minutes ({config.remember_me_ttl_ms // 3600000} hours with remember me)
- Storage Path: {config.storage_path}
- Expiry Check Interval: {config.expiry_check_interval_seconds} seconds
- Server Name: coldchain-dashboard
- Transport Support: stdio, SSE
"""

    return server


# ===== FastMCP Server =====
mcp = create_server()


# ===== Main Function =====
def main():
    """Main entry point for the MCP server."""
    logger.info("❄️ Cold-Chain Warehouse Dashboard MCP Server")

    # Get host and port from environment
    host = os.getenv("MCP_HOST", "0.0.0.0")
    port = int(os.getenv("MCP_SERVER_PORT", "8001"))

    logger.info(f"🌐 Starting SSE transport on http://{host}:{port}/sse")
    logger.info(f"🔍 Connect MCP Inspector to: http://localhost:{port}/sse")
    logger.info(f"🔗 Backend: {BACKEND_BASE_URL}")

    # Get the SSE app and run it with uvicorn
    mcp.run("sse")


if __name__ == "__main__":
    main()
