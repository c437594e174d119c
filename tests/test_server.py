from config import config
from conftest import run
from core.cleanup import clear_expired_session
from mcp_server import create_server

EXPECTED_TOOLS = {
    "user_login", "user_signup", "google_login_url", "complete_google_login", "user_logout",
    "session_status", "list_warehouses", "select_warehouse", "create_warehouse",
    "warehouse_details", "delete_batch", "batch_options", "add_batch", "list_products",
    "create_product", "delete_product", "list_sensors", "create_sensor", "list_alerts",
    "resolve_all_alerts", "generate_report", "utilization_overview", "utility_summary",
}


def test_server_registers_every_dashboard_tool(make_app_ctx):
    ctx = make_app_ctx()
    server = create_server(ctx)

    names = {tool.name for tool in run(server.list_tools())}
    assert EXPECTED_TOOLS <= names
    assert server.app_context is ctx


def test_expiry_sweep_only_clears_expired_sessions(session_store, clock):
    run(session_store.set_session("tok", config.default_ttl_ms, "ops@example.com"))

    assert run(clear_expired_session(session_store)) is False
    assert session_store.get_session() is not None

    clock.advance(config.default_ttl_ms + 1)
    assert run(clear_expired_session(session_store)) is True
    assert session_store.get_session() is None
