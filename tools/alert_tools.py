# --- START OF FILE tools/alert_tools.py ---

from typing import List, Tuple
from mcp.server.fastmcp import FastMCP

from context import AppContext, get_app_context
from models import Alert
from tools.common import run_action, run_page
from logging_config import get_logger

logger = get_logger(__name__)


def split_alerts(alerts: List[Alert]) -> Tuple[List[Alert], List[Alert]]:
    """(unresolved, resolved); a missing is_resolved counts as unresolved."""
    unresolved = [a for a in alerts if not a.is_resolved]
    resolved = [a for a in alerts if a.is_resolved]
    return unresolved, resolved


def _alert_line(alert: Alert) -> str:
    when = alert.created_at.isoformat(timespec="minutes") if alert.created_at else "unknown time"
    detail = f" - {alert.message}" if alert.message else ""
    return (
        f"• [{when}] **{alert.alert_type or 'alert'}** "
        f"(sensor `{alert.sensor_id or 'n/a'}`, warehouse `{alert.warehouse_id or 'n/a'}`){detail}"
    )


def render_alerts(alerts: List[Alert]) -> str:
    unresolved, resolved = split_alerts(alerts)
    lines = [f"🚨 **Active alerts** ({len(unresolved)}):"]
    lines += [_alert_line(a) for a in unresolved] or ["All clear."]
    lines.append("")
    lines.append(f"✔️ **Resolved** ({len(resolved)}):")
    lines += [_alert_line(a) for a in resolved] or ["None."]
    return "\n".join(lines)


async def show_alerts(app_ctx: AppContext) -> str:
    return await run_page(app_ctx, "alerts", app_ctx.client.list_alerts, render_alerts)


async def resolve_all(app_ctx: AppContext) -> str:
    async def action():
        await app_ctx.client.resolve_all_alerts()
        page = app_ctx.pages.get("alerts")
        if page is not None and page.has_data:
            page.data = [a.model_copy(update={"is_resolved": True}) for a in page.data]
        return None

    return await run_action(
        app_ctx, "alerts", action, lambda _: "✅ All alerts marked as resolved.", failure_prefix="Resolution failed"
    )


def register_alert_tools(mcp: FastMCP):
    """Register alert tools."""

    logger.info("Registering alert tools with MCP server")

    @mcp.tool()
    async def list_alerts() -> str:
        """Lists sensor alerts, active first, then resolved."""
        try:
            return await show_alerts(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error listing alerts")
            return f"❌ Error listing alerts: {str(e)}"

    @mcp.tool()
    async def resolve_all_alerts() -> str:
        """Marks every alert as resolved."""
        try:
            return await resolve_all(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error resolving alerts")
            return f"❌ Error resolving alerts: {str(e)}"
