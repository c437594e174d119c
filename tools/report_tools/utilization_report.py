# --- START OF FILE utilization_report.py ---

from mcp.server.fastmcp import FastMCP

from context import AppContext, get_app_context
from core.utilization import utilization_band
from models import UtilitySummary, UtilizationSummary
from tools.common import format_number, run_page
from logging_config import get_logger

logger = get_logger(__name__)


def render_utilization(summary: UtilizationSummary) -> str:
    lines = [
        "📦 **Storage Utilization**",
        f"Total capacity: {format_number(summary.total_capacity)}",
        f"Total occupied: {format_number(summary.total_occupied)}",
        f"Global utilization: {summary.global_utilization:.1f}% ({utilization_band(summary.global_utilization)})",
    ]
    stats = summary.statistics
    if summary.warehouses:
        lines.append(
            f"Per-warehouse spread: mean {stats.get('mean', 0):.1f}%, "
            f"min {stats.get('min', 0):.1f}%, max {stats.get('max', 0):.1f}%"
        )
    lines.append("")
    for item in summary.warehouses:
        flag = " ⚠️ batches unavailable" if item.fetch_failed else ""
        lines.append(
            f"• **{item.name or item.warehouse_id or 'Unnamed'}**: "
            f"{format_number(item.current_occupancy)}/{format_number(item.normalized_capacity)} "
            f"({item.utilization_percent:.1f}% - {utilization_band(item.utilization_percent)}){flag}"
        )
    if not summary.warehouses:
        lines.append("No warehouses to report on.")
    return "\n".join(lines)


def render_utility(summary: UtilitySummary) -> str:
    return (
        f"📦 Server utilization: {summary.used_text} "
        f"({summary.utilization_percent:.1f}% - {utilization_band(summary.utilization_percent)})"
    )


async def show_utilization(app_ctx: AppContext) -> str:
    return await run_page(app_ctx, "utility", app_ctx.aggregator.collect, render_utilization)


async def show_utility_summary(app_ctx: AppContext) -> str:
    return await run_page(app_ctx, "utility-summary", app_ctx.client.fetch_utility_summary, render_utility)


def register_utilization_tools(mcp: FastMCP):
    """Register utilization tools."""

    logger.info("Registering utilization tools with MCP server")

    @mcp.tool()
    async def utilization_overview() -> str:
        """
        Computes storage utilization for every warehouse from its batches, plus
        global totals. A warehouse whose batches cannot be fetched counts as empty.
        """
        try:
            return await show_utilization(get_app_context(mcp))
        except Exception as e:
            logger.exception("Utility load error")
            return f"❌ Error computing utilization: {str(e)}"

    @mcp.tool()
    async def utility_summary() -> str:
        """Shows the backend's own capacity/occupancy totals."""
        try:
            return await show_utility_summary(get_app_context(mcp))
        except Exception as e:
            logger.exception("Utility summary error")
            return f"❌ Error loading utility summary: {str(e)}"


# --- END OF FILE utilization_report.py ---
