# --- START OF FILE tools/sensor_tools.py ---

from typing import List
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from all_types.request_dtypes import ReqCreateSensor, validate_form
from context import AppContext, get_app_context
from models import Sensor
from tools.common import require_current_warehouse, run_action, run_page
from logging_config import get_logger

logger = get_logger(__name__)


def render_sensors(sensors: List[Sensor]) -> str:
    if not sensors:
        return "📂 No sensors in this warehouse. Use `create_sensor` to register one."
    lines = [f"📡 **Sensors** ({len(sensors)}):"]
    for s in sensors:
        device = f" | device: {s.device_id}" if s.device_id else ""
        lines.append(f"• `{s.id}` {s.sensor_type} @ {s.ip_address} [{s.status or 'available'}]{device}")
    return "\n".join(lines)


async def show_sensors(app_ctx: AppContext) -> str:
    async def fetch() -> List[Sensor]:
        stored = require_current_warehouse(app_ctx)
        return await app_ctx.client.list_sensors(stored.id)

    return await run_page(app_ctx, "create-sensor", fetch, render_sensors)


async def create(app_ctx: AppContext, ip_address: str, sensor_type: str, device_id: str = "") -> str:
    async def action():
        req = validate_form(ReqCreateSensor, ip_address=ip_address, sensor_type=sensor_type, device_id=device_id)
        stored = require_current_warehouse(app_ctx)
        await app_ctx.client.create_sensor(stored.id, req)
        return req

    return await run_action(
        app_ctx,
        "create-sensor",
        action,
        lambda req: f"✅ Sensor {req.sensor_type} @ {req.ip_address} registered.",
        failure_prefix="Failed to create sensor",
    )


def register_sensor_tools(mcp: FastMCP):
    """Register sensor tools for the selected warehouse."""

    logger.info("Registering sensor tools with MCP server")

    @mcp.tool()
    async def list_sensors() -> str:
        """Lists sensors installed in the selected warehouse."""
        try:
            return await show_sensors(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error listing sensors")
            return f"❌ Error listing sensors: {str(e)}"

    @mcp.tool()
    async def create_sensor(
        ip_address: str = Field(description="Sensor IP address."),
        sensor_type: str = Field(description="Sensor type, e.g. 'temperature' or 'humidity'."),
        device_id: str = Field(default="", description="Optional hardware device id."),
    ) -> str:
        """Registers a sensor in the selected warehouse."""
        try:
            return await create(get_app_context(mcp), ip_address, sensor_type, device_id)
        except Exception as e:
            logger.exception("Error creating sensor")
            return f"❌ Error creating sensor: {str(e)}"
