# --- START OF FILE tools/warehouse_tools.py ---

from typing import List
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from all_types.request_dtypes import ReqCreateBatch, ReqCreateWarehouse, validate_form
from context import AppContext, get_app_context
from core.errors import ValidationError
from core.utilization import compute_warehouse_utilization, utilization_band
from models import HomeOverview, Sensor, WarehouseContext, WarehouseDetail
from tools.common import format_number, require_current_warehouse, run_action, run_page
from logging_config import get_logger

logger = get_logger(__name__)

AVAILABLE_SENSOR_STATUSES = ("available", "free")


def filter_available_sensors(sensors: List[Sensor]) -> List[Sensor]:
    """Sensors that can take a new batch: status available / free / unset."""
    return [s for s in sensors if not s.status or s.status in AVAILABLE_SENSOR_STATUSES]


# ===== Renderers =====

def render_home(overview: HomeOverview) -> str:
    lines = [f"🏭 **Your Warehouses** ({len(overview.warehouses)}) | 🚨 Alerts: {overview.alerts_count}", ""]
    if not overview.warehouses:
        lines.append("No warehouses yet. Use `create_warehouse` to add one.")
    for w in overview.warehouses:
        lines.append(f"• **{w.name or 'Unnamed'}** (id: `{w.id or 'n/a'}`)")
        lines.append(f"  Location: {w.location or 'n/a'} | Capacity: {format_number(w.storage_capacity)}")
    return "\n".join(lines)


def render_warehouse_detail(detail: WarehouseDetail) -> str:
    w = detail.warehouse
    load = compute_warehouse_utilization(w.id, w.storage_capacity, detail.batches)
    lines = [
        f"🏭 **{w.name or 'Warehouse'}** (id: `{w.id}`)",
        f"Location: {w.location or 'n/a'}",
        f"Load: {format_number(load.current_occupancy)} / {format_number(load.normalized_capacity)} "
        f"({load.utilization_percent:.1f}% - {utilization_band(load.utilization_percent)})",
        "",
        f"📦 **Batches** ({len(detail.batches)}):",
    ]
    if not detail.batches:
        lines.append("No batches stored. Use `add_batch` to deploy one.")
    for b in detail.batches:
        product = b.product_name or b.product_id or "unknown product"
        lines.append(
            f"• `{b.id or 'n/a'}`: {format_number(b.quantity)} units of {product} (sensor: {b.sensor_id or 'n/a'})"
        )
    return "\n".join(lines)


def render_batch_options(options: dict) -> str:
    products, sensors = options["products"], options["available_sensors"]
    if not products and not options["all_sensors"]:
        return (
            "⚠️ No products or sensors are registered for this warehouse yet. "
            "Create them with `create_product` and `create_sensor` before adding a batch."
        )
    lines = [f"🧪 **Products** ({len(products)}):"]
    lines += [f"• `{p.id}` {p.name}" for p in products] or ["None"]
    lines.append("")
    lines.append(f"📡 **Available sensors** ({len(sensors)}):")
    lines += [f"• `{s.id}` {s.sensor_type} @ {s.ip_address}" for s in sensors] or ["None free"]
    return "\n".join(lines)


# ===== Page operations =====

async def show_home(app_ctx: AppContext) -> str:
    return await run_page(app_ctx, "home", app_ctx.client.list_warehouses, render_home)


async def select(app_ctx: AppContext, warehouse: str) -> str:
    async def action() -> WarehouseContext:
        home = app_ctx.pages.get("home")
        if home is not None and home.has_data:
            warehouses = home.data.warehouses
        else:
            warehouses = (await app_ctx.client.list_warehouses()).warehouses

        wanted = warehouse.strip()
        match = next((w for w in warehouses if w.id == wanted), None)
        if match is None:
            match = next((w for w in warehouses if w.name.lower() == wanted.lower()), None)
        if match is None:
            raise ValidationError(f"No warehouse matches '{wanted}'. Use `list_warehouses` to see them.")
        if not match.id:
            logger.warning(f"Selected warehouse '{match.name}' has no id")
        await app_ctx.context_store.set_current_warehouse(match)
        return match

    return await run_action(
        app_ctx,
        "home",
        action,
        lambda w: f"✅ Selected warehouse **{w.name or w.id}** (id: `{w.id}`).",
    )


async def create(app_ctx: AppContext, name: str, location: str, capacity) -> str:
    async def action():
        req = validate_form(ReqCreateWarehouse, name=name, location=location, capacity=capacity)
        await app_ctx.client.create_warehouse(req)
        return req

    return await run_action(
        app_ctx,
        "create-warehouse",
        action,
        lambda req: f"✅ Warehouse **{req.name}** created in {req.location} with capacity {req.capacity}.",
        failure_prefix="Initialization failed",
    )


async def show_current_warehouse(app_ctx: AppContext) -> str:
    async def fetch() -> WarehouseDetail:
        stored = require_current_warehouse(app_ctx)
        return await app_ctx.client.get_warehouse_info(stored.id, fallback=stored)

    return await run_page(app_ctx, "warehouse", fetch, render_warehouse_detail)


async def remove_batch(app_ctx: AppContext, batch_id: str) -> str:
    async def action():
        if not batch_id.strip():
            raise ValidationError("Batch id required.")
        await app_ctx.client.delete_batch(batch_id.strip())
        page = app_ctx.pages.get("warehouse")
        if page is not None and page.has_data:
            page.data.batches = [b for b in page.data.batches if b.id != batch_id.strip()]
        return batch_id.strip()

    return await run_action(
        app_ctx, "warehouse", action, lambda b: f"✅ Batch `{b}` dispatched.", failure_prefix="Dispatch command failed"
    )


async def show_batch_options(app_ctx: AppContext) -> str:
    async def fetch() -> dict:
        stored = require_current_warehouse(app_ctx)
        products, sensors = await app_ctx.client.get_products_and_sensors(stored.id)
        return {
            "products": products,
            "all_sensors": sensors,
            "available_sensors": filter_available_sensors(sensors),
        }

    return await run_page(app_ctx, "add-batch", fetch, render_batch_options)


async def add(app_ctx: AppContext, product_id: str, sensor_id: str, quantity) -> str:
    async def action():
        req = validate_form(ReqCreateBatch, product_id=product_id, sensor_id=sensor_id, quantity=quantity)
        stored = require_current_warehouse(app_ctx)
        await app_ctx.client.create_batch(stored.id, req)
        return req, stored

    return await run_action(
        app_ctx,
        "add-batch",
        action,
        lambda r: f"✅ Deployed {format_number(r[0].quantity)} units of `{r[0].product_id}` "
                  f"on sensor `{r[0].sensor_id}` to **{r[1].name or r[1].id}**.",
        failure_prefix="Batch deployment failed",
    )


def register_warehouse_tools(mcp: FastMCP):
    """Register warehouse, warehouse-detail and batch tools."""

    logger.info("Registering warehouse tools with MCP server")

    @mcp.tool()
    async def list_warehouses() -> str:
        """Lists the user's warehouses with their capacity and the open alert count."""
        try:
            return await show_home(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error listing warehouses")
            return f"❌ Error listing warehouses: {str(e)}"

    @mcp.tool()
    async def select_warehouse(
        warehouse: str = Field(description="Warehouse id (or exact name) from `list_warehouses`."),
    ) -> str:
        """Makes a warehouse the current one for batch, sensor and detail tools."""
        try:
            return await select(get_app_context(mcp), warehouse)
        except Exception as e:
            logger.exception("Error selecting warehouse")
            return f"❌ Error selecting warehouse: {str(e)}"

    @mcp.tool()
    async def create_warehouse(
        name: str = Field(description="Warehouse name."),
        location: str = Field(description="Geographic location."),
        capacity: int = Field(description="Storage capacity in units, greater than 0."),
    ) -> str:
        """Creates a new warehouse."""
        try:
            return await create(get_app_context(mcp), name, location, capacity)
        except Exception as e:
            logger.exception("Error creating warehouse")
            return f"❌ Error creating warehouse: {str(e)}"

    @mcp.tool()
    async def warehouse_details() -> str:
        """Shows the selected warehouse: location, current load and its batches."""
        try:
            return await show_current_warehouse(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error loading warehouse details")
            return f"❌ Error loading warehouse: {str(e)}"

    @mcp.tool()
    async def delete_batch(
        batch_id: str = Field(description="Id of the batch to dispatch/remove."),
    ) -> str:
        """Removes a batch from the selected warehouse."""
        try:
            return await remove_batch(get_app_context(mcp), batch_id)
        except Exception as e:
            logger.exception("Error deleting batch")
            return f"❌ Error deleting batch: {str(e)}"

    @mcp.tool()
    async def batch_options() -> str:
        """Lists products and free sensors usable for a new batch in the selected warehouse."""
        try:
            return await show_batch_options(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error loading batch options")
            return f"❌ Error loading batch options: {str(e)}"

    @mcp.tool()
    async def add_batch(
        product_id: str = Field(description="Product id from `batch_options`."),
        sensor_id: str = Field(description="Free sensor id from `batch_options`."),
        quantity: float = Field(description="Number of units, greater than 0."),
    ) -> str:
        """Deploys a new batch into the selected warehouse."""
        try:
            return await add(get_app_context(mcp), product_id, sensor_id, quantity)
        except Exception as e:
            logger.exception("Error adding batch")
            return f"❌ Error adding batch: {str(e)}"
