# --- START OF FILE tools/product_tools.py ---

from typing import List, Optional
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from all_types.request_dtypes import ReqCreateProduct, validate_form
from context import AppContext, get_app_context
from core.errors import ValidationError
from models import Product
from tools.common import format_number, run_action, run_page
from logging_config import get_logger

logger = get_logger(__name__)


def _range(low: Optional[float], high: Optional[float], unit: str) -> str:
    if low is None or high is None:
        return "n/a"
    return f"{format_number(low)}–{format_number(high)}{unit}"


def render_products(products: List[Product]) -> str:
    if not products:
        return "📂 No products registered. Use `create_product` to add one."
    lines = [f"🧪 **Product Catalog** ({len(products)}):", ""]
    for p in products:
        lines.append(f"• **{p.name}** (id: `{p.id}`)")
        lines.append(
            f"  Temp: {_range(p.min_temp, p.max_temp, '°C')} | Humidity: {_range(p.min_humi, p.max_humi, '%')}"
        )
        if p.description:
            lines.append(f"  {p.description}")
    return "\n".join(lines)


async def show_products(app_ctx: AppContext) -> str:
    return await run_page(app_ctx, "create-product", app_ctx.client.list_products, render_products)


async def create(app_ctx: AppContext, **form) -> str:
    async def action():
        req = validate_form(ReqCreateProduct, **form)
        await app_ctx.client.create_product(req)
        return req

    return await run_action(
        app_ctx,
        "create-product",
        action,
        lambda req: f"✅ Product **{req.name}** registered.",
        failure_prefix="Failed to register product",
    )


async def remove(app_ctx: AppContext, product_id: str) -> str:
    async def action():
        if not product_id.strip():
            raise ValidationError("Product id required.")
        await app_ctx.client.delete_product(product_id.strip())
        page = app_ctx.pages.get("create-product")
        if page is not None and page.has_data:
            page.data = [p for p in page.data if p.id != product_id.strip()]
        return product_id.strip()

    return await run_action(
        app_ctx, "create-product", action, lambda pid: f"✅ Product `{pid}` deleted.", failure_prefix="Deletion failed"
    )


def register_product_tools(mcp: FastMCP):
    """Register product catalog tools."""

    logger.info("Registering product tools with MCP server")

    @mcp.tool()
    async def list_products() -> str:
        """Lists the product catalog with temperature and humidity envelopes."""
        try:
            return await show_products(get_app_context(mcp))
        except Exception as e:
            logger.exception("Error listing products")
            return f"❌ Error listing products: {str(e)}"

    @mcp.tool()
    async def create_product(
        name: str = Field(description="Product name."),
        min_temp: float = Field(description="Minimum storage temperature (°C)."),
        max_temp: float = Field(description="Maximum storage temperature (°C)."),
        min_humi: float = Field(description="Minimum relative humidity (0-100%)."),
        max_humi: float = Field(description="Maximum relative humidity (0-100%)."),
        description: str = Field(default="", description="Optional description."),
    ) -> str:
        """Registers a product with its cold-chain envelope."""
        try:
            return await create(
                get_app_context(mcp),
                name=name,
                description=description,
                min_temp=min_temp,
                max_temp=max_temp,
                min_humi=min_humi,
                max_humi=max_humi,
            )
        except Exception as e:
            logger.exception("Error creating product")
            return f"❌ Error creating product: {str(e)}"

    @mcp.tool()
    async def delete_product(
        product_id: str = Field(description="Id of the product to delete."),
    ) -> str:
        """Deletes a product from the catalog."""
        try:
            return await remove(get_app_context(mcp), product_id)
        except Exception as e:
            logger.exception("Error deleting product")
            return f"❌ Error deleting product: {str(e)}"
