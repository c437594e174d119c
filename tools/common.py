"""
Shared plumbing for dashboard tools: route guard on entry, page state while
loading, and one place that turns dashboard errors into user-facing text.
"""

from typing import Any, Awaitable, Callable, Optional

from context import AppContext
from core.errors import (
    MissingContext,
    NetworkUnavailable,
    RequestFailed,
    SessionExpired,
    ValidationError,
)
from core.page_state import StaleResult
from core.route_guard import GuardState
from models import WarehouseContext
from logging_config import get_logger

logger = get_logger(__name__)

LOGIN_REQUIRED = (
    "🔒 You are not logged in or your session has expired. "
    "Please use the `user_login` tool first."
)
SELECT_WAREHOUSE_HINT = "Use `list_warehouses` and then `select_warehouse` to choose one."


def format_number(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


def require_current_warehouse(app_ctx: AppContext) -> WarehouseContext:
    warehouse = app_ctx.context_store.get_current_warehouse()
    if warehouse is None:
        raise MissingContext()
    if not warehouse.id:
        raise MissingContext("Invalid warehouse ID reference.")
    return warehouse


async def _enter(app_ctx: AppContext, page: str) -> bool:
    await app_ctx.storage.ensure_loaded()
    return await app_ctx.guard.enter(page) is GuardState.AUTHORIZED


async def run_page(
    app_ctx: AppContext,
    page: str,
    fetch: Callable[[], Awaitable[Any]],
    render: Callable[[Any], str],
) -> str:
    """
    Load a protected page.

    A failed load shows an error banner and keeps the last good data
    visible below it.
    """
    loader = app_ctx.navigate(page)
    if not await _enter(app_ctx, page):
        return LOGIN_REQUIRED

    try:
        data = await loader.load(fetch)
    except SessionExpired:
        await app_ctx.guard.on_session_expired()
        return LOGIN_REQUIRED
    except MissingContext as e:
        return f"❌ {e.message} {SELECT_WAREHOUSE_HINT}"
    except (RequestFailed, NetworkUnavailable) as e:
        logger.warning(f"Page '{page}' failed to load: {e}")
        banner = f"⚠️ {e}"
        if loader.has_data:
            return f"{banner}\n\nShowing last loaded data:\n\n{render(loader.data)}"
        return banner
    except StaleResult:
        return f"Left page '{page}' before the response arrived; result discarded."

    return render(data)


async def run_action(
    app_ctx: AppContext,
    page: str,
    action: Callable[[], Awaitable[Any]],
    render: Callable[[Any], str],
    failure_prefix: Optional[str] = None,
) -> str:
    """Run a protected mutation (create / delete / resolve)."""
    if not await _enter(app_ctx, page):
        return LOGIN_REQUIRED

    try:
        result = await action()
    except SessionExpired:
        await app_ctx.guard.on_session_expired()
        return LOGIN_REQUIRED
    except ValidationError as e:
        return f"❌ {e.message}"
    except MissingContext as e:
        return f"❌ {e.message} {SELECT_WAREHOUSE_HINT}"
    except (RequestFailed, NetworkUnavailable) as e:
        logger.warning(f"Action on '{page}' failed: {e}")
        prefix = f"{failure_prefix}: " if failure_prefix else ""
        return f"⚠️ {prefix}{e}"

    return render(result)
