"""
Warehouse context shared across pages.
Holds the warehouse the user last selected so pages like add-batch and
add-sensor can find it without being told.
"""

import json
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.adapters import resolve_warehouse_id, warehouse_from_raw
from core.local_storage import LocalStorage
from models import WarehouseContext
from utils import model_to_payload
from logging_config import get_logger

logger = get_logger(__name__)

CURRENT_WAREHOUSE_KEY = "currentWarehouse"

__all__ = ["WarehouseContextStore", "resolve_warehouse_id", "CURRENT_WAREHOUSE_KEY"]


class WarehouseContextStore:
    """Single last-write-wins slot for the selected warehouse."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    async def set_current_warehouse(self, warehouse: Union[dict, WarehouseContext]) -> None:
        # The whole object is kept; pages read different subsets of it
        payload = model_to_payload(warehouse)
        await self.storage.set_item(CURRENT_WAREHOUSE_KEY, json.dumps(payload))
        logger.info(f"Current warehouse set to {resolve_warehouse_id(payload) or '<no id>'}")

    def get_current_warehouse(self) -> Optional[WarehouseContext]:
        """Stored warehouse, or None when missing or malformed. Never raises."""
        raw = self.storage.get_item(CURRENT_WAREHOUSE_KEY)
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Stored warehouse context is not valid JSON; ignoring it")
            return None
        if not isinstance(parsed, dict):
            logger.warning("Stored warehouse context is not an object; ignoring it")
            return None
        try:
            return warehouse_from_raw(parsed)
        except PydanticValidationError as e:
            logger.warning(f"Stored warehouse context does not fit the model: {e}")
            return None

    async def clear_current_warehouse(self) -> None:
        await self.storage.remove_items(CURRENT_WAREHOUSE_KEY)
