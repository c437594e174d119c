"""
Storage utilization across a user's warehouses.

The arithmetic is pure and safe to recompute on every refresh. The
aggregator gathers batch lists for all warehouses concurrently; a warehouse
whose fetch fails counts as empty instead of failing the whole overview.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from core.adapters import to_number
from core.errors import DashboardError, SessionExpired
from models import Batch, UtilizationSummary, WarehouseContext, WarehouseUtilization
from logging_config import get_logger

logger = get_logger(__name__)

BAND_THRESHOLDS = {
    "critical": 90.0,
    "warning": 75.0,
}


def safe_percent(part: float, whole: float) -> float:
    """part / whole * 100, or 0 when whole is not positive."""
    return (part / whole) * 100 if whole > 0 else 0.0


def utilization_band(percent: float) -> str:
    if percent >= BAND_THRESHOLDS["critical"]:
        return "critical"
    if percent >= BAND_THRESHOLDS["warning"]:
        return "warning"
    return "normal"


def sum_occupancy(batches: Iterable[Any]) -> float:
    """Total quantity across batches; accepts Batch models or raw numbers."""
    total = 0.0
    for batch in batches:
        quantity = batch.quantity if isinstance(batch, Batch) else batch
        total += to_number(quantity)
    return total


def compute_warehouse_utilization(
    warehouse_id: str,
    capacity: Any,
    batches: Iterable[Any],
    name: str = "",
    fetch_failed: bool = False,
) -> WarehouseUtilization:
    normalized_capacity = to_number(capacity)
    occupied = sum_occupancy(batches)
    return WarehouseUtilization(
        warehouse_id=warehouse_id,
        name=name,
        normalized_capacity=normalized_capacity,
        current_occupancy=occupied,
        utilization_percent=safe_percent(occupied, normalized_capacity),
        fetch_failed=fetch_failed,
    )


def calculate_statistics(values: List[float]) -> Dict[str, float]:
    """Spread of per-warehouse utilization percentages."""
    if not values:
        return {"mean": 0.0, "std": 0.0, "min": 0.0, "max": 0.0}

    values_array = np.array(values, dtype=float)
    return {
        "mean": float(np.mean(values_array)),
        "std": float(np.std(values_array)),
        "min": float(np.min(values_array)),
        "max": float(np.max(values_array)),
    }


def aggregate_utilization(items: List[WarehouseUtilization]) -> UtilizationSummary:
    """
    Global figures are a ratio of sums, not a mean of the per-warehouse
    percentages.
    """
    total_capacity = sum(item.normalized_capacity for item in items)
    total_occupied = sum(item.current_occupancy for item in items)
    return UtilizationSummary(
        warehouses=list(items),
        total_capacity=total_capacity,
        total_occupied=total_occupied,
        global_utilization=safe_percent(total_occupied, total_capacity),
        statistics=calculate_statistics([item.utilization_percent for item in items]),
    )


class UtilizationAggregator:
    """Collects warehouses and their batches, then aggregates."""

    def __init__(self, client):
        self.client = client

    async def _occupancy_for(self, warehouse: WarehouseContext) -> WarehouseUtilization:
        if not warehouse.id:
            logger.warning(f"Warehouse '{warehouse.name}' has no id; occupancy treated as 0")
            return compute_warehouse_utilization("", warehouse.storage_capacity, [], name=warehouse.name)

        try:
            detail = await self.client.get_warehouse_info(warehouse.id, fallback=warehouse)
        except SessionExpired:
            raise
        except DashboardError as e:
            logger.warning(f"Failed to fetch batches for {warehouse.id}: {e}")
            return compute_warehouse_utilization(
                warehouse.id, warehouse.storage_capacity, [], name=warehouse.name, fetch_failed=True
            )

        return compute_warehouse_utilization(
            warehouse.id, warehouse.storage_capacity, detail.batches, name=warehouse.name
        )

    async def collect(self, warehouses: Optional[List[WarehouseContext]] = None) -> UtilizationSummary:
        if warehouses is None:
            overview = await self.client.list_warehouses()
            warehouses = overview.warehouses

        results = await asyncio.gather(
            *(self._occupancy_for(w) for w in warehouses), return_exceptions=True
        )

        items: List[WarehouseUtilization] = []
        session_expired: Optional[SessionExpired] = None
        for warehouse, result in zip(warehouses, results):
            if isinstance(result, SessionExpired):
                session_expired = result
                continue
            if isinstance(result, BaseException):
                logger.error(f"Unexpected failure aggregating {warehouse.id}: {result!r}")
                result = compute_warehouse_utilization(
                    warehouse.id, warehouse.storage_capacity, [], name=warehouse.name, fetch_failed=True
                )
            items.append(result)

        if session_expired is not None:
            raise session_expired

        summary = aggregate_utilization(items)
        logger.info(
            f"Utilization aggregated over {len(items)} warehouses: "
            f"{summary.total_occupied:g}/{summary.total_capacity:g} ({summary.global_utilization:.1f}%)"
        )
        return summary
