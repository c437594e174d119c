"""
Backend response adapters.

The backend is inconsistent about key names and response envelopes: ids
arrive as id / warehouse_id / warehouseId, lists arrive bare or wrapped in
an object. Each endpoint gets one adapter here so the rest of the code only
ever sees the canonical models.
"""

import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from models import (
    Alert,
    Batch,
    HomeOverview,
    Product,
    Sensor,
    UtilitySummary,
    WarehouseContext,
    WarehouseDetail,
)

WAREHOUSE_ID_KEYS = ("id", "warehouse_id", "warehouseId", "warehouseid")
WAREHOUSE_CAPACITY_KEYS = ("storage_capacity", "capacity", "storageCapacity")
BATCH_QUANTITY_KEYS = ("number_of_batches", "quantity", "count")


# ===== Scalar coercion =====

def to_number(value: Any) -> float:
    """Coerce to a finite float; anything non-numeric or missing becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def first_present(raw: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Value of the first key that is present and not null."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _first_text(raw: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value is not None and str(value).strip():
            return str(value)
    return ""


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return to_number(value)


def unwrap_list(data: Any, key: str) -> List[Any]:
    """Bare array, or the array under `key`; anything else is an empty list."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return []


# ===== Entity adapters =====

def resolve_warehouse_id(warehouse: Any) -> str:
    """First non-empty of id / warehouse_id / warehouseId / warehouseid, or ''."""
    if isinstance(warehouse, BaseModel):
        warehouse = warehouse.model_dump()
    if not isinstance(warehouse, dict):
        return ""
    return _first_text(warehouse, *WAREHOUSE_ID_KEYS)


def warehouse_from_raw(raw: Dict[str, Any]) -> WarehouseContext:
    data = dict(raw)
    data["id"] = resolve_warehouse_id(raw)
    data["name"] = _text(raw.get("name"))
    data["location"] = _text(raw.get("location"))
    data["storage_capacity"] = to_number(first_present(raw, WAREHOUSE_CAPACITY_KEYS))
    return WarehouseContext.model_validate(data)


def batch_from_raw(raw: Dict[str, Any]) -> Batch:
    return Batch(
        id=_first_text(raw, "id", "batch_id", "batchId"),
        quantity=to_number(first_present(raw, BATCH_QUANTITY_KEYS)),
        sensor_id=_first_text(raw, "sensor_id", "sensorId"),
        product_id=_first_text(raw, "product_id", "productId"),
        product_name=_first_text(raw, "product_name", "productName", "name"),
    )


def product_from_raw(raw: Dict[str, Any]) -> Product:
    return Product(
        id=_first_text(raw, "product_id", "id"),
        name=_text(raw.get("name")),
        description=_text(raw.get("description")),
        min_temp=_optional_number(raw.get("min_temp")),
        max_temp=_optional_number(raw.get("max_temp")),
        min_humi=_optional_number(raw.get("min_humi")),
        max_humi=_optional_number(raw.get("max_humi")),
    )


def sensor_from_raw(raw: Dict[str, Any]) -> Sensor:
    device_id = raw.get("device_id")
    status = raw.get("status")
    return Sensor(
        id=_first_text(raw, "sensor_id", "id"),
        ip_address=_text(raw.get("ip_address")),
        sensor_type=_text(raw.get("sensor_type")),
        device_id=None if device_id is None else str(device_id),
        status=None if status is None else str(status),
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def alert_from_raw(raw: Dict[str, Any]) -> Alert:
    is_resolved = raw.get("is_resolved")
    return Alert(
        id=_first_text(raw, "id", "alert_id"),
        sensor_id=_first_text(raw, "sensor_id", "sensorId"),
        warehouse_id=_first_text(raw, *WAREHOUSE_ID_KEYS[1:]),
        alert_type=_first_text(raw, "alert_type", "type"),
        is_resolved=None if is_resolved is None else bool(is_resolved),
        created_at=_parse_timestamp(raw.get("created_at")),
        message=_text(raw.get("message")),
    )


def _dicts(items: List[Any]) -> List[Dict[str, Any]]:
    return [item for item in items if isinstance(item, dict)]


# ===== Per-endpoint adapters =====

def adapt_login(data: Any) -> Optional[str]:
    """Token from /login or signup; None when the server sent none."""
    if isinstance(data, dict) and data.get("token"):
        return str(data["token"])
    return None


def adapt_home(data: Any) -> HomeOverview:
    """/warehouses -> {warehouses: [...], alertsCount | alerts}"""
    warehouses = [warehouse_from_raw(w) for w in _dicts(unwrap_list(data, "warehouses"))]
    alerts_count = 0
    if isinstance(data, dict):
        alerts_count = int(to_number(data.get("alertsCount"))) or len(unwrap_list(data, "alerts"))
    return HomeOverview(warehouses=warehouses, alerts_count=alerts_count)


def adapt_warehouse_info(data: Any, fallback: Optional[WarehouseContext] = None) -> WarehouseDetail:
    """/getinfo_warehouse -> {warehouse: {...}, batches: [...]}"""
    warehouse = fallback or WarehouseContext()
    if isinstance(data, dict) and isinstance(data.get("warehouse"), dict):
        warehouse = warehouse_from_raw(data["warehouse"])
        if not warehouse.id and fallback is not None:
            warehouse.id = fallback.id
    batches = [batch_from_raw(b) for b in _dicts(unwrap_list(data, "batches"))]
    return WarehouseDetail(warehouse=warehouse, batches=batches)


def adapt_products_sensors(data: Any) -> Tuple[List[Product], List[Sensor]]:
    """/get-products-sensors -> {products: [...], sensors: [...]}"""
    products = [product_from_raw(p) for p in _dicts(unwrap_list(data, "products"))]
    sensors = [sensor_from_raw(s) for s in _dicts(unwrap_list(data, "sensors"))]
    return products, sensors


def adapt_products(data: Any) -> List[Product]:
    """/getproducts -> bare array or {products: [...]}"""
    return [product_from_raw(p) for p in _dicts(unwrap_list(data, "products"))]


def adapt_sensors(data: Any) -> List[Sensor]:
    """/getallsensors -> bare array or {sensors: [...]}"""
    return [sensor_from_raw(s) for s in _dicts(unwrap_list(data, "sensors"))]


def adapt_alerts(data: Any) -> List[Alert]:
    """/alerts -> {alerts: [...]}"""
    return [alert_from_raw(a) for a in _dicts(unwrap_list(data, "alerts"))]


def adapt_report(data: Any) -> str:
    """/generate-report -> {report: "markdown"}"""
    if isinstance(data, dict) and data.get("report") is not None:
        return str(data["report"])
    return ""


def adapt_utility(data: Any) -> UtilitySummary:
    """/utility -> {totalCapacity, totalOccupied}"""
    raw = data if isinstance(data, dict) else {}
    total_capacity = to_number(raw.get("totalCapacity"))
    total_occupied = to_number(raw.get("totalOccupied"))
    percent = (total_occupied / total_capacity) * 100 if total_capacity > 0 else 0.0
    return UtilitySummary(
        total_capacity=total_capacity,
        total_occupied=total_occupied,
        utilization_percent=percent,
        used_text=f"{total_occupied:g}/{total_capacity:g} used",
        raw=raw,
    )
