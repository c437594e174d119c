"""
Data models for the dashboard MCP server.
Canonical shapes the rest of the code works with, after backend adapters
have normalized the inconsistent server payloads.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Dict, List, Optional


class Session(BaseModel):
    """Authenticated user session as persisted in local storage."""

    token: str
    expires_at_epoch_ms: int
    user_identifier: str

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at_epoch_ms


class WarehouseContext(BaseModel):
    """Currently selected warehouse. Extra server-supplied fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    name: str = ""
    location: str = ""
    storage_capacity: float = 0


class Batch(BaseModel):
    id: str = ""
    quantity: float = 0
    sensor_id: str = ""
    product_id: str = ""
    product_name: str = ""


class Product(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None
    min_humi: Optional[float] = None
    max_humi: Optional[float] = None


class Sensor(BaseModel):
    id: str = ""
    ip_address: str = ""
    sensor_type: str = ""
    device_id: Optional[str] = None
    status: Optional[str] = None


class Alert(BaseModel):
    id: str = ""
    sensor_id: str = ""
    warehouse_id: str = ""
    alert_type: str = ""
    is_resolved: Optional[bool] = None
    created_at: Optional[datetime] = None
    message: str = ""


class HomeOverview(BaseModel):
    """Payload behind the home page: warehouses plus open alert count."""

    warehouses: List[WarehouseContext] = Field(default_factory=list)
    alerts_count: int = 0


class WarehouseDetail(BaseModel):
    warehouse: WarehouseContext
    batches: List[Batch] = Field(default_factory=list)


class WarehouseUtilization(BaseModel):
    """Derived per-warehouse occupancy; never persisted."""

    warehouse_id: str
    name: str = ""
    normalized_capacity: float = 0
    current_occupancy: float = 0
    utilization_percent: float = 0
    fetch_failed: bool = False


class UtilizationSummary(BaseModel):
    warehouses: List[WarehouseUtilization] = Field(default_factory=list)
    total_capacity: float = 0
    total_occupied: float = 0
    global_utilization: float = 0
    statistics: Dict[str, float] = Field(default_factory=dict)


class UtilitySummary(BaseModel):
    """Server-computed totals from the /utility endpoint."""

    total_capacity: float = 0
    total_occupied: float = 0
    utilization_percent: float = 0
    used_text: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict)
