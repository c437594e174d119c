"""
Configuration for the cold-chain dashboard MCP server.
Contains backend endpoint paths, session TTLs and storage settings.
"""

import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel


class MCPConfig(BaseModel):
    """MCP Server configuration."""

    # Session settings
    remember_me_ttl_ms: int = 24 * 60 * 60 * 1000
    default_ttl_ms: int = 60 * 60 * 1000
    expiry_check_interval_seconds: int = 60

    # Durable key-value storage (token, token_expiry, mail, currentWarehouse)
    storage_path: str = os.getenv(
        "DASHBOARD_STORAGE_PATH",
        str(Path(__file__).parent / "storage" / "local_storage.json"),
    )

    # None keeps aiohttp's default client timeout
    request_timeout_seconds: Optional[float] = None


class EndpointConfig:
    """
    Backend API endpoint configuration.
    Paths must match the existing backend exactly.
    """

    def __init__(self):
        # Base URL from environment or default
        self.backend_base_url = os.getenv("BACKEND_URL", "http://localhost:8000")
        self.signup_path = os.getenv("SIGNUP_PATH", "/signup")
        self.google_auth_url = os.getenv("GOOGLE_AUTH_URL", "")

    @property
    def login(self) -> str:
        return "/login"

    @property
    def signup(self) -> str:
        return self.signup_path

    @property
    def logout(self) -> str:
        return "/logout"

    @property
    def warehouses(self) -> str:
        """Warehouse list (plus alert count) for the user."""
        return "/warehouses"

    @property
    def create_warehouse(self) -> str:
        return "/create-warehouse"

    @property
    def warehouse_info(self) -> str:
        """Single warehouse with its batches."""
        return "/getinfo_warehouse"

    @property
    def products_sensors(self) -> str:
        return "/get-products-sensors"

    @property
    def create_batch(self) -> str:
        return "/create-batch"

    @property
    def delete_batch(self) -> str:
        return "/delete-batch"

    @property
    def products(self) -> str:
        return "/getproducts"

    @property
    def create_product(self) -> str:
        return "/create-product"

    @property
    def delete_product(self) -> str:
        return "/delete-product"

    @property
    def sensors(self) -> str:
        return "/getallsensors"

    @property
    def create_sensor(self) -> str:
        # Backend spells it this way
        return "/creatsensor"

    @property
    def alerts(self) -> str:
        return "/alerts"

    @property
    def resolve_all_alerts(self) -> str:
        return "/alerts/resolve-all"

    @property
    def utility(self) -> str:
        """Server-side utilization totals."""
        return "/utility"

    @property
    def generate_report(self) -> str:
        """AI-generated operations report."""
        return "/generate-report"


# Global instances
config = MCPConfig()
ENDPOINTS = EndpointConfig()

# Convenience constant
BACKEND_BASE_URL = ENDPOINTS.backend_base_url
