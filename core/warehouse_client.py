"""
Typed client for the cold-chain backend.
One method per endpoint; every call goes through the ApiGateway and every
response through its adapter in core.adapters.
"""

from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from all_types.request_dtypes import (
    ReqCreateBatch,
    ReqCreateProduct,
    ReqCreateSensor,
    ReqCreateWarehouse,
    ReqCredentials,
)
from config import ENDPOINTS, EndpointConfig, config
from core import adapters
from core.errors import DashboardError, RequestFailed, SessionExpired, ValidationError
from core.gateway import ApiGateway
from core.session_store import SessionStore
from models import (
    Alert,
    HomeOverview,
    Product,
    Sensor,
    UtilitySummary,
    WarehouseContext,
    WarehouseDetail,
)
from logging_config import get_logger

logger = get_logger(__name__)


class WarehouseClient:
    """Backend operations for the logged-in user."""

    def __init__(
        self,
        gateway: ApiGateway,
        session_store: SessionStore,
        endpoints: EndpointConfig = ENDPOINTS,
    ):
        self.gateway = gateway
        self.session_store = session_store
        self.endpoints = endpoints

    def _mail(self) -> str:
        session = self.session_store.get_session()
        if session is None or not session.user_identifier:
            raise SessionExpired("User email not found. Please log in again.")
        return session.user_identifier

    def _ttl(self, remember_me: bool) -> int:
        return config.remember_me_ttl_ms if remember_me else config.default_ttl_ms

    # ===================== AUTH =====================

    async def _authenticate(self, path: str, credentials: ReqCredentials, remember_me: bool) -> str:
        data = await self.gateway.call(
            path,
            {"mail": credentials.mail, "pass": credentials.password},
            authenticated=False,
        )
        token = adapters.adapt_login(data)
        if not token:
            raise RequestFailed(200, "No token received from server.")
        await self.session_store.set_session(token, self._ttl(remember_me), credentials.mail)
        return credentials.mail

    async def login(self, credentials: ReqCredentials, remember_me: bool = False) -> str:
        return await self._authenticate(self.endpoints.login, credentials, remember_me)

    async def signup(self, credentials: ReqCredentials, remember_me: bool = False) -> str:
        return await self._authenticate(self.endpoints.signup, credentials, remember_me)

    def google_login_url(self) -> str:
        if not self.endpoints.google_auth_url:
            raise ValidationError("Google sign-in is not configured (GOOGLE_AUTH_URL).")
        return self.endpoints.google_auth_url

    async def capture_oauth_redirect(self, redirect_url: str, remember_me: bool = False) -> Optional[str]:
        """Store the session carried in an OAuth redirect (?token=...&mail=...)."""
        query = urlparse(redirect_url).query or redirect_url.lstrip("?")
        params = parse_qs(query)
        token = (params.get("token") or [""])[0]
        if not token:
            return None
        mail = (params.get("mail") or [""])[0]
        await self.session_store.set_session(token, self._ttl(remember_me), mail)
        return mail

    async def logout(self) -> None:
        """Best-effort backend logout; the local session is always cleared."""
        try:
            if self.session_store.get_session() is not None:
                await self.gateway.call(self.endpoints.logout, {"mail": self._mail()})
        except DashboardError as e:
            logger.warning(f"Logout call failed, clearing session anyway: {e}")
        except Exception:
            logger.exception("Unexpected error during logout, clearing session anyway")
        finally:
            await self.session_store.clear_session()

    # ===================== WAREHOUSES =====================

    async def list_warehouses(self) -> HomeOverview:
        data = await self.gateway.call(self.endpoints.warehouses, {"mail": self._mail()})
        return adapters.adapt_home(data)

    async def create_warehouse(self, req: ReqCreateWarehouse) -> dict:
        return await self.gateway.call(
            self.endpoints.create_warehouse,
            {
                "name": req.name,
                "location": req.location,
                "capacity": req.capacity,
                "mail": self._mail(),
            },
        )

    async def get_warehouse_info(
        self, warehouse_id: str, fallback: Optional[WarehouseContext] = None
    ) -> WarehouseDetail:
        data = await self.gateway.call(
            self.endpoints.warehouse_info, {"warehouse_id": warehouse_id}
        )
        return adapters.adapt_warehouse_info(data, fallback)

    # ===================== BATCHES =====================

    async def get_products_and_sensors(self, warehouse_id: str) -> Tuple[List[Product], List[Sensor]]:
        data = await self.gateway.call(
            self.endpoints.products_sensors,
            {"mail": self._mail(), "warehouseId": warehouse_id},
        )
        return adapters.adapt_products_sensors(data)

    async def create_batch(self, warehouse_id: str, req: ReqCreateBatch) -> dict:
        return await self.gateway.call(
            self.endpoints.create_batch,
            {
                "mail": self._mail(),
                "warehouseId": warehouse_id,
                "productId": req.product_id,
                "sensorId": req.sensor_id,
                "quantity": req.quantity_value,
            },
        )

    async def delete_batch(self, batch_id: str) -> dict:
        return await self.gateway.call(
            self.endpoints.delete_batch, {"mail": self._mail(), "batchId": batch_id}
        )

    # ===================== PRODUCTS =====================

    async def list_products(self) -> List[Product]:
        data = await self.gateway.call(self.endpoints.products, {"mail": self._mail()})
        return adapters.adapt_products(data)

    async def create_product(self, req: ReqCreateProduct) -> dict:
        return await self.gateway.call(
            self.endpoints.create_product,
            {
                "mail": self._mail(),
                "name": req.name,
                "description": req.description,
                "min_temp": req.min_temp,
                "max_temp": req.max_temp,
                "min_humi": req.min_humi,
                "max_humi": req.max_humi,
            },
        )

    async def delete_product(self, product_id: str) -> dict:
        return await self.gateway.call(
            self.endpoints.delete_product, {"mail": self._mail(), "product_id": product_id}
        )

    # ===================== SENSORS =====================

    async def list_sensors(self, warehouse_id: str) -> List[Sensor]:
        data = await self.gateway.call(
            self.endpoints.sensors, {"mail": self._mail(), "warehouseId": warehouse_id}
        )
        return adapters.adapt_sensors(data)

    async def create_sensor(self, warehouse_id: str, req: ReqCreateSensor) -> dict:
        return await self.gateway.call(
            self.endpoints.create_sensor,
            {
                "mail": self._mail(),
                "warehouseId": warehouse_id,
                "ip_address": req.ip_address,
                "sensor_type": req.sensor_type,
                "device_id": req.device_id,
            },
        )

    # ===================== ALERTS & REPORTS =====================

    async def list_alerts(self) -> List[Alert]:
        data = await self.gateway.call(self.endpoints.alerts, {"mail": self._mail()})
        return adapters.adapt_alerts(data)

    async def resolve_all_alerts(self) -> dict:
        return await self.gateway.call(self.endpoints.resolve_all_alerts, {"mail": self._mail()})

    async def fetch_utility_summary(self) -> UtilitySummary:
        data = await self.gateway.call(self.endpoints.utility, {"mail": self._mail()})
        return adapters.adapt_utility(data)

    async def generate_report(self) -> str:
        data = await self.gateway.call(self.endpoints.generate_report, {"mail": self._mail()})
        return adapters.adapt_report(data)
