"""
Core package initialization
"""
from .local_storage import LocalStorage
from .session_store import SessionStore
from .context_store import WarehouseContextStore
from .gateway import ApiGateway
from .route_guard import RouteGuard

__all__ = ['LocalStorage', 'SessionStore', 'WarehouseContextStore', 'ApiGateway', 'RouteGuard']
