"""Request types package for the dashboard MCP server."""

from .request_dtypes import (
    ReqCredentials,
    ReqCreateWarehouse,
    ReqCreateProduct,
    ReqCreateSensor,
    ReqCreateBatch,
    validate_form,
)

__all__ = [
    "ReqCredentials",
    "ReqCreateWarehouse",
    "ReqCreateProduct",
    "ReqCreateSensor",
    "ReqCreateBatch",
    "validate_form",
]
