"""
Request data models for dashboard forms.
Validation runs client-side; a failing form never reaches the network.
"""

import math
import re
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _optional_float(value: Any) -> Optional[float]:
    """Blank -> None; unparseable -> None (reported as 'required')."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def validate_form(model_cls: Type[ModelT], **data: Any) -> ModelT:
    """Build a request model, turning pydantic failures into ValidationError."""
    try:
        return model_cls(**data)
    except PydanticValidationError as e:
        errors = e.errors()
        message = errors[0]["msg"] if errors else str(e)
        raise ValidationError(message.removeprefix("Value error, ")) from e


# ===== Auth =====

class ReqCredentials(BaseModel):
    """Login / sign-up form."""

    mail: str
    password: str

    @model_validator(mode="after")
    def check_credentials(self) -> "ReqCredentials":
        if not EMAIL_PATTERN.search(self.mail) or len(self.password) < 6:
            raise ValueError("Please provide a valid email and password.")
        return self


# ===== Warehouse =====

class ReqCreateWarehouse(BaseModel):
    name: str
    location: str
    capacity: int

    @model_validator(mode="before")
    @classmethod
    def collect_errors(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        errors: List[str] = []
        name = str(data.get("name") or "")
        location = str(data.get("location") or "")
        if not name.strip():
            errors.append("Warehouse name required")
        if not location.strip():
            errors.append("Location required")
        capacity = _optional_float(data.get("capacity"))
        if capacity is None or int(capacity) <= 0:
            errors.append("Valid storage capacity required")
        if errors:
            raise ValueError(" • ".join(errors))
        return {"name": name.strip(), "location": location.strip(), "capacity": int(capacity)}


# ===== Product =====

class ReqCreateProduct(BaseModel):
    name: str = ""
    description: str = ""
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None
    min_humi: Optional[float] = None
    max_humi: Optional[float] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("min_temp", "max_temp", "min_humi", "max_humi", mode="before")
    @classmethod
    def parse_number(cls, value: Any) -> Optional[float]:
        return _optional_float(value)

    @model_validator(mode="after")
    def check_envelope(self) -> "ReqCreateProduct":
        if not self.name:
            raise ValueError("Product name required.")
        if self.min_temp is None:
            raise ValueError("Min Temp required.")
        if self.max_temp is None:
            raise ValueError("Max Temp required.")
        if self.min_temp > self.max_temp:
            raise ValueError("Invalid Temperature envelope.")
        if self.min_humi is None:
            raise ValueError("Min Humidity required.")
        if self.max_humi is None:
            raise ValueError("Max Humidity required.")
        if self.min_humi > self.max_humi:
            raise ValueError("Invalid Humidity envelope.")
        if self.min_humi < 0 or self.max_humi > 100:
            raise ValueError("Humidity out of bounds (0-100%).")
        return self


# ===== Sensor =====

class ReqCreateSensor(BaseModel):
    ip_address: str = ""
    sensor_type: str = ""
    device_id: Optional[str] = None

    @field_validator("ip_address", "sensor_type", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("device_id", mode="before")
    @classmethod
    def blank_device_is_none(cls, value: Any) -> Optional[str]:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @model_validator(mode="after")
    def check_required(self) -> "ReqCreateSensor":
        if not self.ip_address or not self.sensor_type:
            raise ValueError("IP address and sensor type are required.")
        return self


# ===== Batch =====

class ReqCreateBatch(BaseModel):
    product_id: str = ""
    sensor_id: str = ""
    quantity: Optional[float] = None

    @field_validator("product_id", "sensor_id", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, value: Any) -> Optional[float]:
        return _optional_float(value)

    @model_validator(mode="after")
    def check_required(self) -> "ReqCreateBatch":
        if not self.product_id:
            raise ValueError("Product definition required.")
        if not self.sensor_id:
            raise ValueError("Sensor assignment required.")
        if self.quantity is None or self.quantity <= 0:
            raise ValueError("Valid quantity required.")
        return self

    @property
    def quantity_value(self) -> Any:
        """Whole quantities go over the wire as ints."""
        if self.quantity is not None and self.quantity.is_integer():
            return int(self.quantity)
        return self.quantity
