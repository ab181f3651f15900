"""
Record and request schemas for the Scrap Connect API

Each record model corresponds to one in-memory store in database.py.
JSON field names are camelCase (e.g. scrap_type -> "scrapType").
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls):
        return [status.value for status in cls]


def can_transition(source: OrderStatus, target: OrderStatus) -> bool:
    """Every status may move to any other status, itself included."""
    return True


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self, **kwargs) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", **kwargs)


class User(Record):
    id: int
    username: str
    mobile: str = Field(..., description="10 digits, first digit 6-9")
    password: str = Field(..., description="Plaintext, never serialized in responses")
    created_at: datetime
    last_login: datetime

    def public(self) -> Dict[str, Any]:
        return self.to_json(exclude={"password"})


class Order(Record):
    order_id: str = Field(..., description="SC + 6-digit sequence number")
    scrap_type: str
    weight: float = Field(..., gt=0)
    mobile: str
    description: str = ""
    address: str = ""
    status: OrderStatus = OrderStatus.OPEN
    created_at: datetime
    updated_at: datetime


class Price(Record):
    id: int
    scrap_type: str
    price: float = Field(..., gt=0)
    unit: str = "kg"
    last_updated: datetime


# Request bodies keep every field optional so missing values are reported
# by the stores with the API's own error messages. Numbers are strict so
# JSON booleans are rejected instead of becoming 1.0.

class RequestBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterBody(RequestBody):
    username: Optional[str] = None
    mobile: Optional[str] = None
    password: Optional[str] = None


class LoginBody(RequestBody):
    mobile: Optional[str] = None
    password: Optional[str] = None


class OrderCreateBody(RequestBody):
    scrap_type: Optional[str] = None
    weight: Optional[Union[StrictFloat, StrictInt, str]] = None
    mobile: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None


class StatusUpdateBody(RequestBody):
    status: Optional[str] = None


class PriceUpsertBody(RequestBody):
    scrap_type: Optional[str] = None
    price: Optional[Union[StrictFloat, StrictInt, str]] = None
