from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"


class TransactionType(str, Enum):
    IN = "IN"
    OUT = "OUT"


class TypeFilter(str, Enum):
    ALL = "ALL"
    IN = "IN"
    OUT = "OUT"


class Credentials(ApiModel):
    username: str
    password: str


class LoginResponse(ApiModel):
    token: str
    type: str = "Bearer"
    id: int | None = None
    username: str | None = None
    full_name: str | None = None
    email: str | None = None
    role: Role | None = None


class Identity(ApiModel):
    id: int
    username: str
    role: Role
    full_name: str | None = None
    email: str | None = None

    @property
    def user_id(self) -> int:
        return self.id

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


class User(Identity):
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Supplier(ApiModel):
    id: int
    name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Product(ApiModel):
    id: int
    name: str
    category: str | None = None
    sku: str | None = None
    description: str | None = None
    price_in: Decimal
    price_out: Decimal
    stock: int = 0
    minimum_stock: int = 0
    supplier_id: int | None = None
    supplier_name: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def low_stock(self) -> bool:
        return self.stock <= self.minimum_stock


class Transaction(ApiModel):
    id: int
    product_id: int
    product_name: str | None = None
    type: TransactionType
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    supplier_id: int | None = None
    supplier_name: str | None = None
    user_id: int
    username: str | None = None
    transaction_date: datetime
    reference_number: str | None = None
    notes: str | None = None


class StockReportRow(ApiModel):
    product_id: int
    product_name: str
    category: str | None = None
    sku: str | None = None
    current_stock: int
    minimum_stock: int
    price_in: Decimal | None = None
    price_out: Decimal | None = None
    supplier_name: str | None = None
    low_stock: bool
    stock_value: Decimal


class TransactionSummaryRow(ApiModel):
    date: dt.date
    period: str | None = None
    total_transactions: int = 0
    in_transactions: int = 0
    out_transactions: int = 0
    total_in_value: Decimal = Decimal("0")
    total_out_value: Decimal = Decimal("0")
    net_value: Decimal = Decimal("0")


class DateRange(BaseModel):
    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("date range is invalid: 'start' must be less than or equal to 'end'")
        return self

    def to_params(self) -> dict[str, str]:
        return {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()}


class ProductCreate(ApiModel):
    name: str
    category: str | None = None
    sku: str | None = None
    description: str | None = None
    price_in: Decimal
    price_out: Decimal
    minimum_stock: int = 0
    supplier_id: int | None = None


class ProductUpdate(ApiModel):
    name: str | None = None
    category: str | None = None
    sku: str | None = None
    description: str | None = None
    price_in: Decimal | None = None
    price_out: Decimal | None = None
    minimum_stock: int | None = None
    supplier_id: int | None = None
    active: bool | None = None


class SupplierCreate(ApiModel):
    name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class SupplierUpdate(ApiModel):
    name: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    active: bool | None = None


class TransactionCreate(ApiModel):
    product_id: int
    type: TransactionType
    quantity: int
    unit_price: Decimal | None = None
    supplier_id: int | None = None
    user_id: int | None = None
    notes: str | None = None
    reference_number: str | None = None


class TransactionUpdate(ApiModel):
    quantity: int | None = None
    unit_price: Decimal | None = None
    notes: str | None = None
    reference_number: str | None = None


class UserCreate(ApiModel):
    username: str
    password: str
    role: Role
    full_name: str | None = None
    email: str | None = None


class UserUpdate(ApiModel):
    username: str | None = None
    password: str | None = None
    role: Role | None = None
    full_name: str | None = None
    email: str | None = None
    active: bool | None = None


class SessionData(BaseModel):
    token: str
    profile: Optional[Identity] = None
    env_name: str | None = None
    saved_at: datetime | None = None
