from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .models import (
    ProductCreate,
    ProductUpdate,
    SupplierCreate,
    SupplierUpdate,
    TransactionCreate,
    TransactionUpdate,
    UserCreate,
    UserUpdate,
)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ValidationError(ValueError):
    """Input rejected before submission; nothing was sent to the service."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        suffix = f" (+{len(self.issues) - 1} more)" if len(self.issues) > 1 else ""
        return f"{issue.field}: {issue.reason}{suffix}"


class _Checker:
    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add(self, field: str, reason: str) -> None:
        self.issues.append(ValidationIssue(field=field, reason=reason))

    def required_text(self, field: str, value: str | None, label: str) -> None:
        if value is None or not value.strip():
            self.add(field, f"{label} is required")

    def max_length(self, field: str, value: str | None, limit: int, label: str) -> None:
        if value is not None and len(value) > limit:
            self.add(field, f"{label} must not exceed {limit} characters")

    def positive(self, field: str, value: Decimal | None, label: str) -> None:
        if value is not None and value <= 0:
            self.add(field, f"{label} must be greater than 0")

    def non_negative(self, field: str, value: int | None, label: str) -> None:
        if value is not None and value < 0:
            self.add(field, f"{label} cannot be negative")

    def email(self, field: str, value: str | None) -> None:
        if value and not _EMAIL_RE.match(value):
            self.add(field, "Email should be valid")
        self.max_length(field, value, 100, "Email")

    def raise_if_any(self) -> None:
        if self.issues:
            raise ValidationError(self.issues)


def _coerce(payload: T | Mapping[str, Any], model_type: type[T]) -> T:
    if isinstance(payload, model_type):
        return payload
    try:
        return model_type.model_validate(payload)
    except PydanticValidationError as exc:
        issues = [
            ValidationIssue(field=".".join(str(part) for part in error["loc"]) or "payload", reason=error["msg"])
            for error in exc.errors()
        ]
        raise ValidationError(issues) from exc


def validate_product(payload: ProductCreate | ProductUpdate | Mapping[str, Any], *, partial: bool = False) -> ProductCreate | ProductUpdate:
    data = _coerce(payload, ProductUpdate if partial else ProductCreate)
    check = _Checker()
    if not partial or data.name is not None:
        check.required_text("name", data.name, "Product name")
    check.max_length("name", data.name, 100, "Name")
    check.max_length("category", data.category, 50, "Category")
    check.max_length("sku", data.sku, 20, "SKU")
    check.max_length("description", data.description, 500, "Description")
    check.positive("price_in", data.price_in, "Price in")
    check.positive("price_out", data.price_out, "Price out")
    check.non_negative("minimum_stock", data.minimum_stock, "Minimum stock")
    check.raise_if_any()
    return data


def validate_stock_level(stock: int) -> int:
    check = _Checker()
    check.non_negative("stock", stock, "Stock")
    check.raise_if_any()
    return stock


def validate_supplier(payload: SupplierCreate | SupplierUpdate | Mapping[str, Any], *, partial: bool = False) -> SupplierCreate | SupplierUpdate:
    data = _coerce(payload, SupplierUpdate if partial else SupplierCreate)
    check = _Checker()
    if not partial or data.name is not None:
        check.required_text("name", data.name, "Supplier name")
    check.max_length("name", data.name, 100, "Name")
    check.max_length("address", data.address, 200, "Address")
    check.max_length("phone", data.phone, 20, "Phone")
    check.max_length("contact_person", data.contact_person, 50, "Contact person")
    check.email("email", data.email)
    check.raise_if_any()
    return data


def validate_transaction(payload: TransactionCreate | Mapping[str, Any]) -> TransactionCreate:
    data = _coerce(payload, TransactionCreate)
    check = _Checker()
    if data.quantity < 1:
        check.add("quantity", "Quantity must be at least 1")
    check.positive("unit_price", data.unit_price, "Unit price")
    check.max_length("notes", data.notes, 500, "Notes")
    check.max_length("reference_number", data.reference_number, 50, "Reference number")
    check.raise_if_any()
    return data


def validate_user(payload: UserCreate | UserUpdate | Mapping[str, Any], *, partial: bool = False) -> UserCreate | UserUpdate:
    data = _coerce(payload, UserUpdate if partial else UserCreate)
    check = _Checker()
    if data.username is not None:
        username = data.username.strip()
        if not 3 <= len(username) <= 50:
            check.add("username", "Username must be between 3 and 50 characters")
    if data.password is not None and len(data.password) < 6:
        check.add("password", "Password must be at least 6 characters")
    check.max_length("full_name", data.full_name, 100, "Full name")
    check.email("email", data.email)
    check.raise_if_any()
    return data


def validate_transaction_update(payload: TransactionUpdate | Mapping[str, Any]) -> TransactionUpdate:
    data = _coerce(payload, TransactionUpdate)
    check = _Checker()
    if data.quantity is not None and data.quantity < 1:
        check.add("quantity", "Quantity must be at least 1")
    check.positive("unit_price", data.unit_price, "Unit price")
    check.max_length("notes", data.notes, 500, "Notes")
    check.max_length("reference_number", data.reference_number, 50, "Reference number")
    check.raise_if_any()
    return data
