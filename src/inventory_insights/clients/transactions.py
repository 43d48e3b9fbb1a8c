from __future__ import annotations

from dataclasses import dataclass

from ..models import DateRange, Transaction, TransactionCreate, TransactionType, TransactionUpdate
from .base import BaseClient


@dataclass
class TransactionsClient(BaseClient):
    module: str = "transactions"

    async def list_all(self) -> list[Transaction]:
        return await self._get_list("/transactions", Transaction, operation="list_all")

    async def get(self, transaction_id: int) -> Transaction:
        return await self._get_one(f"/transactions/{transaction_id}", Transaction, operation="get")

    async def list_by_product(self, product_id: int) -> list[Transaction]:
        return await self._get_list(f"/transactions/product/{product_id}", Transaction, operation="list_by_product")

    async def list_by_user(self, user_id: int) -> list[Transaction]:
        return await self._get_list(f"/transactions/user/{user_id}", Transaction, operation="list_by_user")

    async def list_by_type(self, transaction_type: TransactionType) -> list[Transaction]:
        kind = TransactionType(transaction_type).value
        return await self._get_list(f"/transactions/type/{kind}", Transaction, operation="list_by_type")

    async def list_by_date_range(self, date_range: DateRange) -> list[Transaction]:
        return await self._get_list(
            "/transactions/date-range",
            Transaction,
            operation="list_by_date_range",
            params=date_range.to_params(),
        )

    async def create(self, payload: TransactionCreate) -> Transaction:
        return await self._send("POST", "/transactions", Transaction, operation="create", body=payload)

    async def update(self, transaction_id: int, payload: TransactionUpdate) -> Transaction:
        return await self._send("PUT", f"/transactions/{transaction_id}", Transaction, operation="update", body=payload)

    async def delete(self, transaction_id: int) -> None:
        await self._delete(f"/transactions/{transaction_id}", operation="delete")
