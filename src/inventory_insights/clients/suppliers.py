from __future__ import annotations

from dataclasses import dataclass

from ..models import Supplier, SupplierCreate, SupplierUpdate
from .base import BaseClient


@dataclass
class SuppliersClient(BaseClient):
    module: str = "suppliers"

    async def list_all(self) -> list[Supplier]:
        return await self._get_list("/suppliers", Supplier, operation="list_all")

    async def list_active(self) -> list[Supplier]:
        return await self._get_list("/suppliers/active", Supplier, operation="list_active")

    async def get(self, supplier_id: int) -> Supplier:
        return await self._get_one(f"/suppliers/{supplier_id}", Supplier, operation="get")

    async def search(self, keyword: str) -> list[Supplier]:
        return await self._get_list("/suppliers/search", Supplier, operation="search", params={"keyword": keyword})

    async def create(self, payload: SupplierCreate) -> Supplier:
        return await self._send("POST", "/suppliers", Supplier, operation="create", body=payload)

    async def update(self, supplier_id: int, payload: SupplierUpdate) -> Supplier:
        return await self._send("PUT", f"/suppliers/{supplier_id}", Supplier, operation="update", body=payload)

    async def delete(self, supplier_id: int) -> None:
        await self._delete(f"/suppliers/{supplier_id}", operation="delete")
