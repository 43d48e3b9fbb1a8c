from __future__ import annotations

from dataclasses import dataclass

from ..models import Product, ProductCreate, ProductUpdate
from .base import BaseClient


@dataclass
class ProductsClient(BaseClient):
    module: str = "products"

    async def list_all(self) -> list[Product]:
        return await self._get_list("/products", Product, operation="list_all")

    async def list_active(self) -> list[Product]:
        return await self._get_list("/products/active", Product, operation="list_active")

    async def get(self, product_id: int) -> Product:
        return await self._get_one(f"/products/{product_id}", Product, operation="get")

    async def list_by_category(self, category: str) -> list[Product]:
        return await self._get_list(f"/products/category/{category}", Product, operation="list_by_category")

    async def list_by_supplier(self, supplier_id: int) -> list[Product]:
        return await self._get_list(f"/products/supplier/{supplier_id}", Product, operation="list_by_supplier")

    async def search(self, keyword: str) -> list[Product]:
        return await self._get_list("/products/search", Product, operation="search", params={"keyword": keyword})

    async def list_low_stock(self) -> list[Product]:
        return await self._get_list("/products/low-stock", Product, operation="list_low_stock")

    async def categories(self) -> list[str]:
        data = await self._request("GET", "/products/categories", operation="categories")
        return [str(item) for item in data or [] if item is not None]

    async def create(self, payload: ProductCreate) -> Product:
        return await self._send("POST", "/products", Product, operation="create", body=payload)

    async def update(self, product_id: int, payload: ProductUpdate) -> Product:
        return await self._send("PUT", f"/products/{product_id}", Product, operation="update", body=payload)

    async def update_stock(self, product_id: int, stock: int) -> None:
        await self._request("PATCH", f"/products/{product_id}/stock", operation="update_stock", params={"stock": stock})

    async def delete(self, product_id: int) -> None:
        await self._delete(f"/products/{product_id}", operation="delete")
