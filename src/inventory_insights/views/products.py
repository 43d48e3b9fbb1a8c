from __future__ import annotations

import logging
from typing import Any, Mapping

from ..aggregation import filter_by_text_query
from ..clients import ProductsClient, SuppliersClient
from ..http_client import HttpClient
from ..models import Identity, Product, ProductCreate, ProductUpdate, Supplier
from ..notifications import NotificationCenter
from ..session import SessionStore
from ..validation import validate_product, validate_stock_level
from .base import ActionResult, BaseView
from .sequencing import settle
from .view_state import ViewState

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "category", "sku")


class ProductsView(BaseView):
    module = "products"
    title = "Products"

    def __init__(self, http: HttpClient, session: SessionStore, notifications: NotificationCenter) -> None:
        self.client = ProductsClient(http=http)
        self.suppliers_client = SuppliersClient(http=http)
        self.products: list[Product] = []
        self.suppliers: list[Supplier] = []
        self.query = ""
        super().__init__(http, session, notifications)

    def has_data(self) -> bool:
        return bool(self.products)

    def set_query(self, query: str) -> list[Product]:
        self.query = query
        return self.visible_products()

    def visible_products(self) -> list[Product]:
        return filter_by_text_query(self.products, self.query, SEARCH_FIELDS)

    def low_stock_products(self) -> list[Product]:
        return [product for product in self.products if product.low_stock]

    async def load(self) -> ViewState:
        sequence = self._begin("products")
        if sequence is None:
            return self.state
        products, suppliers = await settle(self.client.list_active(), self.suppliers_client.list_active())
        if not self._is_current("products", sequence):
            return self.state
        if products.error is not None:
            return self._fail(products.error)

        self.products = products.value
        if suppliers.error is not None:
            # supplier picker is optional; the product list still renders
            logger.warning(
                "optional_fetch_failed",
                extra={"view": self.module, "fetch": "suppliers", "code": suppliers.error.code},
            )
        self.suppliers = suppliers.value_or([])
        return self._succeed()

    async def create(self, payload: ProductCreate | Mapping[str, Any]) -> ActionResult[Product]:
        async def call(identity: Identity) -> Product:
            return await self.client.create(validate_product(payload))

        result = await self._run_action("create_product", call, admin_only=True, success_message="Product created")
        await self._refresh_after(result)
        return result

    async def update(self, product_id: int, payload: ProductUpdate | Mapping[str, Any]) -> ActionResult[Product]:
        async def call(identity: Identity) -> Product:
            return await self.client.update(product_id, validate_product(payload, partial=True))

        result = await self._run_action("update_product", call, admin_only=True, success_message="Product updated")
        await self._refresh_after(result)
        return result

    async def update_stock(self, product_id: int, stock: int) -> ActionResult[None]:
        async def call(identity: Identity) -> None:
            await self.client.update_stock(product_id, validate_stock_level(stock))

        result = await self._run_action("update_stock", call, admin_only=True, success_message="Stock updated")
        await self._refresh_after(result)
        return result

    async def delete(self, product_id: int) -> ActionResult[None]:
        async def call(identity: Identity) -> None:
            await self.client.delete(product_id)

        result = await self._run_action("delete_product", call, admin_only=True, success_message="Product deleted")
        await self._refresh_after(result)
        return result
