from __future__ import annotations

from typing import Any, Mapping

from ..aggregation import filter_by_text_query
from ..clients import SuppliersClient
from ..http_client import HttpClient
from ..models import Identity, Supplier, SupplierCreate, SupplierUpdate
from ..notifications import NotificationCenter
from ..session import SessionStore
from ..validation import validate_supplier
from .base import ActionResult, BaseView
from .sequencing import settle
from .view_state import ViewState

SEARCH_FIELDS = ("name", "contact_person", "email", "phone")


class SuppliersView(BaseView):
    module = "suppliers"
    title = "Suppliers"

    def __init__(self, http: HttpClient, session: SessionStore, notifications: NotificationCenter) -> None:
        self.client = SuppliersClient(http=http)
        self.suppliers: list[Supplier] = []
        self.query = ""
        super().__init__(http, session, notifications)

    def has_data(self) -> bool:
        return bool(self.suppliers)

    def set_query(self, query: str) -> list[Supplier]:
        self.query = query
        return self.visible_suppliers()

    def visible_suppliers(self) -> list[Supplier]:
        return filter_by_text_query(self.suppliers, self.query, SEARCH_FIELDS)

    async def load(self) -> ViewState:
        sequence = self._begin("suppliers")
        if sequence is None:
            return self.state
        (suppliers,) = await settle(self.client.list_active())
        if not self._is_current("suppliers", sequence):
            return self.state
        if suppliers.error is not None:
            return self._fail(suppliers.error)
        self.suppliers = suppliers.value
        return self._succeed()

    async def create(self, payload: SupplierCreate | Mapping[str, Any]) -> ActionResult[Supplier]:
        async def call(identity: Identity) -> Supplier:
            return await self.client.create(validate_supplier(payload))

        result = await self._run_action("create_supplier", call, admin_only=True, success_message="Supplier created")
        await self._refresh_after(result)
        return result

    async def update(self, supplier_id: int, payload: SupplierUpdate | Mapping[str, Any]) -> ActionResult[Supplier]:
        async def call(identity: Identity) -> Supplier:
            return await self.client.update(supplier_id, validate_supplier(payload, partial=True))

        result = await self._run_action("update_supplier", call, admin_only=True, success_message="Supplier updated")
        await self._refresh_after(result)
        return result

    async def delete(self, supplier_id: int) -> ActionResult[None]:
        async def call(identity: Identity) -> None:
            await self.client.delete(supplier_id)

        result = await self._run_action("delete_supplier", call, admin_only=True, success_message="Supplier deleted")
        await self._refresh_after(result)
        return result
