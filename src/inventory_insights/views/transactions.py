from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..aggregation import daily_summaries, filter_by_text_query, filter_by_type
from ..clients import TransactionsClient
from ..http_client import HttpClient
from ..models import (
    DateRange,
    Identity,
    Transaction,
    TransactionCreate,
    TransactionSummaryRow,
    TransactionUpdate,
    TypeFilter,
)
from ..notifications import NotificationCenter
from ..session import SessionStore
from ..validation import ValidationError, ValidationIssue, validate_transaction, validate_transaction_update
from .base import ActionResult, BaseView
from .sequencing import settle
from .view_state import ViewState

SEARCH_FIELDS = ("product_name", "supplier_name", "username", "reference_number", "notes")


class TransactionsView(BaseView):
    """Transaction ledger with type/text filters and an optional date range.

    Recording a movement is open to any signed-in user; editing and deleting
    recorded movements is reserved for administrators.
    """

    module = "transactions"
    title = "Transactions"

    def __init__(self, http: HttpClient, session: SessionStore, notifications: NotificationCenter) -> None:
        self.client = TransactionsClient(http=http)
        self.transactions: list[Transaction] = []
        self.type_filter = TypeFilter.ALL
        self.query = ""
        self.date_range: DateRange | None = None
        super().__init__(http, session, notifications)

    def has_data(self) -> bool:
        return bool(self.transactions)

    def set_type_filter(self, type_filter: TypeFilter | str) -> list[Transaction]:
        self.type_filter = TypeFilter(type_filter)
        return self.visible_transactions()

    def set_query(self, query: str) -> list[Transaction]:
        self.query = query
        return self.visible_transactions()

    def visible_transactions(self) -> list[Transaction]:
        by_type = filter_by_type(self.transactions, self.type_filter)
        return filter_by_text_query(by_type, self.query, SEARCH_FIELDS)

    def daily_summaries(self) -> list[TransactionSummaryRow]:
        return daily_summaries(self.visible_transactions())

    async def set_date_range(self, start: date, end: date) -> ViewState:
        try:
            self.date_range = DateRange(start=start, end=end)
        except PydanticValidationError as exc:
            raise ValidationError(
                [ValidationIssue(field="date_range", reason="Start date must be on or before end date")]
            ) from exc
        return await self.load()

    async def clear_date_range(self) -> ViewState:
        self.date_range = None
        return await self.load()

    async def load(self) -> ViewState:
        sequence = self._begin("transactions")
        if sequence is None:
            return self.state
        if self.date_range is None:
            (transactions,) = await settle(self.client.list_all())
        else:
            (transactions,) = await settle(self.client.list_by_date_range(self.date_range))
        if not self._is_current("transactions", sequence):
            return self.state
        if transactions.error is not None:
            return self._fail(transactions.error)
        self.transactions = transactions.value
        return self._succeed()

    async def create(self, payload: TransactionCreate | Mapping[str, Any]) -> ActionResult[Transaction]:
        async def call(identity: Identity) -> Transaction:
            data = validate_transaction(payload)
            return await self.client.create(data.model_copy(update={"user_id": identity.user_id}))

        result = await self._run_action(
            "create_transaction", call, admin_only=False, success_message="Transaction recorded"
        )
        await self._refresh_after(result)
        return result

    async def update(
        self, transaction_id: int, payload: TransactionUpdate | Mapping[str, Any]
    ) -> ActionResult[Transaction]:
        async def call(identity: Identity) -> Transaction:
            return await self.client.update(transaction_id, validate_transaction_update(payload))

        result = await self._run_action(
            "update_transaction", call, admin_only=True, success_message="Transaction updated"
        )
        await self._refresh_after(result)
        return result

    async def delete(self, transaction_id: int) -> ActionResult[None]:
        async def call(identity: Identity) -> None:
            await self.client.delete(transaction_id)

        result = await self._run_action(
            "delete_transaction", call, admin_only=True, success_message="Transaction deleted"
        )
        await self._refresh_after(result)
        return result
