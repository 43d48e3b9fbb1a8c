from __future__ import annotations

from collections.abc import Callable
from datetime import date

from pydantic import ValidationError as PydanticValidationError

from ..aggregation import (
    CategoryAggregate,
    StockReportTotals,
    TransactionTrend,
    category_distribution,
    low_stock_slice,
    stock_flag_anomalies,
    stock_report_totals,
    top_n_by_stock_value,
    trailing_window,
    transaction_trend,
)
from ..clients import ReportsClient
from ..http_client import HttpClient
from ..models import DateRange, StockReportRow, TransactionSummaryRow
from ..notifications import NotificationCenter
from ..session import SessionStore
from ..validation import ValidationError, ValidationIssue
from .base import BaseView
from .sequencing import first_failure, settle
from .view_state import ViewState

TOP_PRODUCTS = 10


class ReportsView(BaseView):
    """Stock valuation and transaction summary for an editable date range.

    Both reports are re-fetched together whenever the range changes. Results of a
    fetch that was overtaken by a newer range edit are dropped.
    """

    module = "reports"
    title = "Reports"

    def __init__(
        self,
        http: HttpClient,
        session: SessionStore,
        notifications: NotificationCenter,
        *,
        report_window_days: int = 30,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.client = ReportsClient(http=http)
        self.date_range = trailing_window(today(), report_window_days)
        self.stock_rows: list[StockReportRow] = []
        self.summary_rows: list[TransactionSummaryRow] = []
        self.top_products: list[StockReportRow] = []
        self.categories: list[CategoryAggregate] = []
        self.low_stock: list[StockReportRow] = []
        self.trend: TransactionTrend | None = None
        self.totals: StockReportTotals | None = None
        super().__init__(http, session, notifications)

    def has_data(self) -> bool:
        return self.totals is not None

    async def set_date_range(self, start: date, end: date) -> ViewState:
        try:
            date_range = DateRange(start=start, end=end)
        except PydanticValidationError as exc:
            raise ValidationError(
                [ValidationIssue(field="date_range", reason="Start date must be on or before end date")]
            ) from exc
        self.date_range = date_range
        return await self.load()

    async def load(self) -> ViewState:
        sequence = self._begin("reports")
        if sequence is None:
            return self.state
        outcomes = await settle(
            self.client.stock_report(),
            self.client.transaction_summary(self.date_range),
        )
        if not self._is_current("reports", sequence):
            return self.state
        failure = first_failure(outcomes)
        if failure is not None:
            return self._fail(failure)

        stock_rows, summary_rows = (outcome.value for outcome in outcomes)
        self.stock_rows = stock_rows
        self.summary_rows = summary_rows
        self.top_products = top_n_by_stock_value(stock_rows, TOP_PRODUCTS)
        self.categories = category_distribution(stock_rows)
        self.low_stock = low_stock_slice(stock_rows)
        self.trend = transaction_trend(summary_rows)
        self.totals = stock_report_totals(stock_rows, summary_rows)
        self._record_anomalies([*stock_flag_anomalies(stock_rows), *self.trend.anomalies])
        return self._succeed()
