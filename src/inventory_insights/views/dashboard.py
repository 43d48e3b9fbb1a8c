from __future__ import annotations

from collections.abc import Callable
from datetime import date

from ..aggregation import DashboardStats, compute_dashboard_stats, stock_flag_anomalies, trailing_window
from ..clients import ProductsClient, ReportsClient, SuppliersClient, TransactionsClient
from ..http_client import HttpClient
from ..models import Product, StockReportRow, Transaction
from ..notifications import NotificationCenter
from ..session import SessionStore
from .base import BaseView
from .sequencing import first_failure, settle
from .view_state import ViewState

RECENT_PREVIEW = 5
LOW_STOCK_PREVIEW = 5
STOCK_PREVIEW = 10


class DashboardView(BaseView):
    module = "dashboard"
    title = "Dashboard"

    def __init__(
        self,
        http: HttpClient,
        session: SessionStore,
        notifications: NotificationCenter,
        *,
        recent_window_days: int = 7,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.products_client = ProductsClient(http=http)
        self.suppliers_client = SuppliersClient(http=http)
        self.transactions_client = TransactionsClient(http=http)
        self.reports_client = ReportsClient(http=http)
        self.recent_window_days = recent_window_days
        self._today = today
        self.stats: DashboardStats | None = None
        self.recent_transactions: list[Transaction] = []
        self.low_stock_products: list[Product] = []
        self.stock_preview: list[StockReportRow] = []
        super().__init__(http, session, notifications)

    def has_data(self) -> bool:
        return self.stats is not None

    async def load(self) -> ViewState:
        sequence = self._begin("overview")
        if sequence is None:
            return self.state
        window = trailing_window(self._today(), self.recent_window_days)
        outcomes = await settle(
            self.products_client.list_active(),
            self.suppliers_client.list_active(),
            self.products_client.list_low_stock(),
            self.transactions_client.list_by_date_range(window),
            self.reports_client.stock_report(),
        )
        if not self._is_current("overview", sequence):
            return self.state
        failure = first_failure(outcomes)
        if failure is not None:
            return self._fail(failure)

        products, suppliers, low_stock, recent, stock_rows = (outcome.value for outcome in outcomes)
        self.stats = compute_dashboard_stats(products, suppliers, low_stock, recent)
        self.recent_transactions = recent[:RECENT_PREVIEW]
        self.low_stock_products = low_stock[:LOW_STOCK_PREVIEW]
        self.stock_preview = stock_rows[:STOCK_PREVIEW]
        self._record_anomalies(stock_flag_anomalies(stock_rows))
        return self._succeed()
