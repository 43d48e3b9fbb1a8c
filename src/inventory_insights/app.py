from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from .auth_store import TokenStore
from .config import ClientConfig
from .events import SessionEvents
from .http_client import HttpClient, unauthorized_policy
from .navigation import HOME_ROUTE, Navigator, Route
from .notifications import NotificationCenter
from .session import LoginResult, SessionStore
from .views import (
    BaseView,
    DashboardView,
    ProductsView,
    ReportsView,
    SuppliersView,
    TransactionsView,
    UsersView,
    ViewState,
)

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has ended. Please sign in again."


class InventoryApp:
    """Composition root: one transport, one session store, one navigator, one view per route."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        http: HttpClient | None = None,
        token_store: TokenStore | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config
        self.events = SessionEvents()
        self.http = http or HttpClient(config=config)
        self.http.add_response_hook(unauthorized_policy(self.events))
        self.notifications = NotificationCenter()
        self.token_store = token_store or TokenStore()
        self.session = SessionStore(
            self.http,
            self.token_store,
            self.events,
            env_name=config.env_name,
            on_invalid_session=self._on_session_lost,
        )
        self.navigator = Navigator(capabilities=self.session)
        self.dashboard = DashboardView(
            self.http, self.session, self.notifications, recent_window_days=config.recent_window_days, today=today
        )
        self.products = ProductsView(self.http, self.session, self.notifications)
        self.suppliers = SuppliersView(self.http, self.session, self.notifications)
        self.transactions = TransactionsView(self.http, self.session, self.notifications)
        self.reports = ReportsView(
            self.http, self.session, self.notifications, report_window_days=config.report_window_days, today=today
        )
        self.users = UsersView(self.http, self.session, self.notifications)
        self._views: dict[Route, BaseView] = {
            Route.DASHBOARD: self.dashboard,
            Route.PRODUCTS: self.products,
            Route.SUPPLIERS: self.suppliers,
            Route.TRANSACTIONS: self.transactions,
            Route.REPORTS: self.reports,
            Route.USERS: self.users,
        }

    async def start(self) -> Route:
        restored = await self.session.restore()
        route = self.navigator.navigate(HOME_ROUTE if restored else Route.LOGIN)
        logger.info("app_started", extra={"env": self.config.env_name, "route": route.value, "restored": restored})
        return route

    async def login(self, username: str, password: str) -> LoginResult:
        result = await self.session.login(username, password)
        if result.success:
            self.navigator.navigate(HOME_ROUTE)
        return result

    def logout(self) -> None:
        self.session.logout()
        self.navigator.force_login("user_logout")

    def view_for(self, route: Route) -> BaseView | None:
        return self._views.get(route)

    async def open(self, route: Route) -> ViewState | None:
        resolved = self.navigator.navigate(route)
        view = self.view_for(resolved)
        if view is None:
            return None
        return await view.load()

    async def aclose(self) -> None:
        self.session.close()
        await self.http.aclose()

    def _on_session_lost(self, reason: str) -> None:
        self.notifications.push(
            level="warning",
            title="Session ended",
            message=SESSION_EXPIRED_MESSAGE,
            details={"reason": reason},
        )
        self.navigator.force_login(reason)
