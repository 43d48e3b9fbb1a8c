from __future__ import annotations

from dataclasses import dataclass

from inventory_insights.navigation import HOME_ROUTE, Navigator, Route


@dataclass
class StaticCapabilities:
    authenticated: bool = False
    admin: bool = False

    def is_authenticated(self) -> bool:
        return self.authenticated

    def is_admin(self) -> bool:
        return self.authenticated and self.admin


def test_guard_sends_anonymous_callers_to_login() -> None:
    navigator = Navigator(capabilities=StaticCapabilities())
    assert navigator.guard(Route.REPORTS) is Route.LOGIN
    assert navigator.navigate(Route.DASHBOARD) is Route.LOGIN
    assert navigator.visible_routes() == []


def test_guard_keeps_staff_out_of_admin_routes() -> None:
    navigator = Navigator(capabilities=StaticCapabilities(authenticated=True))
    assert navigator.navigate(Route.USERS) is HOME_ROUTE
    assert navigator.navigate(Route.TRANSACTIONS) is Route.TRANSACTIONS
    assert Route.USERS not in navigator.visible_routes()
    assert navigator.history == [Route.DASHBOARD, Route.TRANSACTIONS]


def test_admin_sees_every_route() -> None:
    navigator = Navigator(capabilities=StaticCapabilities(authenticated=True, admin=True))
    assert navigator.visible_routes() == [
        Route.DASHBOARD,
        Route.PRODUCTS,
        Route.SUPPLIERS,
        Route.TRANSACTIONS,
        Route.REPORTS,
        Route.USERS,
    ]


def test_force_login_moves_to_login() -> None:
    navigator = Navigator(capabilities=StaticCapabilities(authenticated=True), current=Route.REPORTS)
    navigator.force_login("authorization_failure")
    assert navigator.current is Route.LOGIN
