from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class Route(str, Enum):
    LOGIN = "login"
    DASHBOARD = "dashboard"
    PRODUCTS = "products"
    SUPPLIERS = "suppliers"
    TRANSACTIONS = "transactions"
    REPORTS = "reports"
    USERS = "users"


ADMIN_ROUTES = frozenset({Route.USERS})
HOME_ROUTE = Route.DASHBOARD


class Capabilities(Protocol):
    def is_authenticated(self) -> bool: ...

    def is_admin(self) -> bool: ...


@dataclass
class Navigator:
    capabilities: Capabilities
    current: Route = Route.LOGIN
    history: list[Route] = field(default_factory=list)

    def guard(self, route: Route) -> Route:
        if route is Route.LOGIN:
            return route
        if not self.capabilities.is_authenticated():
            return Route.LOGIN
        if route in ADMIN_ROUTES and not self.capabilities.is_admin():
            return HOME_ROUTE
        return route

    def navigate(self, route: Route) -> Route:
        resolved = self.guard(route)
        if resolved is not route:
            logger.info("navigation_redirected", extra={"requested": route.value, "route": resolved.value})
        self._go(resolved)
        return resolved

    def visible_routes(self) -> list[Route]:
        return [route for route in Route if route is not Route.LOGIN and self.guard(route) is route]

    def force_login(self, reason: str) -> None:
        logger.info("navigation_forced_login", extra={"reason": reason})
        self._go(Route.LOGIN)

    def _go(self, route: Route) -> None:
        self.history.append(route)
        self.current = route
