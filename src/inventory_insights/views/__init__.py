from .base import ActionResult, BaseView
from .dashboard import DashboardView
from .products import ProductsView
from .reports import ReportsView
from .sequencing import RequestSequencer, Settled, settle
from .suppliers import SuppliersView
from .transactions import TransactionsView
from .users import UsersView
from .view_state import ViewState, ViewStateStatus, resolve_state

__all__ = [
    "ActionResult",
    "BaseView",
    "DashboardView",
    "ProductsView",
    "ReportsView",
    "RequestSequencer",
    "Settled",
    "SuppliersView",
    "TransactionsView",
    "UsersView",
    "ViewState",
    "ViewStateStatus",
    "resolve_state",
    "settle",
]
