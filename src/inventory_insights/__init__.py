from .aggregation import (
    CategoryAggregate,
    DashboardStats,
    DataIntegrityAnomaly,
    category_distribution,
    compute_dashboard_stats,
    filter_by_text_query,
    filter_by_type,
    low_stock_slice,
    top_n_by_stock_value,
    transaction_trend,
)
from .app import InventoryApp
from .auth_store import TokenStore
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ActionNotPermittedError,
    ApiError,
    AuthorizationError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    ResponseFormatError,
    ServerError,
    UnauthorizedError,
)
from .http_client import HttpClient
from .models import (
    DateRange,
    Identity,
    Product,
    Role,
    SessionData,
    StockReportRow,
    Supplier,
    Transaction,
    TransactionSummaryRow,
    TransactionType,
    TypeFilter,
    User,
)
from .session import LoginResult, SessionStatus, SessionStore
from .tracing import TraceContext
from .validation import ValidationError, ValidationIssue

__all__ = [
    "ActionNotPermittedError",
    "ApiError",
    "AuthorizationError",
    "CategoryAggregate",
    "ClientConfig",
    "ConfigError",
    "DashboardStats",
    "DataIntegrityAnomaly",
    "DateRange",
    "ForbiddenError",
    "HttpClient",
    "Identity",
    "InventoryApp",
    "LoginResult",
    "NetworkError",
    "NotFoundError",
    "Product",
    "ResponseFormatError",
    "Role",
    "ServerError",
    "SessionData",
    "SessionStatus",
    "SessionStore",
    "StockReportRow",
    "Supplier",
    "TokenStore",
    "TraceContext",
    "Transaction",
    "TransactionSummaryRow",
    "TransactionType",
    "TypeFilter",
    "UnauthorizedError",
    "User",
    "ValidationError",
    "ValidationIssue",
    "category_distribution",
    "compute_dashboard_stats",
    "filter_by_text_query",
    "filter_by_type",
    "load_config",
    "low_stock_slice",
    "top_n_by_stock_value",
    "transaction_trend",
]
