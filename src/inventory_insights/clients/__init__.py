from .auth import AuthClient
from .products import ProductsClient
from .reports import ReportsClient
from .suppliers import SuppliersClient
from .transactions import TransactionsClient
from .users import UsersClient

__all__ = [
    "AuthClient",
    "ProductsClient",
    "ReportsClient",
    "SuppliersClient",
    "TransactionsClient",
    "UsersClient",
]
