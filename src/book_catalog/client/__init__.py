"""Client side of the book catalog: HTTP client, UI state and controller."""

from .api import ApiError, BookApiClient
from .controller import CatalogController
from .credentials import TokenStore
from .state import CatalogState, Draft

__all__ = [
    "ApiError",
    "BookApiClient",
    "CatalogController",
    "CatalogState",
    "Draft",
    "TokenStore",
]
