"""API Routers."""

from .search import router as search_router
from .catalog import router as catalog_router
from .recommendations import router as recommendations_router
from .watchlist import router as watchlist_router
from .history import router as history_router
from .user import router as user_router

__all__ = [
    "search_router",
    "catalog_router",
    "recommendations_router",
    "watchlist_router",
    "history_router",
    "user_router",
]
