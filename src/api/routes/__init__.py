"""API route modules."""

from src.api.routes.health import router as health_router
from src.api.routes.items import router as items_router
from src.api.routes.stock import router as stock_router

__all__ = [
    "health_router",
    "items_router",
    "stock_router",
]
