"""Store service routers package."""

from services.store_service.routers.addresses import router as addresses_router
from services.store_service.routers.analytics import router as analytics_router
from services.store_service.routers.cart import router as cart_router
from services.store_service.routers.catalog import router as catalog_router
from services.store_service.routers.orders import router as orders_router
from services.store_service.routers.payment_methods import (
    router as payment_methods_router,
)
from services.store_service.routers.reviews import router as reviews_router

__all__ = [
    "addresses_router",
    "analytics_router",
    "cart_router",
    "catalog_router",
    "orders_router",
    "payment_methods_router",
    "reviews_router",
]
