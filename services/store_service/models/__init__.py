"""Store Service models package."""

from services.store_service.models.analytics import AnalyticsEvent
from services.store_service.models.catalog import DEFAULT_CATEGORY, Product, Review
from services.store_service.models.commerce import (
    Cart,
    CartItem,
    Order,
    OrderItem,
    StoreCounter,
)
from services.store_service.models.customers import (
    DEFAULT_COUNTRY,
    Address,
    PaymentMethod,
)
from services.store_service.models.enums import (
    AddressType,
    AnalyticsEventType,
    OrderStatus,
    PaymentMethodType,
    WalletProvider,
)

__all__ = [
    "Address",
    "AddressType",
    "AnalyticsEvent",
    "AnalyticsEventType",
    "Cart",
    "CartItem",
    "DEFAULT_CATEGORY",
    "DEFAULT_COUNTRY",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentMethodType",
    "Product",
    "Review",
    "StoreCounter",
    "WalletProvider",
]
