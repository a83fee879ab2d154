"""Enum definitions for store service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class AnalyticsEventType(str, enum.Enum):
    PAGE_VIEW = "page_view"
    PRODUCT_VIEW = "product_view"
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    BEGIN_CHECKOUT = "begin_checkout"
    PURCHASE_INTENT = "purchase_intent"
    PURCHASE = "purchase"
    SEARCH = "search"
    CUSTOM_EVENT = "custom_event"


class AddressType(str, enum.Enum):
    HOME = "home"
    WORK = "work"
    OTHER = "other"


class PaymentMethodType(str, enum.Enum):
    CARD = "card"
    BANK = "bank"
    WALLET = "wallet"


class WalletProvider(str, enum.Enum):
    JAZZCASH = "jazzcash"
    EASYPAISA = "easypaisa"
    SADAPAY = "sadapay"
    NAYAPAY = "nayapay"
