"""Pydantic schemas for store service.

The storefront clients speak camelCase JSON; every schema here derives from
``CamelModel`` so Python code stays snake_case while the wire format matches
the clients.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from services.store_service.models import (
    DEFAULT_CATEGORY,
    DEFAULT_COUNTRY,
    AddressType,
    AnalyticsEventType,
    OrderStatus,
    PaymentMethodType,
    WalletProvider,
)

# Money is stored as Decimal but sent to clients as a JSON number
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _first_present(data: dict, *keys: str) -> Any:
    """Return the first value among ``keys`` that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Money = Field(..., ge=0)
    original_price: Optional[Money] = Field(None, ge=0)
    category: str = Field(DEFAULT_CATEGORY, max_length=100)
    images: list[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    is_active: bool = True
    variant_options: Optional[dict] = None
    specifications: Optional[dict] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=100)
    images: Optional[list[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    variant_options: Optional[dict] = None
    specifications: Optional[dict] = None


class ProductResponse(ProductBase):
    id: uuid.UUID
    rating: float = 0
    num_reviews: int = 0
    created_at: datetime
    updated_at: datetime


class ProductListResponse(CamelModel):
    """Paginated product list."""

    products: list[ProductResponse]
    page: int
    pages: int
    total: int


# ============================================================================
# REVIEW SCHEMAS
# ============================================================================


class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=5000)
    user_name: Optional[str] = Field(None, max_length=255)  # Display name override


class ReviewResponse(CamelModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: str
    user_name: str
    rating: int
    comment: str
    helpful: int = 0
    created_at: datetime


class ReviewListResponse(CamelModel):
    """Paginated reviews for one product, newest first."""

    reviews: list[ReviewResponse]
    page: int
    pages: int
    total: int


class ReviewStatsResponse(CamelModel):
    total_reviews: int
    average_rating: float
    rating_distribution: dict[int, int]


class ReviewHelpfulResponse(CamelModel):
    helpful: int


class RatingRefreshResponse(CamelModel):
    updated: int


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemCreate(CamelModel):
    product_id: uuid.UUID
    quantity: int = Field(1, ge=1)
    selected_options: Optional[dict] = None


class CartItemResponse(CamelModel):
    product_id: uuid.UUID
    name: str
    image: Optional[str] = None
    unit_price: Money
    quantity: int
    selected_options: dict = Field(default_factory=dict)

    @field_validator("selected_options", mode="before")
    @classmethod
    def default_options(cls, v):
        return v or {}


class CartResponse(CamelModel):
    id: Optional[uuid.UUID] = None
    items: list[CartItemResponse] = []
    items_price: Money = Decimal("0")


# ============================================================================
# CHECKOUT SCHEMAS
# ============================================================================


class ShippingAddress(CamelModel):
    """Where the order ships. ``email`` is mandatory for guest checkout."""

    full_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("fullName", "full_name", "name"),
        serialization_alias="fullName",
    )
    email: Optional[EmailStr] = None
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field("Pakistan", max_length=100)
    phone: str = Field(..., min_length=1, max_length=50)
    second_phone: Optional[str] = Field(None, max_length=50)


class LineItemInput(CamelModel):
    """Canonical checkout line item.

    Storefront clients send the same value under several names (a product
    object or id, ``title`` or ``name``, ``processedImage`` or ``image``,
    ``price``/``currentPrice``/``originalPrice``, ``qty`` or ``quantity``).
    They are folded into one shape here so the order service never sees them.
    """

    # Limits match the order item columns
    product_id: Optional[str] = Field(None, max_length=64)
    name: str = Field("Unnamed Product", max_length=255)
    image: Optional[str] = Field(None, max_length=1024)
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    quantity: int = Field(1, ge=1)
    category: Optional[str] = Field(None, max_length=100)
    selected_options: dict = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def coalesce_client_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        product = _first_present(data, "product", "productId", "product_id", "_id", "id")
        if isinstance(product, dict):
            product = _first_present(product, "_id", "id")

        image = _first_present(data, "processedImage", "image")
        if image is None and data.get("images"):
            first = data["images"][0]
            image = first.get("url") if isinstance(first, dict) else first

        canonical = {
            "product_id": str(product) if product is not None else None,
            "name": _first_present(data, "title", "name"),
            "image": image,
            "unit_price": _first_present(
                data, "unitPrice", "unit_price", "price", "currentPrice", "originalPrice"
            ),
            "quantity": _first_present(data, "quantity", "qty"),
            "category": data.get("category"),
            "selected_options": _first_present(
                data, "selectedOptions", "selected_options", "options"
            ),
        }
        return {k: v for k, v in canonical.items() if v is not None}


class OrderCreate(CamelModel):
    """Checkout request. Without ``items`` the caller's saved cart is used."""

    shipping_address: ShippingAddress
    payment_method: str = Field(..., min_length=1, max_length=50)
    items: Optional[list[LineItemInput]] = None
    items_price: Optional[Decimal] = Field(None, ge=0)
    shipping_price: Optional[Decimal] = None  # Ignored: shipping is free
    tax_price: Optional[Decimal] = None  # Ignored: prices include tax
    total_price: Optional[Decimal] = Field(None, ge=0)
    is_guest: bool = False


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemResponse(CamelModel):
    product_id: Optional[str] = None
    name: str
    image: Optional[str] = None
    unit_price: Money
    quantity: int
    category: str = DEFAULT_CATEGORY
    selected_options: dict = Field(default_factory=dict)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v or DEFAULT_CATEGORY

    @field_validator("selected_options", mode="before")
    @classmethod
    def default_options(cls, v):
        return v or {}


class OrderResponse(CamelModel):
    id: uuid.UUID
    order_number: str

    user_id: Optional[str] = None
    is_guest: bool
    guest_email: Optional[str] = None
    guest_name: Optional[str] = None

    order_items: list[OrderItemResponse]
    shipping_address: dict
    payment_method: str

    items_price: Money
    shipping_price: Money
    tax_price: Money
    total_price: Money

    order_status: OrderStatus
    tracking_number: Optional[str] = None
    is_paid: bool
    paid_at: Optional[datetime] = None
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    created_at: datetime
    updated_at: datetime


class OrderListResponse(CamelModel):
    """Paginated order list."""

    orders: list[OrderResponse]
    page: int
    pages: int
    total: int


class OrderStatusUpdate(CamelModel):
    """Update order status (admin)."""

    order_status: Optional[OrderStatus] = None
    tracking_number: Optional[str] = Field(None, max_length=100)


class OrderCancelRequest(CamelModel):
    email: Optional[EmailStr] = None


# ============================================================================
# SAVED ADDRESS SCHEMAS
# ============================================================================


class AddressBase(CamelModel):
    type: AddressType = AddressType.HOME
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field(DEFAULT_COUNTRY, max_length=100)
    landmark: Optional[str] = Field(None, max_length=255)


class AddressCreate(AddressBase):
    is_default: bool = False


class AddressUpdate(CamelModel):
    type: Optional[AddressType] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    landmark: Optional[str] = Field(None, max_length=255)
    is_default: Optional[bool] = None


class AddressResponse(AddressBase):
    id: uuid.UUID
    email: str
    is_default: bool
    created_at: datetime
    updated_at: datetime


# ============================================================================
# SAVED PAYMENT METHOD SCHEMAS
# ============================================================================


class CardDetails(CamelModel):
    """Display details only. Full card numbers are never accepted."""

    last4: Optional[str] = Field(None, pattern=r"^\d{4}$")
    brand: Optional[str] = Field(None, max_length=50)
    expiry_month: Optional[int] = Field(None, ge=1, le=12)
    expiry_year: Optional[int] = Field(None, ge=2000, le=2100)
    name_on_card: Optional[str] = Field(None, max_length=255)


class BankDetails(CamelModel):
    bank_name: Optional[str] = Field(None, max_length=255)
    account_number: Optional[str] = Field(None, max_length=64)
    account_holder: Optional[str] = Field(None, max_length=255)


class PaymentMethodCreate(CamelModel):
    method_type: PaymentMethodType
    card: Optional[CardDetails] = None
    bank: Optional[BankDetails] = None
    wallet: Optional[WalletProvider] = None
    is_default: bool = False


class PaymentMethodUpdate(CamelModel):
    method_type: Optional[PaymentMethodType] = None
    card: Optional[CardDetails] = None
    bank: Optional[BankDetails] = None
    wallet: Optional[WalletProvider] = None
    is_default: Optional[bool] = None


class PaymentMethodResponse(CamelModel):
    id: uuid.UUID
    method_type: PaymentMethodType
    card: Optional[CardDetails] = None
    bank: Optional[BankDetails] = None
    wallet: Optional[WalletProvider] = None
    is_default: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ============================================================================
# ANALYTICS SCHEMAS
# ============================================================================


class AnalyticsEventCreate(CamelModel):
    event_type: AnalyticsEventType
    page_url: Optional[str] = Field(None, max_length=1024)
    product_id: Optional[str] = Field(None, max_length=64)
    session_id: Optional[str] = Field(None, max_length=255)
    metadata: Optional[dict] = None


class AnalyticsTrackResponse(CamelModel):
    success: bool = True
    already_tracked: bool = False
    event_id: uuid.UUID
