"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    product = ProductFactory.create(price=Decimal("500"))
    db_session.add(product)
    await db_session.commit()
"""

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from jose import jwt

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


def shipping_address(**overrides) -> dict:
    """Checkout shipping address as the storefront sends it (camelCase)."""
    defaults = {
        "fullName": "Ayesha Khan",
        "email": _unique_email(),
        "address": "12 Main Boulevard",
        "city": "Lahore",
        "country": "Pakistan",
        "phone": "+92 300 1234567",
    }
    defaults.update(overrides)
    return defaults


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def make_user(user_id=None, **overrides):
    from libs.auth.models import AuthUser

    defaults = {
        "user_id": user_id or f"user-{uuid.uuid4().hex[:8]}",
        "email": _unique_email(),
        "name": "Test Customer",
        "is_admin": False,
    }
    defaults.update(overrides)
    return AuthUser(**defaults)


def make_admin_user(**overrides):
    overrides.setdefault("name", "Store Admin")
    return make_user(is_admin=True, **overrides)


@contextmanager
def override_auth(app, user):
    """Authenticate every request to ``app`` as ``user`` inside the block."""
    from libs.auth.dependencies import get_current_user, get_optional_user

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_optional_user] = lambda: user
    try:
        yield user
    finally:
        app.dependency_overrides.pop(get_current_user, None)
        app.dependency_overrides.pop(get_optional_user, None)


def bearer_headers(user) -> dict:
    """A real signed token for ``user``, for tests that exercise token decoding."""
    from libs.common.config import get_settings

    settings = get_settings()
    claims = {
        "sub": user.user_id,
        "email": user.email,
        "name": user.name,
        "is_admin": user.is_admin,
    }
    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProductFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Product

        defaults = {
            "id": _uuid(),
            "title": f"Test Product {uuid.uuid4().hex[:6]}",
            "description": "A product used in tests.",
            "price": Decimal("500.00"),
            "category": "Home Decor",
            "images": ["https://cdn.test/products/1.webp"],
            "stock": 10,
            "is_active": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Product(**defaults)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


class CartFactory:
    @staticmethod
    def create(user_id, products=(), quantity=1, **overrides):
        """Cart holding one line per product, priced at the product's price."""
        from services.store_service.models import Cart, CartItem

        defaults = {
            "id": _uuid(),
            "user_id": user_id,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        cart = Cart(**defaults)
        cart.items = [
            CartItem(
                product_id=product.id,
                name=product.title,
                image=product.primary_image,
                unit_price=product.price,
                quantity=quantity,
                created_at=_now(),
            )
            for product in products
        ]
        return cart


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderFactory:
    @staticmethod
    def create(**overrides):
        """A registered user's single-item order. Pass ``is_guest=True`` plus
        ``guest_email``/``guest_name`` (and ``user_id=None``) for a guest order."""
        from services.store_service.models import Order, OrderItem, OrderStatus

        defaults = {
            "id": _uuid(),
            "order_number": f"#{uuid.uuid4().int % 10**8}",
            "user_id": f"user-{uuid.uuid4().hex[:8]}",
            "is_guest": False,
            "shipping_address": shipping_address(),
            "payment_method": "cod",
            "items_price": Decimal("500.00"),
            "shipping_price": Decimal("0"),
            "tax_price": Decimal("0"),
            "total_price": Decimal("500.00"),
            "order_status": OrderStatus.PENDING,
            "is_paid": False,
            "is_delivered": False,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        items = defaults.pop("items", None)
        order = Order(**defaults)
        order.items = items or [
            OrderItem(
                position=0,
                product_id=str(_uuid()),
                name="Test Product",
                unit_price=Decimal("500.00"),
                quantity=1,
            )
        ]
        return order


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class ReviewFactory:
    @staticmethod
    def create(product, **overrides):
        from services.store_service.models import Review

        defaults = {
            "id": _uuid(),
            "product_id": product.id,
            "user_id": f"user-{uuid.uuid4().hex[:8]}",
            "user_name": "Test Reviewer",
            "rating": 5,
            "comment": "Lovely piece.",
            "helpful": 0,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Review(**defaults)


# ---------------------------------------------------------------------------
# Saved addresses / payment methods
# ---------------------------------------------------------------------------


def address_payload(**overrides) -> dict:
    """Saved address request body (camelCase)."""
    defaults = {
        "type": "home",
        "fullName": "Ayesha Khan",
        "email": _unique_email(),
        "phone": "+92 300 1234567",
        "address": "12 Main Boulevard",
        "city": "Lahore",
        "state": "Punjab",
    }
    defaults.update(overrides)
    return defaults


def card_payload(**overrides) -> dict:
    """Saved card request body (camelCase)."""
    defaults = {
        "methodType": "card",
        "card": {"last4": "4242", "brand": "visa", "expiryMonth": 4, "expiryYear": 2030},
    }
    defaults.update(overrides)
    return defaults
