"""Integration tests for the orders endpoints."""

import uuid
from decimal import Decimal

import pytest
from services.store_service.app.main import app
from services.store_service.models import Order, OrderStatus
from sqlalchemy import select
from tests.factories import (
    CartFactory,
    OrderFactory,
    ProductFactory,
    bearer_headers,
    make_admin_user,
    make_user,
    override_auth,
    shipping_address,
)

GUEST_ITEMS = [
    {"_id": "p-1", "title": "Ceramic Vase", "price": 500, "qty": 2},
    {"productId": "p-2", "name": "Candle", "currentPrice": 250, "quantity": 1},
]


def _guest_payload(email="guest@test.com", **overrides) -> dict:
    payload = {
        "shippingAddress": shipping_address(email=email, fullName="Guest Buyer"),
        "paymentMethod": "cod",
        "isGuest": True,
        "items": GUEST_ITEMS,
    }
    payload.update(overrides)
    return payload


async def _create_guest_order(client, email="guest@test.com", **overrides) -> dict:
    response = await client.post("/api/orders", json=_guest_payload(email, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_checkout(client):
    """POST /orders - guest order from client-held items."""
    data = await _create_guest_order(client)

    assert data["orderNumber"] == "#1001"
    assert data["isGuest"] is True
    assert data["userId"] is None
    assert data["guestEmail"] == "guest@test.com"
    assert data["guestName"] == "Guest Buyer"
    assert data["itemsPrice"] == 1250
    assert data["totalPrice"] == 1250
    assert data["shippingPrice"] == 0
    assert data["taxPrice"] == 0
    assert data["orderStatus"] == "pending"
    assert data["shippingAddress"]["fullName"] == "Guest Buyer"

    first, second = data["orderItems"]
    assert first["productId"] == "p-1"
    assert first["quantity"] == 2
    assert first["unitPrice"] == 500
    assert first["category"] == "General"
    assert first["selectedOptions"] == {}
    assert second["name"] == "Candle"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_numbers_increase(client):
    first = await _create_guest_order(client)
    second = await _create_guest_order(client, email="second@test.com")

    assert first["orderNumber"] == "#1001"
    assert second["orderNumber"] == "#1002"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_anonymous_checkout_without_guest_flag_is_401(client):
    response = await client.post(
        "/api/orders", json=_guest_payload(isGuest=False)
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_checkout_without_items_is_400(client):
    response = await client.post("/api/orders", json=_guest_payload(items=[]))
    assert response.status_code == 400
    assert response.json()["detail"] == "No items provided"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_with_invalid_body_is_422(client):
    response = await client.post(
        "/api/orders", json={"paymentMethod": "cod", "isGuest": True}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_with_oversized_item_title_is_422(client, db_session):
    items = [{"_id": "p-1", "title": "x" * 400, "price": 500, "qty": 1}]

    response = await client.post("/api/orders", json=_guest_payload(items=items))

    assert response.status_code == 422
    assert (await db_session.execute(select(Order))).scalars().all() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_registered_checkout_from_cart_with_token(client, db_session):
    """A real bearer token: the saved cart becomes the order and is removed."""
    user = make_user()
    product = ProductFactory.create(title="Lamp", price=Decimal("750"))
    db_session.add(product)
    db_session.add(CartFactory.create(user.user_id, products=[product], quantity=2))
    await db_session.commit()

    response = await client.post(
        "/api/orders",
        json={"shippingAddress": shipping_address(), "paymentMethod": "card"},
        headers=bearer_headers(user),
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["isGuest"] is False
    assert data["userId"] == user.user_id
    assert data["totalPrice"] == 1500
    assert data["orderItems"][0]["name"] == "Lamp"
    assert data["orderItems"][0]["productId"] == str(product.id)

    cart = await client.get("/api/cart", headers=bearer_headers(user))
    assert cart.json()["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_registered_checkout_with_empty_cart_is_400(client):
    with override_auth(app, make_user()):
        response = await client.post(
            "/api/orders",
            json={"shippingAddress": shipping_address(), "paymentMethod": "cod"},
        )
    assert response.status_code == 400
    assert response.json()["detail"] == "Cart is empty"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_token_is_treated_as_guest(client):
    response = await client.post(
        "/api/orders",
        json=_guest_payload(),
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 201
    assert response.json()["isGuest"] is True


# ---------------------------------------------------------------------------
# Customer retrieval
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_orders_for_registered_user(client, db_session):
    user = make_user()
    db_session.add_all(
        [OrderFactory.create(user_id=user.user_id) for _ in range(3)]
        + [OrderFactory.create()]
    )
    await db_session.commit()

    with override_auth(app, user):
        response = await client.get("/api/orders/myorders", params={"limit": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["pages"] == 2
    assert data["page"] == 1
    assert len(data["orders"]) == 2
    assert {o["userId"] for o in data["orders"]} == {user.user_id}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_orders_for_guest_email(client):
    await _create_guest_order(client, email="guest@test.com")
    await _create_guest_order(client, email="other@test.com")

    response = await client.get(
        "/api/orders/myorders", params={"email": "Guest@Test.com"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["orders"][0]["guestEmail"] == "guest@test.com"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_orders_without_identity_is_400(client):
    response = await client.get("/api/orders/myorders")
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_lookup(client):
    first = await _create_guest_order(client)
    second = await _create_guest_order(client)

    latest = await client.get("/api/orders/guest", params={"email": "guest@test.com"})
    assert latest.status_code == 200
    assert latest.json()["id"] == second["id"]

    by_number = await client.get(
        "/api/orders/guest",
        params={"email": "guest@test.com", "orderNumber": first["orderNumber"]},
    )
    assert by_number.status_code == 200
    assert by_number.json()["id"] == first["id"]

    missing = await client.get("/api/orders/guest", params={"email": "nobody@test.com"})
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_order_detail_authorization(client, db_session):
    owner = make_user()
    order = OrderFactory.create(user_id=owner.user_id)
    db_session.add(order)
    await db_session.commit()
    url = f"/api/orders/{order.id}"

    with override_auth(app, owner):
        assert (await client.get(url)).status_code == 200
    with override_auth(app, make_user()):
        response = await client.get(url)
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authorized to view this order"
    with override_auth(app, make_admin_user()):
        assert (await client.get(url)).status_code == 200

    assert (await client.get(f"/api/orders/{uuid.uuid4()}")).status_code == 404
    assert (await client.get("/api/orders/not-an-id")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_order_detail_by_email(client):
    order = await _create_guest_order(client)
    url = f"/api/orders/{order['id']}"

    ok = await client.get(url, params={"email": "guest@test.com"})
    assert ok.status_code == 200
    assert ok.json()["orderNumber"] == order["orderNumber"]

    assert (await client.get(url, params={"email": "x@test.com"})).status_code == 401
    assert (await client.get(url)).status_code == 401


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_cancels_pending_order(client):
    order = await _create_guest_order(client)

    response = await client.put(
        f"/api/orders/{order['id']}/cancel", json={"email": "guest@test.com"}
    )

    assert response.status_code == 200
    assert response.json()["orderStatus"] == "cancelled"
    assert response.json()["cancelledAt"] is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cancel_shipped_order_is_400(client, db_session):
    user = make_user()
    order = OrderFactory.create(user_id=user.user_id, order_status=OrderStatus.SHIPPED)
    db_session.add(order)
    await db_session.commit()

    with override_auth(app, user):
        response = await client.put(f"/api/orders/{order.id}/cancel")

    assert response.status_code == 400
    assert response.json()["detail"] == "Order cannot be cancelled at this stage"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cancel_someone_elses_order_is_401(client):
    order = await _create_guest_order(client)

    response = await client.put(
        f"/api/orders/{order['id']}/cancel", json={"email": "intruder@test.com"}
    )
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_routes_reject_customers(client):
    order = await _create_guest_order(client)

    with override_auth(app, make_user()):
        assert (await client.get("/api/orders")).status_code == 403
        assert (await client.get("/api/orders/admin/filtered")).status_code == 403
        response = await client.put(
            f"/api/orders/{order['id']}/status", json={"orderStatus": "shipped"}
        )
        assert response.status_code == 403

    assert (await client.get("/api/orders")).status_code in (401, 403)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_marks_order_delivered(client, db_session):
    order = await _create_guest_order(client)

    with override_auth(app, make_admin_user()):
        response = await client.put(
            f"/api/orders/{order['id']}/status",
            json={"orderStatus": "delivered", "trackingNumber": "TCS-123"},
        )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["orderStatus"] == "delivered"
    assert data["isDelivered"] is True
    assert data["deliveredAt"] is not None
    assert data["trackingNumber"] == "TCS-123"

    stored = (
        await db_session.execute(select(Order).where(Order.id == uuid.UUID(order["id"])))
    ).scalar_one()
    assert stored.is_delivered is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_illegal_transition_is_400(client):
    order = await _create_guest_order(client)

    with override_auth(app, make_admin_user()):
        await client.put(
            f"/api/orders/{order['id']}/status", json={"orderStatus": "delivered"}
        )
        response = await client.put(
            f"/api/orders/{order['id']}/status", json={"orderStatus": "cancelled"}
        )

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_lists_and_filters_orders(client):
    await _create_guest_order(client, email="amna@test.com")
    target = await _create_guest_order(client, email="bilal@test.com")

    with override_auth(app, make_admin_user()):
        all_orders = await client.get("/api/orders")
        assert all_orders.status_code == 200
        assert all_orders.json()["total"] == 2

        await client.put(
            f"/api/orders/{target['id']}/status", json={"orderStatus": "confirmed"}
        )

        confirmed = await client.get(
            "/api/orders/admin/filtered", params={"status": "confirmed"}
        )
        assert [o["id"] for o in confirmed.json()["orders"]] == [target["id"]]

        by_number = await client.get(
            "/api/orders/admin/filtered",
            params={"status": "all", "search": target["orderNumber"]},
        )
        assert [o["id"] for o in by_number.json()["orders"]] == [target["id"]]

        bad_status = await client.get(
            "/api/orders/admin/filtered", params={"status": "lost"}
        )
        assert bad_status.status_code == 400
