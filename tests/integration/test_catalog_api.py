"""Integration tests for the product catalog endpoints."""

import uuid
from decimal import Decimal

import pytest
from services.store_service.app.main import app
from tests.factories import (
    ProductFactory,
    make_admin_user,
    make_user,
    override_auth,
)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_products_paginates_active_products(client, db_session):
    db_session.add_all(
        [ProductFactory.create(category="Lighting") for _ in range(3)]
        + [ProductFactory.create(title="Rug", category="Textiles")]
        + [ProductFactory.create(is_active=False)]
    )
    await db_session.commit()

    response = await client.get("/api/products", params={"limit": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 4
    assert data["pages"] == 2
    assert len(data["products"]) == 2

    lighting = await client.get("/api/products", params={"category": "Lighting"})
    assert lighting.json()["total"] == 3

    search = await client.get("/api/products", params={"search": "rug"})
    assert [p["title"] for p in search.json()["products"]] == ["Rug"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_product(client, db_session):
    product = ProductFactory.create(price=Decimal("1299.50"))
    db_session.add(product)
    await db_session.commit()

    response = await client.get(f"/api/products/{product.id}")
    assert response.status_code == 200
    assert response.json()["price"] == 1299.5

    assert (await client.get(f"/api/products/{uuid.uuid4()}")).status_code == 404
    assert (await client.get("/api/products/nope")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_creates_and_updates_product(client):
    payload = {
        "title": "Brass Lamp",
        "price": 1800,
        "originalPrice": 2200,
        "images": ["https://cdn.test/lamp.webp"],
        "stock": 4,
    }

    with override_auth(app, make_user()):
        assert (await client.post("/api/products", json=payload)).status_code == 403

    with override_auth(app, make_admin_user()):
        created = await client.post("/api/products", json=payload)
        assert created.status_code == 201, created.text
        product = created.json()
        assert product["category"] == "General"
        assert product["originalPrice"] == 2200

        updated = await client.put(
            f"/api/products/{product['id']}", json={"price": 1500, "stock": 0}
        )

    assert updated.status_code == 200
    assert updated.json()["price"] == 1500
    assert updated.json()["stock"] == 0
    assert updated.json()["title"] == "Brass Lamp"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_product_search_treats_percent_literally(client, db_session):
    db_session.add_all(
        [
            ProductFactory.create(title="100% Cotton Throw", description=None),
            ProductFactory.create(title="Linen Throw", description=None),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/products", params={"search": "%"})

    assert [p["title"] for p in response.json()["products"]] == ["100% Cotton Throw"]
