"""Integration tests for the product review endpoints."""

import pytest
from services.store_service.app.main import app
from tests.factories import (
    ProductFactory,
    bearer_headers,
    make_admin_user,
    make_user,
    override_auth,
)


async def _product(db_session, **overrides):
    product = ProductFactory.create(**overrides)
    db_session.add(product)
    await db_session.commit()
    return product


@pytest.mark.asyncio
@pytest.mark.integration
async def test_review_updates_product_rating(client, db_session):
    product = await _product(db_session)
    url = f"/api/products/{product.id}/reviews"

    first = await client.post(
        url,
        json={"rating": 5, "comment": "Beautiful glaze"},
        headers=bearer_headers(make_user(name="Hina")),
    )
    assert first.status_code == 201, first.text
    assert first.json()["userName"] == "Hina"
    assert first.json()["helpful"] == 0

    with override_auth(app, make_user()):
        second = await client.post(url, json={"rating": 2, "comment": "Chipped"})
    assert second.status_code == 201

    detail = (await client.get(f"/api/products/{product.id}")).json()
    assert detail["rating"] == 3.5
    assert detail["numReviews"] == 2

    listing = await client.get(url)
    assert listing.status_code == 200
    assert listing.json()["total"] == 2
    assert {r["rating"] for r in listing.json()["reviews"]} == {5, 2}

    stats = (await client.get(f"{url}/stats")).json()
    assert stats == {
        "totalReviews": 2,
        "averageRating": 3.5,
        "ratingDistribution": {"1": 0, "2": 1, "3": 0, "4": 0, "5": 1},
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_review_requires_authentication_and_valid_rating(client, db_session):
    product = await _product(db_session)
    url = f"/api/products/{product.id}/reviews"

    anonymous = await client.post(url, json={"rating": 5, "comment": "Great"})
    assert anonymous.status_code in (401, 403)

    with override_auth(app, make_user()):
        assert (await client.post(url, json={"rating": 6, "comment": "x"})).status_code == 422
        assert (await client.post(url, json={"rating": 0, "comment": "x"})).status_code == 422
        assert (await client.post(url, json={"rating": 3})).status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_review_permissions(client, db_session):
    product = await _product(db_session)
    author = make_user()
    with override_auth(app, author):
        review = (
            await client.post(
                f"/api/products/{product.id}/reviews",
                json={"rating": 4, "comment": "Solid"},
            )
        ).json()

    with override_auth(app, make_user()):
        forbidden = await client.delete(f"/api/reviews/{review['id']}")
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Not authorized to delete this review"

    with override_auth(app, make_admin_user()):
        removed = await client.delete(f"/api/reviews/{review['id']}")
        assert removed.status_code == 204
        missing = await client.delete(f"/api/reviews/{review['id']}")
        assert missing.status_code == 404

    detail = (await client.get(f"/api/products/{product.id}")).json()
    assert detail["rating"] == 0
    assert detail["numReviews"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_mark_review_helpful(client, db_session):
    product = await _product(db_session)

    with override_auth(app, make_user()):
        review = (
            await client.post(
                f"/api/products/{product.id}/reviews",
                json={"rating": 5, "comment": "Useful"},
            )
        ).json()
        first = await client.put(f"/api/reviews/{review['id']}/helpful")
        second = await client.put(f"/api/reviews/{review['id']}/helpful")

    assert first.json() == {"helpful": 1}
    assert second.json() == {"helpful": 2}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reviews_for_unknown_product_is_404(client):
    assert (await client.get("/api/products/not-an-id/reviews")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_refresh_all_ratings_is_admin_only(client, db_session):
    await _product(db_session, rating=4.0, num_reviews=3)

    with override_auth(app, make_user()):
        assert (await client.post("/api/reviews/update-all-ratings")).status_code == 403

    with override_auth(app, make_admin_user()):
        response = await client.post("/api/reviews/update-all-ratings")

    assert response.status_code == 200
    assert response.json() == {"updated": 1}
