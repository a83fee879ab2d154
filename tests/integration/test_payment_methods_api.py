"""Integration tests for saved payment methods."""

import pytest
from services.store_service.app.main import app
from tests.factories import card_payload, make_user, override_auth


@pytest.mark.asyncio
@pytest.mark.integration
async def test_payment_methods_require_authentication(client):
    response = await client.get("/api/payments")
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_saved_payment_methods_lifecycle(client):
    with override_auth(app, make_user()):
        card = await client.post("/api/payments", json=card_payload())
        assert card.status_code == 201, card.text
        assert card.json()["isDefault"] is True
        assert card.json()["card"]["last4"] == "4242"
        assert card.json()["bank"] is None

        bank = await client.post(
            "/api/payments",
            json={
                "methodType": "bank",
                "bank": {
                    "bankName": "Meezan Bank",
                    "accountNumber": "0101-22334455",
                    "accountHolder": "Ayesha Khan",
                },
                "isDefault": True,
            },
        )
        assert bank.status_code == 201
        assert bank.json()["isDefault"] is True

        listed = (await client.get("/api/payments")).json()
        assert [p["id"] for p in listed] == [bank.json()["id"], card.json()["id"]]
        assert listed[1]["isDefault"] is False

        removed = await client.delete(f"/api/payments/{bank.json()['id']}")
        assert removed.status_code == 204

        listed = (await client.get("/api/payments")).json()
        assert [p["id"] for p in listed] == [card.json()["id"]]
        assert listed[0]["isDefault"] is True

        gone = await client.patch(f"/api/payments/{bank.json()['id']}/default")
        assert gone.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_payment_method_validation(client):
    with override_auth(app, make_user()):
        no_card = await client.post("/api/payments", json={"methodType": "card"})
        assert no_card.status_code == 400
        assert no_card.json()["detail"] == "Card details are required for card payments"

        full_number = await client.post(
            "/api/payments",
            json=card_payload(card={"last4": "4242424242424242", "brand": "visa"}),
        )
        assert full_number.status_code == 422

        unknown_wallet = await client.post(
            "/api/payments", json={"methodType": "wallet", "wallet": "paypal"}
        )
        assert unknown_wallet.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_payment_method_and_set_default(client):
    with override_auth(app, make_user()):
        first = (await client.post("/api/payments", json=card_payload())).json()
        second = (
            await client.post(
                "/api/payments", json={"methodType": "wallet", "wallet": "easypaisa"}
            )
        ).json()
        assert second["isDefault"] is False

        updated = await client.put(
            f"/api/payments/{first['id']}",
            json={"card": {"last4": "0005", "brand": "amex"}},
        )
        assert updated.status_code == 200
        assert updated.json()["card"]["brand"] == "amex"

        made_default = await client.patch(f"/api/payments/{second['id']}/default")
        assert made_default.json()["isDefault"] is True

        listed = (await client.get("/api/payments")).json()

    assert [p["id"] for p in listed if p["isDefault"]] == [second["id"]]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_other_users_payment_method_is_401(client):
    with override_auth(app, make_user()):
        card = (await client.post("/api/payments", json=card_payload())).json()

    with override_auth(app, make_user()):
        response = await client.delete(f"/api/payments/{card['id']}")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authorized to delete this payment method"
