"""
Tests for the sales HTTP endpoints.
"""
import uuid
from decimal import Decimal

from app.core.events import ITEM_CANCELLED, SALE_CANCELLED, SALE_CREATED, SALE_MODIFIED

BASE = "/api/v1/sales"


def _body(items, sale_number="S1", customer_name="Alice", branch="Downtown"):
    return {
        "sale_number": sale_number,
        "sale_date": "2024-05-01T10:30:00",
        "customer_name": customer_name,
        "branch": branch,
        "items": [
            {"product_name": name, "quantity": qty, "unit_price": price}
            for name, qty, price in items
        ],
    }


async def _create(client, items, **kwargs) -> dict:
    response = await client.post(BASE, json=_body(items, **kwargs))
    assert response.status_code == 201, response.text
    return response.json()


async def test_health(client):
    response = await client.get("/api/ready")

    assert response.status_code == 200
    assert response.json()["message"] == "ready"


async def test_create_sale(client, app_events):
    response = await client.post(BASE, json=_body([("Widget", 5, "10.00")]))

    assert response.status_code == 201
    data = response.json()
    assert uuid.UUID(data["id"])
    assert data["is_cancelled"] is False
    assert data["items"][0]["product_name"] == "Widget"
    assert uuid.UUID(data["items"][0]["id"])
    assert response.headers["location"].endswith(f"{BASE}/{data['id']}")
    assert [(e.name, str(e.sale_id)) for e in app_events] == [(SALE_CREATED, data["id"])]


async def test_create_sale_rejects_invalid_payload(client):
    body = _body([("Widget", -1, "10.00")])
    body["customer_name"] = ""

    response = await client.post(BASE, json=body)

    assert response.status_code == 422


async def test_widget_scenario(client, app_events):
    sale = await _create(client, [("Widget", 5, "10.00")])
    url = f"{BASE}/{sale['id']}"

    response = await client.get(url)
    assert response.status_code == 200
    data = response.json()
    item = data["items"][0]
    assert Decimal(item["discount"]) == Decimal("5.00")
    assert Decimal(item["total"]) == Decimal("45.00")
    assert Decimal(data["total_amount"]) == Decimal("45.00")

    response = await client.post(f"{url}/items/Widget/cancel")
    assert response.status_code == 204

    data = (await client.get(url)).json()
    assert data["items"] == []
    assert Decimal(data["total_amount"]) == Decimal("0")

    response = await client.post(f"{url}/cancel")
    assert response.status_code == 204
    assert (await client.get(url)).json()["is_cancelled"] is True

    response = await client.post(f"{url}/cancel")
    assert response.status_code == 400
    assert response.json() == {"detail": "Sale is already cancelled.", "error": "AlreadyCancelled"}

    assert [e.name for e in app_events] == [SALE_CREATED, ITEM_CANCELLED, SALE_CANCELLED]


async def test_over_quantity_line_fails_on_read(client):
    sale = await _create(client, [("Gadget", 25, "1.00")])

    response = await client.get(f"{BASE}/{sale['id']}")

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidQuantity"


async def test_get_missing_sale(client):
    response = await client.get(f"{BASE}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


async def test_get_with_malformed_id(client):
    response = await client.get(f"{BASE}/not-a-uuid")

    assert response.status_code == 422


async def test_replace_sale(client, app_events):
    sale = await _create(client, [("Widget", 5, "10.00"), ("Bolt", 1, "1.00")])
    url = f"{BASE}/{sale['id']}"

    response = await client.put(url, json=_body([("Gizmo", 4, "2.50")], sale_number="S9", customer_name="Bob"))
    assert response.status_code == 204
    assert response.content == b""

    data = (await client.get(url)).json()
    assert data["sale_number"] == "S9"
    assert data["customer_name"] == "Bob"
    assert [i["product_name"] for i in data["items"]] == ["Gizmo"]
    assert Decimal(data["total_amount"]) == Decimal("9.00")
    assert SALE_MODIFIED in [e.name for e in app_events]


async def test_replace_with_empty_items(client):
    sale = await _create(client, [("Widget", 5, "10.00")])
    url = f"{BASE}/{sale['id']}"

    assert (await client.put(url, json=_body([]))).status_code == 204

    data = (await client.get(url)).json()
    assert data["items"] == []
    assert Decimal(data["total_amount"]) == Decimal("0")


async def test_replace_missing_sale(client):
    response = await client.put(f"{BASE}/{uuid.uuid4()}", json=_body([]))

    assert response.status_code == 404


async def test_cancel_missing_sale(client):
    response = await client.post(f"{BASE}/{uuid.uuid4()}/cancel")

    assert response.status_code == 404


async def test_cancel_item_with_duplicates(client):
    sale = await _create(client, [("Widget", 1, "1.00"), ("Widget", 2, "1.00")])
    url = f"{BASE}/{sale['id']}"

    assert (await client.post(f"{url}/items/Widget/cancel")).status_code == 204
    data = (await client.get(url)).json()
    assert [i["quantity"] for i in data["items"]] == [2]

    assert (await client.post(f"{url}/items/Widget/cancel")).status_code == 204
    response = await client.post(f"{url}/items/Widget/cancel")
    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


async def test_cancel_item_on_missing_sale(client):
    response = await client.post(f"{BASE}/{uuid.uuid4()}/items/Widget/cancel")

    assert response.status_code == 404


async def test_sub_cent_unit_price_is_rejected(client):
    response = await client.post(BASE, json=_body([("Widget", 4, "0.015")]))

    assert response.status_code == 422


async def test_overlong_sale_number_is_rejected(client):
    response = await client.post(BASE, json=_body([("Widget", 1, "1.00")], sale_number="x" * 65))

    assert response.status_code == 422


async def test_create_and_get_agree_on_unit_price(client):
    sale = await _create(client, [("Widget", 4, "0.01"), ("Bolt", 1, "19.99")])

    data = (await client.get(f"{BASE}/{sale['id']}")).json()

    created_prices = [Decimal(i["unit_price"]) for i in sale["items"]]
    stored_prices = [Decimal(i["unit_price"]) for i in data["items"]]
    assert created_prices == stored_prices == [Decimal("0.01"), Decimal("19.99")]
