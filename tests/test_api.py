from decimal import Decimal

from sqlalchemy import func, select

from storefront.data.models import OrderModel
from storefront.domain.errors import PersistenceError
from storefront.repos.order_repo import OrderRepo


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_cart_roundtrip(client):
    assert client.post("/cart/add", json={"user_id": 7, "product_id": 1}).status_code == 200
    client.post("/cart/add", json={"user_id": 7, "product_id": 1, "quantity": 2})
    client.post("/cart/add", json={"user_id": 7, "product_id": 2})

    resp = client.get("/cart/7")
    assert resp.status_code == 200
    lines = {l["product_id"]: l for l in resp.json()}
    assert lines[1]["quantity"] == 3
    assert lines[1]["name"] == "Bamboo Toothbrush"
    assert Decimal(str(lines[1]["price"])) == Decimal("100.00")
    assert lines[1]["image"] == "brush.png"

    resp = client.post("/cart/update", json={"user_id": 7, "product_id": 1, "quantity": 5})
    assert resp.json() == {"message": "Quantity updated"}
    client.post("/cart/adjust", json={"user_id": 7, "product_id": 2, "delta": -3})
    lines = {l["product_id"]: l["quantity"] for l in client.get("/cart/7").json()}
    assert lines == {1: 5, 2: 1}

    assert client.delete("/cart/7/2").json() == {"message": "Item removed"}
    assert client.delete("/cart/7/2").status_code == 200
    assert client.delete("/cart/clear/7").json() == {"message": "Cart cleared"}
    assert client.get("/cart/7").json() == []


def test_cart_validation_errors(client):
    assert client.post("/cart/add", json={"product_id": 1}).status_code == 400
    assert client.post("/cart/add", json={"user_id": 7}).status_code == 400
    assert client.post("/cart/add", json={"user_id": 7, "product_id": 999}).status_code == 404
    assert client.post("/cart/update", json={"user_id": 7, "product_id": 1}).status_code == 400


def test_remove_many_endpoint(client):
    for pid in (1, 2, 3):
        client.post("/cart/add", json={"user_id": 7, "product_id": pid})

    resp = client.post("/cart/remove-many", json={"user_id": 7, "product_ids": [1, 3, 4]})

    assert resp.status_code == 200
    assert resp.json()["removed"] == [1, 3, 4]
    assert resp.json()["failed"] == []
    assert [l["product_id"] for l in client.get("/cart/7").json()] == [2]


def test_favorites(client):
    assert client.post("/favorites", json={"user_id": 7, "product_id": 3}).status_code == 201
    assert client.post("/favorites", json={"user_id": 7, "product_id": 3}).status_code == 201
    client.post("/favorites", json={"user_id": 7, "product_id": 1})

    favs = client.get("/favorites/7").json()
    assert sorted(p["product_id"] for p in favs) == [1, 3]
    assert {"name", "price", "category", "image", "description"} <= favs[0].keys()

    resp = client.request("DELETE", "/favorites/3", json={"user_id": 7})
    assert resp.json() == {"message": "Removed from favorites"}
    assert client.delete("/favorites/1?user_id=7").status_code == 200
    assert client.get("/favorites/7").json() == []

    assert client.post("/favorites", json={"product_id": 3}).status_code == 400


def test_place_order_and_cart_cleanup(client):
    for pid in (1, 2, 3):
        client.post("/cart/add", json={"user_id": 7, "product_id": pid})

    resp = client.post("/orders", json={
        "user_id": 7,
        "items": [
            {"product_id": 1, "quantity": 2, "price": 0.01, "name": "Bamboo Toothbrush"},
            {"product_id": 2, "quantity": 1, "price": 50},
        ],
        "shipping_address": "12 Green St",
        "customer_name": "Sam",
        "payment_method": "card",
    })

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Order placed successfully"
    billing = body["order"]["billing_details"]
    assert {k: Decimal(str(v)) for k, v in billing.items()} == {
        "subtotal": Decimal("250.00"),
        "shipping": Decimal("40.00"),
        "tax": Decimal("5.00"),
        "total": Decimal("295.00"),
    }
    assert body["order"]["status"] == "submitted"

    # ordered products left the cart, the rest stayed
    assert [l["product_id"] for l in client.get("/cart/7").json()] == [3]


def test_empty_order_is_rejected(client, db):
    assert client.post("/orders", json={"user_id": 7, "items": []}).status_code == 400
    assert client.post("/orders", json={"items": [{"product_id": 1}]}).status_code == 400
    assert db.execute(select(func.count()).select_from(OrderModel)).scalar_one() == 0


def test_list_and_get_orders(client, db):
    first = client.post("/orders", json={"user_id": 7, "items": [{"product_id": 3}]}).json()["order"]
    client.post("/orders", json={"user_id": 8, "items": [{"product_id": 2}]})
    db.add(OrderModel(user_id=7, products="[]", billing_details='{"subtotal": 5, "tax": 0.1, "total": 5.1}'))
    db.commit()

    mine = client.get("/orders", params={"user_id": 7}).json()
    assert len(mine) == 2
    assert all(o["user_id"] == 7 for o in mine)
    assert all("shipping" in o["billing_details"] for o in mine)
    legacy = next(o for o in mine if o["order_id"] != first["order_id"])
    assert Decimal(str(legacy["billing_details"]["shipping"])) == 0

    assert len(client.get("/orders").json()) == 3

    resp = client.get(f"/orders/{first['order_id']}")
    assert resp.status_code == 200
    assert resp.json()["items"][0]["name"] == "Solar Lamp"
    assert client.get(f"/orders/{first['order_id']}", params={"user_id": 8}).status_code == 403
    assert client.get("/orders/9999").status_code == 404


def test_storage_failure_is_generic_500(client, monkeypatch):
    def boom(self, order):
        raise PersistenceError("psycopg: connection refused at 10.0.0.3")

    monkeypatch.setattr(OrderRepo, "create_order", boom)

    resp = client.post("/orders", json={"user_id": 7, "items": [{"product_id": 1}]})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal storage error"}


def test_malformed_items_are_400(client, db):
    for items in ("abc", {"product_id": 1}, ["abc"], [{"product_id": 1, "quantity": 10**27}]):
        resp = client.post("/orders", json={"user_id": 7, "items": items})
        assert resp.status_code == 400, items
    assert db.execute(select(func.count()).select_from(OrderModel)).scalar_one() == 0


def test_oversized_cart_quantity_is_400(client):
    resp = client.post("/cart/add", json={"user_id": 7, "product_id": 1, "quantity": 10**27})
    assert resp.status_code == 400
    assert client.get("/cart/7").json() == []
