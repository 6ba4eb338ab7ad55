from conftest import SHIPPING


def order_payload(**overrides):
    payload = {
        "user_id": "u1",
        "items": [
            {"product_id": "1", "product_name": "Modern Office Chair", "price": "10.50", "quantity": 2},
            {"product_id": "2", "product_name": "LED Desk Lamp", "price": 5, "quantity": 1},
        ],
        "status": "confirmed",
        "shipping_address": SHIPPING,
        "payment_method": "Cash on Delivery",
        "transaction_id": "COD_1700000000000",
    }
    payload.update(overrides)
    return payload


def test_place_order_derives_total(client):
    resp = client.post("/api/orders", json=order_payload())
    assert resp.status_code == 201
    order = resp.json()["order"]
    assert order["total"] == "26.00"
    assert order["status"] == "confirmed"
    assert order["shipping_address"]["country"] == "India"
    assert [(i["product_name"], i["unit_price"], i["quantity"]) for i in order["items"]] == [
        ("Modern Office Chair", "10.50", 2),
        ("LED Desk Lamp", "5.00", 1),
    ]


def test_orders_listed_per_user(sql_client):
    sql_client.post("/api/orders", json=order_payload())
    sql_client.post("/api/orders", json=order_payload(user_id="u2"))

    orders = sql_client.get("/api/orders/u1").json()["orders"]
    assert len(orders) == 1
    assert len(orders[0]["items"]) == 2
    assert sql_client.get("/api/orders/nobody").json()["orders"] == []


def test_empty_order_has_zero_total(client):
    resp = client.post("/api/orders", json=order_payload(items=[]))
    assert resp.status_code == 201
    assert resp.json()["order"]["total"] == "0.00"


def test_invalid_shipping_address_is_rejected(client):
    resp = client.post("/api/orders", json=order_payload(shipping_address={**SHIPPING, "phone": "12345"}))
    assert resp.status_code == 400
    assert "Valid phone number is required" in resp.json()["error"]


def test_place_order_clears_cart(sql_client):
    sql_client.post("/api/cart", json={"user_id": "u1", "product_id": "1", "quantity": 2})
    resp = sql_client.post("/api/orders", json=order_payload(clear_cart=True))
    assert resp.status_code == 201
    assert sql_client.get("/api/cart/u1").json()["items"] == []


def test_place_order_keeps_cart_without_flag(client):
    client.post("/api/cart", json={"user_id": "u1", "product_id": "1"})
    client.post("/api/orders", json=order_payload())
    assert len(client.get("/api/cart/u1").json()["items"]) == 1


def test_duplicate_order_id_conflicts_and_leaves_cart_alone(sql_client):
    assert sql_client.post("/api/orders", json=order_payload(id="ORD-1")).status_code == 201

    sql_client.post("/api/cart", json={"user_id": "u1", "product_id": "2"})
    resp = sql_client.post("/api/orders", json=order_payload(id="ORD-1", clear_cart=True))
    assert resp.status_code == 409
    assert resp.json() == {"error": "Order already exists"}

    # the failed placement rolled back its cart clear
    assert len(sql_client.get("/api/cart/u1").json()["items"]) == 1
    assert len(sql_client.get("/api/orders/u1").json()["orders"]) == 1


def test_duplicate_order_id_in_memory(client):
    client.post("/api/cart", json={"user_id": "u1", "product_id": "2"})
    client.post("/api/orders", json=order_payload(id="ORD-9"))
    resp = client.post("/api/orders", json=order_payload(id="ORD-9", clear_cart=True))
    assert resp.status_code == 409
    assert len(client.get("/api/cart/u1").json()["items"]) == 1


def test_orders_fall_back_to_memory(fallback_client):
    resp = fallback_client.post("/api/orders", json=order_payload())
    assert resp.status_code == 201
    assert len(fallback_client.get("/api/orders/u1").json()["orders"]) == 1
