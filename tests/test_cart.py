def test_cart_lifecycle(client):
    resp = client.post("/api/cart", json={"user_id": "u1", "product_id": "1", "quantity": 2})
    assert resp.status_code == 201
    item = resp.json()["item"]
    assert item["quantity"] == 2

    items = client.get("/api/cart/u1").json()["items"]
    assert [i["id"] for i in items] == [item["id"]]

    resp = client.put(f"/api/cart/{item['id']}", json={"quantity": 5})
    assert resp.status_code == 200
    assert resp.json()["item"]["quantity"] == 5

    resp = client.delete(f"/api/cart/{item['id']}")
    assert resp.json() == {"success": True}
    assert client.get("/api/cart/u1").json()["items"] == []


def test_cart_item_missing(client):
    assert client.put("/api/cart/nope", json={"quantity": 1}).status_code == 404
    resp = client.delete("/api/cart/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Cart item not found"}


def test_cart_quantity_must_be_positive(client):
    resp = client.post("/api/cart", json={"user_id": "u1", "product_id": "1", "quantity": 0})
    assert resp.status_code == 400


def test_clear_cart_only_touches_one_user(sql_client):
    sql_client.post("/api/cart", json={"user_id": "u1", "product_id": "1"})
    sql_client.post("/api/cart", json={"user_id": "u1", "product_id": "2"})
    sql_client.post("/api/cart", json={"user_id": "u2", "product_id": "1"})

    resp = sql_client.delete("/api/cart/user/u1")
    assert resp.json() == {"success": True}
    assert sql_client.get("/api/cart/u1").json()["items"] == []
    assert len(sql_client.get("/api/cart/u2").json()["items"]) == 1

    # nothing left to clear
    assert sql_client.delete("/api/cart/user/u1").json() == {"success": False}


def test_wishlist(sql_client):
    resp = sql_client.post("/api/wishlist", json={"user_id": "u1", "product_id": "2"})
    assert resp.status_code == 201
    assert sql_client.post("/api/wishlist", json={"user_id": "u1", "product_id": "2"}).status_code == 409

    items = sql_client.get("/api/wishlist/u1").json()["items"]
    assert [i["product_id"] for i in items] == ["2"]

    assert sql_client.delete("/api/wishlist/u1/2").json() == {"success": True}
    resp = sql_client.delete("/api/wishlist/u1/2")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Wishlist item not found"}


def test_reviews(client):
    review = {"product_id": "1", "user_id": "u1", "rating": 4, "comment": "Comfortable for long days"}
    resp = client.post("/api/reviews", json=review)
    assert resp.status_code == 201
    assert resp.json()["review"]["rating"] == 4

    reviews = client.get("/api/reviews/1").json()["reviews"]
    assert [r["comment"] for r in reviews] == ["Comfortable for long days"]
    assert client.get("/api/reviews/2").json()["reviews"] == []


def test_review_rating_range(client):
    resp = client.post("/api/reviews", json={"product_id": "1", "user_id": "u1", "rating": 6})
    assert resp.status_code == 400
