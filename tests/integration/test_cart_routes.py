def test_cart_requires_authentication(client):
    response = client.get("/api/cart")

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "You must be logged in"


def test_invalid_token(client):
    response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_add_list_update_delete(client, auth_headers):
    added = client.post(
        "/api/cart/add",
        json={"product": "sandstone", "variation_id": "v-sand-2", "quantity": 2},
        headers=auth_headers,
    )
    assert added.status_code == 200
    item = added.json()
    assert item["unit_price"] == 43.2
    assert item["metadata"] == {"productName": "Sandstone", "productImage": "/uploads/sandstone.jpg", "sku": "SAND-2"}

    cart = client.get("/api/cart", headers=auth_headers).json()["data"]
    assert cart["total"] == 86.4
    assert [i["id"] for i in cart["items"]] == [item["id"]]

    updated = client.put(f"/api/cart/{item['id']}", json={"quantity": 5}, headers=auth_headers)
    assert updated.json()["quantity"] == 5

    deleted = client.delete(f"/api/cart/{item['id']}", headers=auth_headers)
    assert deleted.json() == {"ok": True}
    assert client.get("/api/cart", headers=auth_headers).json()["data"]["items"] == []


def test_add_requires_fields(client, auth_headers):
    response = client.post("/api/cart/add", json={"product": "sandstone"}, headers=auth_headers)
    assert response.status_code == 400


def test_add_unknown_product(client, auth_headers):
    response = client.post("/api/cart/add", json={"product": "marble", "variation_id": "v1"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Product not found"


def test_other_users_item(client, auth_headers, other_token):
    item = client.post(
        "/api/cart/add", json={"product": "sandstone", "variation_id": "v-sand-1"}, headers=auth_headers
    ).json()
    other = {"Authorization": f"Bearer {other_token}"}

    update = client.put(f"/api/cart/{item['id']}", json={"quantity": 3}, headers=other)
    delete = client.delete(f"/api/cart/{item['id']}", headers=other)

    assert update.status_code == 401
    assert update.json()["error"]["message"] == "Not your cart item"
    assert delete.status_code == 401


def test_update_missing_item_and_missing_quantity(client, auth_headers):
    assert client.put("/api/cart/missing", json={"quantity": 1}, headers=auth_headers).status_code == 404
    assert client.put("/api/cart/missing", json={}, headers=auth_headers).status_code == 400


def test_redis_cart(client, auth_headers, cache):
    assert client.get("/api/cart/redis", headers=auth_headers).json() == []

    client.post("/api/cart/redis/add", json={"product": 1, "variation_id": 7}, headers=auth_headers)
    response = client.post(
        "/api/cart/redis/add", json={"product": 1, "variation_id": 7, "quantity": 2}, headers=auth_headers
    )

    assert response.json() == {"ok": True, "cart": [{"product": 1, "variation_id": 7, "quantity": 3}]}
    assert client.get("/api/cart/redis", headers=auth_headers).json()[0]["quantity"] == 3

    assert client.delete("/api/cart/redis/clear", headers=auth_headers).json() == {"ok": True}
    assert client.get("/api/cart/redis", headers=auth_headers).json() == []


def test_redis_cart_requires_fields(client, auth_headers):
    response = client.post("/api/cart/redis/add", json={"variation_id": 7}, headers=auth_headers)
    assert response.status_code == 400
