from tests.conftest import make_product, make_variation


def test_list_categories(client):
    response = client.get("/api/categories")

    assert response.status_code == 200
    assert response.json() == [{
        "name": "Paving",
        "slug": "paving",
        "categoryDiscount": 0,
        "images": [{"id": "img-cat", "url": "/uploads/paving.jpg", "alt": "Paving"}],
    }]


def test_category_page_with_filters(client):
    response = client.get("/api/category/paving", params={"colorTone": "Grey", "limit": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["totalProducts"] == 2
    assert len(body["products"]) == 1
    assert body["products"][0]["variation"]["SKU"] == "SAND-2"
    assert body["filterCounts"]["colorTone"]["Beige"] == 1
    assert set(body) >= {"name", "slug", "categoryDiscount", "short_description", "images", "seo", "filterCounts"}


def test_category_page_default_page_size(client, repositories):
    for i in range(15):
        repositories["products"].items.append(
            make_product(f"Extra {i}", [make_variation(uuid=f"x{i}", Price=10)], minutes=10 + i)
        )

    body = client.get("/api/category/paving").json()

    assert body["totalProducts"] == 18
    assert len(body["products"]) == 12


def test_unknown_category(client):
    response = client.get("/api/category/decking")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found_error"


def test_malformed_filter(client):
    response = client.get("/api/category/paving", params={"price": "cheap"})

    assert response.status_code == 400
    assert response.json()["error"]["context"]["field"] == "price"


def test_non_integer_offset_is_a_bad_request(client):
    response = client.get("/api/category/paving", params={"offset": "x"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_save_category(client):
    response = client.post("/api/categories", json={"name": "Decking", "slug": "decking", "categoryDiscount": 15})

    assert response.status_code == 200
    assert [c["slug"] for c in client.get("/api/categories").json()] == ["decking", "paving"]


def test_create_product_assigns_variation_uuids(client):
    payload = {
        "name": "Slate",
        "slug": "slate",
        "categories": ["paving"],
        "variation": [{"SKU": "SL-1", "Price": 99}, {"uuid": "fixed", "SKU": "SL-2"}],
    }

    response = client.post("/api/products", json=payload)

    assert response.status_code == 201
    variations = response.json()["variation"]
    assert variations[0]["uuid"]
    assert variations[1]["uuid"] == "fixed"
    assert client.get("/api/products/slate").json()["variation"][0]["uuid"] == variations[0]["uuid"]


def test_update_unknown_product(client):
    response = client.put("/api/products/nope", json={"name": "Nope", "slug": "nope"})
    assert response.status_code == 404
