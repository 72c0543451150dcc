def test_me_and_details(client, auth_headers):
    empty = client.get("/api/user-details/redis", headers=auth_headers)
    assert empty.status_code == 200
    assert empty.json()["phoneNumbers"] == []

    saved = client.post(
        "/api/user-details",
        json={"fullName": "Alice", "phoneNumbers": [{"phone": "0123"}, {"phone": " "}], "savedAddresses": []},
        headers=auth_headers,
    )
    assert saved.status_code == 200
    assert saved.json()["phoneNumbers"] == [{"phone": "0123"}]

    me = client.get("/api/user-details/me", headers=auth_headers).json()
    assert me["id"] == "user-1"
    assert me["email"] == "alice@example.com"
    assert me["userDetails"]["fullName"] == "Alice"

    assert client.delete("/api/user-details/redis/clear", headers=auth_headers).json() == {"ok": True}


def test_details_require_auth(client):
    assert client.get("/api/user-details/me").status_code == 401


def test_upload_and_use_as_profile_image(client, auth_headers, settings):
    response = client.post(
        "/api/upload",
        files=[("files", ("me.png", b"\x89PNG data", "image/png"))],
        headers=auth_headers,
    )

    assert response.status_code == 200
    record = response.json()[0]
    assert record["name"] == "me.png"
    assert record["mime"] == "image/png"
    assert record["size"] == 9
    assert record["url"].startswith("/uploads/")

    saved = client.post("/api/user-details", json={"profileImageId": record["id"]}, headers=auth_headers)
    assert saved.json()["profileImage"] == {"id": record["id"], "url": record["url"]}


def test_upload_too_large(client, auth_headers):
    response = client.post(
        "/api/upload",
        files=[("files", ("big.bin", b"x" * 2048, "application/octet-stream"))],
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_upload_without_files(client, auth_headers):
    assert client.post("/api/upload", headers=auth_headers).status_code == 400


def test_unknown_profile_image(client, auth_headers):
    response = client.post("/api/user-details", json={"profileImageId": "nope"}, headers=auth_headers)
    assert response.status_code == 400
