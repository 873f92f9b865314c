def _create(client, **fields):
    data = {"productName": "Smartphone", "description": "A high-end smartphone with 128GB storage", "productPrice": "750"}
    data.update(fields)
    return client.post(
        "/api/v1/create/product",
        data=data,
        files={"image": ("phone.png", b"\x89PNG fake", "image/png")},
    )


def test_product_lifecycle(client, settings):
    resp = _create(client)
    assert resp.status_code == 201
    product = resp.json()["data"]
    assert product["price"] == 750
    assert (settings.upload_dir / product["image"]).exists()

    resp = client.get(f"/api/v1/product/{product['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Smartphone"

    resp = client.put(
        f"/api/v1/update/{product['id']}",
        data={"productName": "Smartphone Pro", "productPrice": "900"},
    )
    assert resp.status_code == 200
    updated = resp.json()["data"]
    assert updated["name"] == "Smartphone Pro"
    assert updated["price"] == 900
    assert updated["image"] == product["image"]

    resp = client.get("/api/v1/products")
    assert [item["id"] for item in resp.json()["data"]] == [product["id"]]

    assert client.delete(f"/api/v1/delete/{product['id']}").status_code == 200
    assert client.get(f"/api/v1/product/{product['id']}").status_code == 404
    assert not (settings.upload_dir / product["image"]).exists()


def test_products_listing_may_be_empty(client):
    resp = client.get("/api/v1/products")
    assert resp.status_code == 200
    assert resp.json()["data"] == []


def test_create_rejects_non_image_upload(client):
    resp = client.post(
        "/api/v1/create/product",
        data={"productName": "Smartphone", "productPrice": "750"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400


def test_create_rejects_negative_price(client):
    assert _create(client, productPrice="-1").status_code == 400


def test_missing_product_routes(client):
    assert client.put("/api/v1/update/999", data={"productName": "x"}).status_code == 404
    assert client.delete("/api/v1/delete/999").status_code == 404


def test_create_rejects_non_finite_price(client, settings):
    for price in ("nan", "inf"):
        resp = _create(client, productPrice=price)
        assert resp.status_code == 400
        assert "finite" in resp.json()["message"]

    assert client.get("/api/v1/products").json()["data"] == []
    assert list(settings.upload_dir.iterdir()) == []


def test_update_rejects_non_finite_price(client):
    product = _create(client).json()["data"]

    resp = client.put(f"/api/v1/update/{product['id']}", data={"productPrice": "nan"})

    assert resp.status_code == 400
    assert client.get(f"/api/v1/product/{product['id']}").json()["data"]["price"] == 750


def test_create_ignores_unaliased_field_names(client):
    resp = client.post("/api/v1/create/product", data={"name": "Smartphone", "price": "750"})
    assert resp.status_code == 400
