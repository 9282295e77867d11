from qr_admin.schemas.qrcode import ProductImage, ProductSnapshot

SHOP = "test-shop.myshopify.com"
PRODUCT_ID = "gid://shopify/Product/100"


def _payload(**overrides):
    payload = {
        "title": "Spring sale",
        "product_id": PRODUCT_ID,
        "product_handle": "blue-shirt",
        "product_variant_id": "gid://shopify/ProductVariant/555",
        "destination": "product",
    }
    payload.update(overrides)
    return payload


def _seed_product(catalog):
    catalog.products[PRODUCT_ID] = ProductSnapshot(
        title="Blue shirt",
        images=[ProductImage(url="https://cdn.example.com/shirt.png", alt_text="Shirt")],
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_and_get(client, catalog):
    _seed_product(catalog)

    created = client.post("/api/v1/qrcodes", json=_payload())
    assert created.status_code == 201
    body = created.json()
    assert body["shop"] == SHOP
    assert body["product_title"] == "Blue shirt"
    assert body["destination_url"] == f"https://{SHOP}/products/blue-shirt"
    assert body["image"].endswith(f"/qrcodes/{body['id']}/scan")

    fetched = client.get(f"/api/v1/qrcodes/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["product_image"] == "https://cdn.example.com/shirt.png"


def test_create_with_missing_fields_returns_error_map(client, catalog):
    response = client.post("/api/v1/qrcodes", json=_payload(title="", destination=""))

    assert response.status_code == 422
    assert response.json() == {
        "errors": {"title": "Title is required", "destination": "Destination is required"}
    }
    assert catalog.calls == []


def test_unknown_destination_is_rejected(client):
    response = client.post("/api/v1/qrcodes", json=_payload(destination="collection"))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_list_is_newest_first(client):
    first = client.post("/api/v1/qrcodes", json=_payload(title="one")).json()
    second = client.post("/api/v1/qrcodes", json=_payload(title="two")).json()

    listed = client.get("/api/v1/qrcodes").json()["qr_codes"]

    assert [q["id"] for q in listed] == [second["id"], first["id"]]
    assert all(q["product_deleted"] for q in listed)


def test_list_empty(client, catalog):
    assert client.get("/api/v1/qrcodes").json() == {"qr_codes": []}
    assert catalog.calls == []


def test_new_form_defaults(client):
    assert client.get("/api/v1/qrcodes/new").json() == {"destination": "product", "title": ""}


def test_get_missing_is_404(client, catalog, encoder):
    response = client.get("/api/v1/qrcodes/999")

    assert response.status_code == 404
    assert catalog.calls == []
    assert encoder.calls == []


def test_update(client):
    created = client.post("/api/v1/qrcodes", json=_payload()).json()

    response = client.put(f"/api/v1/qrcodes/{created['id']}", json=_payload(title="Summer", destination="cart"))

    assert response.status_code == 200
    assert response.json()["title"] == "Summer"
    assert response.json()["destination_url"] == f"https://{SHOP}/cart/555:1"


def test_update_validation_and_missing(client):
    created = client.post("/api/v1/qrcodes", json=_payload()).json()

    invalid = client.put(f"/api/v1/qrcodes/{created['id']}", json=_payload(product_id=""))
    assert invalid.status_code == 422
    assert invalid.json() == {"errors": {"product_id": "Product is required"}}

    assert client.put("/api/v1/qrcodes/999", json=_payload()).status_code == 404


def test_delete(client):
    created = client.post("/api/v1/qrcodes", json=_payload()).json()

    assert client.delete(f"/api/v1/qrcodes/{created['id']}").status_code == 204
    assert client.get(f"/api/v1/qrcodes/{created['id']}").status_code == 404
    assert client.delete(f"/api/v1/qrcodes/{created['id']}").status_code == 404


def test_catalog_failure_maps_to_502(client, catalog):
    created = client.post("/api/v1/qrcodes", json=_payload()).json()
    catalog.failing.add(PRODUCT_ID)

    response = client.get(f"/api/v1/qrcodes/{created['id']}")

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "catalog_unavailable"


def test_malformed_cart_variant_is_server_error(client):
    response = client.post(
        "/api/v1/qrcodes", json=_payload(destination="cart", product_variant_id="")
    )

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "invariant_violation"


def test_scan_increments_and_redirects(client):
    created = client.post("/api/v1/qrcodes", json=_payload()).json()

    response = client.get(f"/qrcodes/{created['id']}/scan", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == f"https://{SHOP}/products/blue-shirt"
    assert client.get(f"/api/v1/qrcodes/{created['id']}").json()["scans"] == 1


def test_scan_missing_is_404(client):
    assert client.get("/qrcodes/404/scan", follow_redirects=False).status_code == 404


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_whitespace_title_is_accepted(client):
    response = client.post("/api/v1/qrcodes", json=_payload(title="  "))

    assert response.status_code == 201
    assert response.json()["title"] == "  "
