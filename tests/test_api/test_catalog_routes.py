from decimal import Decimal

from freshgrupo.models.catalog import Category, Product
from freshgrupo.models.pack import Pack


def test_admin_creates_category_and_duplicates_are_400(client, admin_headers):
    created = client.post("/api/categories/", json={"name": "Fruits Pack", "description": "Fresh fruit"}, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["isActive"] is True

    duplicate = client.post("/api/categories/", json={"name": "Fruits Pack"}, headers=admin_headers)
    assert duplicate.status_code == 400


def test_customers_cannot_write_catalog(client, customer_headers):
    response = client.post("/api/categories/", json={"name": "Sneaky"}, headers=customer_headers)
    assert response.status_code == 403


def test_categories_are_sorted_by_name(client, db_session):
    db_session.add_all([Category(name="Sprouts Pack"), Category(name="Fruits Pack"), Category(name="Millets Pack")])
    db_session.commit()

    names = [c["name"] for c in client.get("/api/categories/").json()]
    assert names == ["Fruits Pack", "Millets Pack", "Sprouts Pack"]


def test_product_read_expands_category_and_unit(client, catalog):
    tomatoes = catalog["products"][0]

    body = client.get(f"/api/products/{tomatoes.id}").json()

    assert body["price"] == 100.0
    assert body["category"] == {"id": catalog["category"].id, "name": "Vegetables Pack"}
    assert body["unitType"]["abbreviation"] == "KG"


def test_product_create_checks_category(client, admin_headers):
    response = client.post("/api/products/", json={"name": "Ghost", "price": "10.00", "categoryId": 42}, headers=admin_headers)
    assert response.status_code == 400


def test_deleting_product_marks_it_unavailable(client, db_session, catalog, admin_headers):
    tomatoes = catalog["products"][0]

    assert client.delete(f"/api/products/{tomatoes.id}", headers=admin_headers).status_code == 200

    db_session.expire_all()
    assert db_session.get(Product, tomatoes.id).is_available is False
    public_ids = [p["id"] for p in client.get("/api/public/products").json()]
    assert tomatoes.id not in public_ids
    admin_ids = [p["id"] for p in client.get("/api/products/").json()]
    assert tomatoes.id in admin_ids


def test_unknown_ids_are_404(client):
    assert client.get("/api/categories/999").status_code == 404
    assert client.get("/api/products/999").status_code == 404
    assert client.get("/api/packs/999").status_code == 404
    assert client.get("/api/pack-types/999").status_code == 404
    assert client.get("/api/unit-types/999").status_code == 404


def test_pack_read_lists_products_with_pack_prices(client, pack):
    body = client.get(f"/api/packs/{pack.id}").json()

    assert body["finalPrice"] == 250.0
    assert body["category"]["name"] == "Vegetables Pack"
    assert body["packType"]["duration"] == "weekly"
    assert [(p["productName"], p["quantity"], p["unitPrice"]) for p in body["products"]] == [
        ("Tomatoes", 1, 100.0),
        ("Onions", 3, 50.0),
    ]


def test_admin_creates_pack_with_validity_window(client, catalog, admin_headers):
    payload = {
        "name": "Veg Weekly",
        "categoryId": catalog["category"].id,
        "packTypeId": catalog["pack_type"].id,
        "basePrice": "300.00",
        "validFrom": "2030-01-01T00:00:00Z",
        "validUntil": "2030-01-31T00:00:00Z",
    }
    response = client.post("/api/packs/", json=payload, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["finalPrice"] == 300.0

    payload["validUntil"] = "2029-12-01T00:00:00Z"
    assert client.post("/api/packs/", json=payload, headers=admin_headers).status_code == 422


def test_bulk_pack_products_replace_lines_and_recompute_price(client, db_session, pack, catalog, admin_headers):
    tomatoes, onions = catalog["products"]
    payload = {
        "packId": pack.id,
        "products": [
            {"productId": tomatoes.id, "quantity": 2, "unitPrice": "90.00"},
            {"productId": onions.id, "quantity": 1, "unitPrice": "45.50"},
        ],
    }

    response = client.post("/api/pack-products/bulk", json=payload, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["finalPrice"] == 225.5
    assert body["basePrice"] == 225.5
    assert len(body["products"]) == 2

    db_session.expire_all()
    stored = db_session.get(Pack, pack.id)
    assert stored.final_price == Decimal("225.50")
    assert stored.final_price == stored.composed_price()


def test_bulk_pack_products_rejects_unknown_products(client, pack, admin_headers):
    payload = {"packId": pack.id, "products": [{"productId": 999, "quantity": 1, "unitPrice": "1.00"}]}
    response = client.post("/api/pack-products/bulk", json=payload, headers=admin_headers)
    assert response.status_code == 400


def test_clearing_pack_products_zeroes_price(client, pack, admin_headers):
    assert client.delete(f"/api/packs/{pack.id}/products", headers=admin_headers).status_code == 200

    assert client.get(f"/api/packs/{pack.id}/products").json() == []
    assert client.get(f"/api/packs/{pack.id}").json()["finalPrice"] == 0.0


def test_public_reads_hide_inactive_and_expired_packs(client, make_pack):
    live = make_pack(name="Live Pack")
    inactive = make_pack(name="Inactive Pack", is_active=False)
    expired = make_pack(name="Expired Pack", starts_in_days=-10, valid_days=-1)

    public_ids = [p["id"] for p in client.get("/api/public/packs").json()]
    assert public_ids == [live.id]

    admin_ids = [p["id"] for p in client.get("/api/packs/").json()]
    assert admin_ids == [live.id, inactive.id, expired.id]

    assert client.get(f"/api/public/packs/{expired.id}").status_code == 404


def test_public_category_packs_and_products(client, db_session, pack, catalog):
    category_id = catalog["category"].id

    packs = client.get(f"/api/public/categories/{category_id}/packs").json()
    products = client.get(f"/api/public/categories/{category_id}/products").json()

    assert [p["id"] for p in packs] == [pack.id]
    assert {p["name"] for p in products} == {"Tomatoes", "Onions"}

    catalog["category"].is_active = False
    db_session.commit()
    assert client.get(f"/api/public/categories/{category_id}/packs").status_code == 404
    assert client.get("/api/public/categories").json() == []


def test_category_update_ignores_null_name(client, db_session, catalog, admin_headers):
    category = catalog["category"]

    response = client.put(
        f"/api/categories/{category.id}",
        json={"name": None, "description": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Vegetables Pack"
    assert response.json()["description"] is None
