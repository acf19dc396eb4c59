from decimal import Decimal

from freshgrupo.models.cart import Cart


def test_adding_a_pack_prices_the_line_from_the_pack(client, customer, customer_headers, pack):
    response = client.post(
        "/api/cart/",
        json={"userId": customer.id, "packId": pack.id, "quantity": 2},
        headers=customer_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["unitPrice"] == 250.0
    assert body["totalPrice"] == 500.0
    assert body["pack"]["name"] == pack.name


def test_adding_same_pack_merges_using_stored_unit_price(client, db_session, customer_headers, pack):
    first = client.post("/api/cart/", json={"packId": pack.id, "quantity": 1}, headers=customer_headers).json()

    pack.final_price = Decimal("999.00")
    db_session.commit()

    second = client.post("/api/cart/", json={"packId": pack.id, "quantity": 2}, headers=customer_headers).json()

    assert second["id"] == first["id"]
    assert second["quantity"] == 3
    assert second["unitPrice"] == 250.0
    assert second["totalPrice"] == 750.0
    assert db_session.query(Cart).count() == 1


def test_custom_lines_use_client_price_and_never_merge(client, db_session, customer_headers):
    payload = {"isCustom": True, "customPackName": "My mix", "customPackItems": "[1,2]", "unitPrice": "120.00", "quantity": 2}

    first = client.post("/api/cart/", json=payload, headers=customer_headers).json()
    second = client.post("/api/cart/", json=payload, headers=customer_headers).json()

    assert first["totalPrice"] == 240.0
    assert first["packId"] is None
    assert first["id"] != second["id"]
    assert db_session.query(Cart).count() == 2


def test_custom_line_without_price_is_rejected(client, customer_headers):
    response = client.post("/api/cart/", json={"isCustom": True, "quantity": 1}, headers=customer_headers)
    assert response.status_code == 422


def test_unknown_and_unavailable_packs(client, customer_headers, make_pack):
    assert client.post("/api/cart/", json={"packId": 999}, headers=customer_headers).status_code == 404

    inactive = make_pack(name="Old Pack", is_active=False)
    assert client.post("/api/cart/", json={"packId": inactive.id}, headers=customer_headers).status_code == 400


def test_quantity_update_recomputes_total(client, customer_headers, pack):
    item = client.post("/api/cart/", json={"packId": pack.id, "quantity": 1}, headers=customer_headers).json()

    response = client.put(f"/api/cart/{item['id']}", json={"quantity": 4}, headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["totalPrice"] == 1000.0
    assert client.put(f"/api/cart/{item['id']}", json={"quantity": 0}, headers=customer_headers).status_code == 422


def test_remove_is_a_soft_delete(client, db_session, customer_headers, pack):
    item = client.post("/api/cart/", json={"packId": pack.id}, headers=customer_headers).json()

    assert client.delete(f"/api/cart/{item['id']}", headers=customer_headers).status_code == 200

    db_session.expire_all()
    assert db_session.get(Cart, item["id"]).is_active is False
    assert client.get("/api/cart/", headers=customer_headers).json() == []
    assert client.put(f"/api/cart/{item['id']}", json={"quantity": 2}, headers=customer_headers).status_code == 404


def test_other_users_lines_are_off_limits(client, customer_headers, other_headers, admin_headers, pack):
    item = client.post("/api/cart/", json={"packId": pack.id}, headers=customer_headers).json()

    assert client.put(f"/api/cart/{item['id']}", json={"quantity": 2}, headers=other_headers).status_code == 403
    assert client.delete(f"/api/cart/{item['id']}", headers=other_headers).status_code == 403
    assert client.put(f"/api/cart/{item['id']}", json={"quantity": 2}, headers=admin_headers).status_code == 200


def test_cannot_add_to_someone_elses_cart(client, other_customer, customer_headers, pack):
    response = client.post("/api/cart/", json={"userId": other_customer.id, "packId": pack.id}, headers=customer_headers)
    assert response.status_code == 403


def test_admin_reads_a_users_cart(client, customer, customer_headers, admin_headers, pack):
    client.post("/api/cart/", json={"packId": pack.id}, headers=customer_headers)

    response = client.get(f"/api/cart/{customer.id}", headers=admin_headers)

    assert response.status_code == 200
    assert len(response.json()) == 1
