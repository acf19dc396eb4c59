from freshgrupo.models.order import Order, Payment, PaymentStatus
from freshgrupo.services.payment_gateway import generate_signature

GATEWAY_SECRET = "test_secret"


def _place_order(client, headers, pack_id, method="razorpay"):
    return client.post(
        "/api/orders/",
        json={"packId": pack_id, "quantity": 1, "deliveryAddress": "3 Residency Road", "paymentMethod": method},
        headers=headers,
    ).json()


def _verification(order, payment_id="pay_xyz", signature=None):
    remote_id = order["razorpayOrderId"]
    return {
        "orderId": order["id"],
        "razorpayOrderId": remote_id,
        "razorpayPaymentId": payment_id,
        "razorpaySignature": signature or generate_signature(remote_id, payment_id, GATEWAY_SECRET),
    }


def test_valid_signature_completes_the_pending_payment(client, db_session, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id)

    response = client.post("/api/verify-payment", json=_verification(order), headers=customer_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["payment"]["status"] == "completed"
    assert body["payment"]["razorpayPaymentId"] == "pay_xyz"

    db_session.expire_all()
    stored = db_session.get(Order, order["id"])
    assert stored.payment_status == PaymentStatus.completed
    assert stored.status.value == "confirmed"
    assert db_session.query(Payment).count() == 1


def test_bad_signature_records_failed_payment_and_keeps_order(client, db_session, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id)

    response = client.post(
        "/api/verify-payment", json=_verification(order, signature="0" * 64), headers=customer_headers
    )

    assert response.status_code == 400
    assert response.json()["status"] == "failed"

    db_session.expire_all()
    statuses = sorted(p.status.value for p in db_session.query(Payment).all())
    assert statuses == ["failed", "pending"]
    stored = db_session.get(Order, order["id"])
    assert stored.payment_status == PaymentStatus.processing
    assert stored.status.value == "processing"


def test_verification_of_someone_elses_order_is_403(client, customer_headers, other_headers, pack):
    order = _place_order(client, customer_headers, pack.id)
    response = client.post("/api/verify-payment", json=_verification(order), headers=other_headers)
    assert response.status_code == 403


def test_create_gateway_order_for_existing_order(client, db_session, gateway, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id, method="card")

    response = client.post("/api/create-razorpay-order", json={"orderId": order["id"]}, headers=customer_headers)

    assert response.status_code == 200
    assert response.json() == {"orderId": "order_test1", "amount": 25000, "currency": "INR", "keyId": "rzp_test_key"}
    assert gateway.client.order.calls[0]["receipt"] == f"order_{order['id']}"

    db_session.expire_all()
    payment = db_session.query(Payment).one()
    assert payment.razorpay_order_id == "order_test1"
    assert db_session.get(Order, order["id"]).payment_status == PaymentStatus.processing


def test_paid_orders_cannot_mint_another_gateway_order(client, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id, method="cod")
    response = client.post("/api/create-razorpay-order", json={"orderId": order["id"]}, headers=customer_headers)
    assert response.status_code == 400


def test_gateway_error_is_502(client, gateway, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id, method="card")
    gateway.client.order.error = RuntimeError("bad gateway")

    response = client.post("/api/create-razorpay-order", json={"orderId": order["id"]}, headers=customer_headers)
    assert response.status_code == 502


def test_manual_payment_settles_order(client, db_session, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id, method="upi")

    response = client.post(
        "/api/payments", json={"orderId": order["id"], "paymentMethod": "upi", "transactionId": "UPI-778"}, headers=customer_headers
    )

    assert response.status_code == 201
    assert response.json()["status"] == "completed"
    db_session.expire_all()
    assert db_session.get(Order, order["id"]).payment_status == PaymentStatus.completed


def test_admin_lists_payments_with_user(client, customer, customer_headers, admin_headers, pack):
    _place_order(client, customer_headers, pack.id, method="cod")

    assert client.get("/api/payments", headers=customer_headers).status_code == 403

    payments = client.get("/api/payments", headers=admin_headers).json()
    assert len(payments) == 1
    assert payments[0]["userName"] == customer.name
    assert payments[0]["userEmail"] == customer.email


def test_failed_attempt_stays_failed_when_order_is_marked_paid(client, db_session, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id)
    client.post("/api/verify-payment", json=_verification(order, signature="0" * 64), headers=customer_headers)

    response = client.put(
        f"/api/orders/{order['id']}/payment",
        json={"razorpayPaymentId": "pay_xyz", "status": "completed"},
        headers=customer_headers,
    )

    assert response.status_code == 200
    db_session.expire_all()
    statuses = sorted(p.status.value for p in db_session.query(Payment).all())
    assert statuses == ["completed", "failed"]


def test_signature_of_another_remote_order_is_rejected(client, db_session, customer_headers, pack):
    expensive = client.post(
        "/api/orders/",
        json={"packId": pack.id, "quantity": 10, "deliveryAddress": "3 Residency Road", "paymentMethod": "razorpay"},
        headers=customer_headers,
    ).json()
    cheap = _place_order(client, customer_headers, pack.id)

    verification = _verification(cheap)
    verification["orderId"] = expensive["id"]
    response = client.post("/api/verify-payment", json=verification, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Razorpay order does not belong to this order"
    db_session.expire_all()
    stored = db_session.get(Order, expensive["id"])
    assert stored.payment_status == PaymentStatus.processing
    assert stored.status.value == "processing"
    assert db_session.query(Payment).filter(Payment.status == PaymentStatus.completed).count() == 0


def test_repeated_verification_keeps_one_completed_payment(client, db_session, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id)

    first = client.post("/api/verify-payment", json=_verification(order), headers=customer_headers)
    second = client.post("/api/verify-payment", json=_verification(order), headers=customer_headers)

    assert first.status_code == second.status_code == 200
    assert second.json()["payment"]["id"] == first.json()["payment"]["id"]
    db_session.expire_all()
    assert db_session.query(Payment).filter(Payment.status == PaymentStatus.completed).count() == 1


def test_payment_update_keeps_the_minted_remote_order_id(client, db_session, customer_headers, pack):
    order = _place_order(client, customer_headers, pack.id)

    client.put(
        f"/api/orders/{order['id']}/payment",
        json={"razorpayOrderId": "order_elsewhere", "status": "processing"},
        headers=customer_headers,
    )

    db_session.expire_all()
    payment = db_session.query(Payment).one()
    assert payment.razorpay_order_id == order["razorpayOrderId"]
