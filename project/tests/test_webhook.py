# tests/test_webhook.py

import pytest


@pytest.fixture
def order_id(place_order):
    response = place_order(email="ama@example.com")
    assert response.status_code == 201
    return response.json()["order_id"]


def charge(event: str, reference: str, status: str, amount: int = 3600, currency: str = "GHS") -> dict:
    return {
        "event": event,
        "data": {
            "reference": reference,
            "amount": amount,
            "currency": currency,
            "status": status,
            "gateway_response": "Approved" if status == "success" else "Declined",
            "customer": {"email": "ama@example.com"},
            "metadata": {"order_id": reference},
        },
    }


def read_order(client, admin_headers, order_id):
    return client.get(f"/order/{order_id}", headers=admin_headers).json()


def test_charge_success_marks_order_paid(client, admin_headers, order_id, send_webhook):
    response = send_webhook(charge("charge.success", order_id, "success"))
    assert response.status_code == 200
    assert response.json()["paymentStatus"] == "paid"
    assert response.json()["status"] == "confirmed"

    order = read_order(client, admin_headers, order_id)
    assert order["payment_status"] == "paid"
    assert order["status"] == "confirmed"
    assert order["rejected_at"] is None


def test_charge_success_replay_is_idempotent(client, admin_headers, order_id, send_webhook, notify_gateway):
    payload = charge("charge.success", order_id, "success")

    assert send_webhook(payload).status_code == 200
    first = read_order(client, admin_headers, order_id)
    assert send_webhook(payload).status_code == 200
    second = read_order(client, admin_headers, order_id)

    for key in ("status", "payment_status", "payment_reference", "rejected_at", "delivered_at", "total_amount"):
        assert first[key] == second[key]
    # уведомление только при первом переходе в confirmed
    assert len(notify_gateway.messages) == 1
    assert notify_gateway.messages[0]["to"] == "ama@example.com"


def test_charge_failed_sets_rejected_at_once(client, admin_headers, order_id, send_webhook):
    payload = charge("charge.failed", order_id, "failed")

    assert send_webhook(payload).status_code == 200
    first = read_order(client, admin_headers, order_id)
    assert first["payment_status"] == "failed"
    assert first["status"] == "rejected"
    assert first["rejected_at"] is not None

    assert send_webhook(payload).status_code == 200
    second = read_order(client, admin_headers, order_id)
    assert second["rejected_at"] == first["rejected_at"]


def test_success_event_with_non_success_status_is_failure(client, admin_headers, order_id, send_webhook):
    assert send_webhook(charge("charge.success", order_id, "abandoned")).status_code == 200
    order = read_order(client, admin_headers, order_id)
    assert order["payment_status"] == "failed"
    assert order["status"] == "rejected"


def test_unknown_reference_mutates_nothing(client, admin_headers, order_id, send_webhook):
    response = send_webhook(charge("charge.success", "xyz", "success"))
    assert response.status_code == 404

    order = read_order(client, admin_headers, order_id)
    assert order["payment_status"] == "pending"
    assert order["status"] == "pending"


def test_missing_reference_is_an_error(send_webhook):
    payload = charge("charge.success", "", "success")
    assert send_webhook(payload).status_code == 400


def test_other_events_are_acknowledged(client, admin_headers, order_id, send_webhook):
    response = send_webhook({"event": "transfer.success", "data": {"reference": order_id}})
    assert response.status_code == 200
    assert response.json()["message"] == "Event ignored"
    assert read_order(client, admin_headers, order_id)["payment_status"] == "pending"


def test_invalid_or_missing_signature_is_rejected(client, admin_headers, order_id, send_webhook):
    payload = charge("charge.success", order_id, "success")

    assert send_webhook(payload, signature="deadbeef").status_code == 401
    assert send_webhook(payload, sign=False).status_code == 401
    assert read_order(client, admin_headers, order_id)["payment_status"] == "pending"


def test_amount_mismatch_is_not_trusted(client, admin_headers, order_id, send_webhook):
    assert send_webhook(charge("charge.success", order_id, "success", amount=100)).status_code == 400
    assert send_webhook(charge("charge.success", order_id, "success", currency="NGN")).status_code == 400

    order = read_order(client, admin_headers, order_id)
    assert order["payment_status"] == "pending"
    assert order["status"] == "pending"


def test_notification_failure_keeps_status(client, admin_headers, order_id, send_webhook, notify_gateway):
    notify_gateway.status_code = 500

    response = send_webhook(charge("charge.success", order_id, "success"))
    assert response.status_code == 200
    assert len(notify_gateway.messages) == 1

    order = read_order(client, admin_headers, order_id)
    assert order["payment_status"] == "paid"
    assert order["status"] == "confirmed"


def test_malformed_body_is_rejected(client):
    from storefront.config import settings
    from storefront.utils.security import sign_payload

    raw = b"{not json"
    response = client.post(
        "/payments/webhook",
        content=raw,
        headers={"x-paystack-signature": sign_payload(raw, settings.PAYSTACK_SECRET_KEY)},
    )
    assert response.status_code == 400


def test_replay_after_status_moved_on_keeps_status(client, admin_headers, order_id, send_webhook, notify_gateway):
    payload = charge("charge.success", order_id, "success")
    assert send_webhook(payload).status_code == 200

    response = client.patch(f"/order/{order_id}/status", json={"status": "ready"}, headers=admin_headers)
    assert response.status_code == 200

    replay = send_webhook(payload)
    assert replay.status_code == 200
    assert replay.json()["message"] == "Payment already processed"

    order = read_order(client, admin_headers, order_id)
    assert order["status"] == "ready"
    assert order["payment_status"] == "paid"
    assert [message["subject"] for message in notify_gateway.messages] == [
        f"Order Confirmed - #{order_id[:8]}",
        f"Order Ready for Delivery - #{order_id[:8]}",
    ]


def test_failed_charge_after_payment_is_ignored(client, admin_headers, order_id, send_webhook):
    assert send_webhook(charge("charge.success", order_id, "success")).status_code == 200
    assert send_webhook(charge("charge.failed", order_id, "failed")).status_code == 200

    order = read_order(client, admin_headers, order_id)
    assert order["payment_status"] == "paid"
    assert order["status"] == "confirmed"
    assert order["rejected_at"] is None
