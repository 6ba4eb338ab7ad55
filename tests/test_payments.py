import hashlib
import hmac
import json
import time

from fastapi.testclient import TestClient

from conftest import make_settings
from main import create_app


def test_payment_intent_in_development_mode(client):
    resp = client.post("/api/create-payment-intent", json={"amount": "49.99"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["payment_intent_id"].startswith("pi_test_")
    assert body["client_secret"].startswith(f"{body['payment_intent_id']}_secret_")
    assert body["clientSecret"] == body["client_secret"]
    assert body["paymentIntentId"] == body["payment_intent_id"]


def test_webhook_acknowledged_in_development_mode(client):
    resp = client.post("/api/stripe-webhook", content=b"{}")
    assert resp.status_code == 200
    assert resp.json() == {"received": True}


def test_webhook_requires_signature_with_real_key():
    settings = make_settings(stripe_secret_key="sk_test_configured")
    with TestClient(create_app(settings)) as live:
        resp = live.post("/api/stripe-webhook", content=b"{}")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing signature or webhook secret"}


def test_webhook_rejects_bad_signature():
    settings = make_settings(stripe_secret_key="sk_test_configured", stripe_webhook_secret="whsec_test")
    with TestClient(create_app(settings)) as live:
        resp = live.post(
            "/api/stripe-webhook",
            content=b'{"type": "payment_intent.succeeded"}',
            headers={"Stripe-Signature": "t=1,v1=deadbeef"},
        )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Webhook signature verification failed")


def _stripe_signature(payload: bytes, secret: str) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.".encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def test_webhook_accepts_signed_event():
    settings = make_settings(stripe_secret_key="sk_test_configured", stripe_webhook_secret="whsec_test")
    events = (
        {"id": "evt_1", "object": "event", "type": "payment_intent.succeeded",
         "data": {"object": {"id": "pi_1", "object": "payment_intent", "amount": 4999}}},
        {"id": "evt_2", "object": "event", "type": "payment_intent.payment_failed",
         "data": {"object": {"id": "pi_2", "object": "payment_intent", "amount": 4999}}},
        {"id": "evt_3", "object": "event", "type": "charge.refunded",
         "data": {"object": {"id": "ch_1", "object": "charge"}}},
    )
    with TestClient(create_app(settings)) as live:
        for event in events:
            payload = json.dumps(event).encode()
            resp = live.post(
                "/api/stripe-webhook",
                content=payload,
                headers={"Stripe-Signature": _stripe_signature(payload, "whsec_test")},
            )
            assert resp.status_code == 200, event["type"]
            assert resp.json() == {"received": True}


def test_razorpay_create_order(client):
    resp = client.post(
        "/api/payments/razorpay/create-order",
        json={"amount": 499, "receipt": "ORD-1", "notes": {"customer_name": "Asha"}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["key_id"] == "rzp_test_dummy_key"
    order = body["order"]
    assert order["id"].startswith("order_")
    assert order["amount"] == 49900
    assert order["amount_due"] == 49900
    assert order["amount_paid"] == 0
    assert order["currency"] == "INR"
    assert order["status"] == "created"
    assert order["receipt"] == "ORD-1"


def test_razorpay_create_order_rejects_bad_amount(client):
    for payload in ({}, {"amount": 0}, {"amount": -5}):
        resp = client.post("/api/payments/razorpay/create-order", json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid amount"}


def test_razorpay_verify_accepts_either_field_style(client):
    snake = {"razorpay_order_id": "order_1", "razorpay_payment_id": "pay_1", "razorpay_signature": "sig"}
    camel = {"razorpayOrderId": "order_1", "razorpayPaymentId": "pay_1", "razorpaySignature": "sig"}
    for payload in (snake, camel):
        resp = client.post("/api/payments/razorpay/verify", json=payload)
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["verified"] is True
        assert body["verification"]["status"] == "captured"
        assert body["verification"]["payment_id"] == "pay_1"


def test_razorpay_verify_requires_all_fields(client):
    resp = client.post("/api/payments/razorpay/verify", json={"razorpay_order_id": "order_1"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing payment verification data"}


def test_transactions(client):
    resp = client.post(
        "/api/transactions",
        json={"order_id": "ORD-1", "provider": "razorpay", "amount": "499", "user_id": "u1"},
    )
    assert resp.status_code == 201
    transaction = resp.json()["transaction"]
    assert transaction["status"] == "pending"
    assert transaction["amount"] == "499.00"

    resp = client.put("/api/transactions/ORD-1", json={"status": "success", "payment_id": "pay_1"})
    assert resp.status_code == 200
    assert resp.json()["transaction"]["status"] == "success"
    assert resp.json()["transaction"]["payment_id"] == "pay_1"

    resp = client.post(
        "/api/transaction-events",
        json={"transaction_id": transaction["id"], "event_type": "payment.captured", "payload": {"amount": 49900}},
    )
    assert resp.status_code == 201
    assert resp.json()["event"]["event_type"] == "payment.captured"


def test_transaction_update_missing(sql_client):
    resp = sql_client.put("/api/transactions/ORD-404", json={"status": "failed"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Transaction not found"}


def test_duplicate_transaction_for_order(sql_client):
    payload = {"order_id": "ORD-2", "provider": "cod", "amount": "10"}
    assert sql_client.post("/api/transactions", json=payload).status_code == 201
    assert sql_client.post("/api/transactions", json=payload).status_code == 409
