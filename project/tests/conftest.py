# tests/conftest.py

import asyncio
import json
import os
import tempfile

# окружение до импорта storefront: settings читаются при импорте
_TMP_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ.update({
    "DATABASE_URL": f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
    "AUTH_SECRET_KEY": "test-auth-secret",
    "AUTH_LOGIN": "admin",
    "AUTH_PASSWORD": "admin",
    "PAYSTACK_SECRET_KEY": "sk_test_webhook_secret",
    "PAYSTACK_CURRENCY": "GHS",
    "PAYSTACK_CALLBACK_URL": "https://shop.test/payment-success?order_id={order_id}",
    "PAYSTACK_EMAIL_DOMAIN": "bitecraft.com",
    "PAYSTACK_RETRY_BACKOFF": "0",
    "NOTIFY_WEBHOOK_URL": "",
    "LOG_DIR": os.path.join(_TMP_DIR, "log"),
    "LOG_PRINT": "0",
})

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.config import settings
from storefront.main import app
from storefront.services.notification import Notifier
from storefront.services.paystack import PaystackClient
from storefront.utils.database import drop_db
from storefront.utils.security import sign_payload


class FakePaystack:
    """Paystack API на httpx.MockTransport: пишет запросы, отвечает из очереди или успехом."""

    def __init__(self):
        self.requests = []
        self.responses = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append({"path": request.url.path, "headers": dict(request.headers), "body": body})
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            status_code, payload = response
            return httpx.Response(status_code, json=payload)
        return httpx.Response(200, json={
            "status": True,
            "message": "Authorization URL created",
            "data": {
                "authorization_url": f"https://checkout.paystack.com/{body['reference'][:8]}",
                "access_code": "access_code_test",
                "reference": body["reference"],
            },
        })


class FakeNotifyGateway:
    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.messages = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.messages.append(json.loads(request.content))
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    asyncio.run(drop_db())


@pytest.fixture
def admin_headers(client):
    response = client.post("/auth/token", data={"username": "admin", "password": "admin"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def paystack(client):
    fake = FakePaystack()
    client.app.state.gateway = PaystackClient(
        secret_key=settings.PAYSTACK_SECRET_KEY,
        currency=settings.PAYSTACK_CURRENCY,
        max_retries=3,
        backoff=0,
        transport=httpx.MockTransport(fake.handler),
        log=client.app.state.log,
    )
    return fake


@pytest.fixture
def notify_gateway(client):
    fake = FakeNotifyGateway()
    client.app.state.notifier = Notifier(
        webhook_url="http://notify.test/send",
        transport=httpx.MockTransport(fake.handler),
        log=client.app.state.log,
    )
    return fake


@pytest.fixture
def menu(client, admin_headers):
    """Категория и три блюда: Jollof (15 + 3 доставка), Waakye (10 + 2), недоступный Banku."""
    category = client.post("/catalog/categories", json={"name": "Rice dishes"}, headers=admin_headers).json()
    foods = {}
    for name, price, delivery_price, available in (
        ("Jollof", "15.00", "3.00", True),
        ("Waakye", "10.00", "2.00", True),
        ("Banku", "12.00", "0", False),
    ):
        response = client.post("/catalog/foods", json={
            "name": name,
            "price": price,
            "delivery_price": delivery_price,
            "category_id": category["id"],
            "is_available": available,
        }, headers=admin_headers)
        assert response.status_code == 201
        foods[name] = response.json()["id"]
    foods["category"] = category["id"]
    return foods


@pytest.fixture
def place_order(client, paystack, menu):
    """Оформляет заказ через /checkout/ и возвращает ответ."""

    def _place(items=None, **customer):
        payload_customer = {"name": "Ama Mensah", "phone": "0244000111", "address": "12 Ring Road, Accra"}
        payload_customer.update(customer)
        if items is None:
            items = [{"food_id": menu["Jollof"], "quantity": 2, "order_type": "delivery"}]
        return client.post("/checkout/", json={"customer": payload_customer, "items": items})

    return _place


@pytest.fixture
def send_webhook(client):
    """Отправляет подписанный вебхук Paystack."""

    def _send(payload: dict, signature: str | None = None, sign: bool = True):
        raw = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if sign:
            headers["x-paystack-signature"] = signature or sign_payload(raw, settings.PAYSTACK_SECRET_KEY)
        return client.post("/payments/webhook", content=raw, headers=headers)

    return _send
