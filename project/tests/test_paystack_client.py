# tests/test_paystack_client.py

import asyncio
import json

import httpx
import pytest

from storefront.services.paystack import GatewayError, PaystackClient
from storefront.utils.security import sign_payload

SECRET = "sk_test_client"


def make_client(handler, max_retries: int = 3) -> PaystackClient:
    return PaystackClient(
        secret_key=SECRET,
        currency="GHS",
        max_retries=max_retries,
        backoff=0,
        transport=httpx.MockTransport(handler),
    )


def initialize(client: PaystackClient):
    async def _run():
        try:
            return await client.initialize_transaction(
                email="ama@example.com",
                amount=3600,
                reference="order-1",
                callback_url="https://shop.test/done",
            )
        finally:
            await client.aclose()

    return asyncio.run(_run())


def test_successful_initialization():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={
            "status": True,
            "data": {"authorization_url": "https://checkout.paystack.com/abc", "access_code": "abc", "reference": "order-1"},
        })

    init = initialize(make_client(handler))
    assert init.authorization_url == "https://checkout.paystack.com/abc"
    assert init.access_code == "abc"
    assert init.reference == "order-1"
    assert seen[0]["callback_url"] == "https://shop.test/done"
    assert seen[0]["currency"] == "GHS"


def test_status_false_raises():
    def handler(request):
        return httpx.Response(400, json={"status": False, "message": "Invalid email"})

    with pytest.raises(GatewayError) as error:
        initialize(make_client(handler))
    assert error.value.status_code == 400
    assert "Invalid email" in str(error.value)


def test_invalid_json_raises():
    def handler(request):
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(GatewayError):
        initialize(make_client(handler))


def test_missing_authorization_url_raises():
    def handler(request):
        return httpx.Response(200, json={"status": True, "data": {}})

    with pytest.raises(GatewayError):
        initialize(make_client(handler))


def test_transport_errors_are_retried_then_raised():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayError):
        initialize(make_client(handler, max_retries=3))
    assert len(calls) == 3


def test_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401, json={"status": False, "message": "Invalid key"})

    with pytest.raises(GatewayError):
        initialize(make_client(handler))
    assert len(calls) == 1


def test_verify_signature():
    client = make_client(lambda request: httpx.Response(200))
    raw = b'{"event":"charge.success"}'

    assert client.verify_signature(raw, sign_payload(raw, SECRET))
    assert not client.verify_signature(raw, sign_payload(raw, "other-secret"))
    assert not client.verify_signature(raw, None)
    assert not client.verify_signature(raw + b" ", sign_payload(raw, SECRET))
    asyncio.run(client.aclose())
