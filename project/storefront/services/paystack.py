# storefront/services/paystack.py

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from storefront.config import settings
from storefront.utils.security import verify_signature


class GatewayError(Exception):
    """Ошибка платёжного шлюза: сеть, не-2xx ответ, status=false или битый JSON."""

    def __init__(self, message: str, status_code: int | None = None, payload: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


@dataclass
class TransactionInit:
    authorization_url: str
    access_code: Optional[str]
    reference: str


class PaystackClient:
    """
    Клиент Paystack Transaction API.
    Один экземпляр на приложение (app.state.gateway), httpx.AsyncClient внутри.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        currency: str = "GHS",
        timeout: float = 15.0,
        max_retries: int = 3,
        backoff: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
        log=None,
    ):
        self.secret_key = secret_key
        self.currency = currency
        self.max_retries = max(1, max_retries)
        self.backoff = backoff
        self.log = log
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {secret_key}",
                "Content-Type": "application/json",
                "Cache-Control": "no-cache",
            },
        )

    @classmethod
    def from_settings(cls, log=None, transport: httpx.AsyncBaseTransport | None = None) -> "PaystackClient":
        return cls(
            secret_key=settings.PAYSTACK_SECRET_KEY,
            base_url=settings.PAYSTACK_BASE_URL,
            currency=settings.PAYSTACK_CURRENCY,
            timeout=settings.PAYSTACK_TIMEOUT,
            max_retries=settings.PAYSTACK_MAX_RETRIES,
            backoff=settings.PAYSTACK_RETRY_BACKOFF,
            transport=transport,
            log=log,
        )

    async def _post(self, path: str, body: dict) -> httpx.Response:
        """
        POST с повтором при сетевых ошибках и ответах 5xx.
        Пауза между попытками растёт экспоненциально: backoff, 2*backoff, 4*backoff...
        """
        last_error = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = await self.client.post(path, json=body)
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                if response.status_code < 500:
                    return response
                last_error = f"HTTP {response.status_code}"

            if self.log:
                await self.log.log_warning("paystack", f"Попытка {attempt} не удалась: {last_error}", {"path": path})
            if attempt < self.max_retries:
                await asyncio.sleep(self.backoff * 2 ** (attempt - 1))

        raise GatewayError(f"Платёжный шлюз недоступен после {self.max_retries} попыток: {last_error}")

    async def initialize_transaction(
        self,
        email: str,
        amount: int,
        reference: str,
        callback_url: str | None = None,
        metadata: dict | None = None,
    ) -> TransactionInit:
        """
        Создаёт hosted checkout в Paystack.

        Args:
            email (str): email плательщика
            amount (int): сумма в минимальных единицах валюты
            reference (str): уникальный reference (id заказа)
            callback_url (str, optional): куда вернуть клиента после оплаты
            metadata (dict, optional): данные клиента и заказа

        Returns:
            TransactionInit: authorization_url, access_code, reference
        """
        body = {
            "email": email,
            "amount": amount,
            "currency": self.currency,
            "reference": reference,
            "metadata": metadata or {},
        }
        if callback_url:
            body["callback_url"] = callback_url

        if self.log:
            await self.log.log_info("paystack", "Инициализация платежа", {"reference": reference, "amount": amount})

        response = await self._post("/transaction/initialize", body)

        try:
            payload = response.json()
        except ValueError:
            raise GatewayError(
                f"Некорректный ответ платёжного шлюза: {response.text[:200]}",
                status_code=response.status_code,
            )

        if not response.is_success or not payload.get("status"):
            raise GatewayError(
                f"Ошибка платёжного шлюза ({response.status_code}): "
                f"{payload.get('message') or 'Payment initialization failed'}",
                status_code=response.status_code,
                payload=payload,
            )

        data = payload.get("data") or {}
        if not data.get("authorization_url"):
            raise GatewayError("Ответ платёжного шлюза без authorization_url", response.status_code, payload)

        return TransactionInit(
            authorization_url=data["authorization_url"],
            access_code=data.get("access_code"),
            reference=data.get("reference") or reference,
        )

    def verify_signature(self, raw_body: bytes, signature: str | None) -> bool:
        """Проверка x-paystack-signature секретным ключом этого клиента."""
        return verify_signature(raw_body, signature, self.secret_key)

    async def aclose(self):
        await self.client.aclose()
