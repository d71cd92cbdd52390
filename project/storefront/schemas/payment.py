# storefront/schemas/payment.py

from pydantic import BaseModel, ConfigDict
from typing import Any, Optional

from storefront.models.order import OrderStatus, PaymentStatus
from storefront.schemas.order import Order


# ────────────── Вебхук Paystack ──────────────
class WebhookData(BaseModel):
    model_config = ConfigDict(extra="allow")

    reference: Optional[str] = None
    amount: Optional[int] = None        # в минимальных единицах (pesewas)
    currency: Optional[str] = None
    status: Optional[str] = None
    gateway_response: Optional[str] = None
    customer: Optional[dict] = None
    metadata: Any = None


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    event: str
    data: WebhookData = WebhookData()


# ────────────── Ручное подтверждение оплаты ──────────────
class ManualPaymentUpdate(BaseModel):
    order_id: str
    payment_status: PaymentStatus = PaymentStatus.PAID
    order_status: OrderStatus = OrderStatus.CONFIRMED


class ManualPaymentResponse(BaseModel):
    success: bool
    message: str
    order: Order
