# storefront/schemas/notification.py

from pydantic import BaseModel, Field
from typing import Optional

from storefront.models.order import OrderType


class OrderNotificationRequest(BaseModel):
    to: Optional[str] = Field(None, description="Email клиента")
    customerName: str
    customerPhone: Optional[str] = None
    orderId: str
    status: str
    orderType: OrderType


class OrderNotificationResponse(BaseModel):
    success: bool
    emailSent: bool
    smsSent: bool
