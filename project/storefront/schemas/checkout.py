# storefront/schemas/checkout.py

from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal

from storefront.models.order import OrderType
from storefront.schemas.customer import CustomerInfo


class CartItem(BaseModel):
    food_id: str
    quantity: int = Field(..., description="Количество, не меньше 1")
    order_type: OrderType = OrderType.PICKUP


class CheckoutRequest(BaseModel):
    customer: CustomerInfo
    items: List[CartItem] = []
    callback_url: Optional[str] = Field(None, description="Куда Paystack вернёт клиента после оплаты")


class CheckoutResponse(BaseModel):
    order_id: str
    payment_url: str
    reference: str
    access_code: Optional[str] = None
    total_amount: Decimal
    delivery_fee: Decimal
