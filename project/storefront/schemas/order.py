# storefront/schemas/order.py

from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from storefront.models.order import OrderStatus, OrderType, PaymentStatus
from storefront.schemas.customer import CustomerShort


class OrderItem(BaseModel):
    id: str
    food_id: str
    food_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    model_config = {
        "from_attributes": True
    }


class Order(BaseModel):
    id: str
    customer_id: str
    total_amount: Decimal
    delivery_fee: Decimal
    order_type: OrderType
    status: OrderStatus
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    delivery_address: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    delivered_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    customer: Optional[CustomerShort] = None
    items: List[OrderItem] = []

    model_config = {
        "from_attributes": True
    }


class OrderStatusUpdate(BaseModel):
    status: OrderStatus = Field(..., description="Новый статус заказа")


class OrderStats(BaseModel):
    total_orders: int
    total_revenue: Decimal
    total_customers: int
    available_foods: int
