# storefront/models/order.py

from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from storefront.utils.database import Base, new_id, utcnow


class OrderType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class Order(Base):
    __tablename__ = "orders"

    # id заказа одновременно служит reference в Paystack
    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)

    total_amount      = Column(Numeric(10, 2), nullable=False)             # сумма позиций
    delivery_fee      = Column(Numeric(10, 2), default=0, nullable=False)  # только для отображения
    order_type        = Column(String, nullable=False)                     # OrderType
    status            = Column(String, default=OrderStatus.PENDING.value, nullable=False)
    payment_status    = Column(String, default=PaymentStatus.PENDING.value, nullable=False)
    payment_reference = Column(String, nullable=True, index=True)
    notes             = Column(Text, nullable=True)
    delivery_address  = Column(Text, nullable=True)

    created_at   = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at   = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at  = Column(DateTime(timezone=True), nullable=True)

    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    food_id  = Column(String(36), ForeignKey("foods.id"), nullable=False)

    quantity    = Column(Integer, nullable=False)
    unit_price  = Column(Numeric(10, 2), nullable=False)  # цена + доставка для delivery-позиции
    total_price = Column(Numeric(10, 2), nullable=False)  # quantity × unit_price

    order = relationship("Order", back_populates="items")
    food = relationship("Food")

    @property
    def food_name(self):
        return self.food.name if self.food is not None else None
