# storefront/models/customer.py

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from storefront.utils.database import Base, new_id, utcnow

class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)

    name        = Column(String, nullable=False)
    phone       = Column(String, unique=True, index=True, nullable=False)  # бизнес-ключ клиента
    email       = Column(String, index=True, nullable=True)
    national_id = Column(String, nullable=True)
    address     = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    orders = relationship("Order", back_populates="customer", passive_deletes=True)
    chats = relationship("Chat", back_populates="customer", passive_deletes=True)
