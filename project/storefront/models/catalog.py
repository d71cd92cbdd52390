# storefront/models/catalog.py

from sqlalchemy import Column, String, Text, DateTime, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from storefront.utils.database import Base, new_id, utcnow

class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)

    name        = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image_url   = Column(String, nullable=True)
    is_active   = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    foods = relationship("Food", back_populates="category", passive_deletes=True)


class Food(Base):
    __tablename__ = "foods"

    id = Column(String(36), primary_key=True, default=new_id)

    name           = Column(String, nullable=False)
    description    = Column(Text, nullable=True)
    price          = Column(Numeric(10, 2), nullable=False)
    delivery_price = Column(Numeric(10, 2), default=0, nullable=False)  # надбавка за доставку
    category_id    = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    is_available   = Column(Boolean, default=True, nullable=False)
    image_url      = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    category = relationship("Category", back_populates="foods")
