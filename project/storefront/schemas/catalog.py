# storefront/schemas/catalog.py

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from decimal import Decimal
from datetime import datetime


def reject_null(value):
    """Поле можно не передавать, но null в NOT NULL колонку не пишем."""
    if value is None:
        raise ValueError("Поле не может быть null")
    return value


# ────────────── Категории ──────────────
class CategoryBase(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", "is_active", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class CategoryCreate(CategoryBase):
    name: str = Field(..., min_length=1)
    is_active: bool = True

class Category(CategoryBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True
    }


# ────────────── Блюда ──────────────
class FoodBase(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    delivery_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    category_id: Optional[str] = None
    is_available: Optional[bool] = None
    image_url: Optional[str] = None

    @field_validator("name", "price", "delivery_price", "is_available", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class FoodCreate(FoodBase):
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    delivery_price: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    is_available: bool = True

class Food(FoodBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True
    }
