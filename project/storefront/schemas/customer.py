# storefront/schemas/customer.py

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


def blank_to_none(value):
    """Пустые строки и пробелы считаем отсутствующим значением."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# ────────────── Контактные данные из формы checkout ──────────────
class CustomerInfo(BaseModel):
    name: str = Field("", description="Имя клиента")
    phone: str = Field("", description="Телефон (ключ поиска клиента)")
    email: Optional[str] = None
    national_id: Optional[str] = None
    address: Optional[str] = Field(None, description="Адрес доставки")
    notes: Optional[str] = Field(None, description="Комментарий к заказу")

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_required(cls, value):
        return (value or "").strip() if isinstance(value, str) or value is None else value

    @field_validator("email", "national_id", "address", "notes", mode="before")
    @classmethod
    def strip_optional(cls, value):
        return blank_to_none(value)


# ────────────── Схема для RESPONSE ──────────────
class CustomerShort(BaseModel):
    id: str
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None

    model_config = {
        "from_attributes": True
    }


class Customer(CustomerShort):
    national_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
