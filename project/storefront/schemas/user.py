# storefront/schemas/user.py

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    """
    Базовая схема администратора.
    """
    name: Optional[str] = None
    login: Optional[str] = None
    is_admin: Optional[bool] = False

class UserResponse(UserBase):
    """
    Схема для ответа API при чтении администратора (без пароля)
    """
    id: int
    timestamp: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
