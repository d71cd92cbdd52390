# storefront/schemas/chat.py

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from storefront.models.chat import ChatStatus, SenderType
from storefront.schemas.customer import CustomerInfo, CustomerShort


class ChatStart(BaseModel):
    customer: CustomerInfo


class MessageCreate(BaseModel):
    message: str = Field(..., description="Текст сообщения")


class ChatMessage(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    sender_type: SenderType
    message: str
    is_read: bool
    created_at: datetime

    model_config = {
        "from_attributes": True
    }


class Chat(BaseModel):
    id: str
    customer_id: str
    status: ChatStatus
    created_at: datetime
    updated_at: datetime
    unread_count: int = 0
    customer: Optional[CustomerShort] = None
    messages: List[ChatMessage] = []

    model_config = {
        "from_attributes": True
    }


class ChatStatusUpdate(BaseModel):
    status: ChatStatus


class ChatReadResponse(BaseModel):
    success: bool
    marked: int
