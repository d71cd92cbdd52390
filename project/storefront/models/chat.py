# storefront/models/chat.py

from enum import Enum
from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from storefront.utils.database import Base, new_id, utcnow


class ChatStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class SenderType(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class Chat(Base):
    __tablename__ = "chats"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, default=ChatStatus.ACTIVE.value, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)  # время последнего сообщения

    customer = relationship("Customer", back_populates="chats")
    messages = relationship(
        "ChatMessage",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="ChatMessage.created_at",
    )

    @property
    def unread_count(self) -> int:
        """Непрочитанные администратором сообщения клиента."""
        return sum(
            1 for m in self.messages
            if m.sender_type == SenderType.CUSTOMER.value and not m.is_read
        )


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String(36), primary_key=True, default=new_id)
    chat_id = Column(String(36), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False, index=True)

    sender_id   = Column(String, nullable=False)   # id клиента или логин администратора
    sender_type = Column(String, nullable=False)   # SenderType
    message     = Column(Text, nullable=False)
    is_read     = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    chat = relationship("Chat", back_populates="messages")
