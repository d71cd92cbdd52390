# storefront/services/chat.py

from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, Request

from storefront.models.chat import (
    Chat as ChatModel,
    ChatMessage as ChatMessageModel,
    ChatStatus,
    SenderType,
)
from storefront.models.customer import Customer as CustomerModel
from storefront.schemas.chat import ChatStart
from storefront.services.customer import read_customer_service, upsert_customer_service
from storefront.utils.database import new_id, utcnow


def chat_query():
    """select чата с клиентом и сообщениями."""
    return select(ChatModel).options(
        selectinload(ChatModel.customer),
        selectinload(ChatModel.messages),
    )


async def find_or_create_chat(customer: CustomerModel, request: Request) -> ChatModel:
    """
    У клиента один чат: существующий возвращается (закрытый открывается заново),
    иначе создаётся новый.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(
        chat_query()
        .where(ChatModel.customer_id == customer.id)
        .order_by(ChatModel.created_at.desc())
        .limit(1)
    )
    chat = result.scalars().first()

    if chat is not None:
        if chat.status != ChatStatus.ACTIVE.value:
            chat.status = ChatStatus.ACTIVE.value
            chat.updated_at = utcnow()
            await db.commit()
            await log.log_info("chat", "Чат открыт заново", {"id": chat.id})
        return chat

    chat = ChatModel(
        id=new_id(),
        customer=customer,
        status=ChatStatus.ACTIVE.value,
        messages=[],
    )
    db.add(chat)
    await db.commit()
    await log.log_info("chat", "Чат создан", {"id": chat.id, "customer_id": customer.id})
    return chat


async def start_chat_service(payload: ChatStart, request: Request) -> ChatModel:
    """
    Первое обращение клиента в поддержку.
    Клиент ищется и обновляется так же, как при оформлении заказа.
    """
    if not payload.customer.name or not payload.customer.phone:
        raise HTTPException(status_code=400, detail="Укажите имя и номер телефона")

    customer = await upsert_customer_service(payload.customer, request)
    return await find_or_create_chat(customer, request)


async def open_customer_chat_service(customer_id: str, request: Request) -> ChatModel:
    """Администратор начинает чат с существующим клиентом."""
    customer = await read_customer_service(customer_id, request)
    return await find_or_create_chat(customer, request)


async def read_chats_service(request: Request, status: str | None = None) -> list[ChatModel]:
    """
    Чаты для панели администратора, последние активные первыми.
    """
    db = request.state.db

    query = chat_query().order_by(ChatModel.updated_at.desc())
    if status:
        query = query.where(ChatModel.status == status)
    result = await db.execute(query)
    return result.scalars().all()


async def read_chat_service(id: str, request: Request) -> ChatModel:
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(chat_query().where(ChatModel.id == id))
    chat = result.scalar_one_or_none()
    if chat is None:
        await log.log_error("chat", "Чат не найден", {"id": id})
        raise HTTPException(status_code=404, detail="Чат не найден")
    return chat


async def post_message_service(
    chat_id: str,
    text: str,
    sender_type: SenderType,
    request: Request,
    sender_id: str | None = None,
) -> ChatMessageModel:
    """
    Сообщение в чат от клиента или администратора.
    Сообщение клиента открывает закрытый чат.
    """
    db = request.state.db
    log = request.app.state.log

    text = (text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Пустое сообщение")

    chat = await read_chat_service(chat_id, request)
    if sender_type == SenderType.CUSTOMER:
        sender_id = chat.customer_id
        chat.status = ChatStatus.ACTIVE.value

    message = ChatMessageModel(
        id=new_id(),
        sender_id=sender_id or sender_type.value,
        sender_type=sender_type.value,
        message=text,
        is_read=False,
    )
    chat.messages.append(message)
    chat.updated_at = utcnow()
    await db.commit()

    await log.log_info("chat", "Новое сообщение", {"chat_id": chat.id, "sender_type": sender_type.value})
    return message


async def mark_chat_read_service(chat_id: str, request: Request) -> int:
    """
    Отмечает прочитанными сообщения клиента. Возвращает их количество.
    """
    db = request.state.db
    log = request.app.state.log

    chat = await read_chat_service(chat_id, request)
    unread = [
        m for m in chat.messages
        if m.sender_type == SenderType.CUSTOMER.value and not m.is_read
    ]
    for m in unread:
        m.is_read = True

    if unread:
        await db.commit()
        await log.log_info("chat", "Сообщения прочитаны", {"chat_id": chat.id, "count": len(unread)})
    return len(unread)


async def update_chat_status_service(chat_id: str, status: ChatStatus, request: Request) -> ChatModel:
    db = request.state.db
    log = request.app.state.log

    chat = await read_chat_service(chat_id, request)
    chat.status = status.value
    chat.updated_at = utcnow()
    await db.commit()

    await log.log_info("chat", "Статус чата изменён", {"id": chat.id, "status": chat.status})
    return chat
