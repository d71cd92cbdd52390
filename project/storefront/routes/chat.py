# storefront/routes/chat.py

from fastapi import APIRouter, Depends, Request, status
from typing import List, Optional
from storefront.models.chat import ChatStatus, SenderType
from storefront.schemas.chat import (
    Chat,
    ChatMessage,
    ChatReadResponse,
    ChatStart,
    ChatStatusUpdate,
    MessageCreate,
)
from storefront.services.chat import (
    mark_chat_read_service,
    open_customer_chat_service,
    post_message_service,
    read_chat_service,
    read_chats_service,
    start_chat_service,
    update_chat_status_service,
)
from storefront.routes.auth import admin_required

router = APIRouter()

# ────────────── КЛИЕНТ ──────────────
@router.post(
    "/",
    response_model=Chat,
    status_code=status.HTTP_201_CREATED,
    summary="Начать чат с поддержкой",
    response_description="Чат клиента (существующий или новый)",
    responses={
        201: {"description": "Чат открыт"},
        400: {"description": "Не указаны имя или телефон"},
        422: {"description": "Неверные данные запроса"},
    },
)
async def start_chat(request: Request, payload: ChatStart):
    try:
        return await start_chat_service(payload, request)
    except Exception as e:
        await request.app.state.log.log_error("chat", f"Ошибка открытия чата: {str(e)}")
        raise


@router.get(
    "/{id}",
    response_model=Chat,
    summary="Чат с сообщениями",
    responses={404: {"description": "Чат не найден"}},
)
async def read_chat(id: str, request: Request):
    return await read_chat_service(id, request)


@router.post(
    "/{id}/messages",
    response_model=ChatMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Сообщение клиента",
    responses={
        201: {"description": "Сообщение отправлено"},
        400: {"description": "Пустое сообщение"},
        404: {"description": "Чат не найден"},
    },
)
async def post_customer_message(id: str, body: MessageCreate, request: Request):
    return await post_message_service(id, body.message, SenderType.CUSTOMER, request)


# ────────────── АДМИНИСТРАТОР ──────────────
@router.get(
    "/",
    response_model=List[Chat],
    summary="Список чатов",
    response_description="Чаты с клиентом, сообщениями и числом непрочитанных",
    responses={
        200: {"description": "Чаты, последние активные первыми"},
        401: {"description": "Некорректный пользователь или токен"},
    },
)
async def read_chats(request: Request, chat_status: Optional[ChatStatus] = None, _=Depends(admin_required)):
    return await read_chats_service(request, chat_status.value if chat_status else None)


@router.post(
    "/customer/{customer_id}",
    response_model=Chat,
    summary="Открыть чат с клиентом",
    responses={
        200: {"description": "Чат клиента"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Клиент не найден"},
    },
)
async def open_customer_chat(customer_id: str, request: Request, _=Depends(admin_required)):
    return await open_customer_chat_service(customer_id, request)


@router.post(
    "/{id}/reply",
    response_model=ChatMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Ответ администратора",
    responses={
        201: {"description": "Сообщение отправлено"},
        400: {"description": "Пустое сообщение"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Чат не найден"},
    },
)
async def post_admin_reply(id: str, body: MessageCreate, request: Request, user=Depends(admin_required)):
    return await post_message_service(id, body.message, SenderType.ADMIN, request, sender_id=user.login)


@router.post(
    "/{id}/read",
    response_model=ChatReadResponse,
    summary="Отметить сообщения клиента прочитанными",
    responses={
        200: {"description": "Количество отмеченных сообщений"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Чат не найден"},
    },
)
async def mark_chat_read(id: str, request: Request, _=Depends(admin_required)):
    marked = await mark_chat_read_service(id, request)
    return {"success": True, "marked": marked}


@router.patch(
    "/{id}/status",
    response_model=Chat,
    summary="Закрыть или открыть чат",
    responses={
        200: {"description": "Статус изменён"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Чат не найден"},
        422: {"description": "Неизвестный статус"},
    },
)
async def update_chat_status(id: str, body: ChatStatusUpdate, request: Request, _=Depends(admin_required)):
    return await update_chat_status_service(id, body.status, request)
