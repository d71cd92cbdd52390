# storefront/routes/order.py

from fastapi import APIRouter, Depends, Request, status
from typing import List, Optional
from storefront.models.order import OrderStatus, PaymentStatus
from storefront.schemas.order import Order, OrderStats, OrderStatusUpdate
from storefront.services.order import (
    read_orders_service,
    read_order_service,
    read_order_stats_service,
    update_order_status_service,
)
from storefront.routes.auth import admin_required

router = APIRouter()

# ────────────── READ ALL ──────────────
@router.get(
    "/",
    response_model=List[Order],
    status_code=status.HTTP_200_OK,
    summary="Получить список заказов",
    response_description="Заказы с клиентом и позициями, новые первыми",
    responses={
        200: {"description": "Список заказов успешно получен"},
        401: {"description": "Некорректный пользователь или токен"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def read_orders(
    request: Request,
    skip: int = 0,
    limit: int = 100,
    order_status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    _=Depends(admin_required),
):
    try:
        return await read_orders_service(
            request,
            skip,
            limit,
            status=order_status.value if order_status else None,
            payment_status=payment_status.value if payment_status else None,
        )
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при получении списка заказов: {str(e)}")
        raise


# ────────────── STATS ──────────────
@router.get(
    "/stats",
    response_model=OrderStats,
    status_code=status.HTTP_200_OK,
    summary="Сводка для панели администратора",
    responses={
        200: {"description": "Количество заказов, выручка по оплаченным, клиенты, доступные блюда"},
        401: {"description": "Некорректный пользователь или токен"},
    },
)
async def read_order_stats(request: Request, _=Depends(admin_required)):
    return await read_order_stats_service(request)


# ────────────── READ ONE ──────────────
@router.get(
    "/{id}",
    response_model=Order,
    status_code=status.HTTP_200_OK,
    summary="Получить заказ по ID",
    response_description="Возвращает данные конкретного заказа",
    responses={
        200: {"description": "Заказ найден и возвращён"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Заказ не найден"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def read_order(
    id: str,
    request: Request,
    _=Depends(admin_required),
):
    return await read_order_service(id, request)


# ────────────── UPDATE STATUS ──────────────
@router.patch(
    "/{id}/status",
    response_model=Order,
    status_code=status.HTTP_200_OK,
    summary="Изменить статус заказа",
    response_description="Заказ с новым статусом",
    responses={
        200: {"description": "Статус обновлён (уведомление клиенту отправляется без влияния на результат)"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Заказ не найден"},
        422: {"description": "Неизвестный статус"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def update_order_status(
    id: str,
    body: OrderStatusUpdate,
    request: Request,
    _=Depends(admin_required),
):
    try:
        return await update_order_status_service(id, body.status.value, request)
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при обновлении статуса заказа: {str(e)}", {"id": id})
        raise
