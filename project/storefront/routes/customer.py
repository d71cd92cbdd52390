# storefront/routes/customer.py

from fastapi import APIRouter, Depends, Request, status
from typing import List
from storefront.schemas.customer import Customer
from storefront.schemas.order import Order
from storefront.services.customer import (
    read_customers_service,
    read_customer_service,
    read_customer_orders_service,
    delete_customer_service,
)
from storefront.routes.auth import admin_required

router = APIRouter()

# ────────────── READ ALL ──────────────
@router.get(
    "/",
    response_model=List[Customer],
    status_code=status.HTTP_200_OK,
    summary="Получить список клиентов",
    responses={
        200: {"description": "Список клиентов успешно получен"},
        401: {"description": "Некорректный пользователь или токен"},
    },
)
async def read_customers(request: Request, skip: int = 0, limit: int = 100, _=Depends(admin_required)):
    return await read_customers_service(request, skip, limit)


# ────────────── READ ONE ──────────────
@router.get(
    "/{id}",
    response_model=Customer,
    summary="Получить клиента по ID",
    responses={404: {"description": "Клиент не найден"}},
)
async def read_customer(id: str, request: Request, _=Depends(admin_required)):
    return await read_customer_service(id, request)


@router.get(
    "/{id}/orders",
    response_model=List[Order],
    summary="Заказы клиента",
    responses={404: {"description": "Клиент не найден"}},
)
async def read_customer_orders(id: str, request: Request, _=Depends(admin_required)):
    return await read_customer_orders_service(id, request)


# ────────────── DELETE ──────────────
@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить клиента",
    responses={
        204: {"description": "Клиент удалён"},
        404: {"description": "Клиент не найден"},
        409: {"description": "У клиента есть заказы"},
    },
)
async def delete_customer(id: str, request: Request, _=Depends(admin_required)):
    try:
        await delete_customer_service(id, request)
    except Exception as e:
        await request.app.state.log.log_error("customer", f"Ошибка при удалении клиента: {str(e)}", {"id": id})
        raise
