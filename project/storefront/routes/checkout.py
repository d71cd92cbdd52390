# storefront/routes/checkout.py

from fastapi import APIRouter, Request, status
from storefront.schemas.checkout import CheckoutRequest, CheckoutResponse
from storefront.schemas.order import Order
from storefront.services.checkout import checkout_service, read_receipt_service

router = APIRouter()

# ────────────── CHECKOUT ──────────────
@router.post(
    "/",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Оформить заказ и начать оплату",
    response_description="Ссылка на страницу оплаты Paystack и id заказа",
    responses={
        201: {"description": "Заказ создан, платёж инициализирован"},
        400: {"description": "Не заполнены имя/телефон/адрес, пустая корзина или блюдо недоступно"},
        422: {"description": "Неверные данные запроса"},
        502: {"description": "Ошибка платёжного шлюза, заказ остаётся в статусе pending"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def checkout(request: Request, payload: CheckoutRequest):
    try:
        return await checkout_service(payload, request)
    except Exception as e:
        await request.app.state.log.log_error("checkout", f"Ошибка оформления заказа: {str(e)}")
        raise


# ────────────── RECEIPT ──────────────
@router.get(
    "/{order_id}",
    response_model=Order,
    status_code=status.HTTP_200_OK,
    summary="Заказ для страницы после оплаты",
    responses={
        200: {"description": "Заказ найден"},
        404: {"description": "Заказ не найден"},
    },
)
async def read_receipt(order_id: str, request: Request):
    return await read_receipt_service(order_id, request)
