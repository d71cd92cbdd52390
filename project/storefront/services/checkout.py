# storefront/services/checkout.py

from urllib.parse import urlsplit
from sqlalchemy.future import select
from fastapi import HTTPException, Request

from storefront.config import settings
from storefront.models.catalog import Food as FoodModel
from storefront.models.order import OrderType, PaymentStatus
from storefront.schemas.checkout import CheckoutRequest
from storefront.services.customer import upsert_customer_service
from storefront.services.order import create_order_service, get_order
from storefront.services.paystack import GatewayError, PaystackClient
from storefront.services.pricing import (
    CartLine,
    compute_order_totals,
    order_grand_total,
    payment_reference_for,
    to_minor_units,
)


def is_allowed_callback(url: str) -> bool:
    """Клиентский callback_url допустим только на домене PAYSTACK_CALLBACK_URL."""
    if not settings.PAYSTACK_CALLBACK_URL:
        return False
    allowed = urlsplit(settings.PAYSTACK_CALLBACK_URL)
    target = urlsplit(url)
    return (target.scheme, target.netloc) == (allowed.scheme, allowed.netloc)


def validate_checkout(payload: CheckoutRequest) -> None:
    """
    Проверка формы до любых записей в базу.
    """
    if not payload.customer.name or not payload.customer.phone:
        raise HTTPException(status_code=400, detail="Укажите имя и номер телефона")
    if not payload.items:
        raise HTTPException(status_code=400, detail="Корзина пуста")
    if any(item.quantity < 1 for item in payload.items):
        raise HTTPException(status_code=400, detail="Количество должно быть не меньше 1")
    has_delivery = any(item.order_type == OrderType.DELIVERY for item in payload.items)
    if has_delivery and not payload.customer.address:
        raise HTTPException(status_code=400, detail="Укажите адрес доставки")
    if payload.callback_url and not is_allowed_callback(payload.callback_url):
        raise HTTPException(status_code=400, detail="Недопустимый callback_url")


async def load_cart_foods(payload: CheckoutRequest, request: Request) -> dict[str, FoodModel]:
    """Цены берутся из каталога, а не из корзины клиента."""
    db = request.state.db
    ids = {item.food_id for item in payload.items}

    result = await db.execute(select(FoodModel).where(FoodModel.id.in_(ids)))
    foods = {food.id: food for food in result.scalars().all()}

    missing = sorted(ids - foods.keys())
    if missing:
        raise HTTPException(status_code=400, detail=f"Блюдо не найдено: {', '.join(missing)}")
    unavailable = sorted(food.name for food in foods.values() if not food.is_available)
    if unavailable:
        raise HTTPException(status_code=400, detail=f"Блюдо недоступно: {', '.join(unavailable)}")
    return foods


def payment_metadata(order, customer) -> dict:
    return {
        "customer_name": customer.name,
        "customer_phone": customer.phone,
        "order_id": order.id,
        "custom_fields": [
            {"display_name": "Customer Name", "variable_name": "customer_name", "value": customer.name},
            {"display_name": "Phone Number", "variable_name": "customer_phone", "value": customer.phone},
        ],
    }


def callback_url_for(order, payload: CheckoutRequest) -> str | None:
    if payload.callback_url:
        return payload.callback_url
    if settings.PAYSTACK_CALLBACK_URL:
        return settings.PAYSTACK_CALLBACK_URL.replace("{order_id}", order.id)
    return None


async def checkout_service(payload: CheckoutRequest, request: Request) -> dict:
    """
    Оформление заказа:
      1. проверка формы и корзины (400 без записей в базу),
      2. поиск/создание клиента,
      3. заказ и позиции одной транзакцией,
      4. инициализация платежа в Paystack (502 при ошибке шлюза, заказ остаётся pending).
    """
    db = request.state.db
    log = request.app.state.log
    gateway: PaystackClient = request.app.state.gateway

    validate_checkout(payload)
    foods = await load_cart_foods(payload, request)

    lines = [
        CartLine(
            food_id=item.food_id,
            quantity=item.quantity,
            order_type=item.order_type,
            price=foods[item.food_id].price,
            delivery_price=foods[item.food_id].delivery_price,
        )
        for item in payload.items
    ]
    totals = compute_order_totals(lines)

    customer = await upsert_customer_service(payload.customer, request)
    order = await create_order_service(
        customer,
        totals,
        foods,
        request,
        notes=payload.customer.notes,
        delivery_address=payload.customer.address,
    )

    email = customer.email or f"{customer.phone}@{settings.PAYSTACK_EMAIL_DOMAIN}"
    try:
        init = await gateway.initialize_transaction(
            email=email,
            amount=to_minor_units(order_grand_total(order)),
            reference=payment_reference_for(order),
            callback_url=callback_url_for(order, payload),
            metadata=payment_metadata(order, customer),
        )
    except GatewayError as e:
        await log.log_error("checkout", f"Платёж не инициализирован: {e}", {"order_id": order.id})
        raise HTTPException(status_code=502, detail=str(e))

    order.payment_reference = init.reference
    order.payment_status = PaymentStatus.PENDING.value
    await db.commit()

    await log.log_info("checkout", "Платёж инициализирован", {"order_id": order.id, "reference": init.reference})
    return {
        "order_id": order.id,
        "payment_url": init.authorization_url,
        "reference": init.reference,
        "access_code": init.access_code,
        "total_amount": order.total_amount,
        "delivery_fee": order.delivery_fee,
    }


async def read_receipt_service(order_id: str, request: Request):
    """
    Заказ для страницы после оплаты (без авторизации, по id заказа).
    """
    db = request.state.db
    order = await get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Заказ не найден")
    return order
