# storefront/services/payment.py

from fastapi import HTTPException, Request

from storefront.config import settings
from storefront.models.order import OrderStatus, PaymentStatus
from storefront.schemas.payment import ManualPaymentUpdate, WebhookEvent
from storefront.services.notification import notify_status_change
from storefront.services.order import apply_payment_outcome, get_order, read_order_service, set_order_status
from storefront.services.pricing import order_grand_total, to_minor_units

CHARGE_SUCCESS = "charge.success"
CHARGE_FAILED = "charge.failed"
HANDLED_EVENTS = (CHARGE_SUCCESS, CHARGE_FAILED)


def is_successful_charge(event: WebhookEvent) -> bool:
    return event.event == CHARGE_SUCCESS and (event.data.status or "").lower() == "success"


async def reconcile_payment_service(event: WebhookEvent, request: Request) -> dict:
    """
    Обработка вебхука Paystack (подпись уже проверена роутом).

    - события кроме charge.success / charge.failed подтверждаются и игнорируются,
    - reference обязан совпадать с id существующего заказа, иначе 404 (Paystack повторит),
    - успешная оплата принимается только при совпадении суммы и валюты,
    - оплаченный заказ вебхуком не меняется (повтор или charge.failed после оплаты),
      повтор неудачной оплаты тоже только подтверждается.
    """
    db = request.state.db
    log = request.app.state.log

    if event.event not in HANDLED_EVENTS:
        await log.log_info("webhook", "Событие проигнорировано", {"event": event.event})
        return {"success": True, "message": "Event ignored"}

    reference = (event.data.reference or "").strip()
    if not reference:
        await log.log_error("webhook", "В вебхуке нет reference заказа", {"event": event.event})
        raise HTTPException(status_code=400, detail="Invalid callback - missing order reference")

    order = await get_order(db, reference)
    if order is None:
        await log.log_error("webhook", "Заказ для reference не найден", {"reference": reference})
        raise HTTPException(status_code=404, detail=f"Order not found for reference {reference}")

    succeeded = is_successful_charge(event)
    settled = order.payment_status == PaymentStatus.PAID.value or (
        not succeeded and order.payment_status == PaymentStatus.FAILED.value
    )
    if settled:
        # оплата уже учтена: статус мог уйти дальше (preparing, ready, delivered)
        await log.log_info("webhook", "Повторное событие, заказ не изменён", {
            "reference": reference, "event": event.event, "status": order.status,
        })
        return {
            "success": True,
            "message": "Payment already processed",
            "orderId": order.id,
            "status": order.status,
            "paymentStatus": order.payment_status,
        }

    if succeeded:
        expected = to_minor_units(order_grand_total(order))
        if event.data.amount != expected:
            await log.log_error("webhook", "Сумма платежа не совпадает с заказом", {
                "reference": reference, "expected": expected, "received": event.data.amount,
            })
            raise HTTPException(status_code=400, detail="Payment amount does not match order total")
        if event.data.currency and event.data.currency.upper() != settings.PAYSTACK_CURRENCY.upper():
            await log.log_error("webhook", "Валюта платежа не совпадает", {
                "reference": reference, "expected": settings.PAYSTACK_CURRENCY, "received": event.data.currency,
            })
            raise HTTPException(status_code=400, detail="Payment currency does not match")

    previous = order.status
    apply_payment_outcome(order, succeeded, reference)
    await db.commit()

    await log.log_info("webhook", "Заказ обновлён по вебхуку", {
        "reference": reference,
        "event": event.event,
        "status": order.status,
        "payment_status": order.payment_status,
    })

    await notify_status_change(order, previous, request)
    return {
        "success": True,
        "message": "Payment callback processed successfully",
        "orderId": order.id,
        "status": order.status,
        "paymentStatus": order.payment_status,
    }


async def manual_payment_update_service(body: ManualPaymentUpdate, request: Request):
    """
    Ручное подтверждение оплаты администратором, в обход шлюза.
    """
    db = request.state.db
    log = request.app.state.log

    order = await read_order_service(body.order_id, request)
    previous = order.status

    order.payment_status = PaymentStatus(body.payment_status).value
    set_order_status(order, OrderStatus(body.order_status).value)
    await db.commit()

    await log.log_info("payment", "Оплата обновлена вручную", {
        "id": order.id,
        "payment_status": order.payment_status,
        "status": order.status,
    })

    await notify_status_change(order, previous, request)
    return order
