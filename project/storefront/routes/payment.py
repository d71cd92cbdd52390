# storefront/routes/payment.py

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError
from typing import Optional
from storefront.schemas.payment import ManualPaymentResponse, ManualPaymentUpdate, WebhookEvent
from storefront.services.payment import manual_payment_update_service, reconcile_payment_service
from storefront.routes.auth import admin_required

router = APIRouter()

# ────────────── WEBHOOK ──────────────
@router.post(
    "/webhook",
    status_code=status.HTTP_200_OK,
    summary="Вебхук Paystack",
    responses={
        200: {"description": "Событие обработано или проигнорировано"},
        400: {"description": "Нет reference, битый JSON или сумма не совпадает"},
        401: {"description": "Подпись x-paystack-signature неверна или отсутствует"},
        404: {"description": "Заказ с таким reference не найден"},
    },
)
async def paystack_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(None),
):
    log = request.app.state.log
    raw_body = await request.body()

    if not request.app.state.gateway.verify_signature(raw_body, x_paystack_signature):
        await log.log_warning("webhook", "Неверная подпись вебхука", {"length": len(raw_body)})
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = WebhookEvent.model_validate_json(raw_body)
    except ValidationError as e:
        await log.log_error("webhook", f"Некорректное тело вебхука: {e}")
        raise HTTPException(status_code=400, detail="Invalid webhook payload")

    return await reconcile_payment_service(event, request)


# ────────────── MANUAL UPDATE ──────────────
@router.post(
    "/manual-update",
    response_model=ManualPaymentResponse,
    status_code=status.HTTP_200_OK,
    summary="Отметить заказ оплаченным вручную",
    responses={
        200: {"description": "Заказ обновлён"},
        401: {"description": "Некорректный пользователь или токен"},
        403: {"description": "Требуется администратор"},
        404: {"description": "Заказ не найден"},
        422: {"description": "Неверные данные запроса"},
    },
)
async def manual_payment_update(
    request: Request,
    body: ManualPaymentUpdate,
    _=Depends(admin_required),
):
    try:
        order = await manual_payment_update_service(body, request)
        return {"success": True, "message": "Order updated successfully", "order": order}
    except Exception as e:
        await request.app.state.log.log_error("payment", f"Ошибка ручного обновления оплаты: {str(e)}", {"id": body.order_id})
        raise
