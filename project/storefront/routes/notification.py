# storefront/routes/notification.py

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from storefront.schemas.notification import OrderNotificationRequest, OrderNotificationResponse
from storefront.services.notification import NotificationError
from storefront.routes.auth import admin_required

router = APIRouter()


@router.post(
    "/order",
    response_model=OrderNotificationResponse,
    status_code=status.HTTP_200_OK,
    summary="Отправить клиенту уведомление о статусе заказа",
    responses={
        200: {"description": "Уведомление отправлено"},
        400: {"description": "Статус не поддерживает уведомления (только confirmed и ready)"},
        401: {"description": "Некорректный пользователь или токен"},
        502: {"description": "Шлюз рассылок вернул ошибку"},
    },
)
async def send_order_notification(request: Request, body: OrderNotificationRequest, _=Depends(admin_required)):
    notifier = request.app.state.notifier
    log = request.app.state.log
    try:
        return await notifier.send_order_notification(
            to=body.to,
            customer_name=body.customerName,
            order_id=body.orderId,
            status=body.status,
            order_type=body.orderType.value,
            customer_phone=body.customerPhone,
        )
    except NotificationError as e:
        await log.log_warning("notification", str(e), {"order_id": body.orderId})
        raise HTTPException(status_code=400, detail=str(e))
    except httpx.HTTPError as e:
        await log.log_error("notification", f"Шлюз рассылок недоступен: {e}", {"order_id": body.orderId})
        raise HTTPException(status_code=502, detail="Failed to send notification")
