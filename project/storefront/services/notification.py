# storefront/services/notification.py

import html

import httpx
from fastapi import Request

from storefront.config import settings
from storefront.models.order import OrderStatus, OrderType

# статусы, о которых клиенту отправляется уведомление
NOTIFIABLE_STATUSES = (OrderStatus.CONFIRMED.value, OrderStatus.READY.value)


class NotificationError(Exception):
    """Уведомление нельзя построить (неподдерживаемый статус)."""


def order_type_label(order_type: str) -> str:
    return "Delivery" if order_type == OrderType.DELIVERY.value else "Pickup"


def build_order_message(customer_name: str, order_id: str, status: str, order_type: str,
                        business_name: str = "BiteCraft") -> tuple[str, str]:
    """
    Тема и HTML письма для статусов confirmed и ready.
    """
    label = order_type_label(order_type)
    name = html.escape(customer_name or "")
    number = html.escape(order_id)
    if status == OrderStatus.CONFIRMED.value:
        subject = f"Order Confirmed - #{order_id}"
        body = (
            f"<h2>Order Confirmed!</h2>"
            f"<p>Dear {name},</p>"
            f"<p>Your order <strong>#{number}</strong> has been confirmed and is being prepared.</p>"
            f"<p><strong>Order Type:</strong> {label}</p>"
            f"<p>We'll notify you when your order is ready. Expected time: 15-20 minutes.</p>"
        )
    elif status == OrderStatus.READY.value:
        subject = f"Order Ready for {label} - #{order_id}"
        if order_type == OrderType.DELIVERY.value:
            hint = "Our delivery team will be with you in the next 10 minutes."
        else:
            hint = "Please come to pick up your order within the next 10 minutes."
        body = (
            f"<h2>Order Ready!</h2>"
            f"<p>Dear {name},</p>"
            f"<p>Great news! Your order <strong>#{number}</strong> is now ready.</p>"
            f"<p><strong>Order Type:</strong> {label}</p>"
            f"<p>{hint}</p>"
        )
    else:
        raise NotificationError(f"Invalid status for notification: {status}")

    body += f"<p>Thank you for choosing {business_name}!</p>"
    return subject, body


class Notifier:
    """
    Отправка email/SMS клиенту.
    Если NOTIFY_WEBHOOK_URL задан, сообщение уходит POST-запросом на шлюз рассылок,
    иначе только пишется в лог.
    """

    def __init__(self, webhook_url: str = "", timeout: float = 10.0, business_name: str = "BiteCraft",
                 transport: httpx.AsyncBaseTransport | None = None, log=None):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.business_name = business_name
        self.transport = transport
        self.log = log

    @classmethod
    def from_settings(cls, log=None) -> "Notifier":
        return cls(
            webhook_url=settings.NOTIFY_WEBHOOK_URL,
            timeout=settings.NOTIFY_TIMEOUT,
            business_name=settings.BUSINESS_NAME,
            log=log,
        )

    async def send_order_notification(self, to: str | None, customer_name: str, order_id: str,
                                      status: str, order_type: str, customer_phone: str | None = None) -> dict:
        subject, html = build_order_message(customer_name, order_id, status, order_type, self.business_name)
        email_sent = bool(to)
        sms_sent = bool(customer_phone)

        message = {
            "to": to,
            "phone": customer_phone,
            "subject": subject,
            "html": html,
            "email": email_sent,
            "sms": sms_sent,
        }

        if self.webhook_url:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url, json=message)
                response.raise_for_status()
            if self.log:
                await self.log.log_info("notification", "Уведомление отправлено", {"order_id": order_id, "status": status})
        elif self.log:
            await self.log.log_info("notification", "Шлюз рассылок не настроен, уведомление только в логе",
                                    {"to": to, "phone": customer_phone, "subject": subject})

        return {"success": True, "emailSent": email_sent, "smsSent": sms_sent}


async def notify_status_change(order, previous_status: str | None, request: Request) -> bool:
    """
    Уведомляет клиента о переходе заказа в confirmed/ready.
    Вызывается после commit: любая ошибка только логируется и на статус не влияет.
    Возвращает True, если уведомление ушло.
    """
    log = request.app.state.log
    if order.status == previous_status or order.status not in NOTIFIABLE_STATUSES:
        return False

    customer = order.customer
    if customer is None or not (customer.email or customer.phone):
        return False

    notifier: Notifier = request.app.state.notifier
    try:
        await notifier.send_order_notification(
            to=customer.email,
            customer_name=customer.name,
            order_id=order.id[:8],
            status=order.status,
            order_type=order.order_type,
            customer_phone=customer.phone,
        )
        return True
    except Exception as e:
        await log.log_error("notification", f"Ошибка отправки уведомления: {e}", {"order_id": order.id})
        return False
