# storefront/services/order.py

from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, Request

from storefront.models.catalog import Food as FoodModel
from storefront.models.customer import Customer as CustomerModel
from storefront.models.order import (
    Order as OrderModel,
    OrderItem as OrderItemModel,
    OrderStatus,
    PaymentStatus,
)
from storefront.services.notification import notify_status_change
from storefront.services.pricing import OrderTotals, to_money
from storefront.utils.database import new_id, utcnow


def order_query():
    """select заказа сразу с клиентом и позициями (ленивая подгрузка в async недоступна)."""
    return select(OrderModel).options(
        selectinload(OrderModel.customer),
        selectinload(OrderModel.items).selectinload(OrderItemModel.food),
    )


async def get_order(db, id: str) -> OrderModel | None:
    result = await db.execute(order_query().where(OrderModel.id == id))
    return result.scalar_one_or_none()


def set_order_status(order: OrderModel, status: str) -> None:
    """
    Меняет статус заказа.
    delivered_at / rejected_at ставятся один раз, при первом переходе в статус.
    """
    now = utcnow()
    order.status = status
    if status == OrderStatus.DELIVERED.value and order.delivered_at is None:
        order.delivered_at = now
    if status == OrderStatus.REJECTED.value and order.rejected_at is None:
        order.rejected_at = now
    order.updated_at = now


def apply_payment_outcome(order: OrderModel, succeeded: bool, reference: str | None = None) -> None:
    """
    Результат оплаты: успех → paid/confirmed, иначе failed/rejected.
    Повторное применение того же результата состояние не меняет.
    """
    if succeeded:
        order.payment_status = PaymentStatus.PAID.value
        set_order_status(order, OrderStatus.CONFIRMED.value)
    else:
        order.payment_status = PaymentStatus.FAILED.value
        set_order_status(order, OrderStatus.REJECTED.value)
    if reference:
        order.payment_reference = reference


async def create_order_service(
    customer: CustomerModel,
    totals: OrderTotals,
    foods: dict[str, FoodModel],
    request: Request,
    notes: str | None = None,
    delivery_address: str | None = None,
) -> OrderModel:
    """
    Создание заказа вместе с позициями одним commit.
    """
    db = request.state.db
    log = request.app.state.log

    order = OrderModel(
        id=new_id(),
        customer=customer,
        total_amount=totals.total_amount,
        delivery_fee=totals.delivery_fee,
        order_type=totals.order_type.value,
        status=OrderStatus.PENDING.value,
        payment_status=PaymentStatus.PENDING.value,
        notes=notes,
        delivery_address=delivery_address,
        items=[
            OrderItemModel(
                id=new_id(),
                food_id=line.food_id,
                food=foods.get(line.food_id),
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
            )
            for line in totals.lines
        ],
    )
    db.add(order)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await log.log_info("order", "Заказ создан", {
        "id": order.id,
        "customer_id": customer.id,
        "total_amount": order.total_amount,
        "items": len(order.items),
    })
    return order


async def read_orders_service(
    request: Request,
    skip: int = 0,
    limit: int = 100,
    status: str | None = None,
    payment_status: str | None = None,
) -> list[OrderModel]:
    """
    Получение списка заказов, новые первыми.
    """
    db = request.state.db
    log = request.app.state.log

    query = order_query().order_by(OrderModel.created_at.desc())
    if status:
        query = query.where(OrderModel.status == status)
    if payment_status:
        query = query.where(OrderModel.payment_status == payment_status)

    result = await db.execute(query.offset(skip).limit(limit))
    orders = result.scalars().all()

    await log.log_info("order", f"{len(orders)} заказов загружено")
    return orders


async def read_order_service(id: str, request: Request) -> OrderModel:
    """
    Чтение заказа по ID.
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await get_order(db, id)
    if db_order is None:
        await log.log_error("order", "Заказ не найден", {"id": id})
        raise HTTPException(status_code=404, detail="Заказ не найден")

    return db_order


async def update_order_status_service(id: str, status: str, request: Request) -> OrderModel:
    """
    Смена статуса заказа администратором.
    Уведомление клиенту отправляется после commit и на результат не влияет.
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await read_order_service(id, request)
    previous = db_order.status
    set_order_status(db_order, status)
    await db.commit()
    await log.log_info("order", "Статус заказа обновлён", {"id": id, "from": previous, "to": status})

    await notify_status_change(db_order, previous, request)
    return db_order


async def read_order_stats_service(request: Request) -> dict:
    """
    Сводка для панели администратора.
    """
    db = request.state.db

    total_orders = await db.scalar(select(func.count(OrderModel.id)))
    revenue = await db.scalar(
        select(func.coalesce(func.sum(OrderModel.total_amount), 0))
        .where(OrderModel.payment_status == PaymentStatus.PAID.value)
    )
    total_customers = await db.scalar(select(func.count(CustomerModel.id)))
    available_foods = await db.scalar(
        select(func.count(FoodModel.id)).where(FoodModel.is_available.is_(True))
    )

    return {
        "total_orders": total_orders or 0,
        "total_revenue": to_money(revenue or Decimal("0")),
        "total_customers": total_customers or 0,
        "available_foods": available_foods or 0,
    }
