# storefront/services/customer.py

from typing import Tuple
from sqlalchemy import or_, func, delete
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, Request

from storefront.models.chat import Chat as ChatModel, ChatMessage as ChatMessageModel
from storefront.models.customer import Customer as CustomerModel
from storefront.models.order import Order as OrderModel, OrderItem as OrderItemModel
from storefront.schemas.customer import CustomerInfo
from storefront.utils.database import new_id, utcnow

# поля, которые checkout может обновить у существующего клиента
MERGE_FIELDS = ("name", "national_id", "email", "address")


def merge_customer(existing: dict, incoming: dict) -> Tuple[dict, bool]:
    """
    Сливает данные из формы с сохранённым клиентом.

    name перезаписывается всегда, остальные поля только непустым новым значением.
    Возвращает (итоговые поля, были ли изменения).
    """
    merged = dict(existing)
    changed = False

    name = incoming.get("name")
    if name and name != existing.get("name"):
        merged["name"] = name
        changed = True

    for key in MERGE_FIELDS[1:]:
        value = incoming.get(key)
        if value and value != existing.get(key):
            merged[key] = value
            changed = True

    return merged, changed


async def find_customer(db, phone: str, email: str | None = None) -> CustomerModel | None:
    """Поиск клиента по телефону или email, самый свежий по created_at."""
    conditions = [CustomerModel.phone == phone]
    if email:
        conditions.append(CustomerModel.email == email)

    result = await db.execute(
        select(CustomerModel)
        .where(or_(*conditions))
        .order_by(CustomerModel.created_at.desc())
        .limit(1)
    )
    return result.scalars().first()


async def upsert_customer_service(info: CustomerInfo, request: Request) -> CustomerModel:
    """
    Находит или создаёт клиента для checkout.
    Ошибки базы не перехватываются: без клиента заказ не создаётся.
    """
    db = request.state.db
    log = request.app.state.log

    incoming = info.model_dump(include=set(MERGE_FIELDS))
    existing = await find_customer(db, info.phone, info.email)

    if existing is not None:
        current = {key: getattr(existing, key) for key in MERGE_FIELDS}
        merged, changed = merge_customer(current, incoming)
        if not changed:
            await log.log_info("customer", "Клиент найден, изменений нет", {"id": existing.id})
            return existing

        for key in MERGE_FIELDS:
            setattr(existing, key, merged[key])
        existing.updated_at = utcnow()
        await db.commit()
        await log.log_info("customer", "Клиент обновлён", {"id": existing.id})
        return existing

    customer = CustomerModel(
        id=new_id(),
        name=info.name,
        phone=info.phone,
        email=info.email,
        national_id=info.national_id,
        address=info.address,
    )
    db.add(customer)
    await db.commit()
    await log.log_info("customer", "Клиент создан", {"id": customer.id})
    return customer


async def read_customers_service(request: Request, skip: int = 0, limit: int = 100) -> list[CustomerModel]:
    """
    Получение списка клиентов, новые первыми.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(
        select(CustomerModel).order_by(CustomerModel.created_at.desc()).offset(skip).limit(limit)
    )
    customers = result.scalars().all()

    await log.log_info("customer", f"{len(customers)} клиентов загружено")
    return customers


async def read_customer_service(id: str, request: Request) -> CustomerModel:
    """
    Чтение клиента по ID.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(select(CustomerModel).where(CustomerModel.id == id))
    customer = result.scalar_one_or_none()
    if customer is None:
        await log.log_error("customer", "Клиент не найден", {"id": id})
        raise HTTPException(status_code=404, detail="Клиент не найден")

    return customer


async def read_customer_orders_service(id: str, request: Request) -> list[OrderModel]:
    """
    Заказы клиента с позициями.
    """
    db = request.state.db
    customer = await read_customer_service(id, request)

    result = await db.execute(
        select(OrderModel)
        .options(
            selectinload(OrderModel.customer),
            selectinload(OrderModel.items).selectinload(OrderItemModel.food),
        )
        .where(OrderModel.customer_id == customer.id)
        .order_by(OrderModel.created_at.desc())
    )
    return result.scalars().all()


async def delete_customer_service(id: str, request: Request) -> None:
    """
    Удаление клиента вместе с его чатами. Клиента с заказами удалить нельзя.
    """
    db = request.state.db
    log = request.app.state.log

    customer = await read_customer_service(id, request)
    orders_count = await db.scalar(
        select(func.count(OrderModel.id)).where(OrderModel.customer_id == customer.id)
    )
    if orders_count:
        await log.log_warning("customer", "Удаление клиента с заказами отклонено", {"id": id, "orders": orders_count})
        raise HTTPException(status_code=409, detail="У клиента есть заказы, удаление невозможно")

    # чаты поддержки удаляются вместе с клиентом
    chat_ids = select(ChatModel.id).where(ChatModel.customer_id == customer.id)
    await db.execute(delete(ChatMessageModel).where(ChatMessageModel.chat_id.in_(chat_ids)))
    await db.execute(delete(ChatModel).where(ChatModel.customer_id == customer.id))

    await db.delete(customer)
    await db.commit()
    await log.log_info("customer", "Клиент удалён", {"id": id})
