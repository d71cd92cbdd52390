# storefront/services/catalog.py

from sqlalchemy import or_, update, func
from sqlalchemy.future import select
from fastapi import HTTPException, Request

from storefront.models.catalog import Category as CategoryModel, Food as FoodModel
from storefront.models.order import OrderItem as OrderItemModel
from storefront.schemas.catalog import CategoryBase, CategoryCreate, FoodBase, FoodCreate
from storefront.utils.database import new_id, utcnow


# ==========================================================
# КАТЕГОРИИ
# ==========================================================
async def read_categories_service(request: Request, active_only: bool = False) -> list[CategoryModel]:
    db = request.state.db

    query = select(CategoryModel).order_by(CategoryModel.name)
    if active_only:
        query = query.where(CategoryModel.is_active.is_(True))
    result = await db.execute(query)
    return result.scalars().all()


async def read_category_service(id: str, request: Request) -> CategoryModel:
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(select(CategoryModel).where(CategoryModel.id == id))
    category = result.scalar_one_or_none()
    if category is None:
        await log.log_error("catalog", "Категория не найдена", {"id": id})
        raise HTTPException(status_code=404, detail="Категория не найдена")
    return category


async def create_category_service(category: CategoryCreate, request: Request) -> CategoryModel:
    db = request.state.db
    log = request.app.state.log

    db_category = CategoryModel(id=new_id(), **category.model_dump())
    db.add(db_category)
    await db.commit()

    await log.log_info("catalog", "Категория создана", {"id": db_category.id, "name": db_category.name})
    return db_category


async def update_category_service(id: str, category_update: CategoryBase, request: Request) -> CategoryModel:
    db = request.state.db
    log = request.app.state.log

    db_category = await read_category_service(id, request)
    for key, value in category_update.model_dump(exclude_unset=True).items():
        setattr(db_category, key, value)
    db_category.updated_at = utcnow()

    await db.commit()
    await log.log_info("catalog", "Категория обновлена", {"id": id})
    return db_category


async def delete_category_service(id: str, request: Request) -> None:
    """
    Удаление категории. Блюда категории остаются без категории.
    """
    db = request.state.db
    log = request.app.state.log

    db_category = await read_category_service(id, request)
    await db.execute(update(FoodModel).where(FoodModel.category_id == id).values(category_id=None))
    await db.delete(db_category)
    await db.commit()
    await log.log_info("catalog", "Категория удалена", {"id": id})


# ==========================================================
# БЛЮДА
# ==========================================================
async def read_foods_service(request: Request, skip: int = 0, limit: int = 100,
                             category_id: str | None = None) -> list[FoodModel]:
    db = request.state.db

    query = select(FoodModel).order_by(FoodModel.created_at.desc())
    if category_id:
        query = query.where(FoodModel.category_id == category_id)
    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


async def read_menu_service(request: Request) -> list[FoodModel]:
    """
    Меню для покупателя: доступные блюда из активных категорий или без категории.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(
        select(FoodModel)
        .outerjoin(CategoryModel, FoodModel.category_id == CategoryModel.id)
        .where(FoodModel.is_available.is_(True))
        .where(or_(FoodModel.category_id.is_(None), CategoryModel.is_active.is_(True)))
        .order_by(FoodModel.name)
    )
    foods = result.scalars().all()

    await log.log_info("catalog", f"Меню загружено: {len(foods)} блюд")
    return foods


async def read_food_service(id: str, request: Request) -> FoodModel:
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(select(FoodModel).where(FoodModel.id == id))
    food = result.scalar_one_or_none()
    if food is None:
        await log.log_error("catalog", "Блюдо не найдено", {"id": id})
        raise HTTPException(status_code=404, detail="Блюдо не найдено")
    return food


async def create_food_service(food: FoodCreate, request: Request) -> FoodModel:
    db = request.state.db
    log = request.app.state.log

    if food.category_id:
        await read_category_service(food.category_id, request)

    db_food = FoodModel(id=new_id(), **food.model_dump())
    db.add(db_food)
    await db.commit()

    await log.log_info("catalog", "Блюдо создано", {"id": db_food.id, "name": db_food.name})
    return db_food


async def update_food_service(id: str, food_update: FoodBase, request: Request) -> FoodModel:
    db = request.state.db
    log = request.app.state.log

    db_food = await read_food_service(id, request)
    changes = food_update.model_dump(exclude_unset=True)
    if changes.get("category_id"):
        await read_category_service(changes["category_id"], request)

    for key, value in changes.items():
        setattr(db_food, key, value)
    db_food.updated_at = utcnow()

    await db.commit()
    await log.log_info("catalog", "Блюдо обновлено", {"id": id, "fields": list(changes)})
    return db_food


async def toggle_food_availability_service(id: str, request: Request) -> FoodModel:
    db = request.state.db
    log = request.app.state.log

    db_food = await read_food_service(id, request)
    db_food.is_available = not db_food.is_available
    db_food.updated_at = utcnow()

    await db.commit()
    await log.log_info("catalog", "Доступность блюда изменена", {"id": id, "is_available": db_food.is_available})
    return db_food


async def delete_food_service(id: str, request: Request) -> None:
    """
    Удаление блюда. Блюдо из оформленных заказов удалить нельзя, только скрыть.
    """
    db = request.state.db
    log = request.app.state.log

    db_food = await read_food_service(id, request)
    used = await db.scalar(select(func.count(OrderItemModel.id)).where(OrderItemModel.food_id == id))
    if used:
        await log.log_warning("catalog", "Блюдо есть в заказах, удаление отклонено", {"id": id})
        raise HTTPException(status_code=409, detail="Блюдо есть в заказах, отключите его вместо удаления")

    await db.delete(db_food)
    await db.commit()
    await log.log_info("catalog", "Блюдо удалено", {"id": id})
