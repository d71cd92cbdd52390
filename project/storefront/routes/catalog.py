# storefront/routes/catalog.py

from fastapi import APIRouter, Depends, Request, status
from typing import List, Optional
from storefront.schemas.catalog import Category, CategoryBase, CategoryCreate, Food, FoodBase, FoodCreate
from storefront.services.catalog import (
    create_category_service,
    read_categories_service,
    read_category_service,
    update_category_service,
    delete_category_service,
    create_food_service,
    read_foods_service,
    read_food_service,
    read_menu_service,
    update_food_service,
    toggle_food_availability_service,
    delete_food_service,
)
from storefront.routes.auth import admin_required

router = APIRouter()

# ────────────── MENU (публично) ──────────────
@router.get(
    "/menu",
    response_model=List[Food],
    summary="Меню для покупателя",
    responses={200: {"description": "Доступные блюда активных категорий"}},
)
async def read_menu(request: Request):
    return await read_menu_service(request)


@router.get(
    "/categories",
    response_model=List[Category],
    summary="Список категорий",
    responses={200: {"description": "Категории по алфавиту"}},
)
async def read_categories(request: Request, active_only: bool = False):
    return await read_categories_service(request, active_only)


# ────────────── CATEGORIES (админ) ──────────────
@router.post(
    "/categories",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
    summary="Создать категорию",
    responses={
        201: {"description": "Категория создана"},
        401: {"description": "Некорректный пользователь или токен"},
        422: {"description": "Неверные данные запроса"},
    },
)
async def create_category(request: Request, category: CategoryCreate, _=Depends(admin_required)):
    try:
        return await create_category_service(category, request)
    except Exception as e:
        await request.app.state.log.log_error("catalog", f"Ошибка при создании категории: {str(e)}")
        raise


@router.get(
    "/categories/{id}",
    response_model=Category,
    summary="Категория по ID",
    responses={404: {"description": "Категория не найдена"}},
)
async def read_category(id: str, request: Request):
    return await read_category_service(id, request)


@router.put(
    "/categories/{id}",
    response_model=Category,
    summary="Обновить категорию",
    responses={
        200: {"description": "Категория обновлена"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Категория не найдена"},
    },
)
async def update_category(id: str, category_update: CategoryBase, request: Request, _=Depends(admin_required)):
    return await update_category_service(id, category_update, request)


@router.delete(
    "/categories/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить категорию",
    responses={
        204: {"description": "Категория удалена, блюда остались без категории"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Категория не найдена"},
    },
)
async def delete_category(id: str, request: Request, _=Depends(admin_required)):
    await delete_category_service(id, request)


# ────────────── FOODS (админ) ──────────────
@router.get(
    "/foods",
    response_model=List[Food],
    summary="Список блюд (включая недоступные)",
    responses={401: {"description": "Некорректный пользователь или токен"}},
)
async def read_foods(
    request: Request,
    skip: int = 0,
    limit: int = 100,
    category_id: Optional[str] = None,
    _=Depends(admin_required),
):
    return await read_foods_service(request, skip, limit, category_id)


@router.post(
    "/foods",
    response_model=Food,
    status_code=status.HTTP_201_CREATED,
    summary="Создать блюдо",
    responses={
        201: {"description": "Блюдо создано"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Категория не найдена"},
        422: {"description": "Неверные данные запроса"},
    },
)
async def create_food(request: Request, food: FoodCreate, _=Depends(admin_required)):
    try:
        return await create_food_service(food, request)
    except Exception as e:
        await request.app.state.log.log_error("catalog", f"Ошибка при создании блюда: {str(e)}")
        raise


@router.get(
    "/foods/{id}",
    response_model=Food,
    summary="Блюдо по ID",
    responses={404: {"description": "Блюдо не найдено"}},
)
async def read_food(id: str, request: Request):
    return await read_food_service(id, request)


@router.put(
    "/foods/{id}",
    response_model=Food,
    summary="Обновить блюдо",
    responses={
        200: {"description": "Блюдо обновлено"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Блюдо или категория не найдены"},
    },
)
async def update_food(id: str, food_update: FoodBase, request: Request, _=Depends(admin_required)):
    return await update_food_service(id, food_update, request)


@router.post(
    "/foods/{id}/toggle",
    response_model=Food,
    summary="Включить/выключить блюдо",
    responses={404: {"description": "Блюдо не найдено"}},
)
async def toggle_food(id: str, request: Request, _=Depends(admin_required)):
    return await toggle_food_availability_service(id, request)


@router.delete(
    "/foods/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить блюдо",
    responses={
        204: {"description": "Блюдо удалено"},
        404: {"description": "Блюдо не найдено"},
        409: {"description": "Блюдо есть в заказах"},
    },
)
async def delete_food(id: str, request: Request, _=Depends(admin_required)):
    await delete_food_service(id, request)
