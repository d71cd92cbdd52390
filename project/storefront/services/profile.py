# storefront/services/profile.py

from sqlalchemy.future import select
from fastapi import Request

from storefront.models.admin import AdminUser as AdminUserModel


async def read_admin_by_login_service(login: str, request: Request) -> AdminUserModel | None:
    """
    Поиск администратора по логину (None, если не найден).
    """
    db = request.state.db
    result = await db.execute(select(AdminUserModel).where(AdminUserModel.login == login))
    return result.scalar_one_or_none()
