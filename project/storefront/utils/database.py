# storefront/utils/database.py

import uuid
import datetime
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.future import select
from sqlalchemy.pool import NullPool
from storefront.config import settings
from storefront.utils.security import hash_password

# ────────────── Base для моделей ──────────────
Base = declarative_base()  # базовый класс для всех моделей SQLAlchemy

# ────────────── URL базы данных ──────────────
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL


def engine_options(url: str) -> dict:
    # aiosqlite: без общего пула, каждое соединение живёт в своём event loop
    if url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {"pool_pre_ping": True}


# ────────────── Асинхронный движок ──────────────
engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=False,  # True можно включить для отладки SQL
    **engine_options(SQLALCHEMY_DATABASE_URL),
)

# ────────────── Асинхронная сессия ──────────────
# expire_on_commit=False: после commit объекты остаются читаемыми без ленивой подгрузки
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def new_id() -> str:
    """UUID-строка для первичных ключей (id заказа одновременно reference платежа)."""
    return str(uuid.uuid4())


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


# ────────────── Инициализация базы данных ──────────────
async def init_db():
    """
    Создаёт все таблицы в базе данных (если ещё не созданы)
    Проверяет наличие хотя бы одного администратора
        - Если админ отсутствует, создаёт его из AUTH_LOGIN / AUTH_PASSWORD
        - Пароль хранится в виде хэша
    Возвращает True, если администратор был создан.
    """
    # регистрация моделей в Base.metadata
    from storefront.models import admin, catalog, chat, customer, order  # noqa: F401
    from storefront.models.admin import AdminUser

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(AdminUser).where(AdminUser.is_admin.is_(True)).limit(1))
        if result.scalars().first() is not None:
            return False

        session.add(AdminUser(
            name="Administrator",
            login=settings.AUTH_LOGIN,
            password=hash_password(settings.AUTH_PASSWORD),
            is_admin=True,
        ))
        await session.commit()
        return True


async def drop_db():
    """Удаляет все таблицы (используется тестами и при пересоздании схемы)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
