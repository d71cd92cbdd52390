# storefront/models/admin.py

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func
from storefront.utils.database import Base

class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)  # автоинкремент
    name = Column(String, nullable=True)
    login = Column(String, unique=True, nullable=False)  # логин
    password = Column(String, nullable=False)            # хэш пароля
    is_admin = Column(Boolean, default=False)            # флаг админа
    timestamp = Column(DateTime(timezone=True), server_default=func.now())
