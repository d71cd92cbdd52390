# storefront/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    AUTH_SECRET_KEY: str
    AUTH_TOKEN_EXPIRE_MINUTES: int = 60
    AUTH_LOGIN: str = "admin"          # логин первого администратора
    AUTH_PASSWORD: str = "admin"       # пароль первого администратора

    DATABASE_URL: str = "sqlite+aiosqlite:///./storefront.db"

    # Платёжный шлюз Paystack
    PAYSTACK_SECRET_KEY: str
    PAYSTACK_BASE_URL: str = "https://api.paystack.co"
    PAYSTACK_CURRENCY: str = "GHS"
    PAYSTACK_CALLBACK_URL: str = ""    # может содержать {order_id}
    PAYSTACK_EMAIL_DOMAIN: str = "bitecraft.com"
    PAYSTACK_TIMEOUT: float = 15.0
    PAYSTACK_MAX_RETRIES: int = 3
    PAYSTACK_RETRY_BACKOFF: float = 0.5

    # Уведомления клиентам (email/SMS шлюз)
    NOTIFY_WEBHOOK_URL: str = ""       # пусто: уведомления только пишутся в лог
    NOTIFY_TIMEOUT: float = 10.0
    BUSINESS_NAME: str = "BiteCraft"

    DEBUG: bool = False
    LOG_DIR: str = "storefront/log"
    LOG_PRINT: str = "1"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
