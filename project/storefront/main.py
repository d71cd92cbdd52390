# storefront/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from dotenv import load_dotenv
from contextlib import asynccontextmanager

import os
import multiprocessing

# --- загрузка переменных окружения (до чтения settings) ---
load_dotenv()

from storefront.config import settings
from storefront.utils.log import Log
from storefront.utils.database import init_db
from storefront.middleware.db_middleware import DBSessionMiddleware
from storefront.services.paystack import PaystackClient
from storefront.services.notification import Notifier

# --- sync логгер для раннего старта ---
boot_log = Log()
if os.environ.get("RUN_MAIN") == "true" or multiprocessing.current_process().name == "MainProcess":
    boot_log.log_info_sync(target="startup", message="Импорты main.py выполнены")

# ────────────── Lifespan ──────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    boot_log.log_info_sync(target="startup", message="lifespan: startup начат")

    # Инициализация БД
    admin_created = await init_db()
    boot_log.log_info_sync(target="startup", message="База инициализирована", data={"admin_created": admin_created})

    # Log, платёжный шлюз и рассылки в state
    app.state.log = Log()
    app.state.gateway = PaystackClient.from_settings(log=app.state.log)
    app.state.notifier = Notifier.from_settings(log=app.state.log)
    await app.state.log.log_info(target="startup", message="Log, Paystack и Notifier инициализированы")

    yield

    # shutdown
    await app.state.log.log_info(target="shutdown", message="Остановка приложения")
    await app.state.gateway.aclose()
    await app.state.log.shutdown()
    boot_log.log_info_sync(target="shutdown", message="Log корректно завершён")

# ────────────── Создаём FastAPI приложение ──────────────
app = FastAPI(title="Storefront API", lifespan=lifespan, debug=settings.DEBUG)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# DB middleware для request.state.db
app.add_middleware(DBSessionMiddleware)

@app.get("/")
def read_root():
    return {"message": "Storefront API"}

# ────────────── Подключение роутов ──────────────
from storefront.routes import auth, catalog, chat, checkout, customer, notification, order, payment

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
app.include_router(payment.router, prefix="/payments", tags=["payments"])
app.include_router(order.router, prefix="/order", tags=["order"])
app.include_router(customer.router, prefix="/customer", tags=["customer"])
app.include_router(notification.router, prefix="/notifications", tags=["notifications"])
app.include_router(chat.router, prefix="/chat", tags=["chat"])

# ────────────── Запуск uvicorn ──────────────
if __name__ == "__main__":
    boot_log.log_info_sync(target="startup", message="Запуск uvicorn.run")
    uvicorn.run(
        "storefront.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info",
        reload=True
    )
