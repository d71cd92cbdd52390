# storefront/middleware/db_middleware.py

from starlette.types import ASGIApp, Receive, Scope, Send
from storefront.utils.database import AsyncSessionLocal

class DBSessionMiddleware:
    """Открывает AsyncSession на каждый HTTP-запрос и кладёт её в request.state.db."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        state["db"] = AsyncSessionLocal()
        try:
            await self.app(scope, receive, send)
        finally:
            # закрываем сессию только после завершения запроса
            await state["db"].close()
