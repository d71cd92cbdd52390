# storefront/routes/auth.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jwt import encode, decode, ExpiredSignatureError, InvalidTokenError
from datetime import datetime, timedelta, timezone
from typing import Optional
from storefront.utils.security import verify_password
from storefront.config import settings
from storefront.schemas.user import UserResponse, TokenResponse
from storefront.services.profile import read_admin_by_login_service

router = APIRouter()

# ────────────── JWT и пароли ──────────────
SECRET_KEY = settings.AUTH_SECRET_KEY
ACCESS_TOKEN_EXPIRE_MINUTES = settings.AUTH_TOKEN_EXPIRE_MINUTES
ALGORITHM = "HS256"
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """
    Создаёт JWT токен на основе данных пользователя и времени жизни токена.
    Вход: dict (например {"sub": "username"})
    Выход: JWT строка
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)):
    """
    Проверяет JWT токен и возвращает администратора.

    **Статусы:**
    - 401 Unauthorized – токен истёк, неверный или пользователь не найден
    """
    log = request.app.state.log
    try:
        payload = decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        login: str = payload.get("sub")
        if login is None:
            await log.log_error("auth", "Токен не содержит username")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    except ExpiredSignatureError:
        await log.log_warning("auth", "Токен истёк")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except InvalidTokenError:
        await log.log_warning("auth", "Неверный токен")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalid")

    user = await read_admin_by_login_service(login, request)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    return user


async def admin_required(user=Depends(get_current_user)):
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Доступ запрещён: требуется администратор")
    return user


# ────────────── TOKEN ──────────────
@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Получение JWT токена (вход администратора)",
    responses={
        200: {"description": "✅ Токен успешно получен. Возвращает access_token, token_type и данные пользователя."},
        401: {"description": "❌ Неверный логин или пароль"},
        422: {"description": "⚠️ Ошибка валидации входных данных (например, пустой username или password)"},
    }
)
async def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends()
):
    """
    Авторизация администратора и получение JWT токена.

    **Входные данные (form-data):**
    - `username`: str — логин
    - `password`: str — пароль

    **Выходные данные (JSON):**
    - `access_token`: str — JWT токен для авторизации
    - `token_type`: str — всегда `"bearer"`
    - `user`: object — id, name, login, is_admin
    """
    log = request.app.state.log
    user = await read_admin_by_login_service(form_data.username, request)

    # Проверка логина и пароля
    if not user or not verify_password(form_data.password, user.password):
        await log.log_warning("auth", "Неудачная попытка входа", {"username": form_data.username})
        raise HTTPException(
            status_code=401,
            detail="Неверный логин или пароль",
            headers={"WWW-Authenticate": "Bearer"}
        )

    access_token = create_access_token(
        data={"sub": user.login},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    await log.log_info("auth", "Пользователь успешно авторизован", {"login": user.login})
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Текущий администратор",
    responses={
        200: {"description": "Данные пользователя по токену"},
        401: {"description": "Токен невалиден"},
    }
)
async def read_me(current_user=Depends(get_current_user)):
    return current_user
