# storefront/utils/security.py

"""
Хэширование паролей администраторов и проверка подписи вебхуков Paystack.
Используется passlib с sha256_crypt, чтобы избежать проблем с bcrypt на Windows.
"""

import hashlib
import hmac

from passlib.context import CryptContext

# schemes=["sha256_crypt"] - SHA-256 с солью
# deprecated="auto" - автоматически помечает устаревшие схемы
pwd_context = CryptContext(schemes=["sha256_crypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Хэширует пароль.

    :param password: строка пароля пользователя
    :return: хэшированный пароль в виде строки
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверяет совпадение пароля с его хэшем.

    :param plain_password: строка пароля пользователя
    :param hashed_password: хэшированный пароль из базы
    :return: True если пароль совпадает с хэшем, иначе False
    """
    return pwd_context.verify(plain_password, hashed_password)


def sign_payload(raw_body: bytes, secret: str) -> str:
    """HMAC-SHA512 тела запроса в hex, как его считает Paystack."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha512).hexdigest()


def verify_signature(raw_body: bytes, signature: str | None, secret: str) -> bool:
    """
    Проверяет заголовок x-paystack-signature.

    :param raw_body: сырое тело запроса (до разбора JSON)
    :param signature: значение заголовка, может отсутствовать
    :param secret: секретный ключ Paystack
    :return: True если подпись совпала
    """
    if not signature or not secret:
        return False
    return hmac.compare_digest(sign_payload(raw_body, secret), signature.strip().lower())
