from __future__ import annotations

import hmac

from passlib.context import CryptContext


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def is_hashed(stored: str) -> bool:
    return pwd_context.identify(stored) is not None


def verify_password(plain_password: str, stored: str) -> bool:
    """해시로 저장된 값은 passlib 로, 이전 데이터의 평문 값은 상수 시간 비교로 검증한다."""
    if is_hashed(stored):
        return pwd_context.verify(plain_password, stored)
    return hmac.compare_digest(plain_password.encode(), stored.encode())


def needs_rehash(stored: str) -> bool:
    return not is_hashed(stored) or pwd_context.needs_update(stored)
