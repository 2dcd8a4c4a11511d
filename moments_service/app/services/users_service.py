from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import Depends

from ..dependencies import get_store
from ..exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
    PersistenceError,
)
from ..models.user import INITIAL_CREDITS, User
from ..security import hash_password, needs_rehash, verify_password
from ..store import Store


logger = logging.getLogger(__name__)


class UsersService:
    """회원가입 / 로그인 비즈니스 로직.

    - username 은 대소문자를 구분하는 유니크 키다.
    - 가입 시 20 크레딧을 지급한다.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def register(self, username: str, password: str) -> User:
        if not username or not password:
            raise InvalidInputError("username and password are required")

        with self._store.lock:
            if self._store.find_user_by_username(username) is not None:
                raise DuplicateUsernameError("username already exists")

            user = User(
                id=str(uuid4()),
                username=username,
                password=hash_password(password),
                credits=INITIAL_CREDITS,
                is_premium=False,
            )
            self._store.add_user(user)
            try:
                self._store.persist()
            except PersistenceError:
                self._store.remove_user(user.id)
                raise

        logger.info("user registered", extra={"user_id": user.id})
        return user

    def authenticate(self, username: str, password: str) -> User:
        """자격 증명이 맞으면 유저를 반환한다.

        평문으로 저장된 이전 계정은 로그인 성공 시 해시로 교체해 저장한다.
        """
        user = self._store.find_user_by_username(username) if username else None
        if user is None or not password or not verify_password(password, user.password):
            raise InvalidCredentialsError("invalid credentials")

        if needs_rehash(user.password):
            with self._store.lock:
                legacy = user.password
                user.password = hash_password(password)
                try:
                    self._store.persist()
                except PersistenceError:
                    user.password = legacy
                    raise
        return user

    def get_user(self, user_id: str) -> User:
        user = self._store.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError(f"user not found (id={user_id})")
        return user


def get_users_service(store: Store = Depends(get_store)) -> UsersService:
    """FastAPI DI용 UsersService 팩토리."""

    return UsersService(store)
