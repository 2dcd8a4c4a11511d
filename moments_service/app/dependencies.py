from __future__ import annotations

from fastapi import Depends, Request

from .config import AppConfig
from .exceptions import NotAuthenticatedError
from .store import Store


SESSION_USER_KEY = "userId"


def get_store(request: Request) -> Store:
    """lifespan 에서 app.state 에 올려 둔 Store 를 반환한다."""

    return request.app.state.store


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_current_user_id(
    request: Request, store: Store = Depends(get_store)
) -> str:
    """세션에서 로그인 유저 id 를 꺼낸다. 없거나 스토어에 없는 유저면 401."""

    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        raise NotAuthenticatedError("login required")
    if store.find_user_by_id(user_id) is None:
        request.session.pop(SESSION_USER_KEY, None)
        raise NotAuthenticatedError("session user no longer exists")
    return user_id
