from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from ...dependencies import SESSION_USER_KEY, get_current_user_id
from ...services.users_service import UsersService, get_users_service
from ..schemas.users import CredentialsRequest, UserResponse


router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="회원가입 후 세션 시작",
)
def register(
    body: CredentialsRequest,
    request: Request,
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserResponse:
    user = service.register(body.username, body.password)
    request.session[SESSION_USER_KEY] = user.id
    return UserResponse.from_domain(user)


@router.post("/login", summary="로그인")
def login(
    body: CredentialsRequest,
    request: Request,
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserResponse:
    user = service.authenticate(body.username, body.password)
    request.session[SESSION_USER_KEY] = user.id
    return UserResponse.from_domain(user)


@router.post("/logout", summary="로그아웃")
def logout(request: Request) -> dict[str, str]:
    request.session.clear()
    return {"message": "logged_out"}


@router.get("/me", summary="현재 로그인 유저")
def me(
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserResponse:
    return UserResponse.from_domain(service.get_user(user_id))
