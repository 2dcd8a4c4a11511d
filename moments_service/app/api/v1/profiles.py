from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from ...dependencies import get_current_user_id
from ...services.query_service import QueryService, get_query_service
from ..schemas.instants import ListInstantsResponse
from ..schemas.users import ProfileResponse


router = APIRouter()


@router.get("/profiles/{username}", summary="프로필 (게시 목록 + top fans)")
def get_profile(
    username: str,
    _: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> ProfileResponse:
    return ProfileResponse.from_domain(query.profile_view(username))


@router.get("/me/instants/created", summary="내가 게시한 instant")
def list_created_instants(
    user_id: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> ListInstantsResponse:
    return ListInstantsResponse.from_domain(query.created_instants(user_id))


@router.get("/me/instants/purchased", summary="내가 구매한 instant")
def list_purchased_instants(
    user_id: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> ListInstantsResponse:
    return ListInstantsResponse.from_domain(query.purchased_instants(user_id))
