"""Instant 월/게시/상세/구매 라우터."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse

from ...dependencies import get_current_user_id
from ...exceptions import MediaForbiddenError
from ...services.instants_service import (
    InstantsService,
    MediaUpload,
    get_instants_service,
)
from ...services.media_storage import LocalMediaStorage, get_media_storage
from ...services.purchase_service import PurchaseService, get_purchase_service
from ...services.query_service import QueryService, get_query_service
from ..schemas.instants import (
    InstantDetailResponse,
    InstantResponse,
    ListInstantsResponse,
    PurchaseResponse,
)


router = APIRouter(prefix="/instants", tags=["instants"])


@router.get("", summary="활성 instant 월 (만료 임박 순)")
def list_active_instants(
    _: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> ListInstantsResponse:
    return ListInstantsResponse.from_domain(query.active_wall())


@router.post("", status_code=status.HTTP_201_CREATED, summary="instant 게시")
def create_instant(
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[InstantsService, Depends(get_instants_service)],
    title: Annotated[str, Form()] = "",
    exclusive: Annotated[str | None, Form()] = None,
    content: Annotated[UploadFile | None, File()] = None,
) -> InstantResponse:
    upload: MediaUpload | None = None
    if content is not None and content.filename:
        upload = MediaUpload(filename=content.filename, data=content.file.read())

    instant = service.create_instant(
        creator_id=user_id,
        title=title,
        exclusive=exclusive,
        upload=upload,
    )
    return InstantResponse.from_domain(instant)


@router.get("/{instant_id}", summary="instant 상세")
def get_instant(
    instant_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> InstantDetailResponse:
    return InstantDetailResponse.from_domain(query.instant_detail(user_id, instant_id))


@router.get("/{instant_id}/media", summary="instant 미디어 (열람 권한 필요)")
def get_instant_media(
    instant_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
    media: Annotated[LocalMediaStorage, Depends(get_media_storage)],
) -> FileResponse:
    detail = query.instant_detail(user_id, instant_id)
    if not detail.can_view_media:
        raise MediaForbiddenError("purchase required to view this instant")
    return FileResponse(media.path_for(detail.instant.filename))


@router.post("/{instant_id}/purchase", summary="instant 구매")
def purchase_instant(
    instant_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[PurchaseService, Depends(get_purchase_service)],
) -> PurchaseResponse:
    result = service.purchase(user_id, instant_id)
    return PurchaseResponse(
        instant_id=result.instant.id,
        price=result.instant.price,
        remaining_credits=result.remaining_credits,
        total_spent_on_creator=result.fan_rank.total_credits,
    )
