from __future__ import annotations

from pydantic import BaseModel

from common.types.timestamp import UtcDateTime, millis_to_datetime

from ...models.instant import Instant
from ...services.query_service import InstantDetail


class InstantResponse(BaseModel):
    """Instant 응답 DTO.

    저장된 미디어 파일명은 노출하지 않는다. 미디어는 열람 권한 검사를 거치는
    /instants/{id}/media 로만 내려준다.
    """

    id: str
    title: str
    creator_id: str
    is_exclusive: bool
    price: int
    buyer_count: int
    sold_out: bool
    is_expired: bool
    created_at: UtcDateTime
    expires_at: UtcDateTime

    @classmethod
    def from_domain(cls, instant: Instant) -> "InstantResponse":
        return cls(
            id=instant.id,
            title=instant.title,
            creator_id=instant.creator_id,
            is_exclusive=instant.is_exclusive,
            price=instant.price,
            buyer_count=len(instant.buyers),
            sold_out=instant.is_exclusive and bool(instant.buyers),
            is_expired=instant.is_expired,
            created_at=millis_to_datetime(instant.created_at),
            expires_at=millis_to_datetime(instant.expires_at),
        )


class ListInstantsResponse(BaseModel):
    total: int
    items: list[InstantResponse]

    @classmethod
    def from_domain(cls, instants: list[Instant]) -> "ListInstantsResponse":
        return cls(
            total=len(instants),
            items=[InstantResponse.from_domain(i) for i in instants],
        )


class InstantDetailResponse(BaseModel):
    instant: InstantResponse
    creator_username: str | None
    can_view_media: bool
    media_url: str | None = None

    @classmethod
    def from_domain(cls, detail: InstantDetail) -> "InstantDetailResponse":
        media_url = (
            f"/api/v1/instants/{detail.instant.id}/media"
            if detail.can_view_media
            else None
        )
        return cls(
            instant=InstantResponse.from_domain(detail.instant),
            creator_username=detail.creator_username,
            can_view_media=detail.can_view_media,
            media_url=media_url,
        )


class PurchaseResponse(BaseModel):
    instant_id: str
    price: int
    remaining_credits: int
    total_spent_on_creator: int
