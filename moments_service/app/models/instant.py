"""Instant 도메인 모델.

24시간 동안만 활성 상태인 미디어 게시물. 만료 후에도 삭제하지 않고 프로필/뱃지 이력용으로 남긴다.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from common.types.timestamp import MILLIS_PER_DAY


EXCLUSIVE_PRICE = 50
SHARED_PRICE = 5
INSTANT_TTL_MS = MILLIS_PER_DAY


def price_for(is_exclusive: bool) -> int:
    """가격은 유저가 정하지 않는다. 독점 여부로만 결정된다."""
    return EXCLUSIVE_PRICE if is_exclusive else SHARED_PRICE


class Instant(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="id")
    title: str = Field(min_length=1, alias="title")
    filename: str = Field(alias="filename")
    creator_id: str = Field(alias="creatorId")
    buyers: list[str] = Field(default_factory=list, alias="buyers")
    is_exclusive: bool = Field(default=False, alias="isExclusive")
    price: int = Field(alias="price")
    created_at: int = Field(alias="createdAt")  # epoch ms
    expires_at: int = Field(alias="expiresAt")  # epoch ms
    is_expired: bool = Field(default=False, alias="isExpired")

    def is_due(self, now: int) -> bool:
        """아직 만료 플래그가 서지 않았지만 만료 시각이 지난 경우 True."""
        return not self.is_expired and self.expires_at <= now

    def is_owned_by(self, user_id: str) -> bool:
        return self.creator_id == user_id
