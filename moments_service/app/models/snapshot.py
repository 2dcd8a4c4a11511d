"""영속 스냅샷 모델.

하나의 문서에 users / instants / fanRanks 세 컬렉션을 통째로 담는다.
변경이 있을 때마다 스냅샷 전체를 다시 쓴다.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .fan_rank import FanRank
from .instant import Instant
from .user import User


class StoreSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: list[User] = Field(default_factory=list, alias="users")
    instants: list[Instant] = Field(default_factory=list, alias="instants")
    fan_ranks: list[FanRank] = Field(default_factory=list, alias="fanRanks")

    def to_record(self) -> dict:
        """저장용 dict. 기존 데이터와 필드명이 일치하도록 alias 로 직렬화하고,
        설정되지 않은 값(lastCheckIn 등)은 생략한다."""
        return self.model_dump(by_alias=True, exclude_none=True)
