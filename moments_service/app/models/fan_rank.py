from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


TOP_FANS_LIMIT = 10


class FanRank(BaseModel):
    """(creator, fan) 쌍별 누적 구매 크레딧.

    첫 구매 시 생성되며 이후 증가만 한다 (감소/삭제 없음).
    """

    model_config = ConfigDict(populate_by_name=True)

    creator_id: str = Field(alias="creatorId")
    fan_id: str = Field(alias="fanId")
    total_credits: int = Field(default=0, ge=0, alias="totalCredits")

    @property
    def key(self) -> tuple[str, str]:
        return self.creator_id, self.fan_id


class TopFan(BaseModel):
    """프로필 화면용 top fan 프로젝션."""

    fan_id: str
    fan_username: str
    credits: int
