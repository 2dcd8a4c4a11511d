from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


INITIAL_CREDITS = 20


class Badge(BaseModel):
    """구매 시 부여되는 뱃지. 어떤 instant 를 (독점 여부와 함께) 샀는지 기록한다."""

    model_config = ConfigDict(populate_by_name=True)

    instant_id: str = Field(alias="instantId")
    exclusive: bool = Field(alias="exclusive")


class User(BaseModel):
    """유저 도메인 모델.

    - 저장소의 users 레코드와 1:1 로 매핑된다. alias 는 기존 저장 데이터의 필드명과 같아야 한다.
    - password 는 passlib 해시 문자열이지만, 이전 데이터의 평문 값도 그대로 읽을 수 있다.
    - credits 는 음수가 될 수 없다. 판매 대금은 creator 의 credits 로 들어가지 않는다.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="id")
    username: str = Field(alias="username")
    password: str = Field(alias="password")
    credits: int = Field(default=INITIAL_CREDITS, ge=0, alias="credits")
    is_premium: bool = Field(default=False, alias="isPremium")
    last_check_in: int | None = Field(default=None, alias="lastCheckIn")
    instants_created: list[str] = Field(default_factory=list, alias="instantsCreated")
    instants_purchased: list[str] = Field(
        default_factory=list, alias="instantsPurchased"
    )
    badges: list[Badge] = Field(default_factory=list, alias="badges")
