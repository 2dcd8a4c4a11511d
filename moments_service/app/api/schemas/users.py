from __future__ import annotations

from pydantic import BaseModel

from common.types.timestamp import UtcDateTime, millis_to_datetime

from ...models.user import Badge, User
from ...services.query_service import ProfileView, WalletView
from .instants import InstantResponse


class CredentialsRequest(BaseModel):
    username: str = ""
    password: str = ""


class BadgeResponse(BaseModel):
    instant_id: str
    exclusive: bool

    @classmethod
    def from_domain(cls, badge: Badge) -> "BadgeResponse":
        return cls(instant_id=badge.instant_id, exclusive=badge.exclusive)


class UserResponse(BaseModel):
    id: str
    username: str
    credits: int
    is_premium: bool
    instants_created: list[str]
    instants_purchased: list[str]
    badges: list[BadgeResponse]

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            credits=user.credits,
            is_premium=user.is_premium,
            instants_created=list(user.instants_created),
            instants_purchased=list(user.instants_purchased),
            badges=[BadgeResponse.from_domain(b) for b in user.badges],
        )


class TopFanResponse(BaseModel):
    fan_username: str
    credits: int


class ProfileResponse(BaseModel):
    username: str
    created_instants: list[InstantResponse]
    top_fans: list[TopFanResponse]

    @classmethod
    def from_domain(cls, view: ProfileView) -> "ProfileResponse":
        return cls(
            username=view.profile_user.username,
            created_instants=[
                InstantResponse.from_domain(i) for i in view.created_instants
            ],
            top_fans=[
                TopFanResponse(fan_username=f.fan_username, credits=f.credits)
                for f in view.top_fans
            ],
        )


class WalletResponse(BaseModel):
    credits: int
    badges: list[BadgeResponse]
    last_check_in: UtcDateTime | None = None
    next_check_in_at: UtcDateTime | None = None
    can_check_in: bool

    @classmethod
    def from_domain(cls, view: WalletView) -> "WalletResponse":
        user = view.user
        return cls(
            credits=user.credits,
            badges=[BadgeResponse.from_domain(b) for b in user.badges],
            last_check_in=(
                millis_to_datetime(user.last_check_in)
                if user.last_check_in is not None
                else None
            ),
            next_check_in_at=(
                millis_to_datetime(view.next_check_in_at)
                if view.next_check_in_at is not None
                else None
            ),
            can_check_in=view.can_check_in,
        )


class CheckInResponse(BaseModel):
    granted: int
    already_checked_in: bool
    credits: int
