"""조회 전용 프로젝션 (월, 프로필, 상세, 지갑).

만료 플래그 갱신 외에는 상태를 바꾸지 않는다.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends

from common.types.timestamp import MILLIS_PER_DAY, now_millis

from ..dependencies import get_store
from ..exceptions import NotFoundError
from ..models.fan_rank import TOP_FANS_LIMIT, TopFan
from ..models.instant import Instant
from ..models.user import User
from ..store import Store
from .fan_rank_service import FanRankService
from .lifecycle_service import LifecycleService


CHECK_IN_COOLDOWN_MS = MILLIS_PER_DAY


@dataclass(slots=True)
class ProfileView:
    profile_user: User
    created_instants: list[Instant]
    top_fans: list[TopFan]


@dataclass(slots=True)
class InstantDetail:
    instant: Instant
    creator_username: str | None
    can_view_media: bool


@dataclass(slots=True)
class WalletView:
    user: User
    next_check_in_at: int | None  # None 이면 지금 바로 체크인 가능

    @property
    def can_check_in(self) -> bool:
        return self.next_check_in_at is None


class QueryService:
    def __init__(
        self,
        store: Store,
        lifecycle: LifecycleService,
        fan_ranks: FanRankService,
    ) -> None:
        self._store = store
        self._lifecycle = lifecycle
        self._fan_ranks = fan_ranks

    def get_user(self, user_id: str) -> User:
        user = self._store.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError(f"user not found (id={user_id})")
        return user

    def active_wall(self, now: int | None = None) -> list[Instant]:
        """만료되지 않은 instant 를 만료 임박 순으로."""
        self._lifecycle.refresh_expirations(now)
        active = [i for i in self._store.iter_instants() if not i.is_expired]
        active.sort(key=lambda i: i.expires_at)
        return active

    def profile_view(self, username: str, now: int | None = None) -> ProfileView:
        profile_user = self._store.find_user_by_username(username)
        if profile_user is None:
            raise NotFoundError(f"user not found (username={username})")

        self._lifecycle.refresh_expirations(now)
        created = [
            i for i in self._store.iter_instants() if i.creator_id == profile_user.id
        ]

        top_fans: list[TopFan] = []
        for rank in self._fan_ranks.top_fans(profile_user.id, TOP_FANS_LIMIT):
            fan = self._store.find_user_by_id(rank.fan_id)
            top_fans.append(
                TopFan(
                    fan_id=rank.fan_id,
                    fan_username=fan.username if fan else "",
                    credits=rank.total_credits,
                )
            )

        return ProfileView(
            profile_user=profile_user,
            created_instants=created,
            top_fans=top_fans,
        )

    @staticmethod
    def can_view_media(user: User, instant: Instant) -> bool:
        """creator, 구매자, 또는 아직 만료되지 않은 instant 면 누구나 볼 수 있다.

        만료 전에는 구매 여부와 관계없이 미리보기를 허용한다. 만료 후에는 creator 와 구매자만.
        """
        return (
            instant.is_owned_by(user.id)
            or user.id in instant.buyers
            or not instant.is_expired
        )

    def instant_detail(
        self, user_id: str, instant_id: str, now: int | None = None
    ) -> InstantDetail:
        self._lifecycle.refresh_expirations(now)
        user = self.get_user(user_id)
        instant = self._store.find_instant_by_id(instant_id)
        if instant is None:
            raise NotFoundError(f"instant not found (id={instant_id})")

        creator = self._store.find_user_by_id(instant.creator_id)
        return InstantDetail(
            instant=instant,
            creator_username=creator.username if creator else None,
            can_view_media=self.can_view_media(user, instant),
        )

    def created_instants(self, user_id: str) -> list[Instant]:
        user = self.get_user(user_id)
        return self._resolve_instants(user.instants_created)

    def purchased_instants(self, user_id: str) -> list[Instant]:
        user = self.get_user(user_id)
        return self._resolve_instants(user.instants_purchased)

    def wallet(self, user_id: str, now: int | None = None) -> WalletView:
        if now is None:
            now = now_millis()
        user = self.get_user(user_id)

        next_check_in_at: int | None = None
        if user.last_check_in is not None:
            available_at = user.last_check_in + CHECK_IN_COOLDOWN_MS
            if available_at > now:
                next_check_in_at = available_at
        return WalletView(user=user, next_check_in_at=next_check_in_at)

    def _resolve_instants(self, instant_ids: list[str]) -> list[Instant]:
        self._lifecycle.refresh_expirations()
        instants: list[Instant] = []
        for instant_id in instant_ids:
            instant = self._store.find_instant_by_id(instant_id)
            if instant is not None:
                instants.append(instant)
        return instants


def get_query_service(store: Store = Depends(get_store)) -> QueryService:
    """FastAPI DI용 QueryService 팩토리."""

    return QueryService(
        store=store,
        lifecycle=LifecycleService(store),
        fan_ranks=FanRankService(store),
    )
