from __future__ import annotations

from dataclasses import dataclass

import pytest

from moments_service.app.exceptions import PersistenceError
from moments_service.app.models.instant import INSTANT_TTL_MS, Instant, price_for
from moments_service.app.models.snapshot import StoreSnapshot
from moments_service.app.models.user import User
from moments_service.app.services.fan_rank_service import FanRankService
from moments_service.app.services.lifecycle_service import LifecycleService
from moments_service.app.services.purchase_service import PurchaseService
from moments_service.app.services.query_service import QueryService
from moments_service.app.store import Store


T0 = 1_700_000_000_000


class FakeSnapshotRepository:
    """메모리에만 스냅샷을 기록하는 가짜 저장소."""

    def __init__(self, initial: StoreSnapshot | None = None) -> None:
        self.initial = initial
        self.saved: list[StoreSnapshot] = []
        self.fail_on_save = False

    def load(self) -> StoreSnapshot | None:
        return self.initial

    def save(self, snapshot: StoreSnapshot) -> None:
        if self.fail_on_save:
            raise PersistenceError("disk full")
        self.saved.append(snapshot.model_copy(deep=True))


def build_user(user_id: str, credits: int = 20) -> User:
    return User(id=user_id, username=user_id, password="pw", credits=credits)


def build_instant(
    instant_id: str,
    creator_id: str,
    *,
    exclusive: bool = False,
    created_at: int = T0,
) -> Instant:
    return Instant(
        id=instant_id,
        title=f"title-{instant_id}",
        filename=f"{instant_id}.jpg",
        creator_id=creator_id,
        is_exclusive=exclusive,
        price=price_for(exclusive),
        created_at=created_at,
        expires_at=created_at + INSTANT_TTL_MS,
    )


@dataclass
class ServiceFixture:
    store: Store
    repo: FakeSnapshotRepository
    lifecycle: LifecycleService
    fan_ranks: FanRankService
    purchases: PurchaseService
    queries: QueryService

    def add_user(self, user_id: str, credits: int = 20) -> User:
        return self.store.add_user(build_user(user_id, credits))

    def add_instant(
        self,
        instant_id: str,
        creator_id: str,
        *,
        exclusive: bool = False,
        created_at: int = T0,
    ) -> Instant:
        instant = self.store.add_instant(
            build_instant(
                instant_id, creator_id, exclusive=exclusive, created_at=created_at
            )
        )
        creator = self.store.find_user_by_id(creator_id)
        if creator is not None:
            creator.instants_created.append(instant.id)
        return instant


@pytest.fixture
def fx() -> ServiceFixture:
    repo = FakeSnapshotRepository()
    store = Store(repo)
    store.load()
    lifecycle = LifecycleService(store)
    fan_ranks = FanRankService(store)
    return ServiceFixture(
        store=store,
        repo=repo,
        lifecycle=lifecycle,
        fan_ranks=fan_ranks,
        purchases=PurchaseService(store, lifecycle, fan_ranks),
        queries=QueryService(store, lifecycle, fan_ranks),
    )
