"""구매 서비스.

buyer 의 크레딧으로 instant 를 잠금 해제한다. 검증은 정해진 순서대로 하며 첫 실패가 그대로
예외가 된다. 검증이 모두 끝나기 전에는 어떤 상태도 바꾸지 않고, 저장에 실패하면 바꾼 것을
되돌린다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends

from common.types.timestamp import now_millis

from ..dependencies import get_store
from ..exceptions import (
    AlreadyOwnedError,
    ExclusiveSoldError,
    ExpiredError,
    InsufficientCreditsError,
    MomentsServiceError,
    NotFoundError,
    PersistenceError,
    SelfPurchaseError,
)
from ..models.fan_rank import FanRank
from ..models.instant import Instant
from ..models.user import Badge, User
from ..store import Store
from .fan_rank_service import FanRankService
from .lifecycle_service import LifecycleService


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PurchaseResult:
    buyer: User
    instant: Instant
    fan_rank: FanRank

    @property
    def remaining_credits(self) -> int:
        return self.buyer.credits


class PurchaseService:
    def __init__(
        self,
        store: Store,
        lifecycle: LifecycleService,
        fan_ranks: FanRankService,
    ) -> None:
        self._store = store
        self._lifecycle = lifecycle
        self._fan_ranks = fan_ranks

    def purchase(
        self, buyer_id: str, instant_id: str, now: int | None = None
    ) -> PurchaseResult:
        if now is None:
            now = now_millis()

        with self._store.lock:
            self._lifecycle.refresh_expirations(now)

            buyer = self._store.find_user_by_id(buyer_id)
            if buyer is None:
                raise NotFoundError(f"user not found (id={buyer_id})")
            instant = self._store.find_instant_by_id(instant_id)
            if instant is None:
                raise NotFoundError(f"instant not found (id={instant_id})")

            try:
                self._validate(buyer, instant)
            except MomentsServiceError as exc:
                logger.info(
                    "purchase rejected",
                    extra={
                        "user_id": buyer.id,
                        "instant_id": instant.id,
                        "reason": exc.code,
                    },
                )
                raise

            previous_rank = self._store.find_fan_rank(instant.creator_id, buyer.id)
            previous_total = (
                previous_rank.total_credits if previous_rank is not None else None
            )
            previous_credits = buyer.credits

            # 금액 검증이 있는 누적부터 한다. 여기서 실패하면 아무것도 바뀌지 않는다.
            rank = self._fan_ranks.record_spend(
                instant.creator_id, buyer.id, instant.price
            )
            buyer.credits -= instant.price
            buyer.instants_purchased.append(instant.id)
            buyer.badges.append(
                Badge(instant_id=instant.id, exclusive=instant.is_exclusive)
            )
            instant.buyers.append(buyer.id)

            try:
                self._store.persist()
            except PersistenceError:
                buyer.credits = previous_credits
                buyer.instants_purchased.pop()
                buyer.badges.pop()
                instant.buyers.pop()
                if previous_total is None:
                    self._store.remove_fan_rank(instant.creator_id, buyer.id)
                else:
                    rank.total_credits = previous_total
                logger.warning(
                    "purchase rolled back",
                    extra={"user_id": buyer.id, "instant_id": instant.id},
                )
                raise

        logger.info(
            "instant purchased",
            extra={
                "user_id": buyer.id,
                "instant_id": instant.id,
                "creator_id": instant.creator_id,
                "price": instant.price,
                "credits": buyer.credits,
            },
        )
        return PurchaseResult(buyer=buyer, instant=instant, fan_rank=rank)

    @staticmethod
    def _validate(buyer: User, instant: Instant) -> None:
        if instant.is_expired:
            raise ExpiredError("instant has expired")
        if instant.is_owned_by(buyer.id):
            raise SelfPurchaseError("cannot purchase your own instant")
        if instant.is_exclusive and instant.buyers:
            raise ExclusiveSoldError("exclusive instant already sold")
        if buyer.id in instant.buyers:
            raise AlreadyOwnedError("instant already purchased")
        if buyer.credits < instant.price:
            raise InsufficientCreditsError(
                f"not enough credits (have {buyer.credits}, need {instant.price})"
            )


def get_purchase_service(store: Store = Depends(get_store)) -> PurchaseService:
    """FastAPI DI용 PurchaseService 팩토리."""

    return PurchaseService(
        store=store,
        lifecycle=LifecycleService(store),
        fan_ranks=FanRankService(store),
    )
