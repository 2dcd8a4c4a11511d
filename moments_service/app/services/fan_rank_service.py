from __future__ import annotations

from ..exceptions import InvalidInputError
from ..models.fan_rank import TOP_FANS_LIMIT, FanRank
from ..store import Store


class FanRankService:
    """creator 별 팬 리더보드 (누적 구매 크레딧 기준)."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def record_spend(self, creator_id: str, fan_id: str, amount: int) -> FanRank:
        """(creator, fan) 행을 upsert 하고 amount 만큼 누적한다. 감소는 허용하지 않는다."""
        if amount <= 0:
            raise InvalidInputError(f"spend amount must be positive, got {amount}")

        with self._store.lock:
            rank = self._store.upsert_fan_rank(creator_id, fan_id)
            rank.total_credits += amount
            return rank

    def top_fans(self, creator_id: str, limit: int = TOP_FANS_LIMIT) -> list[FanRank]:
        """totalCredits 내림차순. 동점이면 먼저 생성된 행이 앞선다 (stable sort)."""
        ranks = [r for r in self._store.iter_fan_ranks() if r.creator_id == creator_id]
        ranks.sort(key=lambda r: r.total_credits, reverse=True)
        return ranks[: max(limit, 0)]
