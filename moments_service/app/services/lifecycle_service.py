from __future__ import annotations

import logging

from common.types.timestamp import now_millis

from ..store import Store


logger = logging.getLogger(__name__)


class LifecycleService:
    """Instant 만료 상태 전이 (false -> true, 단방향).

    만료 여부를 읽거나 그에 따라 쓰는 모든 작업(월 조회, 상세 조회, 구매) 전에 호출해야 한다.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def refresh_expirations(self, now: int | None = None) -> list[str]:
        """expiresAt <= now 인 활성 instant 의 isExpired 를 True 로 바꾼다.

        새로 만료된 instant id 목록을 반환한다. 같은 now 로 다시 호출하면 빈 목록이다.
        만료 플래그는 시간에서 유도되는 값이므로 여기서 persist 하지 않고
        다음 변경 작업의 스냅샷에 함께 실린다.
        """
        if now is None:
            now = now_millis()

        expired: list[str] = []
        with self._store.lock:
            for instant in self._store.iter_instants():
                if instant.is_due(now):
                    instant.is_expired = True
                    expired.append(instant.id)

        if expired:
            logger.info("instants expired", extra={"count": len(expired)})
        return expired
