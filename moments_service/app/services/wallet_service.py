from __future__ import annotations

import logging

from fastapi import Depends

from common.types.timestamp import now_millis

from ..dependencies import get_store
from ..exceptions import NotFoundError, PersistenceError
from ..store import Store
from .query_service import CHECK_IN_COOLDOWN_MS


logger = logging.getLogger(__name__)

CHECK_IN_CREDITS = 3


class WalletService:
    """일일 체크인 크레딧 지급."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def check_in(self, user_id: str, now: int | None = None) -> int:
        """체크인. 지급된 양 반환 (마지막 체크인 후 24시간이 안 됐으면 0, 저장도 하지 않음)."""
        if now is None:
            now = now_millis()

        with self._store.lock:
            user = self._store.find_user_by_id(user_id)
            if user is None:
                raise NotFoundError(f"user not found (id={user_id})")

            last = user.last_check_in
            if last is not None and now - last < CHECK_IN_COOLDOWN_MS:
                return 0

            previous_credits = user.credits
            user.credits += CHECK_IN_CREDITS
            user.last_check_in = now
            try:
                self._store.persist()
            except PersistenceError:
                user.credits = previous_credits
                user.last_check_in = last
                raise

        logger.info(
            "check-in granted",
            extra={"user_id": user_id, "credits": user.credits},
        )
        return CHECK_IN_CREDITS


def get_wallet_service(store: Store = Depends(get_store)) -> WalletService:
    """FastAPI DI용 WalletService 팩토리."""

    return WalletService(store)
