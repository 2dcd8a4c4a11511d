"""인메모리 스토어.

기동 시 스냅샷 저장소에서 전체 상태를 읽어 타입이 있는 컬렉션으로 보관하고,
변경 작업이 성공할 때마다 persist() 로 스냅샷 전체를 다시 쓴다. 저장에 실패한 작업은
호출한 서비스가 remove_* 와 필드 복원으로 되돌린다.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from .exceptions import PersistenceError
from .models.fan_rank import FanRank
from .models.instant import Instant
from .models.snapshot import StoreSnapshot
from .models.user import User
from .repositories.interfaces import SnapshotRepositoryInterface


logger = logging.getLogger(__name__)


class Store:
    def __init__(self, repository: SnapshotRepositoryInterface) -> None:
        self._repository = repository
        # 변경 작업(read-check-write-persist)을 직렬화하는 단일 임계 구역
        self.lock = threading.RLock()
        self._users: dict[str, User] = {}
        self._usernames: dict[str, str] = {}
        self._instants: dict[str, Instant] = {}
        self._fan_ranks: dict[tuple[str, str], FanRank] = {}

    # -------- lifecycle --------

    def load(self) -> None:
        """저장소에서 스냅샷을 읽는다. 저장된 데이터가 없으면 빈 스토어로 시작한다.

        데이터가 깨져 있으면 StoreCorruptedError 가 그대로 전파된다.
        """
        snapshot = self._repository.load()
        with self.lock:
            self._reset(snapshot or StoreSnapshot())
        logger.info(
            "store loaded",
            extra={"count": len(self._users) + len(self._instants)},
        )

    def persist(self) -> None:
        with self.lock:
            snapshot = self.snapshot()
            try:
                self._repository.save(snapshot)
            except PersistenceError:
                logger.error("failed to persist store snapshot", exc_info=True)
                raise

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            users=list(self._users.values()),
            instants=list(self._instants.values()),
            fan_ranks=list(self._fan_ranks.values()),
        )

    def _reset(self, snapshot: StoreSnapshot) -> None:
        self._users = {u.id: u for u in snapshot.users}
        self._usernames = {u.username: u.id for u in snapshot.users}
        self._instants = {i.id: i for i in snapshot.instants}
        self._fan_ranks = {r.key: r for r in snapshot.fan_ranks}

    # -------- users --------

    def find_user_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_user_by_username(self, username: str) -> User | None:
        user_id = self._usernames.get(username)
        if user_id is None:
            return None
        return self._users.get(user_id)

    def add_user(self, user: User) -> User:
        self._users[user.id] = user
        self._usernames[user.username] = user.id
        return user

    def remove_user(self, user_id: str) -> None:
        user = self._users.pop(user_id, None)
        if user is not None:
            self._usernames.pop(user.username, None)

    # -------- instants --------

    def find_instant_by_id(self, instant_id: str) -> Instant | None:
        return self._instants.get(instant_id)

    def add_instant(self, instant: Instant) -> Instant:
        self._instants[instant.id] = instant
        return instant

    def remove_instant(self, instant_id: str) -> None:
        self._instants.pop(instant_id, None)

    def iter_instants(self) -> Iterator[Instant]:
        """생성 순서대로 순회한다."""
        return iter(list(self._instants.values()))

    # -------- fan ranks --------

    def find_fan_rank(self, creator_id: str, fan_id: str) -> FanRank | None:
        return self._fan_ranks.get((creator_id, fan_id))

    def upsert_fan_rank(self, creator_id: str, fan_id: str) -> FanRank:
        """(creator, fan) 키로 찾고, 없으면 totalCredits=0 으로 만들어 등록한다."""
        key = (creator_id, fan_id)
        rank = self._fan_ranks.get(key)
        if rank is None:
            rank = FanRank(creator_id=creator_id, fan_id=fan_id, total_credits=0)
            self._fan_ranks[key] = rank
        return rank

    def remove_fan_rank(self, creator_id: str, fan_id: str) -> None:
        self._fan_ranks.pop((creator_id, fan_id), None)

    def iter_fan_ranks(self) -> Iterator[FanRank]:
        """최초 생성 순서대로 순회한다."""
        return iter(list(self._fan_ranks.values()))
