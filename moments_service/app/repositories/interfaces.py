from __future__ import annotations

from typing import Protocol

from ..models.snapshot import StoreSnapshot


class SnapshotRepositoryInterface(Protocol):
    """스토어 스냅샷 저장소가 따라야 할 최소한의 계약.

    Store 는 이 인터페이스에만 의존하고, 파일/Mongo 같은 구체 구현은 몰라도 된다.
    - load: 저장된 스냅샷이 없으면 None. 읽을 수 없거나 형식이 깨졌으면 예외를 던진다.
    - save: 스냅샷 전체를 덮어쓴다. 실패 시 PersistenceError 를 던진다.
    """

    def load(self) -> StoreSnapshot | None:  # pragma: no cover - Protocol
        ...

    def save(self, snapshot: StoreSnapshot) -> None:  # pragma: no cover - Protocol
        ...
