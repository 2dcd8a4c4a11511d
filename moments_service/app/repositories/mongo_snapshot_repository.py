"""MongoDB 스냅샷 저장소.

JSON 파일과 같은 스냅샷을 컬렉션 내 단일 도큐먼트(_id 고정)로 보관한다.
"""

from __future__ import annotations

from pydantic import ValidationError
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .interfaces import SnapshotRepositoryInterface
from ..exceptions import PersistenceError, StoreCorruptedError
from ..models.snapshot import StoreSnapshot


DEFAULT_COLLECTION_NAME = "moments_snapshots"
SNAPSHOT_DOCUMENT_ID = "store"


class MongoSnapshotRepository(SnapshotRepositoryInterface):
    """moments_snapshots 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(
        self,
        database: Database,
        collection_name: str = DEFAULT_COLLECTION_NAME,
    ) -> None:
        self._db = database
        self._col = database[collection_name]

    def load(self) -> StoreSnapshot | None:
        try:
            doc = self._col.find_one({"_id": SNAPSHOT_DOCUMENT_ID})
        except PyMongoError as exc:
            raise PersistenceError(f"failed to read snapshot: {exc}") from exc

        if not doc:
            return None

        doc.pop("_id", None)
        try:
            return StoreSnapshot.model_validate(doc)
        except ValidationError as exc:
            raise StoreCorruptedError(
                f"invalid snapshot document: {exc.error_count()} error(s)"
            ) from exc

    def save(self, snapshot: StoreSnapshot) -> None:
        payload = {"_id": SNAPSHOT_DOCUMENT_ID, **snapshot.to_record()}
        try:
            self._col.replace_one({"_id": SNAPSHOT_DOCUMENT_ID}, payload, upsert=True)
        except PyMongoError as exc:
            raise PersistenceError(f"failed to write snapshot: {exc}") from exc
