from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from conftest import T0, FakeSnapshotRepository, build_instant, build_user
from pymongo.errors import PyMongoError

from moments_service.app.exceptions import PersistenceError, StoreCorruptedError
from moments_service.app.models.snapshot import StoreSnapshot
from moments_service.app.repositories.json_snapshot_repository import (
    JsonFileSnapshotRepository,
)
from moments_service.app.repositories.mongo_snapshot_repository import (
    SNAPSHOT_DOCUMENT_ID,
    MongoSnapshotRepository,
)
from moments_service.app.store import Store


# 기존 data.json 과 같은 모양의 레코드
LEGACY_DATA: dict[str, Any] = {
    "users": [
        {
            "id": "u-a",
            "username": "alice",
            "password": "plain",
            "credits": 20,
            "isPremium": False,
            "instantsCreated": ["i-1"],
            "instantsPurchased": [],
            "badges": [],
        },
        {
            "id": "u-b",
            "username": "bob",
            "password": "plain",
            "credits": 10,
            "isPremium": False,
            "lastCheckIn": T0,
            "instantsCreated": [],
            "instantsPurchased": ["i-1"],
            "badges": [{"instantId": "i-1", "exclusive": True}],
        },
    ],
    "instants": [
        {
            "id": "i-1",
            "title": "Sunset",
            "filename": "abc.jpg",
            "creatorId": "u-a",
            "buyers": ["u-b"],
            "isExclusive": True,
            "price": 50,
            "createdAt": T0,
            "expiresAt": T0 + 86400000,
            "isExpired": False,
        }
    ],
    "fanRanks": [{"creatorId": "u-a", "fanId": "u-b", "totalCredits": 50}],
}


class FakeCollection:
    def __init__(self) -> None:
        self.docs: dict[str, dict] = {}
        self.fail = False

    def find_one(self, query: dict) -> dict | None:
        if self.fail:
            raise PyMongoError("connection lost")
        doc = self.docs.get(query["_id"])
        return dict(doc) if doc is not None else None

    def replace_one(self, query: dict, doc: dict, upsert: bool = False) -> None:
        if self.fail:
            raise PyMongoError("connection lost")
        assert upsert is True
        self.docs[query["_id"]] = dict(doc)


class FakeDatabase(dict):
    def __missing__(self, name: str) -> FakeCollection:
        col = FakeCollection()
        self[name] = col
        return col


def test_store_lookups_after_load() -> None:
    store = Store(FakeSnapshotRepository(StoreSnapshot.model_validate(LEGACY_DATA)))
    store.load()

    assert store.find_user_by_id("u-a").username == "alice"
    assert store.find_user_by_username("bob").id == "u-b"
    assert store.find_user_by_username("Bob") is None
    assert store.find_instant_by_id("i-1").creator_id == "u-a"
    assert store.find_fan_rank("u-a", "u-b").total_credits == 50
    assert store.find_instant_by_id("nope") is None


def test_store_starts_empty_without_saved_data() -> None:
    store = Store(FakeSnapshotRepository())
    store.load()

    assert store.snapshot() == StoreSnapshot()


def test_upsert_fan_rank_is_keyed_by_pair() -> None:
    store = Store(FakeSnapshotRepository())
    store.load()

    first = store.upsert_fan_rank("c", "f")
    again = store.upsert_fan_rank("c", "f")
    other = store.upsert_fan_rank("f", "c")

    assert first is again
    assert other is not first
    assert first.total_credits == 0


def test_json_repository_round_trips_original_field_names(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(LEGACY_DATA), encoding="utf-8")
    repo = JsonFileSnapshotRepository(path)

    store = Store(repo)
    store.load()
    store.persist()

    assert json.loads(path.read_text(encoding="utf-8")) == LEGACY_DATA


def test_json_repository_writes_new_entities(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "data.json"
    store = Store(JsonFileSnapshotRepository(path))
    store.load()
    store.add_user(build_user("u-1"))
    store.add_instant(build_instant("i-1", "u-1"))

    store.persist()

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert set(saved) == {"users", "instants", "fanRanks"}
    assert "lastCheckIn" not in saved["users"][0]
    assert saved["instants"][0]["creatorId"] == "u-1"


def test_json_repository_missing_file_is_empty(tmp_path: Path) -> None:
    assert JsonFileSnapshotRepository(tmp_path / "data.json").load() is None


@pytest.mark.parametrize(
    "content",
    ["{not json", json.dumps({"users": [{"id": "x"}]})],
)
def test_json_repository_fails_fast_on_corruption(tmp_path: Path, content: str) -> None:
    path = tmp_path / "data.json"
    path.write_text(content, encoding="utf-8")
    store = Store(JsonFileSnapshotRepository(path))

    with pytest.raises(StoreCorruptedError):
        store.load()


def test_json_repository_rejects_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_bytes(b"\xff\xfe\x00broken")

    with pytest.raises(StoreCorruptedError):
        JsonFileSnapshotRepository(path).load()


def test_json_repository_surfaces_write_failure(tmp_path: Path) -> None:
    # 디렉토리 자리에 파일을 쓰려고 하면 OSError 가 난다.
    path = tmp_path / "data.json"
    path.mkdir()
    store = Store(JsonFileSnapshotRepository(path))

    with pytest.raises(PersistenceError):
        store.persist()


def test_mongo_repository_saves_single_document() -> None:
    db = FakeDatabase()
    repo = MongoSnapshotRepository(db, collection_name="snapshots")  # type: ignore[arg-type]

    assert repo.load() is None

    repo.save(StoreSnapshot.model_validate(LEGACY_DATA))

    doc = db["snapshots"].docs[SNAPSHOT_DOCUMENT_ID]
    assert doc["fanRanks"] == LEGACY_DATA["fanRanks"]
    loaded = repo.load()
    assert loaded is not None
    assert loaded.to_record() == LEGACY_DATA


def test_mongo_repository_errors() -> None:
    db = FakeDatabase()
    repo = MongoSnapshotRepository(db, collection_name="snapshots")  # type: ignore[arg-type]
    db["snapshots"].docs[SNAPSHOT_DOCUMENT_ID] = {
        "_id": SNAPSHOT_DOCUMENT_ID,
        "users": "broken",
    }

    with pytest.raises(StoreCorruptedError):
        repo.load()

    db["snapshots"].fail = True
    with pytest.raises(PersistenceError):
        repo.save(StoreSnapshot())
