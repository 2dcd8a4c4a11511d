from __future__ import annotations

import logging
import threading
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database

from .config import get_mongo_db_name, get_mongo_uri


logger = logging.getLogger(__name__)


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 에서 URI 를 읽어온다.
    - ping 으로 연결을 검증한다.
    - MONGO_DB_NAME 이 없고 URI 에도 기본 데이터베이스가 없으면 에러를 발생시킨다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        client: MongoClient = MongoClient(get_mongo_uri())

        try:
            client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc

        db_name = get_mongo_db_name()
        try:
            db = client[db_name] if db_name else client.get_default_database()
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        _client = client
        _db = db
        logger.info("MongoDB connected (db=%s)", db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다."""

    if _db is None:
        get_client()
    assert _db is not None  # get_client 가 실패했다면 예외가 이미 발생했어야 한다.
    return _db


def close_client() -> None:
    """종료 훅에서 호출한다. 연결이 없으면 아무 것도 하지 않는다."""

    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None
