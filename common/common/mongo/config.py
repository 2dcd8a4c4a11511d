from __future__ import annotations

import os


MONGO_URI_ENV = "MONGO_URI"
MONGO_DB_NAME_ENV = "MONGO_DB_NAME"


def get_mongo_uri() -> str:
    """MongoDB 연결에 사용할 URI를 반환한다.

    mongo 저장소 백엔드를 선택한 경우에만 호출되며, 설정되지 않았다면
    애플리케이션이 기동 시점에 즉시 실패하도록 RuntimeError를 발생시킨다.
    """

    value = os.getenv(MONGO_URI_ENV, "").strip()
    if not value:
        raise RuntimeError(
            f"{MONGO_URI_ENV} environment variable is required for the mongo storage backend",
        )
    return value


def get_mongo_db_name() -> str | None:
    """MONGO_DB_NAME 이 있으면 그 값을, 없으면 None(URI 기본 DB 사용)을 반환한다."""

    value = os.getenv(MONGO_DB_NAME_ENV, "").strip()
    return value or None
