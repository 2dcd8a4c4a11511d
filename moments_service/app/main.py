from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware

from .api.health import router as health_router
from .api.v1 import api_router
from .config import AppConfig, load_config
from .exceptions import MomentsServiceError
from .repositories.interfaces import SnapshotRepositoryInterface
from .repositories.json_snapshot_repository import JsonFileSnapshotRepository
from .store import Store


logger = logging.getLogger(__name__)


def build_snapshot_repository(config: AppConfig) -> SnapshotRepositoryInterface:
    if config.storage.backend == "mongo":
        # mongo 백엔드를 고른 경우에만 연결을 연다.
        from common.mongo.client import get_database

        from .repositories.mongo_snapshot_repository import MongoSnapshotRepository

        return MongoSnapshotRepository(
            get_database(), collection_name=config.storage.mongo_collection
        )
    return JsonFileSnapshotRepository(config.storage.data_path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: AppConfig = app.state.config
    store = Store(build_snapshot_repository(config))
    # 깨진 데이터로 빈 상태를 띄우지 않는다. StoreCorruptedError 는 기동 실패로 이어진다.
    store.load()
    app.state.store = store
    try:
        yield
    finally:
        store.persist()
        if config.storage.backend == "mongo":
            from common.mongo.client import close_client

            close_client()


async def handle_service_error(
    request: Request, exc: MomentsServiceError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("service error: %s", exc.message, extra={"reason": exc.code})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"code": exc.code, "message": exc.message}},
    )


def create_app(config: AppConfig | None = None) -> FastAPI:
    setup_logger()
    if config is None:
        config = load_config()

    app = FastAPI(
        title="Hidden Moments Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config

    # 나중에 추가한 미들웨어가 바깥을 감싼다. 세션이 trace 로그보다 먼저 풀려야 user_id 가 남는다.
    app.add_middleware(RequestTraceMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session.secret,
        session_cookie=config.session.cookie_name,
        max_age=config.session.max_age_seconds,
    )

    app.add_exception_handler(MomentsServiceError, handle_service_error)  # type: ignore[arg-type]

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")

    return app


def main() -> None:
    import uvicorn

    port = int(os.getenv("MOMENTS_SERVICE_PORT", "3000"))
    uvicorn.run(
        "moments_service.app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
