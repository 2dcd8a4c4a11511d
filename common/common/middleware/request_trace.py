import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"

# 노이즈를 줄이기 위해 로그에서 제외할 엔드포인트 경로 목록
IGNORED_LOG_PATHS: set[str] = {"/health"}

SESSION_USER_KEY = "userId"


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """요청 단위 Request ID 부여 및 access 로그 미들웨어.

    - X-Request-Id 가 없으면 새로 생성해 request.state 와 응답 헤더에 싣는다.
    - 세션에 로그인 유저가 있으면 user_id 로 함께 남긴다.
    - 요청 바디는 비밀번호를 포함할 수 있으므로 기록하지 않는다.
    """

    def __init__(self, app, logger: logging.Logger | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        should_log = request.url.path not in IGNORED_LOG_PATHS
        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if should_log:
                self._logger.exception(
                    "request failed",
                    extra=self._build_log_extra(
                        request, request_id, duration=time.monotonic() - start
                    ),
                )
            raise

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)

        if should_log:
            self._logger.info(
                "completed request",
                extra=self._build_log_extra(
                    request,
                    request_id,
                    status=response.status_code,
                    duration=time.monotonic() - start,
                ),
            )

        return response

    @staticmethod
    def _build_log_extra(
        request: Request,
        request_id: str,
        status: int | None = None,
        duration: float | None = None,
    ) -> dict[str, object]:
        extra: dict[str, object] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        # SessionMiddleware 가 바깥에 감싸고 있을 때만 scope 에 session 이 존재한다.
        session = request.scope.get("session") or {}
        user_id = session.get(SESSION_USER_KEY)
        if user_id:
            extra["user_id"] = user_id

        if status is not None:
            extra["status"] = status

        if duration is not None:
            extra["duration"] = f"{duration * 1000:.3f}ms"

        return extra
