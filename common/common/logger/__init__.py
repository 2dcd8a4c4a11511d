import json
import logging
import os
import sys


DEFAULT_SERVICE_NAME = "hidden-moments"

# JsonFormatter 가 extra 로 넘어온 값 중 로그 레코드에 옮겨 싣는 필드 목록
EXTRA_KEYS: tuple[str, ...] = (
    "request_id",
    "method",
    "path",
    "status",
    "duration",
    "user_id",
    "instant_id",
    "creator_id",
    "reason",
    "price",
    "credits",
    "count",
)


def setup_logger(
    name: str = DEFAULT_SERVICE_NAME, level: str | None = None
) -> logging.Logger:
    """애플리케이션 전역 로거를 설정하고 반환한다.

    Args:
        name: 로거 이름 (기본값: hidden-moments, SERVICE_NAME 환경변수가 우선)
        level: 로그 레벨 (기본값: None -> 환경변수 LOG_LEVEL 또는 INFO 사용)

    Returns:
        설정된 logging.Logger 인스턴스
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    service_name = os.getenv("SERVICE_NAME", name)
    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)

    # 재호출(create_app 여러 번) 시 핸들러 중복 방지
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    # 서비스 모듈 로거(moments_service.*)도 같은 포맷으로 출력되도록 루트에 연결한다.
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)

    return logger


class JsonFormatter(logging.Formatter):
    """한 줄 JSON 로그 포맷터.

    - datetime, level, logger, message 필드를 기본으로 포함한다.
    - EXTRA_KEYS 에 해당하는 extra 값이 있으면 함께 싣는다.
    - 예외 정보가 있으면 exc_info 필드에 문자열로 추가한다.
    """

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_record: dict[str, object] = {
            "datetime": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in EXTRA_KEYS:
            if hasattr(record, key):
                log_record[key] = getattr(record, key)

        service_name = getattr(record, "service_name", None) or os.getenv(
            "SERVICE_NAME"
        )
        if service_name:
            log_record["service_name"] = service_name

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)
