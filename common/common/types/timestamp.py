from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer


MILLIS_PER_HOUR = 60 * 60 * 1000
MILLIS_PER_DAY = 24 * MILLIS_PER_HOUR


def now_millis() -> int:
    """현재 시각을 epoch 밀리초 정수로 반환한다 (저장 포맷과 동일)."""
    return int(time.time() * 1000)


def millis_to_datetime(value: int) -> datetime:
    """epoch 밀리초를 UTC tz-aware datetime 으로 변환한다."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def serialize_datetime_to_utc_iso8601(value: datetime) -> str:
    """모든 datetime을 UTC 기준 ISO8601(+타임존) 문자열로 직렬화한다."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


UtcDateTime = Annotated[
    datetime,
    PlainSerializer(
        serialize_datetime_to_utc_iso8601,
        return_type=str,
        when_used="json",
    ),
]
