from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from fastapi import Depends

from common.types.timestamp import now_millis

from ..dependencies import get_store
from ..exceptions import InvalidInputError, NotFoundError, PersistenceError
from ..models.instant import INSTANT_TTL_MS, Instant, price_for
from ..store import Store
from .media_storage import LocalMediaStorage, get_media_storage


logger = logging.getLogger(__name__)

# HTML 폼 체크박스가 보내는 값들
TRUTHY_FLAGS = {"on", "true"}


@dataclass(slots=True)
class MediaUpload:
    filename: str
    data: bytes


def parse_exclusive_flag(value: bool | str | None) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return value.strip().lower() in TRUTHY_FLAGS


class InstantsService:
    """Instant 게시. 가격은 독점 여부로 고정되고, 만료 시각은 생성 후 24시간이다."""

    def __init__(self, store: Store, media_storage: LocalMediaStorage) -> None:
        self._store = store
        self._media = media_storage

    def create_instant(
        self,
        creator_id: str,
        title: str | None,
        exclusive: bool | str | None,
        upload: MediaUpload | None,
        now: int | None = None,
    ) -> Instant:
        title = (title or "").strip()
        if not title or upload is None or not upload.filename:
            raise InvalidInputError("title and content are required")

        if now is None:
            now = now_millis()
        is_exclusive = parse_exclusive_flag(exclusive)

        with self._store.lock:
            creator = self._store.find_user_by_id(creator_id)
            if creator is None:
                raise NotFoundError(f"user not found (id={creator_id})")

            filename = self._media.save(upload.filename, upload.data)
            instant = Instant(
                id=str(uuid4()),
                title=title,
                filename=filename,
                creator_id=creator.id,
                buyers=[],
                is_exclusive=is_exclusive,
                price=price_for(is_exclusive),
                created_at=now,
                expires_at=now + INSTANT_TTL_MS,
                is_expired=False,
            )
            self._store.add_instant(instant)
            creator.instants_created.append(instant.id)
            try:
                self._store.persist()
            except PersistenceError:
                creator.instants_created.pop()
                self._store.remove_instant(instant.id)
                self._media.delete(filename)
                raise

        logger.info(
            "instant created",
            extra={
                "user_id": creator_id,
                "instant_id": instant.id,
                "price": instant.price,
            },
        )
        return instant


def get_instants_service(
    store: Store = Depends(get_store),
    media_storage: LocalMediaStorage = Depends(get_media_storage),
) -> InstantsService:
    """FastAPI DI용 InstantsService 팩토리."""

    return InstantsService(store=store, media_storage=media_storage)
