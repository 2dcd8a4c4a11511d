"""업로드 미디어 로컬 저장소.

코어는 반환된 파일명을 저장하고 그대로 돌려줄 뿐, 내용은 해석하지 않는다.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath
from uuid import uuid4

from fastapi import Depends

from ..config import AppConfig
from ..dependencies import get_app_config
from ..exceptions import NotFoundError, PersistenceError


logger = logging.getLogger(__name__)


class LocalMediaStorage:
    def __init__(self, upload_dir: Path | str) -> None:
        self._upload_dir = Path(upload_dir)

    def save(self, original_filename: str, data: bytes) -> str:
        """<uuid4><원본 확장자> 로 저장하고 그 파일명을 반환한다."""
        suffix = PurePath(original_filename or "").suffix
        filename = f"{uuid4()}{suffix}"
        try:
            self._upload_dir.mkdir(parents=True, exist_ok=True)
            (self._upload_dir / filename).write_bytes(data)
        except OSError as exc:
            raise PersistenceError(f"failed to store upload: {exc}") from exc
        return filename

    def delete(self, filename: str) -> None:
        """저장해 둔 파일을 지운다. 이미 없으면 무시한다."""
        try:
            (self._upload_dir / PurePath(filename).name).unlink(missing_ok=True)
        except OSError:
            # 정리 실패는 예외로 올리지 않는다.
            logger.warning("failed to remove upload %s", filename, exc_info=True)

    def path_for(self, filename: str) -> Path:
        # 저장 시 만든 이름만 허용한다 (경로 구분자 포함 불가)
        if not filename or PurePath(filename).name != filename:
            raise NotFoundError("media not found")
        path = self._upload_dir / filename
        if not path.is_file():
            raise NotFoundError("media not found")
        return path


def get_media_storage(
    config: AppConfig = Depends(get_app_config),
) -> LocalMediaStorage:
    return LocalMediaStorage(config.media.upload_dir)
