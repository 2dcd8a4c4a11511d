"""JSON 파일 스냅샷 저장소.

data.json 하나에 users / instants / fanRanks 전체를 pretty-print 로 저장한다.
원자적 교체(rename)나 fsync 는 하지 않는다.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from .interfaces import SnapshotRepositoryInterface
from ..exceptions import PersistenceError, StoreCorruptedError
from ..models.snapshot import StoreSnapshot


class JsonFileSnapshotRepository(SnapshotRepositoryInterface):
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoreSnapshot | None:
        if not self._path.exists():
            return None

        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreCorruptedError(
                f"failed to read data file {self._path}: {exc}"
            ) from exc

        try:
            return StoreSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreCorruptedError(
                f"invalid data file {self._path}: {exc.error_count()} error(s)"
            ) from exc

    def save(self, snapshot: StoreSnapshot) -> None:
        payload = json.dumps(snapshot.to_record(), indent=2, ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                f"failed to write data file {self._path}: {exc}"
            ) from exc
