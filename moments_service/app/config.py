from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml


DEFAULT_CONFIG_FILE_NAME = "config.yaml"
CONFIG_PATH_ENV = "MOMENTS_CONFIG_PATH"
SESSION_SECRET_ENV = "MOMENTS_SESSION_SECRET"

STORAGE_BACKENDS = ("json", "mongo")


@dataclass(slots=True)
class StorageConfig:
    backend: str = "json"
    data_path: Path = Path("data.json")
    mongo_collection: str = "moments_snapshots"


@dataclass(slots=True)
class MediaConfig:
    upload_dir: Path = Path("uploads")


@dataclass(slots=True)
class SessionConfig:
    secret: str
    cookie_name: str = "moments_session"
    max_age_seconds: int = 14 * 24 * 60 * 60


@dataclass(slots=True)
class AppConfig:
    """moments-service 전체 설정 루트."""

    storage: StorageConfig
    media: MediaConfig
    session: SessionConfig


def _find_config_path() -> Path:
    """MOMENTS_CONFIG_PATH 가 있으면 그 파일을, 없으면 현재 작업 디렉토리부터
    상위로 올라가며 config.yaml 을 찾는다."""

    explicit = os.getenv(CONFIG_PATH_ENV, "").strip()
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise RuntimeError(f"{CONFIG_PATH_ENV} points to a missing file: {path}")
        return path

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

    raise RuntimeError(
        f"{DEFAULT_CONFIG_FILE_NAME} not found. Place config.yaml in project root.",
    )


def _resolve(base_dir: Path, raw: object, default: Path) -> Path:
    """설정 파일 기준 상대 경로를 절대 경로로 바꾼다."""
    value = str(raw).strip() if raw is not None else ""
    path = Path(value) if value else default
    if not path.is_absolute():
        path = base_dir / path
    return path


def _parse_int(section: str, key: str, raw: object, path: Path) -> int:
    try:
        return int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:  # noqa: TRY003
        raise RuntimeError(f"invalid {section}.{key} in {path}: {raw!r}") from exc


def load_storage_config(data: dict, path: Path) -> StorageConfig:
    storage = data.get("storage") or {}
    backend = str(storage.get("backend") or "json").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise RuntimeError(
            f"invalid storage.backend in {path}: {backend!r} (expected one of {STORAGE_BACKENDS})",
        )
    collection = str(storage.get("mongo_collection") or "moments_snapshots").strip()
    return StorageConfig(
        backend=backend,
        data_path=_resolve(path.parent, storage.get("data_path"), Path("data.json")),
        mongo_collection=collection,
    )


def load_session_config(data: dict, path: Path) -> SessionConfig:
    session = data.get("session") or {}
    secret = os.getenv(SESSION_SECRET_ENV, "").strip()
    if not secret:
        raise RuntimeError(
            f"{SESSION_SECRET_ENV} environment variable is required for moments-service",
        )
    max_age = _parse_int(
        "session", "max_age_seconds", session.get("max_age_seconds", 14 * 24 * 60 * 60), path
    )
    cookie_name = str(session.get("cookie_name") or "moments_session").strip()
    return SessionConfig(secret=secret, cookie_name=cookie_name, max_age_seconds=max_age)


def load_config() -> AppConfig:
    """moments-service 설정을 로드하여 AppConfig 로 반환한다."""

    path = _find_config_path()
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    media = data.get("media") or {}
    return AppConfig(
        storage=load_storage_config(data, path),
        media=MediaConfig(
            upload_dir=_resolve(path.parent, media.get("upload_dir"), Path("uploads")),
        ),
        session=load_session_config(data, path),
    )
