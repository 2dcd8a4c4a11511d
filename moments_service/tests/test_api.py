from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from moments_service.app.config import AppConfig, MediaConfig, SessionConfig, StorageConfig
from moments_service.app.exceptions import StoreCorruptedError
from moments_service.app.main import create_app


def _config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(backend="json", data_path=tmp_path / "data.json"),
        media=MediaConfig(upload_dir=tmp_path / "uploads"),
        session=SessionConfig(secret="test-secret"),
    )


@pytest.fixture
def client(tmp_path: Path) -> Iterator[TestClient]:
    with TestClient(create_app(_config(tmp_path))) as c:
        yield c


def _register(client: TestClient, username: str, password: str = "pw") -> dict:
    res = client.post(
        "/api/v1/auth/register", json={"username": username, "password": password}
    )
    assert res.status_code == 201, res.text
    return res.json()


def _create_instant(client: TestClient, title: str, exclusive: bool) -> dict:
    data = {"title": title}
    if exclusive:
        data["exclusive"] = "on"
    res = client.post(
        "/api/v1/instants",
        data=data,
        files={"content": ("moment.jpg", b"jpeg-bytes", "image/jpeg")},
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_health(client: TestClient) -> None:
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_protected_routes_require_login(client: TestClient) -> None:
    res = client.get("/api/v1/instants")

    assert res.status_code == 401
    assert res.json()["detail"]["code"] == "not_authenticated"


def test_session_for_missing_user_is_rejected(tmp_path: Path) -> None:
    with TestClient(create_app(_config(tmp_path))) as first:
        _register(first, "alice")
        cookies = dict(first.cookies)

    # 같은 세션 키로 빈 데이터의 앱에 접속한다.
    with TestClient(create_app(_config(tmp_path / "other")), cookies=cookies) as second:
        res = second.get("/api/v1/wallet")

    assert res.status_code == 401
    assert res.json()["detail"]["code"] == "not_authenticated"


def test_register_login_logout(client: TestClient) -> None:
    created = _register(client, "alice", "secret")
    assert created["credits"] == 20
    assert client.get("/api/v1/auth/me").json()["username"] == "alice"

    dup = client.post(
        "/api/v1/auth/register", json={"username": "alice", "password": "x"}
    )
    assert dup.status_code == 409
    assert dup.json()["detail"]["code"] == "duplicate_username"

    client.post("/api/v1/auth/logout")
    assert client.get("/api/v1/auth/me").status_code == 401

    bad = client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "nope"}
    )
    assert bad.status_code == 401
    assert bad.json()["detail"]["code"] == "invalid_credentials"

    ok = client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "secret"}
    )
    assert ok.status_code == 200
    assert ok.json()["id"] == created["id"]


def test_create_instant_requires_title_and_content(client: TestClient) -> None:
    _register(client, "alice")

    res = client.post("/api/v1/instants", data={"title": "no file"})

    assert res.status_code == 400
    assert res.json()["detail"]["code"] == "invalid_input"


def test_purchase_flow(client: TestClient, tmp_path: Path) -> None:
    _register(client, "alice")
    exclusive = _create_instant(client, "Exclusive", exclusive=True)
    shared = _create_instant(client, "Shared", exclusive=False)
    assert exclusive["price"] == 50
    assert shared["price"] == 5

    own = client.post(f"/api/v1/instants/{shared['id']}/purchase")
    assert own.status_code == 403
    assert own.json()["detail"]["code"] == "self_purchase"

    client.post("/api/v1/auth/logout")
    _register(client, "bob")

    wall = client.get("/api/v1/instants").json()
    assert wall["total"] == 2
    assert "filename" not in wall["items"][0]

    poor = client.post(f"/api/v1/instants/{exclusive['id']}/purchase")
    assert poor.status_code == 402
    assert poor.json()["detail"]["code"] == "insufficient_credits"

    bought = client.post(f"/api/v1/instants/{shared['id']}/purchase")
    assert bought.status_code == 200
    assert bought.json() == {
        "instant_id": shared["id"],
        "price": 5,
        "remaining_credits": 15,
        "total_spent_on_creator": 5,
    }

    again = client.post(f"/api/v1/instants/{shared['id']}/purchase")
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "already_owned"

    detail = client.get(f"/api/v1/instants/{shared['id']}").json()
    assert detail["can_view_media"] is True
    assert detail["creator_username"] == "alice"
    media = client.get(detail["media_url"])
    assert media.status_code == 200
    assert media.content == b"jpeg-bytes"

    purchased = client.get("/api/v1/me/instants/purchased").json()
    assert [i["id"] for i in purchased["items"]] == [shared["id"]]

    profile = client.get("/api/v1/profiles/alice").json()
    assert profile["top_fans"] == [{"fan_username": "bob", "credits": 5}]
    assert len(profile["created_instants"]) == 2
    assert client.get("/api/v1/profiles/nobody").status_code == 404

    saved = json.loads((tmp_path / "data.json").read_text(encoding="utf-8"))
    assert saved["fanRanks"][0]["totalCredits"] == 5
    assert saved["instants"][1]["buyers"] == [saved["users"][1]["id"]]


def test_unknown_instant(client: TestClient) -> None:
    _register(client, "bob")

    assert client.get("/api/v1/instants/missing").status_code == 404
    res = client.post("/api/v1/instants/missing/purchase")
    assert res.status_code == 404
    assert res.json()["detail"]["code"] == "not_found"


def test_wallet_check_in(client: TestClient) -> None:
    _register(client, "bob")

    first = client.post("/api/v1/wallet/check-in").json()
    second = client.post("/api/v1/wallet/check-in").json()
    wallet = client.get("/api/v1/wallet").json()

    assert first == {"granted": 3, "already_checked_in": False, "credits": 23}
    assert second == {"granted": 0, "already_checked_in": True, "credits": 23}
    assert wallet["credits"] == 23
    assert wallet["can_check_in"] is False
    assert wallet["next_check_in_at"] is not None


def test_state_survives_restart(tmp_path: Path) -> None:
    config = _config(tmp_path)
    with TestClient(create_app(config)) as client:
        _register(client, "alice", "secret")
        client.post("/api/v1/wallet/check-in")

    with TestClient(create_app(config)) as client:
        res = client.post(
            "/api/v1/auth/login", json={"username": "alice", "password": "secret"}
        )
        assert res.status_code == 200
        assert res.json()["credits"] == 23


def test_startup_fails_on_corrupted_data(tmp_path: Path) -> None:
    (tmp_path / "data.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(StoreCorruptedError):
        with TestClient(create_app(_config(tmp_path))):
            pass
