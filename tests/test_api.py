"""
End-to-end checks of the HTTP layer against a temporary JSON database.
"""
from __future__ import annotations

import dataclasses

import pytest
from fastapi.testclient import TestClient

from chirpy.app import create_app
from chirpy.core.config import ConfigurationError


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def _signup_and_login(client, email="walt@breakingbad.com", password="04234"):
    resp = client.post("/api/users", json={"email": email, "password": password})
    assert resp.status_code == 201
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_healthz(client):
    resp = client.get("/api/healthz")
    assert resp.status_code == 200
    assert resp.text == "OK"


def test_validate_chirp(client):
    resp = client.post("/api/validate_chirp", json={"body": "I had a kerfuffle today"})
    assert resp.json() == {"cleaned_body": "I had a **** today"}
    resp = client.post("/api/validate_chirp", json={"body": "x" * 141})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Chirp is too long"}


def test_create_user_hides_password_and_rejects_duplicates(client):
    resp = client.post("/api/users", json={"email": "a@example.com", "password": "pw"})
    assert resp.status_code == 201
    assert resp.json() == {"id": 1, "email": "a@example.com", "is_chirpy_red": False}

    resp = client.post("/api/users", json={"email": "a@example.com", "password": "pw"})
    assert resp.status_code == 409


def test_login_failure(client):
    client.post("/api/users", json={"email": "a@example.com", "password": "pw"})
    resp = client.post("/api/login", json={"email": "a@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert "error" in resp.json()


def test_chirp_flow(client):
    login = _signup_and_login(client)
    assert set(login) == {"id", "email", "is_chirpy_red", "token", "refresh_token"}
    headers = _auth(login["token"])

    resp = client.post("/api/chirps", json={"body": "hello world"}, headers=headers)
    assert resp.status_code == 201
    assert resp.json() == {"id": 1, "body": "hello world", "author_id": login["id"]}

    resp = client.post("/api/chirps", json={"body": "this is kerfuffle talk"}, headers=headers)
    assert resp.json()["body"] == "this is **** talk"
    assert resp.json()["id"] == 2

    assert client.delete("/api/chirps/1", headers=headers).status_code == 204
    assert [c["id"] for c in client.get("/api/chirps").json()] == [2]

    resp = client.post("/api/chirps", json={"body": "third"}, headers=headers)
    assert resp.json()["id"] == 3

    assert client.get("/api/chirps/3").json()["body"] == "third"
    assert client.get("/api/chirps/1").status_code == 404
    assert client.get("/api/chirps/not-a-number").status_code == 404


def test_post_chirp_requires_auth_and_length(client):
    assert client.post("/api/chirps", json={"body": "hi"}).status_code == 401
    login = _signup_and_login(client)
    resp = client.post("/api/chirps", json={"body": "x" * 141}, headers=_auth(login["token"]))
    assert resp.status_code == 400
    resp = client.post("/api/chirps", json={"body": "hi"}, headers=_auth(login["refresh_token"]))
    assert resp.status_code == 401


def test_list_chirps_filters_and_sorts(client):
    alice = _signup_and_login(client, "alice@example.com", "pw")
    bob = _signup_and_login(client, "bob@example.com", "pw")
    client.post("/api/chirps", json={"body": "a1"}, headers=_auth(alice["token"]))
    client.post("/api/chirps", json={"body": "b1"}, headers=_auth(bob["token"]))
    client.post("/api/chirps", json={"body": "a2"}, headers=_auth(alice["token"]))

    bodies = [c["body"] for c in client.get("/api/chirps", params={"author_id": alice["id"]}).json()]
    assert bodies == ["a1", "a2"]
    ids = [c["id"] for c in client.get("/api/chirps", params={"sort": "desc"}).json()]
    assert ids == [3, 2, 1]
    assert client.get("/api/chirps", params={"sort": "sideways"}).status_code == 400


def test_delete_other_users_chirp_is_forbidden(client):
    alice = _signup_and_login(client, "alice@example.com", "pw")
    bob = _signup_and_login(client, "bob@example.com", "pw")
    client.post("/api/chirps", json={"body": "mine"}, headers=_auth(alice["token"]))

    assert client.delete("/api/chirps/1", headers=_auth(bob["token"])).status_code == 403
    assert client.delete("/api/chirps/9", headers=_auth(bob["token"])).status_code == 404
    assert client.delete("/api/chirps/1").status_code == 401
    assert len(client.get("/api/chirps").json()) == 1


def test_update_user(client):
    login = _signup_and_login(client)
    resp = client.put(
        "/api/users",
        json={"email": "walter@example.com", "password": "new"},
        headers=_auth(login["token"]),
    )
    assert resp.status_code == 200
    assert resp.json() == {"id": login["id"], "email": "walter@example.com", "is_chirpy_red": False}
    assert client.post("/api/login", json={"email": "walter@example.com", "password": "new"}).status_code == 200

    assert client.put("/api/users", json={"email": "x@example.com", "password": "p"}).status_code == 401


def test_refresh_and_revoke(client):
    login = _signup_and_login(client)
    refresh_headers = _auth(login["refresh_token"])

    resp = client.post("/api/refresh", headers=refresh_headers)
    assert resp.status_code == 200
    new_access = resp.json()["token"]
    assert client.post("/api/chirps", json={"body": "hi"}, headers=_auth(new_access)).status_code == 201

    assert client.post("/api/revoke", headers=refresh_headers).status_code == 204
    assert client.post("/api/refresh", headers=refresh_headers).status_code == 401
    assert client.post("/api/refresh").status_code == 401


def test_polka_webhook(client, settings):
    login = _signup_and_login(client)
    hook = {"Authorization": f"ApiKey {settings.polka_key}"}

    resp = client.post("/api/polka/webhooks", json={"event": "user.payment_failed", "data": {"user_id": login["id"]}}, headers=hook)
    assert resp.status_code == 204

    resp = client.post("/api/polka/webhooks", json={"event": "user.upgraded", "data": {"user_id": login["id"]}})
    assert resp.status_code == 401

    resp = client.post("/api/polka/webhooks", json={"event": "user.upgraded", "data": {"user_id": 999}}, headers=hook)
    assert resp.status_code == 404

    resp = client.post("/api/polka/webhooks", json={"event": "user.upgraded", "data": {"user_id": login["id"]}}, headers=hook)
    assert resp.status_code == 204

    again = client.post("/api/login", json={"email": "walt@breakingbad.com", "password": "04234"})
    assert again.json()["is_chirpy_red"] is True


def test_metrics_count_fileserver_hits(client):
    assert client.get("/app/").status_code == 200
    client.get("/app/")
    resp = client.get("/admin/metrics")
    assert "visited 2 times" in resp.text

    assert client.post("/admin/reset").status_code == 200
    assert "visited 0 times" in client.get("/admin/metrics").text


def test_malformed_database_returns_server_error(client, db_path):
    db_path.write_text("{not json", encoding="utf-8")
    resp = client.get("/api/chirps")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Something went wrong"}


def test_debug_reset_wipes_database(settings):
    with TestClient(create_app(settings)) as first:
        _signup_and_login(first)
    with TestClient(create_app(settings, reset_database=True)) as second:
        assert second.post("/api/login", json={"email": "walt@breakingbad.com", "password": "04234"}).status_code == 401


def test_missing_jwt_secret_is_rejected_at_startup(settings):
    with pytest.raises(ConfigurationError):
        create_app(dataclasses.replace(settings, jwt_secret=""))


def test_polka_webhook_rejects_non_ascii_api_key(client):
    login = _signup_and_login(client)
    resp = client.post(
        "/api/polka/webhooks",
        json={"event": "user.upgraded", "data": {"user_id": login["id"]}},
        headers={"Authorization": "ApiKey clé".encode("latin-1")},
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}
