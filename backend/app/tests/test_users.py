"""Tests for /api/users endpoints."""

from fastapi.testclient import TestClient

from app.tests.conftest import set_restricted


class TestUpdateMe:
    def test_enable_friends_only(self, client: TestClient, alice_headers):
        resp = client.patch("/api/users/me", json={"pm_friends_only": True}, headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["pm_friends_only"] is True

    def test_friends_only_takes_effect(self, client: TestClient, alice_headers, bob_headers, alice_id):
        client.patch("/api/users/me", json={"pm_friends_only": True}, headers=alice_headers)
        resp = client.post("/api/chat/new", json={"target_id": alice_id, "message": "hi"}, headers=bob_headers)
        assert resp.status_code == 403

    def test_empty_update_is_noop(self, client: TestClient, alice_headers):
        resp = client.patch("/api/users/me", json={}, headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["pm_friends_only"] is False

    def test_requires_auth(self, client: TestClient):
        assert client.patch("/api/users/me", json={"pm_friends_only": True}).status_code == 401


class TestGetUser:
    def test_get_user(self, client: TestClient, alice_headers, bob_id):
        resp = client.get(f"/api/users/{bob_id}", headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json() == {"id": bob_id, "username": "bob"}

    def test_restricted_user_hidden_from_others(self, client: TestClient, db, alice_headers, bob_id):
        set_restricted(db, bob_id)
        assert client.get(f"/api/users/{bob_id}", headers=alice_headers).status_code == 404

    def test_restricted_user_sees_self(self, client: TestClient, db, bob_headers, bob_id):
        set_restricted(db, bob_id)
        assert client.get(f"/api/users/{bob_id}", headers=bob_headers).status_code == 200

    def test_unknown_user(self, client: TestClient, alice_headers):
        assert client.get("/api/users/99999", headers=alice_headers).status_code == 404
