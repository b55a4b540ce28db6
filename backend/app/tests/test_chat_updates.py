"""Tests for GET /api/chat/updates?since={message_id}."""

import pytest
from fastapi.testclient import TestClient

from app.tests.conftest import add_relation, auth_headers, make_message, make_public_channel, set_restricted


def _updates(client, headers, since=0, **params):
    return client.get("/api/chat/updates", params={"since": since, **params}, headers=headers)


def _contents(resp):
    return [m["content"] for m in resp.json()["messages"]]


@pytest.fixture()
def lobby(client, db, alice_headers, alice_id):
    channel = make_public_channel(db)
    resp = client.put(f"/api/chat/channels/{channel.id}/users/{alice_id}", headers=alice_headers)
    assert resp.status_code == 204
    return channel


@pytest.fixture()
def pm(client, alice_headers, bob_id):
    resp = client.post("/api/chat/new", json={"target_id": bob_id, "message": "opening line"}, headers=alice_headers)
    assert resp.status_code == 200
    return resp.json()["new_channel_id"]


class TestChatUpdates:
    def test_updates_when_guest(self, client: TestClient):
        resp = client.get("/api/chat/updates")
        assert resp.status_code == 401

    def test_updates_when_guest_with_cursor(self, client: TestClient):
        resp = client.get("/api/chat/updates", params={"since": 0})
        assert resp.status_code == 401

    def test_updates_with_no_new_messages(self, client: TestClient, db, alice_headers, bob_id, lobby):
        message = make_message(db, lobby.id, bob_id)
        resp = _updates(client, alice_headers, since=message.id)
        assert resp.status_code == 204
        assert resp.content == b""

    def test_updates_with_no_channels(self, client: TestClient, alice_headers):
        resp = _updates(client, alice_headers)
        assert resp.status_code == 204

    def test_updates(self, client: TestClient, db, alice_headers, bob_id, lobby):
        message = make_message(db, lobby.id, bob_id, content="welcome to the lobby")
        resp = _updates(client, alice_headers, since=0)
        assert resp.status_code == 200
        assert _contents(resp) == ["welcome to the lobby"]
        data = resp.json()
        assert data["messages"][0]["message_id"] == message.id
        assert data["messages"][0]["sender"]["username"] == "bob"
        assert [p["channel_id"] for p in data["presence"]] == [lobby.id]

    def test_updates_strictly_after_cursor(self, client: TestClient, db, alice_headers, bob_id, lobby):
        first = make_message(db, lobby.id, bob_id, content="one")
        make_message(db, lobby.id, bob_id, content="two")
        make_message(db, lobby.id, bob_id, content="three")

        resp = _updates(client, alice_headers, since=first.id)
        assert _contents(resp) == ["two", "three"]

    def test_updates_are_ascending_across_channels(
        self, client: TestClient, db, alice_headers, alice_id, bob_id, lobby, pm
    ):
        make_message(db, lobby.id, bob_id, content="lobby msg")
        make_message(db, pm, bob_id, content="pm reply")

        resp = _updates(client, alice_headers)
        ids = [m["message_id"] for m in resp.json()["messages"]]
        assert ids == sorted(ids)
        assert _contents(resp) == ["opening line", "lobby msg", "pm reply"]

    def test_updates_respect_limit(self, client: TestClient, db, alice_headers, bob_id, lobby):
        for i in range(5):
            make_message(db, lobby.id, bob_id, content=f"msg {i}")

        resp = _updates(client, alice_headers, limit=2)
        assert _contents(resp) == ["msg 0", "msg 1"]

        cursor = resp.json()["messages"][-1]["message_id"]
        resp = _updates(client, alice_headers, since=cursor, limit=2)
        assert _contents(resp) == ["msg 2", "msg 3"]

    def test_updates_exclude_channels_not_joined(self, client: TestClient, db, alice_headers, bob_id):
        other = make_public_channel(db, name="#elsewhere")
        make_message(db, other.id, bob_id)
        assert _updates(client, alice_headers).status_code == 204

    def test_updates_exclude_parted_channel(self, client: TestClient, db, alice_headers, alice_id, bob_id, lobby):
        make_message(db, lobby.id, bob_id)
        client.delete(f"/api/chat/channels/{lobby.id}/users/{alice_id}", headers=alice_headers)
        assert _updates(client, alice_headers).status_code == 204

    def test_negative_cursor_rejected(self, client: TestClient, alice_headers):
        resp = _updates(client, alice_headers, since=-1)
        assert resp.status_code == 422


class TestUpdatesVisibility:
    def test_updates_hide_restricted_user_messages(self, client: TestClient, db, alice_headers, bob_id, pm):
        reply = make_message(db, pm, bob_id, content="a reply from bob")

        resp = _updates(client, alice_headers)
        assert resp.status_code == 200
        assert reply.content in _contents(resp)

        set_restricted(db, bob_id)
        resp = _updates(client, alice_headers, since=reply.id - 1)
        assert resp.status_code == 204

        set_restricted(db, bob_id, False)
        resp = _updates(client, alice_headers, since=reply.id - 1)
        assert _contents(resp) == ["a reply from bob"]

    def test_restricted_author_hidden_in_public_channel(self, client: TestClient, db, alice_headers, bob_id, lobby):
        make_message(db, lobby.id, bob_id, content="spam")
        set_restricted(db, bob_id)
        assert _updates(client, alice_headers).status_code == 204

    def test_restricted_user_still_sees_own_messages(self, client: TestClient, db, bob_headers, bob_id):
        channel = make_public_channel(db)
        client.put(f"/api/chat/channels/{channel.id}/users/{bob_id}", headers=bob_headers)
        make_message(db, channel.id, bob_id, content="my own words")
        set_restricted(db, bob_id)

        resp = _updates(client, bob_headers)
        assert _contents(resp) == ["my own words"]

    def test_block_hides_pm_updates(self, client: TestClient, db, alice_headers, alice_id, bob_id, pm):
        make_message(db, pm, bob_id, content="hello?")
        add_relation(db, alice_id, bob_id, "block")
        assert _updates(client, alice_headers).status_code == 204

    def test_parted_pm_hidden_until_reopened(self, client: TestClient, db, alice_headers, bob_headers, alice_id, pm):
        client.delete(f"/api/chat/channels/{pm}/users/{alice_id}", headers=alice_headers)
        assert _updates(client, alice_headers).status_code == 204

        resp = client.post(f"/api/chat/channels/{pm}/messages", json={"message": "ping"}, headers=bob_headers)
        assert resp.status_code == 200
        assert _contents(_updates(client, alice_headers)) == ["opening line", "ping"]

    def test_third_party_sees_nothing(self, client: TestClient, pm):
        charlie_headers = auth_headers(client, username="charlie")
        assert _updates(client, charlie_headers).status_code == 204
