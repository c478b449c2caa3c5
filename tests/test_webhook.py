##pytest tests/test_webhook.py -q

import dataclasses
import hashlib
import hmac
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from gh_matrix.app import app
from gh_matrix.routers import gh

SECRET = "s3cret"

client = TestClient(app)


@pytest.fixture(autouse=True)
def configured(monkeypatch):
    monkeypatch.setattr(
        gh,
        "settings",
        dataclasses.replace(
            gh.settings,
            github_webhook_secret=SECRET,
            matrix_token="tok",
            matrix_room_id="!room:matrix.org",
            matrix_homeserver="https://matrix.org",
            ignored_label_senders=frozenset({"ghost"}),
        ),
    )


@pytest.fixture
def sent(monkeypatch):
    calls = []

    async def fake_send_notice(token, room_id, txn_id, content, *, homeserver):
        calls.append(
            {
                "token": token,
                "room_id": room_id,
                "txn_id": txn_id,
                "content": content,
                "homeserver": homeserver,
            }
        )
        return httpx.Response(200, json={"event_id": "$evt"})

    monkeypatch.setattr(gh, "send_notice", fake_send_notice)
    return calls


def _post(payload, event="push", delivery="d-1", secret=SECRET, path="/webhook", raw=None):
    body = raw if raw is not None else json.dumps(payload).encode()
    signature = "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    headers = {
        "X-Hub-Signature-256": signature,
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": delivery,
        "Content-Type": "application/json",
    }
    return client.post(path, content=body, headers=headers)


# ========== Test Cases ==========


def test_push_is_forwarded(sent, payload_factory):
    r = _post(payload_factory(ref="refs/heads/main", commits=[{}], compare="c"))
    assert r.status_code == 200
    assert r.json() == {"event_id": "$evt"}
    assert len(sent) == 1
    call = sent[0]
    assert call["txn_id"] == "github_d-1"
    assert call["room_id"] == "!room:matrix.org"
    assert call["token"] == "tok"
    assert call["homeserver"] == "https://matrix.org"
    assert call["content"].body == "📤 **bob** pushed [1 commit](c) to `main` in acme/repo"


def test_trailing_slash_path(sent, payload_factory):
    r = _post(payload_factory(), path="/webhook/")
    assert r.status_code == 200
    assert len(sent) == 1


def test_bad_signature(sent, payload_factory):
    r = _post(payload_factory(), secret="wrong")
    assert r.status_code == 401
    assert sent == []


def test_missing_signature(sent):
    r = client.post("/webhook", content=b"{}", headers={"X-GitHub-Event": "push"})
    assert r.status_code == 401
    assert sent == []


def test_invalid_json(sent):
    r = _post(None, raw=b"{not json")
    assert r.status_code == 400
    assert r.text == "Invalid JSON"
    assert sent == []


def test_ghost_label_events_are_filtered(sent, payload_factory):
    payload = payload_factory(action="created", label={"name": "bug"})
    payload["sender"] = {"login": "ghost"}
    r = _post(payload, event="label")
    assert r.status_code == 200
    assert r.json() == {"status": "filtered", "reason": "GitHub system label event"}
    assert sent == []


def test_label_events_from_people_are_forwarded(sent, payload_factory):
    r = _post(payload_factory(action="created", label={"name": "bug"}), event="label")
    assert r.status_code == 200
    assert sent[0]["content"].formatted_body is None


def test_missing_event_header_uses_unknown(sent, payload_factory):
    body = json.dumps(payload_factory()).encode()
    signature = "sha256=" + hmac.new(SECRET.encode(), body, hashlib.sha256).hexdigest()
    r = client.post("/webhook", content=body, headers={"X-Hub-Signature-256": signature})
    assert r.status_code == 200
    assert sent[0]["content"].body == "📌 GitHub unknown event occurred in acme/repo"
    assert sent[0]["txn_id"].startswith("github_")


def test_matrix_status_is_mirrored(monkeypatch, payload_factory):
    async def rejecting_send_notice(token, room_id, txn_id, content, *, homeserver):
        return httpx.Response(403, json={"errcode": "M_FORBIDDEN"})

    monkeypatch.setattr(gh, "send_notice", rejecting_send_notice)
    r = _post(payload_factory())
    assert r.status_code == 403
    assert r.json() == {"errcode": "M_FORBIDDEN"}


def test_delivery_failure_is_500(monkeypatch, payload_factory):
    async def failing_send_notice(token, room_id, txn_id, content, *, homeserver):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(gh, "send_notice", failing_send_notice)
    r = _post(payload_factory())
    assert r.status_code == 500
    assert r.text == "Internal server error"


def test_only_post_on_webhook_path(sent):
    assert client.get("/webhook").status_code == 405
    assert client.post("/elsewhere", content=b"{}").status_code == 404
    assert client.get("/").status_code == 404
    assert sent == []
